"""
Relational persistence for products.

Every statement is parameterized and runs on the session handed to the
repository at construction time. Backend errors propagate unchanged.
"""

from decimal import Decimal
from typing import Any, Mapping, Optional

from sqlalchemy import Numeric, bindparam, text
from sqlalchemy.engine import Connection

from catalog.handlers.utils.observability import logger
from catalog.models.product import Product, ProductCategory, ProductStatus

PRICE_TYPE = Numeric(12, 2, asdecimal=True)

INSERT_PRODUCT = text(
    'INSERT INTO products (id, name, price, status, category, description, created_at, updated_at) '
    'VALUES (:id, :name, :price, :status, :category, :description, :created_at, :updated_at)'
).bindparams(bindparam('price', type_=PRICE_TYPE))

SELECT_PRODUCT = text(
    'SELECT id, name, price, status, category, description, created_at, updated_at FROM products '
    'WHERE id = :id AND status <> :deleted'
)

SELECT_PRODUCT_ANY_STATUS = text(
    'SELECT id, name, price, status, category, description, created_at, updated_at '
    'FROM products WHERE id = :id'
)

UPDATE_PRODUCT = text(
    'UPDATE products SET name = :name, price = :price, status = :status, updated_at = :updated_at '
    'WHERE id = :id'
).bindparams(bindparam('price', type_=PRICE_TYPE))


def _row_to_product(row: Mapping[str, Any]) -> Product:
    # drivers differ in column name casing (Oracle upper-cases unquoted names)
    columns = {str(key).lower(): value for key, value in row.items()}
    return Product(
        id=columns['id'],
        name=columns['name'],
        price=Decimal(str(columns['price'])),
        status=ProductStatus(columns['status']),
        category=ProductCategory(columns['category']) if columns.get('category') else None,
        description=columns.get('description'),
        created_at=str(columns['created_at']),
        updated_at=str(columns['updated_at']),
    )


class ProductRepository:
    """Product gateway over a single database session."""

    def __init__(self, session: Connection) -> None:
        self.session = session

    def save(self, product: Product) -> None:
        """Insert a new product row."""
        self.session.execute(INSERT_PRODUCT, {
            'id': product.id,
            'name': product.name,
            'price': product.price,
            'status': product.status.value,
            'category': product.category.value if product.category else None,
            'description': product.description,
            'created_at': product.created_at,
            'updated_at': product.updated_at,
        })
        self.session.commit()
        logger.debug('Product row inserted', extra={'product_id': product.id})

    def find_by_id(self, product_id: str, include_deleted: bool = False) -> Optional[Product]:
        """
        Fetch a product by id.

        Args:
            product_id: Product identifier
            include_deleted: Also return DELETED rows (privileged read mode)

        Returns:
            Product if found, None otherwise
        """
        if include_deleted:
            result = self.session.execute(SELECT_PRODUCT_ANY_STATUS, {'id': product_id})
        else:
            result = self.session.execute(SELECT_PRODUCT, {
                'id': product_id,
                'deleted': ProductStatus.DELETED.value,
            })

        row = result.mappings().first()
        if row is None:
            logger.debug('Product not found', extra={'product_id': product_id})
            return None
        return _row_to_product(row)

    def update(self, product: Product) -> None:
        """Persist name, price, status and updated_at. Soft deletes go through here too."""
        self.session.execute(UPDATE_PRODUCT, {
            'id': product.id,
            'name': product.name,
            'price': product.price,
            'status': product.status.value,
            'updated_at': product.updated_at,
        })
        self.session.commit()
        logger.debug('Product row updated', extra={
            'product_id': product.id,
            'status': product.status.value,
        })
