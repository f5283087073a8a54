"""
Business Logic Layer for product management.

ProductService orchestrates the domain rules, the product gateway and the audit
sink for the create / read / update / soft-delete use cases. Every use case is
fetch-then-mutate-then-persist-then-audit; the audit write always comes after
the primary write succeeded.
"""

from typing import Callable, Optional

from sqlalchemy.engine import Connection

from catalog.constants import ERRORS
from catalog.dal import AuditSink, ProductGateway
from catalog.dal.product_repository import ProductRepository
from catalog.dal.session import SessionPool, session_scope
from catalog.handlers.utils.errors import InvalidStateError, NotFoundError
from catalog.handlers.utils.observability import count, logger, span
from catalog.logic.product_rules import create_product, mark_as_deleted, update_product
from catalog.models.audit import AuditAction, AuditEntry
from catalog.models.input import CreateProductRequest, UpdateProductRequest
from catalog.models.product import Product


class ProductService:
    """Business logic service for product management."""

    def __init__(
        self,
        pool: SessionPool,
        audit: AuditSink,
        session: Optional[Connection] = None,
        repository_factory: Callable[[Connection], ProductGateway] = ProductRepository,
    ):
        """
        Initialize product service.

        Args:
            pool: Connection pool used only when no session is injected
            audit: Audit sink for mutating use cases
            session: Request-scoped session owned by the caller, if any
            repository_factory: Builds the product gateway for a session
        """
        self.pool = pool
        self.audit = audit
        self.session = session
        self.repository_factory = repository_factory

    def _fetch(self, repository: ProductGateway, product_id: str, include_deleted: bool = False) -> Product:
        product = repository.find_by_id(product_id, include_deleted=include_deleted)
        if product is None:
            count('ProductNotFound')
            logger.warning('Product not found', extra={'product_id': product_id})
            raise NotFoundError('Product', product_id, message=ERRORS['PRODUCT_NOT_FOUND'])
        return product

    def create_product(self, actor: str, request: CreateProductRequest) -> Product:
        """
        Create a new product.

        Args:
            actor: User performing the operation
            request: Validated creation input

        Returns:
            The persisted product
        """
        with span('create_product'), session_scope(self.pool, self.session) as session:
            repository = self.repository_factory(session)
            product = create_product(request)

            logger.info('Creating product', extra={'product_id': product.id, 'product_name': product.name})
            repository.save(product)

            self.audit.log(AuditEntry(
                entity_id=product.id,
                action=AuditAction.CREATE,
                performed_by=actor,
                details={'snapshot': product.to_response()},
            ))

        count('ProductCreated')
        return product

    def get_product(self, product_id: str, include_deleted: bool = False) -> Product:
        """
        Read a product.

        Raises:
            NotFoundError: If the product does not exist or is soft-deleted
        """
        with span('get_product', product_id=product_id), session_scope(self.pool, self.session) as session:
            product = self._fetch(self.repository_factory(session), product_id, include_deleted)

        count('ProductRetrieved')
        return product

    def update_product(self, actor: str, product_id: str, request: UpdateProductRequest) -> Product:
        """
        Apply a partial update.

        Raises:
            NotFoundError: If the product does not exist or is soft-deleted
            InvalidStateError: If the product is DELETED
        """
        with span('update_product', product_id=product_id), session_scope(self.pool, self.session) as session:
            repository = self.repository_factory(session)
            current = self._fetch(repository, product_id)

            changes = request.changes()
            try:
                updated = update_product(current, changes)
            except InvalidStateError:
                count('InvalidStateRejected')
                raise
            repository.update(updated)

            before = current.to_response()
            after = updated.to_response()
            details = {
                'changes': {field: after[field] for field in changes},
                'before': {field: before[field] for field in changes},
            }
            if 'price' in changes:
                details['oldPrice'] = before['price']
                details['newPrice'] = after['price']

            self.audit.log(AuditEntry(
                entity_id=product_id,
                action=AuditAction.UPDATE,
                performed_by=actor,
                details=details,
            ))

        count('ProductUpdated')
        logger.info('Product updated', extra={'product_id': product_id, 'fields': sorted(changes)})
        return updated

    def delete_product(self, actor: str, product_id: str) -> None:
        """
        Soft delete a product by switching its status to DELETED.

        Raises:
            NotFoundError: If the product does not exist or is already soft-deleted
        """
        with span('delete_product', product_id=product_id), session_scope(self.pool, self.session) as session:
            repository = self.repository_factory(session)
            current = self._fetch(repository, product_id)

            deleted = mark_as_deleted(current)
            repository.update(deleted)

            self.audit.log(AuditEntry(
                entity_id=product_id,
                action=AuditAction.DELETE,
                performed_by=actor,
                details={'type': 'Soft Delete', 'previousStatus': current.status.value},
            ))

        count('ProductDeleted')
        logger.info('Product soft deleted', extra={'product_id': product_id})
