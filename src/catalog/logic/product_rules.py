"""
Product domain rules.

Pure functions: each takes the current state and returns a new Product. No I/O,
and the only failure is the deleted-state guard on update.
"""

from datetime import datetime
from typing import Any, Dict
from uuid import uuid4

from catalog.constants import ERRORS
from catalog.handlers.utils.errors import InvalidStateError
from catalog.models.input import CreateProductRequest
from catalog.models.product import Product, ProductStatus, utc_now_iso


def _next_timestamp(previous: str) -> str:
    # updated_at never moves backwards, even with clock skew between hosts
    now = utc_now_iso()
    if datetime.fromisoformat(now) < datetime.fromisoformat(previous):
        return previous
    return now


def create_product(request: CreateProductRequest) -> Product:
    """New ACTIVE product with a fresh id and createdAt == updatedAt."""
    now = utc_now_iso()
    return Product(
        id=str(uuid4()),
        name=request.name,
        price=request.price,
        status=ProductStatus.ACTIVE,
        category=request.category,
        description=request.description,
        created_at=now,
        updated_at=now,
    )


def update_product(current: Product, changes: Dict[str, Any]) -> Product:
    """
    Merge changes into the current product.

    Raises:
        InvalidStateError: If the product is already DELETED
    """
    if current.is_deleted:
        raise InvalidStateError(ERRORS['ALREADY_DELETED'], current_status=current.status.value)

    allowed = {key: value for key, value in changes.items() if key in ('name', 'price', 'status')}
    return Product.model_validate({
        **current.model_dump(),
        **allowed,
        'updated_at': _next_timestamp(current.updated_at),
    })


def mark_as_deleted(current: Product) -> Product:
    """Soft delete. Already-deleted products are returned unchanged."""
    if current.is_deleted:
        return current

    return current.model_copy(update={
        'status': ProductStatus.DELETED,
        'updated_at': _next_timestamp(current.updated_at),
    })
