"""
Data Access Layer (DAL) for the product catalog.

Relational repositories run on a caller-supplied session; the audit sink and the
config store talk to DynamoDB on their own clients.
"""

from typing import Optional, Protocol, runtime_checkable

from catalog.models.audit import AuditEntry
from catalog.models.product import Product


@runtime_checkable
class ProductGateway(Protocol):
    """Protocol defining the product persistence interface."""

    def save(self, product: Product) -> None:
        """Insert a new product."""
        ...

    def find_by_id(self, product_id: str, include_deleted: bool = False) -> Optional[Product]:
        """Retrieve a product, DELETED rows excluded unless asked for."""
        ...

    def update(self, product: Product) -> None:
        """Persist a changed product."""
        ...


@runtime_checkable
class AuditSink(Protocol):
    """Protocol for append-only audit writers."""

    def log(self, entry: AuditEntry) -> None:
        """Append an entry. Must not raise."""
        ...


__all__ = [
    'AuditSink',
    'ProductGateway',
]
