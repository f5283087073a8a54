"""
Audit entry model.

Audit entries are immutable, append-only records of who did what to which
entity. They are keyed by entity and timestamp and expire after the
compliance window.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from catalog.constants import DEFAULT_AUDIT_TTL_DAYS


def audit_timestamp() -> str:
    # microsecond precision keeps sort keys unique per entity
    return datetime.now(timezone.utc).isoformat(timespec='microseconds')


class AuditAction(str, Enum):
    """Audited actions."""

    CREATE = 'CREATE'
    UPDATE = 'UPDATE'
    DELETE = 'DELETE'
    PRICE_FETCH = 'PRICE_FETCH'


class AuditEntry(BaseModel):
    """Immutable audit record."""

    model_config = ConfigDict(frozen=True)

    entity_id: Annotated[str, Field(min_length=1)]
    entity_type: str = 'PRODUCT'
    action: AuditAction
    performed_by: Annotated[str, Field(min_length=1)]
    timestamp: Annotated[str, Field(default_factory=audit_timestamp)]
    details: Dict[str, Any] = Field(default_factory=dict)
    ttl: Optional[int] = None

    @property
    def partition_key(self) -> str:
        return f'{self.entity_type}#{self.entity_id}'

    def expires_at(self, ttl_days: int = DEFAULT_AUDIT_TTL_DAYS) -> int:
        """Expiration in epoch seconds, the caller's override wins."""
        if self.ttl is not None:
            return self.ttl
        return int((datetime.now(timezone.utc) + timedelta(days=ttl_days)).timestamp())
