"""
Audit sink backed by DynamoDB.

Entries are appended with a structured partition key (ENTITY_TYPE#id), the
ISO-8601 timestamp as sort key and a TTL marker for compliance purging.

Writes are fail-open: an audit failure is logged at CRITICAL level with the
full entry and swallowed, so it can never fail or roll back the business
operation that produced it. This trades strict audit completeness for
availability; the CRITICAL log line is the alerting hook.
"""

import json
from decimal import Decimal
from typing import Any, Dict

from catalog.constants import DEFAULT_AUDIT_TTL_DAYS
from catalog.handlers.utils.errors import AuditWriteError
from catalog.handlers.utils.observability import count, logger
from catalog.models.audit import AuditEntry


def _to_dynamodb_value(details: Dict[str, Any]) -> Dict[str, Any]:
    # DynamoDB rejects floats, numbers must travel as Decimal
    return json.loads(json.dumps(details, default=str), parse_float=Decimal)


class AuditRepository:
    """Append-only audit writer."""

    def __init__(self, table: Any, ttl_days: int = DEFAULT_AUDIT_TTL_DAYS) -> None:
        """
        Initialize the audit sink.

        Args:
            table: boto3 DynamoDB Table resource
            ttl_days: Default retention window in days
        """
        self.table = table
        self.ttl_days = ttl_days

    def _to_item(self, entry: AuditEntry) -> Dict[str, Any]:
        return {
            'PK': entry.partition_key,
            'SK': entry.timestamp,
            'EntityType': entry.entity_type,
            'EntityId': entry.entity_id,
            'Action': entry.action.value,
            'PerformedBy': entry.performed_by,
            'Timestamp': entry.timestamp,
            'Details': _to_dynamodb_value(entry.details),
            'ttl': entry.expires_at(self.ttl_days),
        }

    def log(self, entry: AuditEntry) -> None:
        """Write one audit entry. Never raises."""
        logger.debug('Writing audit log', extra={'entity_id': entry.entity_id, 'action': entry.action.value})

        try:
            self.table.put_item(
                Item=self._to_item(entry),
                ConditionExpression='attribute_not_exists(PK) AND attribute_not_exists(SK)',
            )
        except Exception as exc:
            error = AuditWriteError(entry.entity_id, exc)
            count('AuditWriteFailure')
            logger.critical('CRITICAL: Failed to write audit log', extra={
                **error.to_dict(),
                'entry': entry.model_dump(mode='json'),
            })
            return

        logger.info('Audit log created', extra={
            'action': entry.action.value,
            'entity_id': entry.entity_id,
            'performed_by': entry.performed_by,
        })
