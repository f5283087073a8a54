"""
Unit tests for the DynamoDB audit sink and config store.
"""

from decimal import Decimal
from unittest.mock import Mock, patch

from botocore.exceptions import ClientError

from catalog.dal.audit_repository import AuditRepository
from catalog.dal.config_repository import ConfigRepository
from catalog.models.audit import AuditAction, AuditEntry


def make_entry(**overrides):
    values = dict(
        entity_id="p1",
        action=AuditAction.UPDATE,
        performed_by="user-123",
        details={"oldPrice": 9.99, "newPrice": 12.5},
    )
    values.update(overrides)
    return AuditEntry(**values)


class TestAuditRepository:

    def test_writes_entry_with_keys_and_ttl(self, dynamodb_tables):
        audit_table, _ = dynamodb_tables
        entry = make_entry()

        AuditRepository(audit_table, ttl_days=30).log(entry)

        item = audit_table.get_item(Key={"PK": "PRODUCT#p1", "SK": entry.timestamp})["Item"]
        assert item["Action"] == "UPDATE"
        assert item["PerformedBy"] == "user-123"
        assert item["EntityType"] == "PRODUCT"
        assert item["Details"] == {"oldPrice": Decimal("9.99"), "newPrice": Decimal("12.5")}
        assert abs(int(item["ttl"]) - entry.expires_at(30)) <= 1

    def test_existing_entry_is_never_overwritten(self, dynamodb_tables):
        audit_table, _ = dynamodb_tables
        entry = make_entry()
        sink = AuditRepository(audit_table)

        sink.log(entry)
        with patch("catalog.dal.audit_repository.logger") as mock_logger:
            sink.log(entry.model_copy(update={"performed_by": "intruder"}))

        mock_logger.critical.assert_called_once()
        item = audit_table.get_item(Key={"PK": "PRODUCT#p1", "SK": entry.timestamp})["Item"]
        assert item["PerformedBy"] == "user-123"

    def test_failure_is_logged_critical_and_swallowed(self):
        table = Mock()
        table.put_item.side_effect = ClientError(
            {"Error": {"Code": "ProvisionedThroughputExceededException", "Message": "slow down"}},
            "PutItem",
        )

        with patch("catalog.dal.audit_repository.logger") as mock_logger, \
                patch("catalog.dal.audit_repository.count") as mock_count:
            AuditRepository(table).log(make_entry())

        mock_logger.critical.assert_called_once()
        logged = mock_logger.critical.call_args.kwargs["extra"]
        assert logged["severity"] == "CRITICAL"
        assert logged["entry"]["entity_id"] == "p1"
        mock_count.assert_called_once_with("AuditWriteFailure")


class TestConfigRepository:

    def test_returns_stored_config(self, dynamodb_tables):
        _, config_table = dynamodb_tables
        config_table.put_item(Item={"pk": "USER#u1", "sk": "CONFIG", "theme": "dark"})

        config = ConfigRepository(config_table).get_user_config("u1")

        assert config["theme"] == "dark"

    def test_missing_config_is_empty(self, dynamodb_tables):
        _, config_table = dynamodb_tables

        assert ConfigRepository(config_table).get_user_config("nobody") == {}
