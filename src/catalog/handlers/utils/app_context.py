"""
Process-wide application context.

The relational pool and the DynamoDB tables are created once per Lambda
execution environment (cold start) and handed explicitly to the request
pipeline and services. Only checked-out sessions are request-scoped.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import boto3
from sqlalchemy.engine import Engine

from catalog.dal.audit_repository import AuditRepository
from catalog.dal.session import create_pool
from catalog.handlers.models.env_vars import CatalogEnvVars, get_handler_env_vars
from catalog.handlers.utils.observability import logger


@dataclass(frozen=True)
class AppContext:
    """Read-only collaborators shared by every invocation in this process."""

    settings: CatalogEnvVars
    pool: Engine
    audit_table: Any
    config_table: Any

    @property
    def audit_sink(self) -> AuditRepository:
        return AuditRepository(self.audit_table, ttl_days=self.settings.AUDIT_TTL_DAYS)


def build_app_context(settings: CatalogEnvVars) -> AppContext:
    """Create the pool and DynamoDB tables for the given settings."""
    dynamodb = boto3.resource(
        'dynamodb',
        region_name=settings.AWS_REGION,
        endpoint_url=settings.dynamodb_endpoint,
    )
    logger.info('Application context initialized', extra={
        'audit_table': settings.AUDIT_TABLE,
        'config_table': settings.CONFIG_TABLE,
        'offline': settings.IS_OFFLINE,
    })
    return AppContext(
        settings=settings,
        pool=create_pool(settings),
        audit_table=dynamodb.Table(settings.AUDIT_TABLE),
        config_table=dynamodb.Table(settings.CONFIG_TABLE),
    )


@lru_cache(maxsize=1)
def get_app_context() -> AppContext:
    """Lazily build the context on first use and reuse it for warm invocations."""
    return build_app_context(get_handler_env_vars())
