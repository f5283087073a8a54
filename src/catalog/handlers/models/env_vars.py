"""
Environment variable models for type-safe configuration.

This module defines the Pydantic model for environment variables used by the
catalog handlers. Values are parsed once per process and cached.
"""

from typing import Annotated, Optional

from aws_lambda_env_modeler import BaseModel, get_environment_variables
from pydantic import Field

from catalog.constants import DEFAULT_AUDIT_TTL_DAYS

# Local Docker Oracle used when IS_OFFLINE is set
OFFLINE_CONNECT_STRING = 'host.docker.internal:1521/XEPDB1'
OFFLINE_DYNAMODB_ENDPOINT = 'http://host.docker.internal:8000'


class CatalogEnvVars(BaseModel):
    """Environment variables for the catalog Lambda handlers."""

    # Relational store (Oracle by default)
    ORACLE_USER: Annotated[str, Field(
        default='system',
        description='Oracle user name'
    )] = 'system'

    ORACLE_PASSWORD: Annotated[str, Field(
        default='oracle',
        description='Oracle password'
    )] = 'oracle'

    ORACLE_CONN_STRING: Annotated[Optional[str], Field(
        default=None,
        description='Oracle Easy Connect string, e.g. host:1521/SERVICE'
    )] = None

    # Any SQLAlchemy URL; takes precedence over the Oracle settings
    DATABASE_URL: Annotated[Optional[str], Field(
        default=None,
        description='Full SQLAlchemy database URL override'
    )] = None

    IS_OFFLINE: Annotated[bool, Field(
        default=False,
        description='Use local Docker endpoints instead of cloud resources'
    )] = False

    DB_POOL_MIN: Annotated[int, Field(
        default=1,
        description='Connections kept open in the pool',
        ge=1,
        le=50
    )] = 1

    DB_POOL_MAX: Annotated[int, Field(
        default=2,
        description='Maximum connections in the pool',
        ge=1,
        le=100
    )] = 2

    DB_POOL_RECYCLE_SECONDS: Annotated[int, Field(
        default=1800,
        description='Recycle pooled connections older than this',
        ge=-1
    )] = 1800

    DB_POOL_TIMEOUT: Annotated[int, Field(
        default=10,
        description='Seconds to wait for a free pooled connection',
        ge=1,
        le=300
    )] = 10

    # Document store
    AUDIT_TABLE: Annotated[str, Field(
        default='product-audit-trail',
        description='DynamoDB table holding audit entries',
        min_length=1
    )] = 'product-audit-trail'

    CONFIG_TABLE: Annotated[str, Field(
        default='App_Configs_Local',
        description='DynamoDB table holding per-user configuration',
        min_length=1
    )] = 'App_Configs_Local'

    DYNAMODB_ENDPOINT: Annotated[Optional[str], Field(
        default=None,
        description='Custom DynamoDB endpoint (local DynamoDB)'
    )] = None

    AWS_REGION: Annotated[str, Field(
        default='us-east-1',
        description='AWS region for service deployment'
    )] = 'us-east-1'

    AUDIT_TTL_DAYS: Annotated[int, Field(
        default=DEFAULT_AUDIT_TTL_DAYS,
        description='Days before audit entries expire',
        ge=1,
        le=3650
    )] = DEFAULT_AUDIT_TTL_DAYS

    # Privileged read mode: honour ?includeDeleted=true on product reads
    ALLOW_DELETED_READS: Annotated[bool, Field(
        default=False,
        description='Allow soft-deleted products to be fetched explicitly'
    )] = False

    # Service name for observability
    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        default='product-catalog',
        description='Service name for AWS Powertools'
    )] = 'product-catalog'

    # Log level for AWS Powertools Logger
    LOG_LEVEL: Annotated[str, Field(
        default='INFO',
        description='Log level for application logging',
        pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'

    @property
    def connect_string(self) -> Optional[str]:
        if self.IS_OFFLINE:
            return OFFLINE_CONNECT_STRING
        return self.ORACLE_CONN_STRING

    @property
    def dynamodb_endpoint(self) -> Optional[str]:
        if self.DYNAMODB_ENDPOINT:
            return self.DYNAMODB_ENDPOINT
        return OFFLINE_DYNAMODB_ENDPOINT if self.IS_OFFLINE else None


def get_handler_env_vars() -> CatalogEnvVars:
    """
    Get typed environment variables for the catalog handlers.

    Returns:
        Validated environment variables model instance
    """
    return get_environment_variables(model=CatalogEnvVars)
