"""
Centralized observability utilities for the catalog Lambda handlers.

This module provides configured instances of AWS Lambda Powertools for logging,
tracing, and metrics collection, plus an explicit span helper used at every
operation boundary instead of method decorators.
"""

from contextlib import contextmanager
from typing import Any, Iterator

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import Metrics, MetricUnit
from aws_lambda_powertools.tracing import Tracer

# Metrics namespace for business KPIs
METRICS_NAMESPACE = 'ProductCatalog'

# JSON output format, service name can be set by environment variable "POWERTOOLS_SERVICE_NAME"
logger: Logger = Logger()

# Service name can be set by environment variable "POWERTOOLS_SERVICE_NAME"
# Disabled by setting POWERTOOLS_TRACE_DISABLED to "True"
tracer: Tracer = Tracer()

# Namespace and service name can be set by environment variables:
# - POWERTOOLS_METRICS_NAMESPACE
# - POWERTOOLS_SERVICE_NAME
metrics = Metrics(namespace=METRICS_NAMESPACE)


@contextmanager
def span(name: str, **annotations: Any) -> Iterator[Any]:
    """
    Open a trace subsegment for the duration of the block.

    Args:
        name: Subsegment name, prefixed with "## " like Powertools does
        **annotations: Searchable annotations attached to the subsegment

    Yields:
        The active subsegment
    """
    with tracer.provider.in_subsegment(name=f'## {name}') as subsegment:
        for key, value in annotations.items():
            if value is not None:
                subsegment.put_annotation(key=key, value=value)
        yield subsegment


def count(name: str, value: int = 1) -> None:
    """Increment a named business counter."""
    metrics.add_metric(name=name, unit=MetricUnit.Count, value=value)
