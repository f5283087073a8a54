"""
Product Catalog Service Module.

This package contains the serverless product catalog following a three-layer
architecture:

- handlers: Lambda entry points and the shared request pipeline
- logic: Domain rules and use case orchestration
- dal: Relational repositories, session management and DynamoDB stores
- models: Data models and schemas
"""

__version__ = "1.0.0"
__description__ = "Serverless product catalog with audited persistence"

# Re-export commonly used classes for convenience
from catalog.handlers.utils.observability import logger, metrics, tracer
from catalog.models.input import CreateProductRequest, UpdateProductRequest
from catalog.models.product import Product, ProductStatus

__all__ = [
    "Product",
    "ProductStatus",
    "CreateProductRequest",
    "UpdateProductRequest",
    "logger",
    "tracer",
    "metrics",
]
