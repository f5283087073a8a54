"""Data models shared by the handler, logic and data access layers."""

from catalog.models.audit import AuditAction, AuditEntry
from catalog.models.input import (
    ConfigRequest,
    CreateProductRequest,
    PriceRequest,
    ProductIdQuery,
    UpdateProductRequest,
)
from catalog.models.price import Currency, PriceQuote
from catalog.models.product import Product, ProductStatus

__all__ = [
    "AuditAction",
    "AuditEntry",
    "ConfigRequest",
    "CreateProductRequest",
    "Currency",
    "PriceQuote",
    "PriceRequest",
    "Product",
    "ProductIdQuery",
    "ProductStatus",
    "UpdateProductRequest",
]
