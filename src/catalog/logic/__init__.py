"""
Business Logic Layer for the product catalog.

Pure product rules plus the services that orchestrate them with persistence
and auditing.
"""

from catalog.logic.price_service import PriceService
from catalog.logic.product_service import ProductService

__all__ = [
    "PriceService",
    "ProductService",
]
