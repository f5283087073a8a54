"""
Product domain model.

This module defines the Product entity shared by every layer. Storage rows and
HTTP payloads are mapped to and from this model explicitly; nothing outside the
domain rules changes its fields.
"""

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from catalog.constants import MAX_DESCRIPTION_LENGTH, MAX_NAME_LENGTH, MAX_PRODUCT_PRICE

PRICE_QUANTUM = Decimal('0.01')


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds')


def quantize_price(price: Decimal) -> Decimal:
    return price.quantize(PRICE_QUANTUM, rounding=ROUND_HALF_UP)


class ProductStatus(str, Enum):
    """Product lifecycle status. DELETED is terminal."""

    ACTIVE = 'ACTIVE'
    ARCHIVED = 'ARCHIVED'
    DELETED = 'DELETED'


class ProductCategory(str, Enum):
    ELECTRONICS = 'ELECTRONICS'
    BOOKS = 'BOOKS'
    CLOTHING = 'CLOTHING'


class Product(BaseModel):
    """Core Product domain model."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: Annotated[str, Field(
        min_length=1,
        description='Unique identifier for the product',
        examples=['550e8400-e29b-41d4-a716-446655440000']
    )]

    name: Annotated[str, Field(
        min_length=1,
        max_length=MAX_NAME_LENGTH,
        description='Display name of the product',
        examples=['Widget']
    )]

    price: Annotated[Decimal, Field(
        gt=0,
        le=MAX_PRODUCT_PRICE,
        description='Unit price, two decimal places',
        examples=[9.99]
    )]

    status: Annotated[ProductStatus, Field(
        default=ProductStatus.ACTIVE,
        description='Current lifecycle status of the product'
    )] = ProductStatus.ACTIVE

    category: Annotated[Optional[ProductCategory], Field(
        default=None,
        description='Optional catalog category, fixed at creation'
    )] = None

    description: Annotated[Optional[str], Field(
        default=None,
        max_length=MAX_DESCRIPTION_LENGTH,
        description='Optional free-text description, fixed at creation'
    )] = None

    created_at: Annotated[str, Field(
        description='ISO timestamp when the product was created'
    )]

    updated_at: Annotated[str, Field(
        description='ISO timestamp when the product was last updated'
    )]

    @field_validator('price')
    @classmethod
    def validate_price_scale(cls, v: Decimal) -> Decimal:
        """Store prices quantized to cents."""
        return quantize_price(v)

    @field_serializer('price', when_used='json')
    def serialize_price(self, price: Decimal) -> float:
        return float(price)

    @property
    def is_deleted(self) -> bool:
        return self.status == ProductStatus.DELETED

    def to_response(self) -> Dict[str, Any]:
        """JSON-ready representation with camelCase keys. Unset optional attributes are omitted."""
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)
