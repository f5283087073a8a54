"""
Input models for request validation using Pydantic.

One plain data-transfer model per use case. The request pipeline looks the
model up in its schema table and either gets an instance back or a list of
field-level issues.
"""

from decimal import Decimal
from typing import Annotated, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from catalog.constants import ERRORS, MAX_DESCRIPTION_LENGTH, MAX_NAME_LENGTH, MAX_PRODUCT_PRICE, MIN_NAME_LENGTH
from catalog.models.product import ProductCategory, ProductStatus


def _coerce_price(value: Any) -> Any:
    # JSON numbers only; floats go through str() so 9.99 stays 9.99
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ValueError('Price must be a number')
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def _strip_name(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _check_name(value: str) -> str:
    if len(value) < MIN_NAME_LENGTH:
        raise ValueError(ERRORS['INVALID_NAME'])
    return value


def _check_price(value: Decimal) -> Decimal:
    if not value.is_finite() or value <= 0:
        raise ValueError('Price must be greater than zero')
    if value > MAX_PRODUCT_PRICE:
        raise ValueError(ERRORS['PRICE_TOO_HIGH'])
    if value.normalize().as_tuple().exponent < -2:
        raise ValueError('Price can only have 2 decimal places')
    return value


class CreateProductRequest(BaseModel):
    """Request model for creating a new product. Clients never send the id."""

    model_config = ConfigDict(extra='forbid')

    name: Annotated[str, Field(
        max_length=MAX_NAME_LENGTH,
        description='Product name, surrounding whitespace is dropped',
        examples=['Widget']
    )]

    price: Annotated[Decimal, Field(
        description='Unit price, positive, at most two decimal places',
        examples=[9.99]
    )]

    category: Annotated[Optional[ProductCategory], Field(
        default=None,
        description='Catalog category'
    )] = None

    description: Annotated[Optional[str], Field(
        default=None,
        max_length=MAX_DESCRIPTION_LENGTH,
        description='Free-text description'
    )] = None

    @field_validator('name', mode='before')
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return _strip_name(v)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_name(v)

    @field_validator('price', mode='before')
    @classmethod
    def coerce_price(cls, v: Any) -> Any:
        return _coerce_price(v)

    @field_validator('price')
    @classmethod
    def validate_price(cls, v: Decimal) -> Decimal:
        return _check_price(v)


class UpdateProductRequest(BaseModel):
    """Request model for a partial product update."""

    model_config = ConfigDict(extra='forbid')

    name: Annotated[Optional[str], Field(
        default=None,
        max_length=MAX_NAME_LENGTH,
        description='New product name, surrounding whitespace is dropped'
    )] = None

    price: Annotated[Optional[Decimal], Field(
        default=None,
        description='New unit price'
    )] = None

    status: Annotated[Optional[ProductStatus], Field(
        default=None,
        description='New lifecycle status'
    )] = None

    @field_validator('name', mode='before')
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return _strip_name(v)

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _check_name(v)

    @field_validator('price', mode='before')
    @classmethod
    def coerce_price(cls, v: Any) -> Any:
        if v is None:
            return v
        return _coerce_price(v)

    @field_validator('price')
    @classmethod
    def validate_price(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is None:
            return v
        return _check_price(v)

    @model_validator(mode='after')
    def require_change(self) -> 'UpdateProductRequest':
        if not self.changes():
            raise ValueError(ERRORS['EMPTY_UPDATE'])
        return self

    def changes(self) -> dict:
        """Only the fields the caller actually supplied."""
        return self.model_dump(exclude_none=True)


class ProductIdQuery(BaseModel):
    """Query string for GET / PUT / DELETE on a single product."""

    id: Annotated[str, Field(min_length=1, description='Product identifier')]

    include_deleted: Annotated[bool, Field(
        default=False,
        alias='includeDeleted',
        description='Also return soft-deleted products (privileged read mode)'
    )] = False


class PriceRequest(BaseModel):
    """Query string for the price lookup function."""

    id: Annotated[str, Field(min_length=1, description='Product identifier')]
    user_id: Annotated[str, Field(min_length=1, alias='userId', description='Requesting user')]


class ConfigRequest(BaseModel):
    """Query string for the config retrieval function."""

    user_id: Annotated[str, Field(min_length=1, alias='userId', description='User whose config is read')]
