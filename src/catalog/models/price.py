"""Price quote model returned by the price lookup function."""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_serializer
from pydantic.alias_generators import to_camel


class Currency(str, Enum):
    USD = 'USD'
    EUR = 'EUR'
    GBP = 'GBP'


class PriceQuote(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    product_id: str
    price: Decimal
    currency: Currency

    @field_serializer('price', when_used='json')
    def serialize_price(self, price: Decimal) -> float:
        return float(price)

    def to_response(self) -> dict:
        return self.model_dump(mode='json', by_alias=True)
