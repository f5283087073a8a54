"""Relational price lookup for the price fetcher function."""

from decimal import Decimal
from typing import Optional

from sqlalchemy import text
from sqlalchemy.engine import Connection

from catalog.models.price import Currency, PriceQuote

SELECT_PRICE = text('SELECT price, currency FROM product_prices WHERE product_id = :id')


class PriceRepository:

    def __init__(self, session: Connection) -> None:
        self.session = session

    def get_price(self, product_id: str) -> Optional[PriceQuote]:
        row = self.session.execute(SELECT_PRICE, {'id': product_id}).first()
        if row is None:
            return None

        price, currency = row
        return PriceQuote(
            product_id=product_id,
            price=Decimal(str(price)),
            currency=Currency(currency),
        )
