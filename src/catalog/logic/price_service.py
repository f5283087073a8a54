"""
Price lookup use case.

Unlike product reads, every price lookup is audited (including misses) to keep
an access trail of who looked at which price.
"""

from typing import Callable, Optional

from sqlalchemy.engine import Connection

from catalog.dal import AuditSink
from catalog.dal.price_repository import PriceRepository
from catalog.dal.session import SessionPool, session_scope
from catalog.handlers.utils.observability import count, span
from catalog.models.audit import AuditAction, AuditEntry
from catalog.models.price import PriceQuote


class PriceService:

    def __init__(
        self,
        pool: SessionPool,
        audit: AuditSink,
        session: Optional[Connection] = None,
        repository_factory: Callable[[Connection], PriceRepository] = PriceRepository,
    ):
        self.pool = pool
        self.audit = audit
        self.session = session
        self.repository_factory = repository_factory

    def fetch_price(self, product_id: str, user_id: str) -> Optional[PriceQuote]:
        """Look up the price and record the access. Returns None when no price exists."""
        with span('fetch_price', product_id=product_id), session_scope(self.pool, self.session) as session:
            quote = self.repository_factory(session).get_price(product_id)

            self.audit.log(AuditEntry(
                entity_id=product_id,
                action=AuditAction.PRICE_FETCH,
                performed_by=user_id,
                details={'status': 'SUCCESS' if quote else 'NOT_FOUND'},
            ))

        count('PriceFetched' if quote else 'PriceNotFound')
        return quote
