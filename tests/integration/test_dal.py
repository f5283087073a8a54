"""
Integration tests for the relational repositories on an in-memory database.
"""

from decimal import Decimal

import pytest
from sqlalchemy import text

from catalog.dal import ProductGateway
from catalog.dal.price_repository import PriceRepository
from catalog.dal.product_repository import ProductRepository
from catalog.logic.product_rules import mark_as_deleted, update_product
from catalog.models.price import Currency
from catalog.models.product import ProductCategory, ProductStatus


@pytest.fixture
def session(sqlite_pool):
    connection = sqlite_pool.connect()
    yield connection
    connection.close()


@pytest.fixture
def repository(session):
    return ProductRepository(session)


class TestProductRepository:

    def test_implements_gateway(self, repository):
        assert isinstance(repository, ProductGateway)

    def test_save_and_find(self, repository, sample_product):
        repository.save(sample_product)

        assert repository.find_by_id(sample_product.id) == sample_product

    def test_save_and_find_with_category_and_description(self, repository, sample_product):
        product = sample_product.model_copy(update={"category": ProductCategory.BOOKS, "description": "Paperback"})

        repository.save(product)

        found = repository.find_by_id(product.id)
        assert found.category == ProductCategory.BOOKS
        assert found.description == "Paperback"

    def test_update_keeps_category_and_description(self, repository, sample_product):
        product = sample_product.model_copy(update={"category": ProductCategory.BOOKS, "description": "Paperback"})
        repository.save(product)

        repository.update(update_product(product, {"price": Decimal("3")}))

        found = repository.find_by_id(product.id)
        assert found.category == ProductCategory.BOOKS
        assert found.description == "Paperback"

    def test_find_missing_returns_none(self, repository):
        assert repository.find_by_id("does-not-exist") is None

    def test_update_persists_changes(self, repository, sample_product):
        repository.save(sample_product)
        updated = update_product(sample_product, {"name": "Gadget", "price": Decimal("19.5")})

        repository.update(updated)

        found = repository.find_by_id(sample_product.id)
        assert found.name == "Gadget"
        assert found.price == Decimal("19.50")
        assert found.created_at == sample_product.created_at

    def test_deleted_product_is_hidden(self, repository, sample_product):
        repository.save(sample_product)
        repository.update(mark_as_deleted(sample_product))

        assert repository.find_by_id(sample_product.id) is None

    def test_deleted_product_visible_in_read_mode(self, repository, sample_product):
        repository.save(sample_product)
        repository.update(mark_as_deleted(sample_product))

        found = repository.find_by_id(sample_product.id, include_deleted=True)
        assert found.status == ProductStatus.DELETED

    def test_writes_are_committed(self, sqlite_pool, repository, sample_product):
        repository.save(sample_product)

        with sqlite_pool.connect() as other:
            count = other.execute(text("SELECT COUNT(*) FROM products")).scalar()

        assert count == 1


class TestPriceRepository:

    def test_returns_quote(self, session):
        session.execute(text(
            "INSERT INTO product_prices (product_id, price, currency) VALUES ('p1', 4.2, 'EUR')"
        ))
        session.commit()

        quote = PriceRepository(session).get_price("p1")

        assert quote.product_id == "p1"
        assert quote.price == Decimal("4.2")
        assert quote.currency == Currency.EUR

    def test_missing_price_is_none(self, session):
        assert PriceRepository(session).get_price("p1") is None
