from unittest.mock import MagicMock

import pytest
from sqlalchemy import text

from catalog_api.api.schemas.product import Product
from catalog_api.repositories.exceptions import ProductNotFound, RepositoryError
from catalog_api.repositories.product_repository import SqlProductRepository


def store_all(repository, *skus):
    for sku in skus:
        repository.store(sku, Product(sku=sku, attrs={"a": "b", "c": "d"}))


class TestLookup:
    def test_store_then_lookup(self, repository):
        repository.store("widget-1", Product(sku="widget-1", attrs={"color": "red"}))

        product = repository.lookup("widget-1")

        assert product.sku == "widget-1"
        assert product.attrs == {"color": "red"}

    def test_empty_attrs_round_trip(self, repository):
        repository.store("bare", Product(sku="bare"))
        assert repository.lookup("bare").attrs == {}

    def test_unknown_sku(self, repository):
        with pytest.raises(ProductNotFound):
            repository.lookup("does-not-exist")

    def test_empty_sku(self, repository):
        with pytest.raises(ProductNotFound):
            repository.lookup("")

    def test_reads_return_independent_copies(self, repository):
        repository.store("widget-1", Product(sku="widget-1", attrs={"color": "red"}))

        first = repository.lookup("widget-1")
        first.attrs["color"] = "blue"

        assert repository.lookup("widget-1").attrs == {"color": "red"}

    def test_corrupt_column_is_a_read_failure(self, repository, engine):
        with engine.begin() as conn:
            conn.execute(text("INSERT INTO product (sku, attrs) VALUES ('broken', 'not json')"))

        with pytest.raises(RepositoryError):
            repository.lookup("broken")


class TestStore:
    def test_second_store_replaces_attributes(self, repository):
        repository.store("widget-1", Product(sku="widget-1", attrs={"color": "red", "size": "L"}))
        repository.store("widget-1", Product(sku="widget-1", attrs={"weight": "2kg"}))

        assert repository.lookup("widget-1").attrs == {"weight": "2kg"}

    def test_upsert_keeps_a_single_row(self, repository, engine):
        store_all(repository, "foo", "foo", "foo")

        with engine.connect() as conn:
            count = conn.execute(text("SELECT COUNT(*) FROM product WHERE sku = 'foo'")).scalar()
        assert count == 1

    def test_failed_write_is_rolled_back(self, repository):
        # model_construct skips validation, so the codec sees an unencodable value
        bad = Product.model_construct(sku="bad", attrs={"k": object()})

        with pytest.raises(RepositoryError):
            repository.store("bad", bad)
        with pytest.raises(ProductNotFound):
            repository.lookup("bad")

    def test_sku_argument_is_the_key(self, repository):
        repository.store("key", Product(sku="other", attrs={"x": "y"}))
        assert repository.lookup("key").attrs == {"x": "y"}

    def test_unsupported_dialect(self, engine):
        repository = SqlProductRepository(engine)
        repository.engine = MagicMock()
        repository.engine.dialect.name = "oracle"

        with pytest.raises(RepositoryError):
            repository.store("widget-1", Product(sku="widget-1"))


class TestListProducts:
    def test_insertion_order(self, repository):
        store_all(repository, "foo", "bar", "baz", "foobar")

        skus = [p.sku for p in repository.list_products(0, 10)]

        assert skus == ["foo", "bar", "baz", "foobar"]

    def test_limit(self, repository):
        store_all(repository, "foo", "bar", "baz", "foobar")
        assert len(repository.list_products(0, 2)) == 2

    def test_lower_bound_is_inclusive(self, repository):
        store_all(repository, "foo", "bar", "baz", "foobar")

        skus = [p.sku for p in repository.list_products(2, 10)]

        assert skus == ["bar", "baz", "foobar"]

    def test_zero_or_negative_limit_returns_nothing(self, repository):
        store_all(repository, "foo", "bar")
        assert repository.list_products(0, 0) == []
        assert repository.list_products(0, -1) == []

    def test_update_keeps_position(self, repository):
        store_all(repository, "foo", "bar")
        repository.store("foo", Product(sku="foo", attrs={"new": "value"}))

        products = repository.list_products(0, 10)

        assert [p.sku for p in products] == ["foo", "bar"]
        assert products[0].attrs == {"new": "value"}

    def test_empty_catalog(self, repository):
        assert repository.list_products(0, 10) == []
