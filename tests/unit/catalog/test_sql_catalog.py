"""
Tests for the SQL-backed catalog and activity store (SQLite in memory).
"""

from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool

from catalog_engine.activity import SqlActivityStore, UserActivityLog
from catalog_engine.catalog import InMemoryCatalog, SqlProductCatalog
from catalog_engine.db import Base, create_session_factory
from catalog_engine.errors import DependencyError
from catalog_engine.models import ActivityEvent, ActivityType, Preferences
from catalog_engine.search import ProductFilters

from helpers import make_product


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield create_session_factory(engine)
    engine.dispose()


@pytest.fixture
def sql_catalog(session_factory, sample_products):
    catalog = SqlProductCatalog(session_factory)
    catalog.add_products(sample_products)
    return catalog


def _ids(products):
    return [p.id for p in products]


@pytest.mark.parametrize(
    "filters",
    [
        ProductFilters(),
        ProductFilters(in_stock_only=False),
        ProductFilters(category="iphone", in_stock_only=False),
        ProductFilters(min_price=Decimal("249"), max_price=Decimal("799")),
        ProductFilters(text_terms=["air", "titanium"]),
        ProductFilters(colors=["Pink", "Red"], in_stock_only=False),
        ProductFilters(features=["USB-C", "5G"]),
        ProductFilters(min_reviews=50, exclude_ids=["p05", "p01"]),
        ProductFilters(name_or_category_contains="IPH", in_stock_only=False),
    ],
)
def test_query_matches_in_memory_catalog(sql_catalog, catalog, filters):
    assert _ids(sql_catalog.query(filters)) == _ids(catalog.query(filters))
    assert sql_catalog.count(filters) == catalog.count(filters)


class TestSqlProductCatalog:
    def test_get_round_trips_record(self, sql_catalog, sample_products):
        product = sql_catalog.get("p01")

        assert product.name == "iPhone 15 Pro"
        assert product.price == Decimal("999")
        assert product.color_names == ["Black", "Blue Titanium", "White"]
        assert product.features == sample_products[0].features
        assert product.created_at == sample_products[0].created_at

    def test_get_missing(self, sql_catalog):
        assert sql_catalog.get("nope") is None

    def test_get_many_keeps_requested_order(self, sql_catalog):
        assert _ids(sql_catalog.get_many(["p07", "missing", "p02"])) == ["p07", "p02"]
        assert sql_catalog.get_many([]) == []

    def test_limit_with_sql_only_predicates(self, sql_catalog):
        assert _ids(sql_catalog.query(ProductFilters(in_stock_only=False), limit=3)) == ["p01", "p02", "p03"]

    def test_limit_applied_after_post_filters(self, sql_catalog):
        filters = ProductFilters(colors=["White"], in_stock_only=False)

        assert _ids(sql_catalog.query(filters, limit=2)) == ["p01", "p07"]

    def test_like_wildcards_are_literal(self, sql_catalog):
        assert sql_catalog.query(ProductFilters(name_or_category_contains="%", in_stock_only=False)) == []

    def test_add_products_upserts(self, sql_catalog):
        sql_catalog.add_products([make_product("p01", "iPhone 15 Pro Max", price="1199")])

        assert sql_catalog.get("p01").name == "iPhone 15 Pro Max"
        assert sql_catalog.count(ProductFilters(in_stock_only=False)) == 8

    def test_database_errors_become_dependency_errors(self, session_factory):
        catalog = SqlProductCatalog(session_factory)
        Base.metadata.drop_all(session_factory.kw["bind"])

        with pytest.raises(DependencyError) as exc_info:
            catalog.get("p01")

        assert not exc_info.value.fatal
        assert isinstance(exc_info.value.__cause__, OperationalError)


class TestSqlActivityStore:
    def test_load_missing(self, session_factory):
        assert SqlActivityStore(session_factory).load("nobody") is None

    def test_save_and_load(self, session_factory):
        store = SqlActivityStore(session_factory)
        log = UserActivityLog("u1", preferences=Preferences(color_preferences=["Black"]))
        log.append(ActivityEvent(activity_type=ActivityType.VIEW_PRODUCT, product_id="p01", category="iphone"))
        store.save(log)

        log.append(ActivityEvent(activity_type=ActivityType.SEARCH, search_query="ipad"))
        store.save(log)

        restored = store.load("u1")
        assert [e.activity_type for e in restored.events] == ["view_product", "search"]
        assert restored.preferences.color_preferences == ["Black"]
        assert restored.last_active_at == log.last_active_at

    def test_applies_cap_on_load(self, session_factory):
        store = SqlActivityStore(session_factory, max_events=1)
        store.save(
            UserActivityLog(
                "u1",
                max_events=5,
                events=[
                    ActivityEvent(activity_type=ActivityType.SEARCH, search_query=q) for q in ("a", "b")
                ],
            )
        )

        assert [e.search_query for e in store.load("u1").events] == ["b"]

    def test_write_failure_is_fatal(self, session_factory):
        store = SqlActivityStore(session_factory)
        Base.metadata.drop_all(session_factory.kw["bind"])

        with pytest.raises(DependencyError) as exc_info:
            store.save(UserActivityLog("u1"))

        assert exc_info.value.fatal
