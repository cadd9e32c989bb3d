"""
Tests for similar-product scoring.
"""

import pytest

from catalog_engine.catalog import InMemoryCatalog
from catalog_engine.config import SearchConfig
from catalog_engine.errors import DependencyError
from catalog_engine.search import CandidateRetriever, SimilarityFinder

from helpers import FailingCatalog, make_product


def _finder(catalog):
    return SimilarityFinder(CandidateRetriever(catalog), SearchConfig())


def test_orders_by_feature_overlap():
    catalog = InMemoryCatalog([
        make_product("P", features=["A", "B", "C"]),
        make_product("Q", features=["B", "C", "D"]),
        make_product("R", features=["A"]),
    ])

    similar = _finder(catalog).find_similar("P", limit=2)

    assert [p.id for p in similar] == ["Q", "R"]
    assert [p.similarity_score for p in similar] == [2, 1]


def test_excludes_source_and_other_categories(catalog, sample_products):
    finder = _finder(catalog)

    for product in sample_products:
        similar = finder.find_similar(product.id, limit=10)
        assert product.id not in [p.id for p in similar]
        assert all(p.category == product.category for p in similar)


def test_includes_out_of_stock_candidates(catalog):
    similar = _finder(catalog).find_similar("p01")

    # p02 shares 5G and USB-C, p03 (out of stock) shares 5G
    assert [p.id for p in similar] == ["p02", "p03"]


def test_rating_breaks_score_ties():
    catalog = InMemoryCatalog([
        make_product("P", features=["A"]),
        make_product("Q", features=["A"], rating=3.0),
        make_product("R", features=["A"], rating=4.5),
        make_product("S", features=[], rating=5.0),
    ])

    assert [p.id for p in _finder(catalog).find_similar("P")] == ["R", "Q", "S"]


def test_unknown_product_returns_empty(catalog):
    assert _finder(catalog).find_similar("missing") == []


def test_limit_truncates(catalog):
    assert len(_finder(catalog).find_similar("p01", limit=1)) == 1


def test_non_fatal_failure_degrades_to_empty():
    assert _finder(FailingCatalog()).find_similar("p01") == []


def test_fatal_failure_propagates():
    with pytest.raises(DependencyError):
        _finder(FailingCatalog(fatal=True)).find_similar("p01")
