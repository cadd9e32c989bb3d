"""
Test helpers: product factory, failing collaborators and a Redis stand-in.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional

import redis

from catalog_engine.catalog import ProductCatalog
from catalog_engine.errors import DependencyError
from catalog_engine.models import ProductRecord

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


def make_product(
    id: str,
    name: Optional[str] = None,
    category: str = "iphone",
    price="100",
    colors: Optional[List[str]] = None,
    features: Optional[List[str]] = None,
    rating: float = 4.0,
    num_reviews: int = 10,
    stock_count: int = 5,
    description: str = "",
    created_days: int = 0,
    images: Optional[List[str]] = None,
) -> ProductRecord:
    """Build a ProductRecord with sensible defaults."""
    return ProductRecord(
        id=id,
        name=name or f"Product {id}",
        description=description,
        category=category,
        price=Decimal(str(price)),
        colors=[{"name": c, "displayColor": "#000000"} for c in (colors or [])],
        features=features or [],
        images=images if images is not None else [f"https://cdn.example.com/{id}/1.jpg"],
        rating=rating,
        num_reviews=num_reviews,
        stock_count=stock_count,
        created_at=BASE_TIME + timedelta(days=created_days),
    )


class FailingCatalog(ProductCatalog):
    """Catalog whose every call raises DependencyError."""

    def __init__(self, fatal: bool = False):
        self.fatal = fatal
        self.calls = 0

    def _fail(self):
        self.calls += 1
        raise DependencyError("catalog unavailable", fatal=self.fatal)

    def get(self, product_id):
        self._fail()

    def get_many(self, product_ids):
        self._fail()

    def query(self, filters, limit=None):
        self._fail()


class FakeRedis:
    """Dict-backed subset of the redis.Redis API used by ResultCache."""

    def __init__(self, fail=False):
        self.data = {}
        self.ttls = {}
        self.fail = fail

    def _check(self):
        if self.fail:
            raise redis.ConnectionError("connection refused")

    def get(self, key):
        self._check()
        return self.data.get(key)

    def set(self, key, value):
        self._check()
        self.data[key] = value

    def setex(self, key, ttl, value):
        self._check()
        self.data[key] = value
        self.ttls[key] = ttl

    def delete(self, key):
        self._check()
        return 1 if self.data.pop(key, None) is not None else 0

    def ping(self):
        self._check()
        return True
