"""
SQL Product Catalog
ProductCatalog over the `products` table.

Scalar and text predicates run in SQL; the JSON-array predicates (colors,
features) are evaluated on the loaded records.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import String, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..db.models import ProductRow
from ..errors import DependencyError
from ..models import ProductRecord
from ..search.filters import FilterOperator, ProductFilter, ProductFilters
from .base import ProductCatalog

logger = logging.getLogger(__name__)


def _contains(column, needle: str):
    return func.lower(column, type_=String).contains(needle.lower(), autoescape=True)


def _to_clause(condition: ProductFilter):
    """
    Translate one condition into a SQL expression.

    Returns None when the condition must be evaluated in Python.
    """
    op = condition.operator
    value = condition.value

    if condition.field == "text" and op == FilterOperator.MATCH_ANY_TERM:
        return or_(*[
            or_(
                _contains(ProductRow.name, term),
                _contains(ProductRow.description, term),
                _contains(ProductRow.category, term),
            )
            for term in value
        ])

    if condition.field == "name_or_category" and op == FilterOperator.ILIKE:
        return or_(_contains(ProductRow.name, value), _contains(ProductRow.category, value))

    if not condition.is_scalar:
        return None

    column = getattr(ProductRow, condition.field)

    if op == FilterOperator.EQ:
        return column == value
    if op == FilterOperator.GTE:
        return column >= value
    if op == FilterOperator.LTE:
        return column <= value
    if op == FilterOperator.GT:
        return column > value
    if op == FilterOperator.NOT_IN:
        return column.not_in(list(value))

    return None


class SqlProductCatalog(ProductCatalog):
    """
    Product catalog backed by a SQLAlchemy session factory.

    Every call opens its own short-lived session, so one instance can be
    shared across worker threads.
    """

    def __init__(self, session_factory: sessionmaker):
        """
        Initialize SQL catalog.

        Args:
            session_factory: sessionmaker bound to the catalog database
        """
        self.session_factory = session_factory

        logger.info("SQL product catalog initialized")

    def _split(self, filters: ProductFilters) -> Tuple[list, List[ProductFilter]]:
        clauses = []
        post_filters = []

        for condition in filters.build_filters():
            clause = _to_clause(condition)
            if clause is None:
                post_filters.append(condition)
            else:
                clauses.append(clause)

        return clauses, post_filters

    def get(self, product_id: str) -> Optional[ProductRecord]:
        try:
            with self.session_factory() as db:
                row = db.query(ProductRow).filter(ProductRow.id == product_id).first()
                return row.to_record() if row else None
        except SQLAlchemyError as e:
            logger.error(f"Product lookup failed for {product_id}: {e}")
            raise DependencyError("Catalog lookup failed", details={"product_id": product_id}) from e

    def get_many(self, product_ids: Iterable[str]) -> List[ProductRecord]:
        product_ids = list(product_ids)
        if not product_ids:
            return []

        try:
            with self.session_factory() as db:
                rows = db.query(ProductRow).filter(ProductRow.id.in_(product_ids)).all()
                by_id = {row.id: row.to_record() for row in rows}
        except SQLAlchemyError as e:
            logger.error(f"Batch product lookup failed: {e}")
            raise DependencyError("Catalog lookup failed", details={"count": len(product_ids)}) from e

        return [by_id[pid] for pid in product_ids if pid in by_id]

    def query(self, filters: ProductFilters, limit: Optional[int] = None) -> List[ProductRecord]:
        clauses, post_filters = self._split(filters)

        try:
            with self.session_factory() as db:
                query = db.query(ProductRow)
                if clauses:
                    query = query.filter(*clauses)
                query = query.order_by(ProductRow.id.asc())

                # Limit can only be pushed down when nothing is filtered afterwards
                if limit is not None and not post_filters:
                    query = query.limit(limit)

                records = [row.to_record() for row in query.all()]
        except SQLAlchemyError as e:
            logger.error(f"Catalog query failed: {e}")
            raise DependencyError("Catalog query failed", details={"predicates": len(clauses)}) from e

        if post_filters:
            records = [r for r in records if all(f.matches(r) for f in post_filters)]
            if limit is not None:
                records = records[:limit]

        logger.debug(
            f"Catalog query: {len(clauses)} SQL predicates, {len(post_filters)} post-filters, "
            f"{len(records)} products"
        )

        return records

    def count(self, filters: ProductFilters) -> int:
        clauses, post_filters = self._split(filters)
        if post_filters:
            return len(self.query(filters))

        try:
            with self.session_factory() as db:
                query = db.query(func.count(ProductRow.id))
                if clauses:
                    query = query.filter(*clauses)
                return query.scalar() or 0
        except SQLAlchemyError as e:
            logger.error(f"Catalog count failed: {e}")
            raise DependencyError("Catalog count failed") from e

    def add_products(self, products: Iterable[ProductRecord]) -> int:
        """
        Upsert products into the catalog table.

        Returns:
            Number of products written
        """
        written = 0
        try:
            with self.session_factory() as db:
                for product in products:
                    db.merge(ProductRow.from_record(product))
                    written += 1
                db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Catalog write failed: {e}")
            raise DependencyError("Catalog write failed", fatal=True) from e

        logger.info(f"Wrote {written} products to catalog")
        return written
