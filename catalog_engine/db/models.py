"""
SQLAlchemy ORM Models
Table definitions for the product catalog and per-user activity logs.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import JSON, TIMESTAMP, Column, Float, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import declarative_base

from ..models import ProductRecord

Base = declarative_base()


class ProductRow(Base):
    """
    Product model.

    Stores catalog products. Multi-valued attributes are kept as JSON
    arrays so the same schema works on PostgreSQL and SQLite.
    """
    __tablename__ = 'products'

    id = Column(String(64), primary_key=True)

    # Core product info
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default='')
    category = Column(String(50), nullable=False, index=True)

    # Pricing
    price = Column(Numeric(10, 2), nullable=False, index=True)

    # Multi-valued attributes
    colors = Column(JSON, nullable=False, default=list,
                    comment='List of {name, displayColor}')
    features = Column(JSON, nullable=False, default=list)
    images = Column(JSON, nullable=False, default=list,
                    comment='Image URLs, first one is the thumbnail')

    # Reviews
    rating = Column(Float, nullable=False, default=0.0)
    num_reviews = Column(Integer, nullable=False, default=0, index=True)

    # Stock
    stock_count = Column(Integer, nullable=False, default=0)

    # Timestamps
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        Index('idx_products_category_price', 'category', 'price'),
    )

    def to_record(self) -> ProductRecord:
        return ProductRecord(
            id=self.id,
            name=self.name,
            description=self.description or '',
            category=self.category,
            price=self.price,
            colors=self.colors or [],
            features=self.features or [],
            images=self.images or [],
            rating=self.rating or 0.0,
            num_reviews=self.num_reviews or 0,
            stock_count=self.stock_count or 0,
            created_at=self.created_at,
        )

    @classmethod
    def from_record(cls, record: ProductRecord) -> "ProductRow":
        return cls(
            id=record.id,
            name=record.name,
            description=record.description,
            category=str(record.category),
            price=record.price,
            colors=[color.model_dump(by_alias=True) for color in record.colors],
            features=list(record.features),
            images=list(record.images),
            rating=record.rating,
            num_reviews=record.num_reviews,
            stock_count=record.stock_count,
            created_at=record.created_at,
        )

    def __repr__(self):
        return f"<ProductRow(id={self.id}, name={self.name[:30]})>"


class UserActivityRow(Base):
    """
    Per-user activity log.

    One row per user. Events are a bounded JSON array (oldest first) and
    preferences a JSON object; both are rewritten on every append.
    """
    __tablename__ = 'user_activity_logs'

    user_id = Column(String(255), primary_key=True)

    events = Column(JSON, nullable=False, default=list,
                    comment='Bounded list of activity events, oldest first')
    preferences = Column(JSON, nullable=False, default=dict,
                         comment='Derived and user-set preferences')

    # Timestamps
    last_active_at = Column(TIMESTAMP, nullable=True)
    created_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow)
    updated_at = Column(TIMESTAMP, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<UserActivityRow(user_id={self.user_id}, events={len(self.events or [])})>"
