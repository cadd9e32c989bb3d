"""
Pagination over a ranked result list.
"""

from dataclasses import dataclass, field
from typing import List

from ..models import ProductRecord


@dataclass
class Page:
    """One slice of ranked products plus page metadata."""

    items: List[ProductRecord] = field(default_factory=list)
    total_count: int = 0
    pages: int = 0
    page: int = 1
    page_size: int = 20


class Paginator:
    """
    Slices ranked products into 1-based pages.

    page and page_size are echoed back unchanged; a page past the end yields
    an empty item list rather than an error.
    """

    def paginate(self, ranked: List[ProductRecord], page: int, page_size: int) -> Page:
        if page < 1 or page_size < 1:
            raise ValueError(f"page and page_size must be >= 1, got page={page}, page_size={page_size}")

        total = len(ranked)
        skip = (page - 1) * page_size

        return Page(
            items=ranked[skip : skip + page_size],
            total_count=total,
            pages=-(-total // page_size),  # ceil
            page=page,
            page_size=page_size,
        )
