"""
Activity Report
Per-user activity summary for administrators.
"""

from collections import Counter
from datetime import datetime
from typing import Optional

from ..config import ActivityConfig, get_engine_config
from ..models import ActivityReport, ActivityType, CategoryCount, SearchEntry
from .log import UserActivityLog


class ActivityReportBuilder:
    """Summarizes one user's activity log, optionally restricted to a date range."""

    def __init__(self, config: Optional[ActivityConfig] = None):
        self.config = config or get_engine_config().activity

    def build(
        self,
        log: UserActivityLog,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Optional[ActivityReport]:
        """
        Build the report.

        Args:
            log: User's activity log
            start: Inclusive lower bound on event time
            end: Inclusive upper bound on event time

        Returns:
            ActivityReport, or None when a range is given and no event falls in it
        """
        events = log.events_between(start, end)
        if (start is not None or end is not None) and not events:
            return None

        viewed_products = set()
        category_tally = Counter()
        searches = []

        for event in events:
            if event.activity_type == ActivityType.VIEW_PRODUCT and event.product_id:
                viewed_products.add(event.product_id)
            if event.category:
                category_tally[event.category] += 1
            if event.activity_type == ActivityType.SEARCH and event.search_query:
                searches.append(SearchEntry(query=event.search_query, timestamp=event.timestamp))

        categories = [
            CategoryCount(name=name, count=count)
            for name, count in sorted(category_tally.items(), key=lambda item: -item[1])
        ]

        # Newest first; equal timestamps keep reverse insertion order
        searches.reverse()
        searches.sort(key=lambda s: s.timestamp, reverse=True)

        recent = events[-self.config.report_recent_events:][::-1]
        recent.sort(key=lambda e: e.timestamp, reverse=True)

        return ActivityReport(
            user_id=log.user_id,
            preferences=log.preferences,
            viewed_products_count=len(viewed_products),
            favorite_categories=categories,
            recent_searches=searches[: self.config.report_recent_searches],
            last_active_at=log.last_active_at,
            recent_activities=recent,
        )
