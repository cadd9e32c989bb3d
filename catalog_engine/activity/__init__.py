"""
Activity Module
User activity tracking, learned preferences and personalized recommendations.
"""

from .log import UserActivityLog
from .preferences import PreferenceLearner
from .store import ActivityStore, InMemoryActivityStore, SqlActivityStore
from .report import ActivityReportBuilder
from .tracker import ActivityTracker
from .recommendations import RecommendationEngine, most_viewed_product_ids

__all__ = [
    "UserActivityLog",
    "PreferenceLearner",
    "ActivityStore",
    "InMemoryActivityStore",
    "SqlActivityStore",
    "ActivityReportBuilder",
    "ActivityTracker",
    "RecommendationEngine",
    "most_viewed_product_ids",
]
