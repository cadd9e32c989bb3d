"""
Preference Learner
Derives rolling preferences from a user's most recent activity.
"""

from collections import Counter
from typing import List, Optional, Sequence

from ..config import ActivityConfig, get_engine_config
from ..models import ActivityEvent, Preferences
from .log import UserActivityLog


class PreferenceLearner:
    """
    Recomputes favorite categories from the preference window.

    Only category frequency is learned. Price range, feature and color
    preferences are carried over untouched; they change only through
    explicit preference updates.
    """

    def __init__(self, config: Optional[ActivityConfig] = None):
        self.config = config or get_engine_config().activity

    def favorite_categories(self, events: Sequence[ActivityEvent]) -> List[str]:
        """
        Rank categories by frequency.

        Args:
            events: Events oldest first

        Returns:
            Top categories, most frequent first; ties keep first-seen order
        """
        window = list(events)[-self.config.preference_window:]
        tally = Counter(event.category for event in window if event.category)

        # Counter keeps insertion order and sorted() is stable
        ranked = sorted(tally.items(), key=lambda item: -item[1])

        return [category for category, _ in ranked[: self.config.favorite_categories_top_n]]

    def derive(self, log: UserActivityLog) -> Preferences:
        """Preferences for the log's current events."""
        return log.preferences.model_copy(
            update={"favorite_categories": self.favorite_categories(log.events)}
        )
