"""
User Activity Log
Bounded, per-user sequence of activity events.
"""

from collections import deque
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from ..models import ActivityEvent, Preferences


class UserActivityLog:
    """
    Activity history for one user.

    Events are kept oldest first in a fixed-capacity deque; appending to a
    full log evicts the oldest event in the same step.
    """

    def __init__(
        self,
        user_id: str,
        max_events: int = 500,
        events: Optional[Iterable[ActivityEvent]] = None,
        preferences: Optional[Preferences] = None,
        last_active_at: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
    ):
        """
        Initialize activity log.

        Args:
            user_id: Owning user
            max_events: Retention cap
            events: Existing events, oldest first (only the newest max_events are kept)
            preferences: Existing preferences
            last_active_at: Last activity time
            created_at: Creation time (default: now)
        """
        self.user_id = user_id
        self.max_events = max_events
        self.events = deque(events or [], maxlen=max_events)
        self.preferences = preferences or Preferences()
        self.last_active_at = last_active_at
        self.created_at = created_at or datetime.utcnow()

    def append(self, event: ActivityEvent) -> Optional[ActivityEvent]:
        """
        Append an event and mark the user active.

        Returns:
            The evicted event, if the log was full
        """
        evicted = self.events[0] if len(self.events) == self.max_events else None

        self.events.append(event)
        self.last_active_at = datetime.utcnow()

        return evicted

    def events_between(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> List[ActivityEvent]:
        """Events with start <= timestamp <= end (either bound optional)."""
        return [
            event
            for event in self.events
            if (start is None or event.timestamp >= start) and (end is None or event.timestamp <= end)
        ]

    def to_record(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        return {
            "user_id": self.user_id,
            "events": [event.model_dump(mode="json") for event in self.events],
            "preferences": self.preferences.model_dump(mode="json"),
            "last_active_at": self.last_active_at,
            "created_at": self.created_at,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any], max_events: int = 500) -> "UserActivityLog":
        return cls(
            user_id=record["user_id"],
            max_events=max_events,
            events=[ActivityEvent.model_validate(e) for e in record.get("events") or []],
            preferences=Preferences.model_validate(record.get("preferences") or {}),
            last_active_at=record.get("last_active_at"),
            created_at=record.get("created_at"),
        )

    def __len__(self) -> int:
        return len(self.events)

    def __repr__(self):
        return f"<UserActivityLog(user_id={self.user_id}, events={len(self.events)})>"
