"""
Activity Stores
Persistence for per-user activity logs.
"""

import copy
import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..db.models import UserActivityRow
from ..errors import DependencyError
from .log import UserActivityLog

logger = logging.getLogger(__name__)


class ActivityStore(ABC):
    """
    Load/save interface for activity logs.

    Stores hand out independent copies: a loaded log is never shared with
    another caller, so mutation only becomes visible through save().
    """

    def __init__(self, max_events: int = 500):
        self.max_events = max_events

    @abstractmethod
    def load(self, user_id: str) -> Optional[UserActivityLog]:
        """Load a user's log, or None if the user has none."""

    @abstractmethod
    def save(self, log: UserActivityLog) -> None:
        """Persist a user's log, replacing any previous version."""


class InMemoryActivityStore(ActivityStore):
    """Process-local store keyed by user id."""

    def __init__(self, max_events: int = 500):
        super().__init__(max_events)
        self._records: Dict[str, dict] = {}
        self._lock = threading.Lock()

    def load(self, user_id: str) -> Optional[UserActivityLog]:
        with self._lock:
            record = self._records.get(user_id)
            if record is None:
                return None
            record = copy.deepcopy(record)

        return UserActivityLog.from_record(record, max_events=self.max_events)

    def save(self, log: UserActivityLog) -> None:
        record = log.to_record()
        with self._lock:
            self._records[log.user_id] = record

    def __len__(self) -> int:
        return len(self._records)


class SqlActivityStore(ActivityStore):
    """Store backed by the `user_activity_logs` table (one row per user)."""

    def __init__(self, session_factory: sessionmaker, max_events: int = 500):
        """
        Initialize SQL activity store.

        Args:
            session_factory: sessionmaker bound to the activity database
            max_events: Retention cap applied when loading
        """
        super().__init__(max_events)
        self.session_factory = session_factory

    def load(self, user_id: str) -> Optional[UserActivityLog]:
        try:
            with self.session_factory() as db:
                row = db.query(UserActivityRow).filter(UserActivityRow.user_id == user_id).first()
                if row is None:
                    return None
                record = {
                    "user_id": row.user_id,
                    "events": row.events,
                    "preferences": row.preferences,
                    "last_active_at": row.last_active_at,
                    "created_at": row.created_at,
                }
        except SQLAlchemyError as e:
            logger.error(f"Failed to load activity log for user {user_id}: {e}")
            raise DependencyError("Activity store read failed", details={"user_id": user_id}) from e

        return UserActivityLog.from_record(record, max_events=self.max_events)

    def save(self, log: UserActivityLog) -> None:
        record = log.to_record()

        try:
            with self.session_factory() as db:
                row = db.get(UserActivityRow, log.user_id)
                if row is None:
                    row = UserActivityRow(user_id=log.user_id, created_at=log.created_at)
                    db.add(row)

                row.events = record["events"]
                row.preferences = record["preferences"]
                row.last_active_at = log.last_active_at
                db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to save activity log for user {log.user_id}: {e}")
            raise DependencyError(
                "Activity store write failed", details={"user_id": log.user_id}, fatal=True
            ) from e
