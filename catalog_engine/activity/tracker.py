"""
Activity Tracker
Records user activity events and keeps per-user preferences current.
"""

import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, Iterator, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..catalog.base import CatalogLookup
from ..config import ActivityConfig, get_engine_config
from ..errors import NotFoundError, ValidationError
from ..models import ActivityEvent, ActivityInput, ActivityReport, PreferenceUpdate, Preferences
from .log import UserActivityLog
from .preferences import PreferenceLearner
from .report import ActivityReportBuilder
from .store import ActivityStore

logger = logging.getLogger(__name__)


def _as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Event timestamps are naive UTC
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class ActivityTracker:
    """
    Appends activity events to bounded per-user logs.

    Every read-modify-write of one user's log (append, evict, recompute
    preferences, persist) runs under that user's lock. Different users never
    contend.
    """

    def __init__(
        self,
        catalog: CatalogLookup,
        store: ActivityStore,
        config: Optional[ActivityConfig] = None,
    ):
        """
        Initialize activity tracker.

        Args:
            catalog: Product lookup used to validate referenced products
            store: Activity log persistence
            config: Activity configuration
        """
        self.config = config or get_engine_config().activity
        self.catalog = catalog
        self.store = store
        self.learner = PreferenceLearner(self.config)
        self.report_builder = ActivityReportBuilder(self.config)

        # user_id -> [lock, holders and waiters]
        self._user_locks: Dict[str, list] = {}
        self._registry_lock = threading.Lock()

        logger.info("Activity tracker initialized")

    @contextmanager
    def _user_lock(self, user_id: str) -> Iterator[None]:
        """Serialize read-modify-write of one user's log; entries are dropped once unused."""
        with self._registry_lock:
            entry = self._user_locks.get(user_id)
            if entry is None:
                entry = self._user_locks[user_id] = [threading.Lock(), 0]
            entry[1] += 1

        try:
            with entry[0]:
                yield
        finally:
            with self._registry_lock:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._user_locks[user_id]

    def _new_log(self, user_id: str) -> UserActivityLog:
        return UserActivityLog(user_id, max_events=self.config.max_events)

    def _load_or_new(self, user_id: str) -> UserActivityLog:
        # An empty log is falsy, so test for None explicitly
        log = self.store.load(user_id)
        if log is None:
            log = self._new_log(user_id)
        return log

    def add_activity(self, user_id: str, payload: Union[ActivityInput, dict]) -> ActivityEvent:
        """
        Record one activity event for a user.

        Args:
            user_id: Acting user
            payload: Activity fields (ActivityInput or raw dict)

        Returns:
            The stored event

        Raises:
            ValidationError: Missing user id or activity type, or malformed payload
            NotFoundError: productId does not resolve in the catalog
        """
        if not user_id:
            raise ValidationError("User ID is required")

        if not isinstance(payload, ActivityInput):
            try:
                payload = ActivityInput.model_validate(payload or {})
            except PydanticValidationError as e:
                raise ValidationError(
                    "Invalid activity payload",
                    details={"errors": e.errors(include_url=False, include_context=False)},
                ) from e

        if payload.activity_type is None:
            raise ValidationError("Activity type is required")

        category = payload.category
        if payload.product_id:
            product = self.catalog.get(payload.product_id)
            if product is None:
                raise NotFoundError("Product", payload.product_id)
            category = str(product.category)

        event = ActivityEvent(
            activity_type=payload.activity_type,
            product_id=payload.product_id or None,
            category=category or None,
            search_query=payload.search_query or None,
            filter_options=payload.filter_options,
            session_id=payload.session_id,
            metadata=payload.metadata,
            duration_ms=payload.duration_ms or None,
        )

        with self._user_lock(user_id):
            log = self._load_or_new(user_id)

            evicted = log.append(event)
            log.preferences = self.learner.derive(log)

            self.store.save(log)

        if evicted is not None:
            logger.debug(f"Evicted oldest event for user {user_id} ({evicted.activity_type})")

        logger.info(
            f"Tracked {event.activity_type} for user {user_id}",
            extra={"user_id": user_id, "product_id": event.product_id, "events": len(log)},
        )

        return event

    def get_log(self, user_id: str) -> Optional[UserActivityLog]:
        """User's activity log, or None if they have none."""
        return self.store.load(user_id)

    def get_preferences(self, user_id: str) -> Preferences:
        """
        Get a user's preferences, creating an empty log on first read.

        Args:
            user_id: User ID

        Returns:
            Preferences
        """
        with self._user_lock(user_id):
            log = self.store.load(user_id)
            if log is None:
                log = self._new_log(user_id)
                self.store.save(log)
                logger.info(f"Created activity log for user {user_id} on preference read")

        return log.preferences

    def update_preferences(
        self, user_id: str, update: Union[PreferenceUpdate, dict]
    ) -> Preferences:
        """
        Partially update a user's preferences.

        Only supplied (non-null) fields overwrite; an explicit empty list
        clears that field. Favorite categories set here are replaced by the
        learned ones on the next tracked activity.

        Args:
            user_id: User ID
            update: Fields to overwrite

        Returns:
            Updated preferences
        """
        if not isinstance(update, PreferenceUpdate):
            try:
                update = PreferenceUpdate.model_validate(update or {})
            except PydanticValidationError as e:
                raise ValidationError(
                    "Invalid preferences payload",
                    details={"errors": e.errors(include_url=False, include_context=False)},
                ) from e

        changes = {
            name: getattr(update, name)
            for name in PreferenceUpdate.model_fields
            if getattr(update, name) is not None
        }

        with self._user_lock(user_id):
            log = self._load_or_new(user_id)
            log.preferences = log.preferences.model_copy(update=changes)
            self.store.save(log)

        logger.info(f"Updated preferences for user {user_id}: {sorted(changes)}")

        return log.preferences

    def activity_report(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> ActivityReport:
        """
        Build a user's activity report.

        Raises:
            NotFoundError: User has no log, or no event falls in the range
        """
        log = self.store.load(user_id)
        if log is None:
            raise NotFoundError("User activity", user_id)

        report = self.report_builder.build(log, _as_naive_utc(start), _as_naive_utc(end))
        if report is None:
            raise NotFoundError("User activity", user_id)

        return report
