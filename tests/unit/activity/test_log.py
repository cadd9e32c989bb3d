"""
Tests for the bounded activity log and the in-memory store.
"""

from datetime import timedelta

from catalog_engine.activity import InMemoryActivityStore, UserActivityLog
from catalog_engine.models import ActivityEvent, ActivityType, Preferences

from helpers import BASE_TIME


def _event(query, minutes=0):
    return ActivityEvent(
        activity_type=ActivityType.SEARCH,
        search_query=query,
        timestamp=BASE_TIME + timedelta(minutes=minutes),
    )


class TestUserActivityLog:
    def test_append_below_cap(self):
        log = UserActivityLog("u1", max_events=3)

        assert log.append(_event("a")) is None
        assert len(log) == 1
        assert log.last_active_at is not None

    def test_append_at_cap_returns_evicted(self):
        log = UserActivityLog("u1", max_events=2)
        log.append(_event("a"))
        log.append(_event("b"))

        evicted = log.append(_event("c"))

        assert evicted.search_query == "a"
        assert [e.search_query for e in log.events] == ["b", "c"]

    def test_initial_events_trimmed_to_cap(self):
        log = UserActivityLog("u1", max_events=2, events=[_event("a"), _event("b"), _event("c")])

        assert [e.search_query for e in log.events] == ["b", "c"]

    def test_events_between_is_inclusive(self):
        log = UserActivityLog("u1", events=[_event(q, minutes=i) for i, q in enumerate("abcd")])

        selected = log.events_between(BASE_TIME + timedelta(minutes=1), BASE_TIME + timedelta(minutes=2))

        assert [e.search_query for e in selected] == ["b", "c"]

    def test_record_round_trip_keeps_preferences(self):
        log = UserActivityLog(
            "u1", events=[_event("a")], preferences=Preferences(favorite_categories=["mac"])
        )

        restored = UserActivityLog.from_record(log.to_record())

        assert restored.user_id == "u1"
        assert restored.events[0].timestamp == BASE_TIME
        assert restored.preferences.favorite_categories == ["mac"]


class TestInMemoryActivityStore:
    def test_load_missing(self):
        assert InMemoryActivityStore().load("nobody") is None

    def test_loaded_logs_are_independent_copies(self):
        store = InMemoryActivityStore()
        store.save(UserActivityLog("u1", events=[_event("a")]))

        first = store.load("u1")
        first.append(_event("b"))

        assert len(store.load("u1")) == 1

    def test_applies_store_cap_on_load(self):
        store = InMemoryActivityStore(max_events=2)
        store.save(UserActivityLog("u1", max_events=10, events=[_event(q) for q in "abc"]))

        assert [e.search_query for e in store.load("u1").events] == ["b", "c"]
