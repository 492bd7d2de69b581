"""Tests for DatabaseStorage against an in-memory SQLite database."""
from datetime import date, timedelta

import pytest

from camp_events.core.errors import NotFound
from camp_events.db.models import CalendarSyncLog, FavoriteEvent, User
from camp_events.db.schemas import SyncLogCreate, UserUpsert
from camp_events.db.seed import SEED_EVENTS, seed_events


class TestSeeding:

    def test_seed_inserts_catalogue(self, storage):
        assert seed_events(storage) == len(SEED_EVENTS)
        assert storage.count_events() == len(SEED_EVENTS)

    def test_seed_is_idempotent(self, storage):
        seed_events(storage)
        assert seed_events(storage) == 0
        assert storage.count_events() == len(SEED_EVENTS)

    def test_seeded_events_have_structured_ages_and_location(self, seeded):
        father_son = next(e for e in seeded if e.title == "Father/Son Adventure Camp")
        assert (father_son.age_min, father_son.age_max) == (8, None)
        young_adults = next(e for e in seeded if e.title == "Young Adults Fall Retreat")
        assert (young_adults.age_min, young_adults.age_max) == (16, 75)
        assert all(e.location == "Hume Lake, CA" for e in seeded)
        assert all(e.pricing_options for e in seeded)

    def test_invalid_record_is_skipped(self, storage):
        records = [
            dict(SEED_EVENTS[0]),
            dict(SEED_EVENTS[1], pricing_options=[]),
            dict(SEED_EVENTS[2], start_date="2025-09-22"),
        ]
        assert seed_events(storage, events=records) == 1

    def test_location_override(self, storage):
        seed_events(storage, location="Pine Cove", events=[SEED_EVENTS[0]])
        assert storage.get_events()[0].location == "Pine Cove"

    def test_location_left_empty_without_override(self, storage):
        record = {k: v for k, v in SEED_EVENTS[0].items() if k != "location"}
        seed_events(storage, events=[record])
        assert storage.get_events()[0].location is None


class TestEvents:

    def test_events_ordered_by_start_date(self, seeded):
        starts = [e.start_date for e in seeded]
        assert starts == sorted(starts)

    def test_date_range_uses_overlap(self, storage, seeded):
        events = storage.get_events_by_date_range(date(2025, 9, 20), date(2025, 10, 4))
        assert [e.title for e in events] == [
            "Fall Women's Retreat 1", "Fall Women's Retreat 2", "Fall Marriage Retreat",
        ]

    def test_by_type_is_exact(self, storage, seeded):
        assert len(storage.get_events_by_type("Family Event")) == 2
        assert storage.get_events_by_type("family event") == []

    def test_get_missing_event(self, storage, seeded):
        assert storage.get_event("missing") is None


class TestUsersAndSessions:

    def test_upsert_creates_then_updates(self, storage):
        created = storage.upsert_user(UserUpsert(id="sub-1", email="a@example.org"))
        updated = storage.upsert_user(UserUpsert(id="sub-1", email="b@example.org", first_name="Bo"))
        assert created.id == updated.id
        assert storage.get_user("sub-1").email == "b@example.org"
        assert storage.get_user("sub-1").first_name == "Bo"

    def test_session_roundtrip(self, storage, user):
        sid = storage.create_session(user.id)
        assert storage.get_session(sid).sess == {"user_id": user.id}

    def test_expired_session_is_ignored(self, storage, user):
        sid = storage.create_session(user.id, ttl=timedelta(seconds=-1))
        assert storage.get_session(sid) is None

    def test_delete_session(self, storage, user):
        sid = storage.create_session(user.id)
        storage.delete_session(sid)
        assert storage.get_session(sid) is None

    def test_update_calendar_sync(self, storage, user):
        updated = storage.update_calendar_sync(user.id, True, google_calendar_id="primary")
        assert updated.calendar_sync_enabled is True
        assert updated.google_calendar_id == "primary"
        assert updated.outlook_calendar_id is None

    def test_update_calendar_sync_unknown_user(self, storage):
        with pytest.raises(NotFound):
            storage.update_calendar_sync("ghost", True)


class TestSyncLog:

    def _log(self, event_id, status="success"):
        return SyncLogCreate(event_id=event_id, operation="create", provider="google", status=status)

    def test_logs_newest_first(self, storage, db, seeded, user):
        first = storage.add_sync_log(user.id, self._log(seeded[0].id))
        second = storage.add_sync_log(user.id, self._log(seeded[1].id, status="failed"))
        first.synced_at = second.synced_at - timedelta(minutes=5)
        db.commit()

        logs = storage.get_sync_logs(user.id)
        assert [log.id for log in logs] == [second.id, first.id]

    def test_logs_are_scoped_to_user(self, storage, seeded, user):
        storage.add_sync_log(user.id, self._log(seeded[0].id))
        assert storage.get_sync_logs("someone-else") == []


class TestCascades:

    def test_deleting_user_removes_favorites_and_logs(self, storage, db, seeded, user):
        storage.add_favorite(user.id, seeded[0].id)
        storage.add_sync_log(user.id, SyncLogCreate(
            event_id=seeded[0].id, operation="create", provider="outlook", status="success",
        ))
        db.delete(db.get(User, user.id))
        db.commit()

        assert db.query(FavoriteEvent).count() == 0
        assert db.query(CalendarSyncLog).count() == 0

    def test_deleting_event_removes_favorites(self, storage, db, seeded, user):
        storage.add_favorite(user.id, seeded[0].id)
        db.delete(seeded[0])
        db.commit()
        assert storage.count_favorites(user.id) == 0
