import logging
import secrets
from datetime import date, datetime, timedelta
from typing import List, Optional

import pytz
from fastapi import Depends
from sqlalchemy import and_, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from camp_events.core.errors import Conflict, NotFound
from camp_events.db import schemas
from camp_events.db.database import get_db
from camp_events.db.models import CalendarSyncLog, Event, FavoriteEvent, User, UserSession, utcnow
from camp_events.services.filters import parse_age_group

logger = logging.getLogger(__name__)

SESSION_TTL = timedelta(days=7)


def _aware(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value


class DatabaseStorage:
    """All reads and writes against the relational store for one request."""

    def __init__(self, db: Session):
        self.db = db

    # --- Users ---
    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def upsert_user(self, data: schemas.UserUpsert) -> User:
        user = self.get_user(data.id)
        if user is None:
            user = User(id=data.id)
            self.db.add(user)
        for key, value in data.model_dump(exclude={"id"}).items():
            setattr(user, key, value)
        user.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(user)
        return user

    # --- Sessions ---
    def create_session(self, user_id: str, ttl: timedelta = SESSION_TTL) -> str:
        sid = secrets.token_urlsafe(32)
        self.db.add(UserSession(sid=sid, sess={"user_id": user_id}, expire=utcnow() + ttl))
        self.db.commit()
        return sid

    def get_session(self, sid: str) -> Optional[UserSession]:
        record = self.db.get(UserSession, sid)
        if record is None or _aware(record.expire) <= utcnow():
            return None
        return record

    def delete_session(self, sid: str):
        self.db.query(UserSession).filter(UserSession.sid == sid).delete()
        self.db.commit()

    # --- Events ---
    def get_events(self) -> List[Event]:
        return self.db.query(Event).order_by(Event.start_date).all()

    def get_event(self, event_id: str) -> Optional[Event]:
        return self.db.get(Event, event_id)

    def get_events_by_date_range(self, start: date, end: date) -> List[Event]:
        return (
            self.db.query(Event)
            .filter(Event.start_date <= end, Event.end_date >= start)
            .order_by(Event.start_date)
            .all()
        )

    def get_events_by_type(self, event_type: str) -> List[Event]:
        return self.db.query(Event).filter(Event.event_type == event_type).order_by(Event.start_date).all()

    def count_events(self) -> int:
        return self.db.query(func.count(Event.id)).scalar()

    def add_event(self, data: schemas.EventCreate) -> Event:
        age_min, age_max = parse_age_group(data.age_group)
        values = data.model_dump(exclude_none=True)
        db_event = Event(**values, age_min=age_min, age_max=age_max)
        self.db.add(db_event)
        self.db.commit()
        self.db.refresh(db_event)
        return db_event

    # --- Favorites ---
    def get_user_favorites(self, user_id: str) -> List[FavoriteEvent]:
        return (
            self.db.query(FavoriteEvent)
            .options(joinedload(FavoriteEvent.event))
            .filter(FavoriteEvent.user_id == user_id)
            .order_by(FavoriteEvent.added_at.desc())
            .all()
        )

    def get_favorite(self, user_id: str, event_id: str) -> Optional[FavoriteEvent]:
        return (
            self.db.query(FavoriteEvent)
            .filter(and_(FavoriteEvent.user_id == user_id, FavoriteEvent.event_id == event_id))
            .first()
        )

    def add_favorite(self, user_id: str, event_id: str) -> FavoriteEvent:
        favorite = FavoriteEvent(user_id=user_id, event_id=event_id)
        self.db.add(favorite)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Duplicate favorite {user_id}/{event_id}: {e.orig}")
            raise Conflict("Event is already in favorites")
        self.db.refresh(favorite)
        return favorite

    def remove_favorite(self, user_id: str, event_id: str) -> int:
        removed = (
            self.db.query(FavoriteEvent)
            .filter(and_(FavoriteEvent.user_id == user_id, FavoriteEvent.event_id == event_id))
            .delete()
        )
        self.db.commit()
        return removed

    def is_favorite(self, user_id: str, event_id: str) -> bool:
        return self.get_favorite(user_id, event_id) is not None

    def count_favorites(self, user_id: str) -> int:
        return self.db.query(func.count(FavoriteEvent.id)).filter(FavoriteEvent.user_id == user_id).scalar()

    def update_favorite_sync(self, favorite_id: str, synced: bool, external_event_id: str = None):
        favorite = self.db.get(FavoriteEvent, favorite_id)
        if favorite is None:
            raise NotFound("Favorite not found")
        favorite.synced_to_calendar = synced
        favorite.external_calendar_event_id = external_event_id
        self.db.commit()

    # --- Calendar sync ---
    def update_calendar_sync(self, user_id: str, enabled: bool, google_calendar_id: str = None,
                             outlook_calendar_id: str = None) -> User:
        user = self.get_user(user_id)
        if user is None:
            raise NotFound("User not found")
        user.calendar_sync_enabled = enabled
        user.google_calendar_id = google_calendar_id
        user.outlook_calendar_id = outlook_calendar_id
        user.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(user)
        return user

    def add_sync_log(self, user_id: str, data: schemas.SyncLogCreate) -> CalendarSyncLog:
        entry = CalendarSyncLog(user_id=user_id, **data.model_dump())
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def get_sync_logs(self, user_id: str) -> List[CalendarSyncLog]:
        return (
            self.db.query(CalendarSyncLog)
            .filter(CalendarSyncLog.user_id == user_id)
            .order_by(CalendarSyncLog.synced_at.desc())
            .all()
        )


def get_storage(db: Session = Depends(get_db)) -> DatabaseStorage:
    return DatabaseStorage(db)
