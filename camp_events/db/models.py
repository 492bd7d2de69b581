import uuid
from datetime import datetime

import pytz
from sqlalchemy import (
    JSON, Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint,
)
from sqlalchemy.orm import relationship

from camp_events.db.database import Base


def _uuid():
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(pytz.utc)


class Event(Base):
    __tablename__ = "events"

    id = Column(String(36), primary_key=True, default=_uuid)
    title = Column(Text, nullable=False)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False)
    event_type = Column(Text, nullable=False, index=True)
    description = Column(Text, nullable=True)
    age_group = Column(Text, nullable=False)  # display text, e.g. "8+", "16-75"
    age_min = Column(Integer, nullable=True)
    age_max = Column(Integer, nullable=True)  # None means open-ended
    gender = Column(String(16), nullable=True)
    location = Column(Text, nullable=True)
    pricing_options = Column(JSON, nullable=False)

    favorites = relationship("FavoriteEvent", back_populates="event", cascade="all, delete-orphan",
                             passive_deletes=True)


class User(Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True)  # external subject id
    email = Column(String, nullable=True, unique=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    profile_image_url = Column(String, nullable=True)
    calendar_sync_enabled = Column(Boolean, nullable=False, default=False)
    google_calendar_id = Column(String, nullable=True)
    outlook_calendar_id = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow)

    favorites = relationship("FavoriteEvent", back_populates="user", cascade="all, delete-orphan",
                             passive_deletes=True)


class UserSession(Base):
    __tablename__ = "sessions"

    sid = Column(String, primary_key=True)
    sess = Column(JSON, nullable=False)
    expire = Column(DateTime(timezone=True), nullable=False, index=True)


class FavoriteEvent(Base):
    __tablename__ = "favorite_events"
    __table_args__ = (UniqueConstraint("user_id", "event_id", name="uq_favorite_user_event"),)

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    added_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    synced_to_calendar = Column(Boolean, nullable=False, default=False)
    external_calendar_event_id = Column(String, nullable=True)

    user = relationship("User", back_populates="favorites")
    event = relationship("Event", back_populates="favorites")


class CalendarSyncLog(Base):
    __tablename__ = "calendar_sync_log"

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event_id = Column(String(36), ForeignKey("events.id", ondelete="CASCADE"), nullable=False)
    operation = Column(String(16), nullable=False)  # create, update, delete
    provider = Column(String(16), nullable=False)  # google, outlook
    status = Column(String(16), nullable=False)  # success, failed
    external_event_id = Column(String, nullable=True)
    error_message = Column(Text, nullable=True)
    synced_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
