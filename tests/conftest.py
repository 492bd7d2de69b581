from datetime import date

import pytest
from fastapi.testclient import TestClient

from camp_events.core.config import Settings
from camp_events.db import schemas
from camp_events.db.database import Base
from camp_events.db.seed import seed_events
from camp_events.main import create_app
from camp_events.services.filters import parse_age_group
from camp_events.services.storage import DatabaseStorage


@pytest.fixture
def settings():
    return Settings(
        DATABASE_URL="sqlite://",
        APP_ENV="test",
        SHARE_BASE_URL="https://camp.example.org",
        TIMEZONE="America/Los_Angeles",
    )


@pytest.fixture
def app(settings):
    app = create_app(settings)
    Base.metadata.create_all(bind=app.state.engine)
    yield app
    Base.metadata.drop_all(bind=app.state.engine)
    app.state.engine.dispose()


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def storage(db):
    return DatabaseStorage(db)


@pytest.fixture
def seeded(storage, settings):
    seed_events(storage, location=settings.DEFAULT_LOCATION)
    return storage.get_events()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def user(storage):
    return storage.upsert_user(schemas.UserUpsert(id="user-1", email="camper@example.org", first_name="Sam"))


@pytest.fixture
def auth_client(client, storage, user, settings):
    sid = storage.create_session(user.id)
    client.cookies.set(settings.SESSION_COOKIE_NAME, sid)
    return client


def make_event(event_id, start, end, prices=(100,), event_type="Summer Camp", title=None,
               age_group="18+", location="Hume Lake, CA"):
    """Build an API-level Event without touching the database."""
    age_min, age_max = parse_age_group(age_group)
    return schemas.Event(
        id=event_id,
        title=title or f"Event {event_id}",
        start_date=date.fromisoformat(start),
        end_date=date.fromisoformat(end),
        event_type=event_type,
        age_group=age_group,
        age_min=age_min,
        age_max=age_max,
        location=location,
        pricing_options=[{"name": f"Option {i}", "price": price} for i, price in enumerate(prices)],
    )


@pytest.fixture
def event_factory():
    return make_event
