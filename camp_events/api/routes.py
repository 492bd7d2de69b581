import logging
from datetime import date, datetime
from typing import List, Optional

import pytz
from fastapi import APIRouter, Depends, Query, Request, Response

from camp_events.core.auth import AuthContext, require_user, resolve_auth_context
from camp_events.core.errors import NotFound, ValidationError
from camp_events.db import schemas
from camp_events.services import calendar_views
from camp_events.services.favorites import FavoritesService
from camp_events.services.filters import (
    LIST_SEARCH_FIELDS, TITLE_ONLY, FilterSpec, event_type_counts, filter_events, sort_by_start,
)
from camp_events.services.sharing import share_links
from camp_events.services.storage import DatabaseStorage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


# --- Helpers ---
def to_schemas(events) -> List[schemas.Event]:
    return [schemas.Event.model_validate(e) for e in events]


def filter_params(
    search: Optional[str] = None,
    event_types: List[str] = Query([], alias="eventType"),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    age_groups: List[str] = Query([], alias="ageGroup"),
) -> dict:
    return {
        "search": search,
        "event_types": event_types,
        "min_price": min_price,
        "max_price": max_price,
        "age_groups": age_groups,
    }


def today(request: Request) -> date:
    tz = pytz.timezone(request.app.state.settings.TIMEZONE)
    return datetime.now(tz).date()


def load_event(storage: DatabaseStorage, event_id: str):
    event = storage.get_event(event_id)
    if not event:
        raise NotFound("Event not found")
    return event


# --- Events ---
@router.get("/events", response_model=List[schemas.Event])
def get_events(storage: DatabaseStorage = Depends(get_storage)):
    return to_schemas(storage.get_events())


@router.get("/events/type-counts", response_model=schemas.TypeCounts)
def get_event_type_counts(storage: DatabaseStorage = Depends(get_storage)):
    events = storage.get_events()
    return schemas.TypeCounts(counts=event_type_counts(events), total=len(events))


@router.get("/events/filter", response_model=List[schemas.Event])
def get_filtered_events(params: dict = Depends(filter_params), storage: DatabaseStorage = Depends(get_storage)):
    spec = FilterSpec.build(**params, search_fields=LIST_SEARCH_FIELDS)
    return sort_by_start(filter_events(to_schemas(storage.get_events()), spec))


@router.get("/events/range/{start_date}/{end_date}", response_model=List[schemas.Event])
def get_events_by_range(start_date: date, end_date: date, storage: DatabaseStorage = Depends(get_storage)):
    if start_date > end_date:
        raise ValidationError("startDate must not be after endDate")
    return to_schemas(storage.get_events_by_date_range(start_date, end_date))


@router.get("/events/type/{event_type}", response_model=List[schemas.Event])
def get_events_by_type(event_type: str, storage: DatabaseStorage = Depends(get_storage)):
    return to_schemas(storage.get_events_by_type(event_type))


@router.get("/events/{event_id}/share", response_model=schemas.ShareLinks)
def share_event(event_id: str, request: Request, storage: DatabaseStorage = Depends(get_storage)):
    event = schemas.Event.model_validate(load_event(storage, event_id))
    return share_links(event, request.app.state.settings.SHARE_BASE_URL)


@router.get("/events/{event_id}", response_model=schemas.Event)
def get_event(event_id: str, storage: DatabaseStorage = Depends(get_storage)):
    return schemas.Event.model_validate(load_event(storage, event_id))


# --- Calendar views ---
@router.get("/calendar/month", response_model=schemas.MonthView)
def get_month(
    request: Request,
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    params: dict = Depends(filter_params),
    storage: DatabaseStorage = Depends(get_storage),
):
    current = today(request)
    spec = FilterSpec.build(**params, search_fields=TITLE_ONLY)
    events = filter_events(to_schemas(storage.get_events()), spec)
    return calendar_views.month_view(
        year or current.year, month or current.month, events, request.app.state.settings.MAX_EVENTS_PER_DAY,
    )


@router.get("/calendar/week", response_model=schemas.WeekView)
def get_week(
    request: Request,
    anchor: Optional[date] = Query(None, alias="date"),
    params: dict = Depends(filter_params),
    storage: DatabaseStorage = Depends(get_storage),
):
    spec = FilterSpec.build(**params, search_fields=TITLE_ONLY)
    events = filter_events(to_schemas(storage.get_events()), spec)
    return calendar_views.week_view(anchor or today(request), events)


@router.get("/calendar/year", response_model=schemas.YearView)
def get_year(
    request: Request,
    year: Optional[int] = Query(None, ge=1, le=9999),
    params: dict = Depends(filter_params),
    storage: DatabaseStorage = Depends(get_storage),
):
    spec = FilterSpec.build(**params, search_fields=TITLE_ONLY)
    events = filter_events(to_schemas(storage.get_events()), spec)
    return calendar_views.year_view(year or today(request).year, events)


# --- Auth ---
@router.get("/auth/user", response_model=schemas.User)
def get_auth_user(auth: AuthContext = Depends(require_user), storage: DatabaseStorage = Depends(get_storage)):
    user = storage.get_user(auth.user_id)
    if not user:
        raise NotFound("User not found")
    return user


@router.post("/logout", status_code=204)
def logout(request: Request, auth: AuthContext = Depends(resolve_auth_context),
           storage: DatabaseStorage = Depends(get_storage)):
    if auth.session_id:
        storage.delete_session(auth.session_id)
    response = Response(status_code=204)
    response.delete_cookie(request.app.state.settings.SESSION_COOKIE_NAME)
    return response


# --- Favorites ---
@router.get("/favorites", response_model=List[schemas.FavoriteEventWithEvent])
def get_favorites(auth: AuthContext = Depends(require_user), storage: DatabaseStorage = Depends(get_storage)):
    return FavoritesService(storage).list(auth.user_id)


@router.post("/favorites", response_model=schemas.FavoriteEvent, status_code=201)
def add_favorite(body: schemas.FavoriteCreate, auth: AuthContext = Depends(require_user),
                 storage: DatabaseStorage = Depends(get_storage)):
    return FavoritesService(storage).add(auth.user_id, body.event_id)


@router.delete("/favorites/{event_id}", status_code=204)
def remove_favorite(event_id: str, auth: AuthContext = Depends(require_user),
                    storage: DatabaseStorage = Depends(get_storage)):
    FavoritesService(storage).remove(auth.user_id, event_id)
    return Response(status_code=204)


@router.get("/favorites/check/{event_id}", response_model=schemas.FavoriteCheck)
def check_favorite(event_id: str, auth: AuthContext = Depends(resolve_auth_context),
                   storage: DatabaseStorage = Depends(get_storage)):
    return schemas.FavoriteCheck(is_favorite=FavoritesService(storage).is_favorite(auth.user_id, event_id))


# --- Calendar sync ---
@router.put("/calendar-sync", response_model=schemas.User)
def update_calendar_sync(body: schemas.CalendarSyncUpdate, auth: AuthContext = Depends(require_user),
                         storage: DatabaseStorage = Depends(get_storage)):
    return storage.update_calendar_sync(
        auth.user_id, body.enabled, body.google_calendar_id, body.outlook_calendar_id,
    )


@router.get("/sync-logs", response_model=List[schemas.SyncLog])
def get_sync_logs(auth: AuthContext = Depends(require_user), storage: DatabaseStorage = Depends(get_storage)):
    return storage.get_sync_logs(auth.user_id)


@router.post("/sync-logs", response_model=schemas.SyncLog, status_code=201)
def add_sync_log(body: schemas.SyncLogCreate, auth: AuthContext = Depends(require_user),
                 storage: DatabaseStorage = Depends(get_storage)):
    load_event(storage, body.event_id)
    entry = storage.add_sync_log(auth.user_id, body)
    logger.info(f"Sync log {entry.operation}/{entry.provider} recorded for user {auth.user_id}: {entry.status}")
    return entry
