import logging
from typing import List, Optional

from camp_events.core.errors import Conflict, NotFound, ValidationError
from camp_events.db.models import FavoriteEvent
from camp_events.services.storage import DatabaseStorage

logger = logging.getLogger(__name__)


class FavoritesService:
    """
    Keeps at most one favorite row per (user, event) pair.

    Callers are expected to have authenticated the user already; user_id is
    always the caller's own identity.
    """

    def __init__(self, storage: DatabaseStorage):
        self.storage = storage

    def list(self, user_id: str) -> List[FavoriteEvent]:
        return self.storage.get_user_favorites(user_id)

    def add(self, user_id: str, event_id: Optional[str]) -> FavoriteEvent:
        if not event_id:
            raise ValidationError("eventId is required")
        if self.storage.get_user(user_id) is None:
            raise NotFound("User not found")
        if self.storage.get_event(event_id) is None:
            raise NotFound("Event not found")
        if self.storage.is_favorite(user_id, event_id):
            raise Conflict("Event is already in favorites")
        favorite = self.storage.add_favorite(user_id, event_id)
        logger.info(f"User {user_id} favorited event {event_id}")
        return favorite

    def remove(self, user_id: str, event_id: str):
        removed = self.storage.remove_favorite(user_id, event_id)
        if removed:
            logger.info(f"User {user_id} removed favorite {event_id}")

    def is_favorite(self, user_id: Optional[str], event_id: str) -> bool:
        if user_id is None:
            return False
        return self.storage.is_favorite(user_id, event_id)
