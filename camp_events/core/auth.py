from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request

from camp_events.core.errors import Unauthorized
from camp_events.services.storage import DatabaseStorage, get_storage


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller, resolved once per request from the session cookie."""

    user_id: Optional[str] = None
    session_id: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


ANONYMOUS = AuthContext()


def resolve_auth_context(request: Request, storage: DatabaseStorage = Depends(get_storage)) -> AuthContext:
    cookie_name = request.app.state.settings.SESSION_COOKIE_NAME
    sid = request.cookies.get(cookie_name)
    if not sid:
        return ANONYMOUS
    record = storage.get_session(sid)
    if record is None or not record.sess.get("user_id"):
        return ANONYMOUS
    return AuthContext(user_id=record.sess["user_id"], session_id=sid)


def require_user(auth: AuthContext = Depends(resolve_auth_context)) -> AuthContext:
    if not auth.is_authenticated:
        raise Unauthorized("Unauthorized")
    return auth
