"""
Session handling: identity check, logout and expiry monitoring.
"""

import logging
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Awaitable, Callable, Optional

from jose import JWTError, jwt

from ..config import get_settings
from ..models.user import CurrentUser
from ..token_store import TokenStore, SESSION_EXPIRY_KEY
from .api_client import ApiError, QueueApiClient
from .poller import Poller

logger = logging.getLogger(__name__)


class SessionCheck(str, Enum):
    """Outcome of an expiry check."""
    NO_SESSION = "no_session"
    VALID = "valid"
    EXPIRING = "expiring"
    EXPIRED = "expired"


def _parse_expiry(raw: str) -> Optional[datetime]:
    try:
        value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Ignoring malformed session expiry {raw!r}")
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


class SessionService:
    """Owns the global logout side effect; queue views never call it directly."""

    def __init__(
        self,
        store: TokenStore,
        client: QueueApiClient,
        warning_minutes: Optional[int] = None,
        on_logout: Optional[Callable[[], Awaitable[None]]] = None
    ):
        self.store = store
        self.client = client
        self.on_logout = on_logout
        if warning_minutes is None:
            warning_minutes = get_settings().SESSION_EXPIRY_WARNING_MINUTES
        self.warning_window = timedelta(minutes=warning_minutes)
        self._logging_out = False

    async def logout(self) -> None:
        """
        Tell the backend when a session exists, then always clear storage
        and run the `on_logout` hook, which closes every open view.
        """
        if self._logging_out:
            return
        self._logging_out = True
        try:
            if self.store.get_session_token():
                await self.client.logout()
        except ApiError as e:
            logger.error(f"Logout error: {e.message}")
        finally:
            self.store.clear_session()
            try:
                await self._notify_logout()
            finally:
                self._logging_out = False

    async def _notify_logout(self) -> None:
        if self.on_logout is None:
            return
        try:
            await self.on_logout()
        except Exception:
            logger.exception("Logout hook failed")

    async def handle_unauthorized(self, error: ApiError) -> None:
        """Hook for the API client: the backend rejected our session."""
        logger.warning(f"Your session has expired. Please login again. ({error.status_code})")
        await self.logout()

    async def check_identity(self) -> Optional[CurrentUser]:
        """Resolve the stored token to a user; a rejected token clears storage."""
        if not (self.store.get_token() and self.store.get_session_token()):
            return None
        try:
            return await self.client.get_current_user()
        except ApiError as e:
            logger.warning(f"Stored session rejected: {e.message}")
            self.store.clear_session()
            await self._notify_logout()
            return None

    def session_expiry(self) -> Optional[datetime]:
        """Stored session expiry, else the bearer token's own `exp` claim."""
        raw = self.store.get_item(SESSION_EXPIRY_KEY)
        if raw:
            return _parse_expiry(raw)

        token = self.store.get_token()
        if not token:
            return None
        try:
            claims = jwt.get_unverified_claims(token)
        except JWTError:
            return None
        exp = claims.get("exp")
        if exp is None:
            return None
        return datetime.fromtimestamp(exp, tz=timezone.utc)

    async def check_expiry(self, now: Optional[datetime] = None) -> SessionCheck:
        expiry = self.session_expiry()
        if expiry is None:
            return SessionCheck.NO_SESSION

        now = now or datetime.now(timezone.utc)
        if expiry <= now:
            logger.warning("Your session has expired. Please login again.")
            await self.logout()
            return SessionCheck.EXPIRED
        if expiry - now < self.warning_window:
            minutes = int(self.warning_window.total_seconds() // 60)
            logger.warning(f"Your session will expire in less than {minutes} minutes.")
            return SessionCheck.EXPIRING
        return SessionCheck.VALID


class SessionMonitor:
    """Periodic expiry check."""

    def __init__(self, service: SessionService, interval: Optional[float] = None):
        self.service = service
        interval = interval or get_settings().SESSION_CHECK_INTERVAL_SECONDS
        self.poller = Poller(interval, self.service.check_expiry, "session-monitor")

    def start(self) -> None:
        self.poller.start()

    async def stop(self) -> None:
        await self.poller.cancel()
