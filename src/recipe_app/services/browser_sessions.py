"""Per-browser login and flash state for the web backend."""

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from recipe_app.adapters.http_transport import TokenStore
from recipe_app.web.flash import DISMISS_AFTER_SECONDS, FlashBoard

SESSION_COOKIE = "recipe_session"
SESSION_TTL_SECONDS = 86400

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class BrowserSession:
    """State owned by one browser: its token and its flash queue."""

    tokens: TokenStore
    flash: FlashBoard
    expires_at: datetime


@dataclass
class BrowserSessionService:
    """Issues opaque session ids and keeps the state behind them."""

    ttl_seconds: float = SESSION_TTL_SECONDS
    flash_dismiss_seconds: float = DISMISS_AFTER_SECONDS
    clock: Callable[[], datetime] = _utcnow
    _sessions: dict[str, BrowserSession] = field(default_factory=dict)

    @property
    def open_count(self) -> int:
        return len(self._sessions)

    def resolve(self, session_id: str | None) -> tuple[str, BrowserSession]:
        """Return the session behind a cookie value, opening one if needed.

        Unknown or expired ids never resurrect state; the caller gets a fresh id
        and must hand it back to the browser.
        """
        self._prune()
        session = self._sessions.get(session_id) if session_id else None
        if session_id is None or session is None:
            session_id = secrets.token_urlsafe(32)
            session = BrowserSession(
                tokens=TokenStore(),
                flash=FlashBoard(
                    dismiss_after_seconds=self.flash_dismiss_seconds, clock=self.clock
                ),
                expires_at=self._deadline(),
            )
            self._sessions[session_id] = session
            _logger.debug("Opened browser session (%s open)", len(self._sessions))
        session.expires_at = self._deadline()
        return session_id, session

    def _deadline(self) -> datetime:
        return self.clock() + timedelta(seconds=self.ttl_seconds)

    def _prune(self) -> None:
        now = self.clock()
        expired = [
            key for key, entry in self._sessions.items() if now >= entry.expires_at
        ]
        for key in expired:
            self._sessions.pop(key, None)
