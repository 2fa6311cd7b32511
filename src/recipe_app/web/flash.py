"""Transient flash notifications."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum

DISMISS_AFTER_SECONDS = 5


class FlashLevel(Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"

    @classmethod
    def parse(cls, value: str) -> "FlashLevel":
        """Map a level name to a level; unknown names render as info."""
        try:
            return cls(value)
        except ValueError:
            return cls.INFO


_LEVEL_CLASSES = {
    FlashLevel.ERROR: "bg-red-500 text-white",
    FlashLevel.SUCCESS: "bg-green-500 text-white",
    FlashLevel.WARNING: "bg-yellow-500 text-white",
    FlashLevel.INFO: "bg-blue-500 text-white",
}


@dataclass(frozen=True)
class FlashMessage:
    text: str
    level: FlashLevel
    created_at: datetime
    expires_at: datetime

    @property
    def css_class(self) -> str:
        return (
            "fixed top-20 right-4 p-4 rounded-lg shadow-lg z-50 "
            f"{_LEVEL_CLASSES[self.level]}"
        )


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class FlashBoard:
    """Queue of flash messages that dismiss themselves after a fixed time."""

    dismiss_after_seconds: float = DISMISS_AFTER_SECONDS
    clock: Callable[[], datetime] = _utcnow
    _messages: list[FlashMessage] = field(default_factory=list)

    def show(self, text: str, level: str = "info") -> FlashMessage:
        now = self.clock()
        message = FlashMessage(
            text=text,
            level=FlashLevel.parse(level),
            created_at=now,
            expires_at=now + timedelta(seconds=self.dismiss_after_seconds),
        )
        self._messages.append(message)
        return message

    def active(self) -> list[FlashMessage]:
        """Return messages still on screen, dropping expired ones."""
        now = self.clock()
        self._messages = [item for item in self._messages if now < item.expires_at]
        return list(self._messages)
