"""Ownership of recipe form sessions across requests."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from recipe_app.web.forms import RecipeFormSession

FORM_TTL_SECONDS = 3600


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class _OpenForm:
    form: RecipeFormSession
    expires_at: datetime


@dataclass
class FormSessionService:
    """Keeps one form session per open recipe form.

    Forms expire after ``ttl_seconds`` without a read, so abandoned pages do not
    accumulate.
    """

    ttl_seconds: float = FORM_TTL_SECONDS
    clock: Callable[[], datetime] = _utcnow
    _forms: dict[UUID, _OpenForm] = field(default_factory=dict)

    @property
    def open_count(self) -> int:
        return len(self._forms)

    def start(self, ingredient_rows: int = 1, instruction_rows: int = 1) -> UUID:
        """Open a form with the initial rows the page renders."""
        self._prune()
        session = RecipeFormSession()
        for _ in range(ingredient_rows):
            session.add_ingredient()
        for _ in range(instruction_rows):
            session.add_instruction()
        session_id = uuid4()
        self._forms[session_id] = _OpenForm(form=session, expires_at=self._deadline())
        return session_id

    def get(self, session_id: UUID) -> RecipeFormSession | None:
        """Return an open form and extend its lifetime."""
        self._prune()
        entry = self._forms.get(session_id)
        if entry is None:
            return None
        entry.expires_at = self._deadline()
        return entry.form

    def finish(self, session_id: UUID) -> None:
        """Drop a form once it has been submitted."""
        self._forms.pop(session_id, None)

    def _deadline(self) -> datetime:
        return self.clock() + timedelta(seconds=self.ttl_seconds)

    def _prune(self) -> None:
        now = self.clock()
        expired = [key for key, entry in self._forms.items() if now >= entry.expires_at]
        for key in expired:
            self._forms.pop(key, None)
