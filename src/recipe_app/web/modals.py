"""Modal visibility and navigation after completed requests."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

LOGIN_MODAL_ID = "loginModal"
REGISTER_MODAL_ID = "registerModal"
FORM_MESSAGE_ID = "form-message"
RECIPES_URL = "/recipes"
REDIRECT_DELAY_SECONDS = 1.5

_logger = logging.getLogger(__name__)


class ModalState(Enum):
    HIDDEN = "hidden"
    VISIBLE = "visible"


@dataclass
class Modal:
    """A dialog identified by its backdrop element id."""

    element_id: str
    state: ModalState = ModalState.HIDDEN

    @property
    def visible(self) -> bool:
        return self.state is ModalState.VISIBLE


@dataclass(frozen=True)
class RequestCompleted:
    """Signal emitted when a request issued by a page element finishes."""

    target_id: str
    successful: bool


@dataclass(frozen=True)
class Reload:
    """Reload the current page."""


@dataclass(frozen=True)
class Redirect:
    """Navigate to a URL after a delay."""

    url: str
    delay_seconds: float = 0


NavigationAction = Reload | Redirect


class Navigator(Protocol):
    """Browser-side navigation capability."""

    async def reload(self) -> None:
        """Reload the current page."""

    async def navigate(self, url: str) -> None:
        """Go to another page."""


@dataclass
class ModalController:
    """Owns the login and register dialogs of a page."""

    redirect_delay_seconds: float = REDIRECT_DELAY_SECONDS
    modals: dict[str, Modal] = field(
        default_factory=lambda: {
            LOGIN_MODAL_ID: Modal(LOGIN_MODAL_ID),
            REGISTER_MODAL_ID: Modal(REGISTER_MODAL_ID),
        }
    )

    def open(self, modal_id: str) -> None:
        self._modal(modal_id).state = ModalState.VISIBLE

    def close(self, modal_id: str) -> None:
        self._modal(modal_id).state = ModalState.HIDDEN

    def is_visible(self, modal_id: str) -> bool:
        return self._modal(modal_id).visible

    def handle_click(self, target_id: str | None) -> None:
        """Hide a modal when the click landed on its backdrop."""
        modal = self.modals.get(target_id or "")
        if modal is not None:
            modal.state = ModalState.HIDDEN

    def handle_request_completed(
        self, event: RequestCompleted
    ) -> NavigationAction | None:
        """Decide how the page reacts to a finished request."""
        if not event.successful:
            return None
        if event.target_id in self.modals:
            self.close(event.target_id)
            return Reload()
        if event.target_id == FORM_MESSAGE_ID:
            return Redirect(RECIPES_URL, delay_seconds=self.redirect_delay_seconds)
        return None

    def _modal(self, modal_id: str) -> Modal:
        try:
            return self.modals[modal_id]
        except KeyError:
            raise KeyError(f"Unknown modal: {modal_id}") from None


async def perform_navigation(
    action: NavigationAction,
    navigator: Navigator,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> None:
    """Carry out a navigation action, waiting out any delay first."""
    if isinstance(action, Reload):
        await navigator.reload()
        return
    if action.delay_seconds > 0:
        await sleep(action.delay_seconds)
    _logger.debug("Navigating to %s", action.url)
    await navigator.navigate(action.url)
