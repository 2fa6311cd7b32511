"""Generic response envelopes."""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    """Message with an optional payload or error."""

    message: str
    data: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class PaginatedResponse(Generic[T]):
    """One page of items as reported by the server."""

    items: list[T]
    total_count: int
    current_page: int
    page_size: int
    has_next_page: bool
    has_previous_page: bool
