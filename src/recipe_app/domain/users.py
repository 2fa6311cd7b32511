"""Domain models for users."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class User:
    """An account on the recipe service."""

    id: int
    email: str
    name: str
    is_admin: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ProfileUpdate:
    """Editable profile fields of the current user."""

    name: str
    email: str
