"""Authentication transfer objects."""

from dataclasses import dataclass

from recipe_app.domain.users import User


@dataclass(frozen=True)
class LoginRequest:
    email: str
    password: str


@dataclass(frozen=True)
class RegisterRequest:
    email: str
    password: str
    name: str


@dataclass(frozen=True)
class AuthResponse:
    """Issued token with the authenticated user and its lifetime in seconds."""

    token: str
    user: User
    expires_in: int
