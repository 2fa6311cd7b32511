"""Authentication capability of the recipe service."""

import logging
from dataclasses import dataclass
from typing import Protocol

from recipe_app.adapters.http_transport import ApiTransport
from recipe_app.adapters.mappers import auth_response_from_dto, parse_payload
from recipe_app.adapters.wire_models import AuthResponseDto, TokenRefreshDto
from recipe_app.domain.auth import AuthResponse, LoginRequest, RegisterRequest
from recipe_app.domain.errors import NotAuthenticatedError

_logger = logging.getLogger(__name__)


class AuthApi(Protocol):
    """Remote authentication operations."""

    async def login(self, email: str, password: str) -> AuthResponse:
        """Exchange credentials for a token."""

    async def register(self, email: str, password: str, name: str) -> AuthResponse:
        """Create an account and return its first token."""

    async def refresh_token(self) -> AuthResponse:
        """Exchange the current token for a fresh one."""

    async def logout(self) -> None:
        """Forget the current token."""


@dataclass
class HttpxAuthApi(AuthApi):
    """Auth API that keeps the issued token in the transport's token store."""

    transport: ApiTransport

    async def login(self, email: str, password: str) -> AuthResponse:
        request = LoginRequest(email=email, password=password)
        payload = await self.transport.request(
            "POST",
            "/api/auth/login",
            json={"email": request.email, "password": request.password},
        )
        return self._store(payload)

    async def register(self, email: str, password: str, name: str) -> AuthResponse:
        request = RegisterRequest(email=email, password=password, name=name)
        payload = await self.transport.request(
            "POST",
            "/api/auth/register",
            json={
                "email": request.email,
                "password": request.password,
                "name": request.name,
            },
        )
        return self._store(payload)

    async def refresh_token(self) -> AuthResponse:
        """Refresh the stored token; the server does not resend the user."""
        current = self.transport.tokens.session
        if current is None:
            raise NotAuthenticatedError("No token to refresh")
        payload = await self.transport.request("POST", "/api/auth/refresh")
        refreshed = parse_payload(TokenRefreshDto, payload)
        session = AuthResponse(
            token=refreshed.token,
            user=current.user,
            expires_in=refreshed.expires_in,
        )
        self.transport.tokens.save(session)
        _logger.info("Refreshed token for user %s", session.user.id)
        return session

    async def logout(self) -> None:
        """Clear the stored token; the service keeps no server-side session."""
        self.transport.tokens.clear()

    def _store(self, payload: object) -> AuthResponse:
        session = auth_response_from_dto(parse_payload(AuthResponseDto, payload))
        self.transport.tokens.save(session)
        _logger.info("Authenticated user %s", session.user.id)
        return session
