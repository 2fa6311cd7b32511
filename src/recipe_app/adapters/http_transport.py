"""Shared HTTP transport for the recipe service adapters."""

import asyncio
import logging
from dataclasses import dataclass, field

import httpx

from recipe_app.adapters.mappers import parse_payload
from recipe_app.adapters.wire_models import ErrorResponseDto, ValidationErrorDto
from recipe_app.domain.auth import AuthResponse
from recipe_app.domain.errors import (
    MappingError,
    ServerValidationError,
    TransportError,
)

_logger = logging.getLogger(__name__)

_RETRYABLE_METHODS = frozenset({"GET"})


@dataclass
class TokenStore:
    """Holds the current session issued by the auth endpoints."""

    session: AuthResponse | None = None

    @property
    def token(self) -> str | None:
        return self.session.token if self.session else None

    def save(self, session: AuthResponse) -> None:
        self.session = session

    def clear(self) -> None:
        self.session = None


@dataclass
class ApiTransport:
    """JSON-over-HTTP transport with bearer auth and GET-only retries."""

    base_url: str
    http_client: httpx.AsyncClient
    tokens: TokenStore = field(default_factory=TokenStore)
    timeout_seconds: float = 15
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        base_url: str,
        *,
        tokens: TokenStore | None = None,
        timeout_seconds: float = 15,
        retry_attempts: int = 1,
        retry_delay_seconds: float = 0.3,
    ) -> "ApiTransport":
        """Create a transport with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            tokens=tokens or TokenStore(),
            timeout_seconds=timeout_seconds,
            retry_attempts=retry_attempts,
            retry_delay_seconds=retry_delay_seconds,
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: list[tuple[str, str]] | None = None,
        json: object | None = None,
    ) -> object:
        """Send a request and return the decoded JSON body."""
        attempt = 0
        while True:
            try:
                return await self._send(method, path, params=params, json=json)
            except TransportError as exc:
                attempt += 1
                can_retry = (
                    method in _RETRYABLE_METHODS
                    and exc.retryable
                    and attempt <= self.retry_attempts
                )
                _logger.warning(
                    "Request %s %s failed (attempt %s/%s, status=%s): %s",
                    method,
                    path,
                    attempt,
                    self.retry_attempts + 1 if method in _RETRYABLE_METHODS else 1,
                    exc.status_code if exc.status_code is not None else "n/a",
                    exc.message,
                )
                if not can_retry:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: list[tuple[str, str]] | None,
        json: object | None,
    ) -> object:
        headers = {"Accept": "application/json"}
        if self.tokens.token:
            headers["Authorization"] = f"Bearer {self.tokens.token}"
        try:
            response = await self.http_client.request(
                method,
                f"{self.base_url}{path}",
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout_seconds,
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc
        if response.is_error:
            raise _error_from_response(response)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise MappingError("body", response.text, "response is not JSON") from exc

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _error_from_response(response: httpx.Response) -> TransportError:
    """Build a transport error from an error response body."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if response.status_code == httpx.codes.BAD_REQUEST:
        invalid = _parse_error_body(ValidationErrorDto, body)
        if isinstance(invalid, ValidationErrorDto):
            return ServerValidationError(invalid.message, invalid.errors)
    error = _parse_error_body(ErrorResponseDto, body)
    if isinstance(error, ErrorResponseDto):
        return TransportError(
            error.message or error.error,
            status_code=response.status_code,
            code=error.code,
        )
    message = response.text.strip() or response.reason_phrase
    return TransportError(message, status_code=response.status_code)


def _parse_error_body(
    model: type[ErrorResponseDto] | type[ValidationErrorDto], body: object
) -> ErrorResponseDto | ValidationErrorDto | None:
    """Parse an error body, returning None when it has another shape."""
    if not isinstance(body, dict):
        return None
    try:
        return parse_payload(model, body)
    except MappingError:
        return None
