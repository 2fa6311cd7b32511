"""Error taxonomy shared by the client and web layers."""


class RecipeAppError(Exception):
    """Base class for application errors."""


class MappingError(RecipeAppError):
    """A wire value could not be converted into the domain model."""

    def __init__(self, field: str, value: object, reason: str | None = None) -> None:
        self.field = field
        self.value = value
        detail = f": {reason}" if reason else ""
        super().__init__(f"Cannot map {field}={value!r}{detail}")


class TransportError(RecipeAppError):
    """A remote call failed at the network or HTTP level."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        if self.status_code is None:
            return True
        return self.status_code == 429 or self.status_code >= 500


class ServerValidationError(TransportError):
    """The server rejected a payload with per-field errors."""

    def __init__(self, message: str, errors: dict[str, str]) -> None:
        super().__init__(message, status_code=400, code="VALIDATION_FAILED")
        self.errors = errors


class NotAuthenticatedError(RecipeAppError):
    """An operation needs a token but none is stored."""
