"""Profile capability of the recipe service."""

from dataclasses import dataclass
from typing import Protocol

from recipe_app.adapters.http_transport import ApiTransport
from recipe_app.adapters.mappers import parse_payload, user_from_dto
from recipe_app.adapters.wire_models import UserDto
from recipe_app.domain.users import ProfileUpdate, User


class UserApi(Protocol):
    """Remote profile operations for the authenticated user."""

    async def get_profile(self) -> User:
        """Return the current user's profile."""

    async def update_profile(self, update: ProfileUpdate) -> User:
        """Change the current user's name and email."""


@dataclass
class HttpxUserApi(UserApi):
    """Profile API backed by the shared HTTP transport."""

    transport: ApiTransport

    async def get_profile(self) -> User:
        payload = await self.transport.request("GET", "/api/users/profile")
        return user_from_dto(parse_payload(UserDto, payload))

    async def update_profile(self, update: ProfileUpdate) -> User:
        payload = await self.transport.request(
            "PUT",
            "/api/users/profile",
            json={"name": update.name, "email": update.email},
        )
        return user_from_dto(parse_payload(UserDto, payload))
