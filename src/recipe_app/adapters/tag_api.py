"""Tag capability of the recipe service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from recipe_app.adapters.http_transport import ApiTransport
from recipe_app.adapters.mappers import parse_payload, parse_payload_list, tag_from_dto
from recipe_app.adapters.wire_models import MessageDto, TagDto
from recipe_app.domain.recipes import Tag


class TagApi(Protocol):
    """Remote tag operations."""

    async def list(self) -> list[Tag]:
        """Return all tags."""

    async def get(self, tag_id: int) -> Tag:
        """Return one tag."""

    async def create(self, name: str, color: str | None = None) -> Tag:
        """Create a tag; the server picks a color when none is given."""

    async def update(self, tag_id: int, name: str, color: str | None = None) -> Tag:
        """Rename or recolor a tag."""

    async def delete(self, tag_id: int) -> None:
        """Delete a tag."""


@dataclass
class HttpxTagApi(TagApi):
    """Tag API backed by the shared HTTP transport."""

    transport: ApiTransport

    async def list(self) -> list[Tag]:
        payload = await self.transport.request("GET", "/api/tags")
        return [tag_from_dto(dto) for dto in parse_payload_list(TagDto, payload)]

    async def get(self, tag_id: int) -> Tag:
        payload = await self.transport.request("GET", f"/api/tags/{tag_id}")
        return tag_from_dto(parse_payload(TagDto, payload))

    async def create(self, name: str, color: str | None = None) -> Tag:
        payload = await self.transport.request(
            "POST", "/api/tags", json=_body(name, color)
        )
        return tag_from_dto(parse_payload(TagDto, payload))

    async def update(self, tag_id: int, name: str, color: str | None = None) -> Tag:
        payload = await self.transport.request(
            "PUT", f"/api/tags/{tag_id}", json=_body(name, color)
        )
        return tag_from_dto(parse_payload(TagDto, payload))

    async def delete(self, tag_id: int) -> None:
        payload = await self.transport.request("DELETE", f"/api/tags/{tag_id}")
        if payload is not None:
            parse_payload(MessageDto, payload)


def _body(name: str, color: str | None) -> dict[str, object]:
    body: dict[str, object] = {"name": name}
    if color is not None:
        body["color"] = color
    return body
