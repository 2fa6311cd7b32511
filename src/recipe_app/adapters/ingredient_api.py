"""Ingredient capability of the recipe service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from recipe_app.adapters.http_transport import ApiTransport
from recipe_app.adapters.mappers import (
    ingredient_from_dto,
    parse_payload,
    parse_payload_list,
)
from recipe_app.adapters.wire_models import IngredientDto, MessageDto
from recipe_app.domain.recipes import Ingredient


class IngredientApi(Protocol):
    """Remote ingredient operations."""

    async def list(self) -> list[Ingredient]:
        """Return all ingredients ordered by name."""

    async def get(self, ingredient_id: int) -> Ingredient:
        """Return one ingredient."""

    async def create(self, name: str, category: str | None = None) -> Ingredient:
        """Create an ingredient."""

    async def update(
        self, ingredient_id: int, name: str, category: str | None = None
    ) -> Ingredient:
        """Rename or recategorize an ingredient."""

    async def delete(self, ingredient_id: int) -> None:
        """Delete an ingredient."""

    async def search(self, query: str) -> list[Ingredient]:
        """Return ingredients whose name matches a query."""


@dataclass
class HttpxIngredientApi(IngredientApi):
    """Ingredient API backed by the shared HTTP transport."""

    transport: ApiTransport

    async def list(self) -> list[Ingredient]:
        payload = await self.transport.request("GET", "/api/ingredients")
        return _ingredients(payload)

    async def get(self, ingredient_id: int) -> Ingredient:
        payload = await self.transport.request(
            "GET", f"/api/ingredients/{ingredient_id}"
        )
        return ingredient_from_dto(parse_payload(IngredientDto, payload))

    async def create(self, name: str, category: str | None = None) -> Ingredient:
        payload = await self.transport.request(
            "POST", "/api/ingredients", json=_body(name, category)
        )
        return ingredient_from_dto(parse_payload(IngredientDto, payload))

    async def update(
        self, ingredient_id: int, name: str, category: str | None = None
    ) -> Ingredient:
        payload = await self.transport.request(
            "PUT", f"/api/ingredients/{ingredient_id}", json=_body(name, category)
        )
        return ingredient_from_dto(parse_payload(IngredientDto, payload))

    async def delete(self, ingredient_id: int) -> None:
        payload = await self.transport.request(
            "DELETE", f"/api/ingredients/{ingredient_id}"
        )
        if payload is not None:
            parse_payload(MessageDto, payload)

    async def search(self, query: str) -> list[Ingredient]:
        payload = await self.transport.request(
            "GET", "/api/ingredients", params=[("search", query)]
        )
        return _ingredients(payload)


def _body(name: str, category: str | None) -> dict[str, object]:
    body: dict[str, object] = {"name": name}
    if category is not None:
        body["category"] = category
    return body


def _ingredients(payload: object) -> list[Ingredient]:
    return [
        ingredient_from_dto(dto) for dto in parse_payload_list(IngredientDto, payload)
    ]
