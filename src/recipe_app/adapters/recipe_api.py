"""Recipe capability of the recipe service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from recipe_app.adapters.http_transport import ApiTransport
from recipe_app.adapters.mappers import (
    page_from_dto,
    parse_payload,
    parse_payload_list,
    recipe_from_dto,
    recipe_to_dto,
)
from recipe_app.adapters.wire_models import (
    MessageDto,
    RecipeDto,
    RecipeEnvelopeDto,
    SearchResultDto,
)
from recipe_app.domain.envelopes import ApiResponse, PaginatedResponse
from recipe_app.domain.errors import MappingError
from recipe_app.domain.recipes import Recipe, RecipeFilter, SearchFilter


class RecipeApi(Protocol):
    """Remote recipe operations; every call crosses the network and may fail."""

    async def list(self, recipe_filter: RecipeFilter) -> list[Recipe]:
        """Return recipes matching a filter."""

    async def get(self, recipe_id: int) -> Recipe:
        """Return a single recipe with its relations."""

    async def create(self, recipe: Recipe) -> Recipe:
        """Create a recipe and return the stored version."""

    async def update(self, recipe_id: int, recipe: Recipe) -> Recipe:
        """Replace a recipe and return the stored version."""

    async def delete(self, recipe_id: int) -> None:
        """Delete a recipe."""

    async def search(self, search_filter: SearchFilter) -> PaginatedResponse[Recipe]:
        """Run a full-text search and return one page of recipes."""

    async def suggestions(self, query: str) -> list[str]:
        """Return title suggestions for a partial query."""


@dataclass
class HttpxRecipeApi(RecipeApi):
    """Recipe API backed by the shared HTTP transport."""

    transport: ApiTransport

    async def list(self, recipe_filter: RecipeFilter) -> list[Recipe]:
        payload = await self.transport.request(
            "GET", "/api/recipes", params=filter_params(recipe_filter)
        )
        return [recipe_from_dto(dto) for dto in parse_payload_list(RecipeDto, payload)]

    async def get(self, recipe_id: int) -> Recipe:
        payload = await self.transport.request("GET", f"/api/recipes/{recipe_id}")
        return recipe_from_dto(parse_payload(RecipeDto, payload))

    async def create(self, recipe: Recipe) -> Recipe:
        payload = await self.transport.request(
            "POST", "/api/recipes", json=_recipe_body(recipe)
        )
        return _unwrap(payload).data

    async def update(self, recipe_id: int, recipe: Recipe) -> Recipe:
        payload = await self.transport.request(
            "PUT", f"/api/recipes/{recipe_id}", json=_recipe_body(recipe)
        )
        return _unwrap(payload).data

    async def delete(self, recipe_id: int) -> None:
        payload = await self.transport.request("DELETE", f"/api/recipes/{recipe_id}")
        if payload is not None:
            parse_payload(MessageDto, payload)

    async def search(self, search_filter: SearchFilter) -> PaginatedResponse[Recipe]:
        payload = await self.transport.request(
            "GET", "/api/search", params=search_params(search_filter)
        )
        return page_from_dto(parse_payload(SearchResultDto, payload), recipe_from_dto)

    async def suggestions(self, query: str) -> list[str]:
        if not query:
            return []
        payload = await self.transport.request(
            "GET", "/api/search/suggestions", params=[("q", query)]
        )
        if not isinstance(payload, list) or not all(
            isinstance(item, str) for item in payload
        ):
            raise MappingError("suggestions", payload, "expected a list of strings")
        return payload


def filter_params(recipe_filter: RecipeFilter) -> list[tuple[str, str]]:
    """Encode a recipe filter as query parameters, skipping unset fields."""
    params: list[tuple[str, str]] = []
    if recipe_filter.user_id is not None:
        params.append(("user_id", str(recipe_filter.user_id)))
    if recipe_filter.title:
        params.append(("title", recipe_filter.title))
    if recipe_filter.difficulty is not None:
        params.append(("difficulty", recipe_filter.difficulty.value))
    params.extend(("tags", tag) for tag in recipe_filter.tags)
    if recipe_filter.is_public is not None:
        params.append(("is_public", _flag(recipe_filter.is_public)))
    if recipe_filter.limit is not None:
        params.append(("limit", str(recipe_filter.limit)))
    if recipe_filter.offset is not None:
        params.append(("offset", str(recipe_filter.offset)))
    params.append(("sort_by", recipe_filter.sort_by))
    params.append(("sort_order", recipe_filter.sort_order.value))
    return params


def search_params(search_filter: SearchFilter) -> list[tuple[str, str]]:
    """Encode a search filter as query parameters, skipping unset fields."""
    params: list[tuple[str, str]] = []
    if search_filter.query:
        params.append(("q", search_filter.query))
    if search_filter.difficulty is not None:
        params.append(("difficulty", search_filter.difficulty.value))
    if search_filter.tags:
        params.append(("tags", ",".join(search_filter.tags)))
    if search_filter.category_ids:
        params.append(
            ("categories", ",".join(str(item) for item in search_filter.category_ids))
        )
    if search_filter.is_public is not None:
        params.append(("is_public", _flag(search_filter.is_public)))
    numeric = {
        "user_id": search_filter.user_id,
        "min_prep_time": search_filter.min_prep_time,
        "max_prep_time": search_filter.max_prep_time,
        "min_cook_time": search_filter.min_cook_time,
        "max_cook_time": search_filter.max_cook_time,
        "min_servings": search_filter.min_servings,
        "max_servings": search_filter.max_servings,
        "limit": search_filter.limit,
        "offset": search_filter.offset,
    }
    params.extend(
        (key, str(value)) for key, value in numeric.items() if value is not None
    )
    params.append(("sort_by", search_filter.sort_by))
    params.append(("sort_order", search_filter.sort_order.value))
    return params


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _recipe_body(recipe: Recipe) -> dict[str, object]:
    return recipe_to_dto(recipe).model_dump(mode="json")


def _unwrap(payload: object) -> ApiResponse[Recipe]:
    """Unwrap the {"message", "recipe"} envelope of write responses."""
    envelope = parse_payload(RecipeEnvelopeDto, payload)
    return ApiResponse(message=envelope.message, data=recipe_from_dto(envelope.recipe))
