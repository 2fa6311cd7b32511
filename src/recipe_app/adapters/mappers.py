"""Conversions between wire DTOs and domain models."""

import re
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from recipe_app.adapters.wire_models import (
    AuthResponseDto,
    CategoryDto,
    IngredientDto,
    RecipeDto,
    RecipeIngredientDto,
    SearchResultDto,
    TagDto,
    UserDto,
)
from recipe_app.domain.auth import AuthResponse
from recipe_app.domain.envelopes import PaginatedResponse
from recipe_app.domain.errors import MappingError
from recipe_app.domain.recipes import (
    Category,
    Difficulty,
    Ingredient,
    Recipe,
    RecipeIngredient,
    Tag,
)
from recipe_app.domain.users import User

ModelT = TypeVar("ModelT", bound=BaseModel)
ItemT = TypeVar("ItemT")

_RFC3339 = re.compile(
    r"(?P<base>\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d{1,9}))?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2})"
)


def parse_payload(model: type[ModelT], payload: object) -> ModelT:
    """Validate a decoded JSON payload against a wire model."""
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or model.__name__
        raise MappingError(location, first.get("input"), first["msg"]) from exc


def parse_payload_list(model: type[ModelT], payload: object) -> list[ModelT]:
    """Validate a decoded JSON array of wire models; null decodes as empty."""
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise MappingError(model.__name__, payload, "expected a JSON array")
    return [parse_payload(model, item) for item in payload]


def parse_timestamp(value: str, field: str = "timestamp") -> datetime:
    """Parse RFC 3339 text into an aware datetime.

    Date-only, basic-format and offset-less text is rejected. Fractions beyond
    microseconds are truncated.
    """
    match = _RFC3339.fullmatch(value)
    if match is None:
        raise MappingError(field, value, "not an RFC 3339 timestamp")
    text = match["base"]
    if match["fraction"]:
        text += "." + match["fraction"][:6].ljust(6, "0")
    text += "+00:00" if match["offset"] == "Z" else match["offset"]
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise MappingError(field, value, "not an ISO-8601 timestamp") from exc


def format_timestamp(value: datetime) -> str:
    """Render a datetime as RFC 3339 with trimmed fractional seconds."""
    text = value.strftime("%Y-%m-%dT%H:%M:%S")
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")
    offset = value.utcoffset()
    if offset is None:
        return text
    if offset == timedelta(0):
        return text + "Z"
    raw = value.strftime("%z")
    return f"{text}{raw[:3]}:{raw[3:5]}"


def parse_difficulty(value: str) -> Difficulty:
    """Decode a wire difficulty literal."""
    try:
        return Difficulty(value)
    except ValueError as exc:
        raise MappingError("difficulty", value, "unknown difficulty") from exc


def ingredient_from_dto(dto: IngredientDto) -> Ingredient:
    return Ingredient(
        id=dto.id,
        name=dto.name,
        category=dto.category,
        created_at=parse_timestamp(dto.created_at, "ingredient.created_at"),
    )


def ingredient_to_dto(ingredient: Ingredient) -> IngredientDto:
    return IngredientDto(
        id=ingredient.id,
        name=ingredient.name,
        category=ingredient.category,
        created_at=format_timestamp(ingredient.created_at),
    )


def tag_from_dto(dto: TagDto) -> Tag:
    return Tag(
        id=dto.id,
        name=dto.name,
        color=dto.color,
        created_at=parse_timestamp(dto.created_at, "tag.created_at"),
    )


def tag_to_dto(tag: Tag) -> TagDto:
    return TagDto(
        id=tag.id,
        name=tag.name,
        color=tag.color,
        created_at=format_timestamp(tag.created_at),
    )


def category_from_dto(dto: CategoryDto) -> Category:
    return Category(
        id=dto.id,
        user_id=dto.user_id,
        name=dto.name,
        parent_id=dto.parent_id,
        created_at=parse_timestamp(dto.created_at, "category.created_at"),
    )


def category_to_dto(category: Category) -> CategoryDto:
    return CategoryDto(
        id=category.id,
        user_id=category.user_id,
        name=category.name,
        parent_id=category.parent_id,
        created_at=format_timestamp(category.created_at),
    )


def user_from_dto(dto: UserDto) -> User:
    return User(
        id=dto.id,
        email=dto.email,
        name=dto.name,
        is_admin=dto.is_admin,
        created_at=parse_timestamp(dto.created_at, "user.created_at"),
        updated_at=parse_timestamp(dto.updated_at, "user.updated_at"),
    )


def user_to_dto(user: User) -> UserDto:
    return UserDto(
        id=user.id,
        email=user.email,
        name=user.name,
        is_admin=user.is_admin,
        created_at=format_timestamp(user.created_at),
        updated_at=format_timestamp(user.updated_at),
    )


def recipe_ingredient_from_dto(dto: RecipeIngredientDto) -> RecipeIngredient:
    return RecipeIngredient(
        id=dto.id,
        recipe_id=dto.recipe_id,
        ingredient_id=dto.ingredient_id,
        quantity=dto.quantity,
        unit=dto.unit,
        notes=dto.notes,
        ingredient=(
            ingredient_from_dto(dto.ingredient) if dto.ingredient is not None else None
        ),
    )


def recipe_ingredient_to_dto(line: RecipeIngredient) -> RecipeIngredientDto:
    return RecipeIngredientDto(
        id=line.id,
        recipe_id=line.recipe_id,
        ingredient_id=line.ingredient_id,
        quantity=line.quantity,
        unit=line.unit,
        notes=line.notes,
        ingredient=(
            ingredient_to_dto(line.ingredient) if line.ingredient is not None else None
        ),
    )


def recipe_from_dto(dto: RecipeDto) -> Recipe:
    """Convert a recipe payload, failing on unknown difficulty or bad timestamps."""
    return Recipe(
        id=dto.id,
        user_id=dto.user_id,
        title=dto.title,
        description=dto.description,
        instructions=dto.instructions,
        prep_time=dto.prep_time,
        cook_time=dto.cook_time,
        servings=dto.servings,
        difficulty=parse_difficulty(dto.difficulty),
        image_url=dto.image_url,
        is_public=dto.is_public,
        created_at=parse_timestamp(dto.created_at, "recipe.created_at"),
        updated_at=parse_timestamp(dto.updated_at, "recipe.updated_at"),
        ingredients=[recipe_ingredient_from_dto(item) for item in dto.ingredients],
        tags=[tag_from_dto(item) for item in dto.tags],
        categories=[category_from_dto(item) for item in dto.categories],
        user=user_from_dto(dto.user) if dto.user is not None else None,
    )


def recipe_to_dto(recipe: Recipe) -> RecipeDto:
    return RecipeDto(
        id=recipe.id,
        user_id=recipe.user_id,
        title=recipe.title,
        description=recipe.description,
        instructions=recipe.instructions,
        prep_time=recipe.prep_time,
        cook_time=recipe.cook_time,
        servings=recipe.servings,
        difficulty=recipe.difficulty.value,
        image_url=recipe.image_url,
        is_public=recipe.is_public,
        created_at=format_timestamp(recipe.created_at),
        updated_at=format_timestamp(recipe.updated_at),
        ingredients=[recipe_ingredient_to_dto(item) for item in recipe.ingredients],
        tags=[tag_to_dto(item) for item in recipe.tags],
        categories=[category_to_dto(item) for item in recipe.categories],
        user=user_to_dto(recipe.user) if recipe.user is not None else None,
    )


def auth_response_from_dto(dto: AuthResponseDto) -> AuthResponse:
    return AuthResponse(
        token=dto.token,
        user=user_from_dto(dto.user),
        expires_in=dto.expires_in,
    )


def auth_response_to_dto(response: AuthResponse) -> AuthResponseDto:
    return AuthResponseDto(
        token=response.token,
        user=user_to_dto(response.user),
        expires_in=response.expires_in,
    )


def page_from_dto(
    dto: SearchResultDto, convert: Callable[[RecipeDto], ItemT]
) -> PaginatedResponse[ItemT]:
    """Convert a search result page, keeping the server's paging fields."""
    return PaginatedResponse(
        items=[convert(item) for item in dto.recipes or []],
        total_count=dto.total_count,
        current_page=dto.current_page,
        page_size=dto.page_size,
        has_next_page=dto.has_next,
        has_previous_page=dto.has_prev,
    )
