"""Domain models for recipes and their reference data."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from recipe_app.domain.users import User

RECIPE_SORT_FIELDS = ("created_at", "title", "prep_time", "cook_time")
SEARCH_SORT_FIELDS = ("relevance", *RECIPE_SORT_FIELDS)


class Difficulty(Enum):
    """Closed set of recipe difficulty levels."""

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


class SortOrder(Enum):
    """Sort direction for recipe listings."""

    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True)
class Ingredient:
    """Shared ingredient reference data."""

    id: int
    name: str
    category: str | None
    created_at: datetime


@dataclass(frozen=True)
class Tag:
    """Label attached to recipes."""

    id: int
    name: str
    color: str
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """User-owned recipe category; categories nest through parent_id."""

    id: int
    user_id: int
    name: str
    parent_id: int | None
    created_at: datetime


@dataclass(frozen=True)
class RecipeIngredient:
    """Ingredient line of a recipe."""

    id: int
    recipe_id: int
    ingredient_id: int
    quantity: float | None
    unit: str | None
    notes: str | None
    ingredient: Ingredient | None = None


@dataclass(frozen=True)
class Recipe:
    """A recipe with its ingredient lines, tags and categories."""

    id: int
    user_id: int
    title: str
    description: str | None
    instructions: str
    prep_time: int | None
    cook_time: int | None
    servings: int
    difficulty: Difficulty
    image_url: str | None
    is_public: bool
    created_at: datetime
    updated_at: datetime
    ingredients: list[RecipeIngredient] = field(default_factory=list)
    tags: list[Tag] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)
    user: User | None = None


@dataclass(frozen=True)
class RecipeFilter:
    """Query parameters for listing recipes."""

    user_id: int | None = None
    title: str | None = None
    difficulty: Difficulty | None = None
    tags: list[str] = field(default_factory=list)
    is_public: bool | None = None
    limit: int | None = None
    offset: int | None = None
    sort_by: str = "created_at"
    sort_order: SortOrder = SortOrder.DESC

    def __post_init__(self) -> None:
        if self.sort_by not in RECIPE_SORT_FIELDS:
            raise ValueError(f"Unsupported sort field: {self.sort_by}")


@dataclass(frozen=True)
class SearchFilter:
    """Full-text recipe search with range filters."""

    query: str = ""
    user_id: int | None = None
    difficulty: Difficulty | None = None
    tags: list[str] = field(default_factory=list)
    category_ids: list[int] = field(default_factory=list)
    min_prep_time: int | None = None
    max_prep_time: int | None = None
    min_cook_time: int | None = None
    max_cook_time: int | None = None
    min_servings: int | None = None
    max_servings: int | None = None
    is_public: bool | None = None
    limit: int | None = None
    offset: int | None = None
    sort_by: str = "created_at"
    sort_order: SortOrder = SortOrder.DESC

    def __post_init__(self) -> None:
        if self.sort_by not in SEARCH_SORT_FIELDS:
            raise ValueError(f"Unsupported sort field: {self.sort_by}")
