"""Pydantic models mirroring the recipe service JSON payloads."""

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", strict=True)


class IngredientDto(_WireModel):
    """Ingredient payload."""

    id: int
    name: str
    category: str | None = None
    created_at: str


class TagDto(_WireModel):
    """Tag payload."""

    id: int
    name: str
    color: str
    created_at: str


class CategoryDto(_WireModel):
    """Category payload."""

    id: int
    user_id: int
    name: str
    parent_id: int | None = None
    created_at: str


class UserDto(_WireModel):
    """User payload."""

    id: int
    email: str
    name: str
    is_admin: bool
    created_at: str
    updated_at: str


class RecipeIngredientDto(_WireModel):
    """Recipe ingredient line payload."""

    id: int
    recipe_id: int
    ingredient_id: int
    quantity: float | None = None
    unit: str | None = None
    notes: str | None = None
    ingredient: IngredientDto | None = None


class RecipeDto(_WireModel):
    """Recipe payload."""

    id: int
    user_id: int
    title: str
    description: str | None = None
    instructions: str
    prep_time: int | None = None
    cook_time: int | None = None
    servings: int
    difficulty: str
    image_url: str | None = None
    is_public: bool
    created_at: str
    updated_at: str
    ingredients: list[RecipeIngredientDto] = Field(default_factory=list)
    tags: list[TagDto] = Field(default_factory=list)
    categories: list[CategoryDto] = Field(default_factory=list)
    user: UserDto | None = None


class AuthResponseDto(_WireModel):
    """Login and registration response payload."""

    token: str
    user: UserDto
    expires_in: int


class TokenRefreshDto(_WireModel):
    """Token refresh response payload."""

    token: str
    expires_in: int


class MessageDto(_WireModel):
    """Plain acknowledgement payload."""

    message: str


class RecipeEnvelopeDto(_WireModel):
    """Create/update recipe response payload."""

    message: str
    recipe: RecipeDto


class SearchResultDto(_WireModel):
    """Paginated recipe search payload."""

    recipes: list[RecipeDto] | None = None
    total_count: int
    current_page: int
    page_size: int
    has_next: bool
    has_prev: bool


class ErrorResponseDto(_WireModel):
    """Error payload produced by the service error middleware."""

    error: str
    message: str | None = None
    code: str | None = None


class ValidationErrorDto(_WireModel):
    """Field validation failure payload."""

    message: str
    errors: dict[str, str]
