"""Shared test fixtures."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

import pytest

from recipe_app.adapters.auth_api import AuthApi
from recipe_app.adapters.http_transport import TokenStore
from recipe_app.adapters.ingredient_api import IngredientApi
from recipe_app.adapters.recipe_api import RecipeApi
from recipe_app.adapters.tag_api import TagApi
from recipe_app.adapters.user_api import UserApi
from recipe_app.config import Settings
from recipe_app.containers import ApiClients, AppContainer
from recipe_app.domain.auth import AuthResponse
from recipe_app.domain.envelopes import PaginatedResponse
from recipe_app.domain.errors import NotAuthenticatedError, TransportError
from recipe_app.domain.recipes import (
    Ingredient,
    Recipe,
    RecipeFilter,
    SearchFilter,
    Tag,
)
from recipe_app.domain.users import ProfileUpdate, User
from recipe_app.services.browser_sessions import BrowserSessionService
from recipe_app.services.form_sessions import FormSessionService

NOW = datetime(2024, 5, 1, 12, 30, tzinfo=UTC)


def user_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": 7,
        "email": "cook@example.com",
        "name": "Cook",
        "is_admin": False,
        "created_at": "2024-01-02T03:04:05Z",
        "updated_at": "2024-01-03T03:04:05.5Z",
    }
    payload.update(overrides)
    return payload


def ingredient_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": 3,
        "name": "Flour",
        "category": "Baking",
        "created_at": "2024-01-02T03:04:05Z",
    }
    payload.update(overrides)
    return payload


def tag_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": 4,
        "name": "Vegan",
        "color": "#00ff00",
        "created_at": "2024-01-02T03:04:05Z",
    }
    payload.update(overrides)
    return payload


def recipe_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "id": 11,
        "user_id": 7,
        "title": "Pancakes",
        "description": "Fluffy",
        "instructions": "Mix\nFry",
        "prep_time": 10,
        "cook_time": 15,
        "servings": 4,
        "difficulty": "EASY",
        "image_url": "https://img.example.com/p.jpg",
        "is_public": True,
        "created_at": "2024-01-02T03:04:05.123456Z",
        "updated_at": "2024-01-02T05:04:05+02:00",
        "ingredients": [
            {
                "id": 1,
                "recipe_id": 11,
                "ingredient_id": 3,
                "quantity": 2.5,
                "unit": "cup",
                "notes": "sifted",
                "ingredient": ingredient_payload(),
            }
        ],
        "tags": [tag_payload()],
        "categories": [
            {
                "id": 5,
                "user_id": 7,
                "name": "Breakfast",
                "parent_id": 2,
                "created_at": "2024-01-02T03:04:05Z",
            }
        ],
        "user": user_payload(),
    }
    payload.update(overrides)
    return payload


def make_user(user_id: int = 7) -> User:
    return User(
        id=user_id,
        email="cook@example.com",
        name="Cook",
        is_admin=False,
        created_at=NOW,
        updated_at=NOW,
    )


@dataclass
class FakeAuthApi(AuthApi):
    """Auth API that accepts one password and records the session."""

    tokens: TokenStore
    password: str = "password123"

    async def login(self, email: str, password: str) -> AuthResponse:
        if password != self.password:
            raise TransportError("Invalid credentials", status_code=401)
        return self._issue(email, "Cook")

    async def register(self, email: str, password: str, name: str) -> AuthResponse:
        return self._issue(email, name)

    async def refresh_token(self) -> AuthResponse:
        if self.tokens.session is None:
            raise NotAuthenticatedError("No token to refresh")
        return self.tokens.session

    async def logout(self) -> None:
        self.tokens.clear()

    def _issue(self, email: str, name: str) -> AuthResponse:
        user = replace(make_user(), email=email, name=name)
        session = AuthResponse(token="token-1", user=user, expires_in=86400)
        self.tokens.save(session)
        return session


@dataclass
class InMemoryRecipeApi(RecipeApi):
    """Recipe API keeping recipes in a dict."""

    recipes: dict[int, Recipe] = field(default_factory=dict)
    filters: list[RecipeFilter] = field(default_factory=list)

    async def list(self, recipe_filter: RecipeFilter) -> list[Recipe]:
        self.filters.append(recipe_filter)
        return [*self.recipes.values()]

    async def get(self, recipe_id: int) -> Recipe:
        if recipe_id not in self.recipes:
            raise TransportError("Recipe not found", status_code=404)
        return self.recipes[recipe_id]

    async def create(self, recipe: Recipe) -> Recipe:
        created = replace(recipe, id=len(self.recipes) + 1)
        self.recipes[created.id] = created
        return created

    async def update(self, recipe_id: int, recipe: Recipe) -> Recipe:
        self.recipes[recipe_id] = recipe
        return recipe

    async def delete(self, recipe_id: int) -> None:
        self.recipes.pop(recipe_id, None)

    async def search(self, search_filter: SearchFilter) -> PaginatedResponse[Recipe]:
        items = [
            recipe
            for recipe in self.recipes.values()
            if search_filter.query.lower() in recipe.title.lower()
        ]
        return PaginatedResponse(
            items=items,
            total_count=len(items),
            current_page=1,
            page_size=len(items),
            has_next_page=False,
            has_previous_page=False,
        )

    async def suggestions(self, query: str) -> list[str]:
        return [recipe.title for recipe in self.recipes.values()]


@dataclass
class InMemoryIngredientApi(IngredientApi):
    """Ingredient API keeping ingredients in a dict."""

    ingredients: dict[int, Ingredient] = field(default_factory=dict)

    async def list(self) -> list[Ingredient]:
        return sorted(self.ingredients.values(), key=lambda item: item.name)

    async def get(self, ingredient_id: int) -> Ingredient:
        return self.ingredients[ingredient_id]

    async def create(self, name: str, category: str | None = None) -> Ingredient:
        ingredient = Ingredient(
            id=len(self.ingredients) + 1, name=name, category=category, created_at=NOW
        )
        self.ingredients[ingredient.id] = ingredient
        return ingredient

    async def update(
        self, ingredient_id: int, name: str, category: str | None = None
    ) -> Ingredient:
        ingredient = Ingredient(
            id=ingredient_id, name=name, category=category, created_at=NOW
        )
        self.ingredients[ingredient_id] = ingredient
        return ingredient

    async def delete(self, ingredient_id: int) -> None:
        self.ingredients.pop(ingredient_id, None)

    async def search(self, query: str) -> list[Ingredient]:
        return [
            item
            for item in self.ingredients.values()
            if query.lower() in item.name.lower()
        ]


@dataclass
class InMemoryTagApi(TagApi):
    """Tag API keeping tags in a dict."""

    tags: dict[int, Tag] = field(default_factory=dict)

    async def list(self) -> list[Tag]:
        return [*self.tags.values()]

    async def get(self, tag_id: int) -> Tag:
        return self.tags[tag_id]

    async def create(self, name: str, color: str | None = None) -> Tag:
        tag = Tag(
            id=len(self.tags) + 1, name=name, color=color or "#cccccc", created_at=NOW
        )
        self.tags[tag.id] = tag
        return tag

    async def update(self, tag_id: int, name: str, color: str | None = None) -> Tag:
        tag = Tag(id=tag_id, name=name, color=color or "#cccccc", created_at=NOW)
        self.tags[tag_id] = tag
        return tag

    async def delete(self, tag_id: int) -> None:
        self.tags.pop(tag_id, None)


@dataclass
class FakeUserApi(UserApi):
    """Profile API returning a fixed user."""

    user: User = field(default_factory=make_user)

    async def get_profile(self) -> User:
        return self.user

    async def update_profile(self, update: ProfileUpdate) -> User:
        self.user = replace(self.user, name=update.name, email=update.email)
        return self.user


@pytest.fixture
def settings() -> Settings:
    return Settings(api_base_url="https://recipes.test", retry_delay_seconds=0)


@pytest.fixture
def recipe_api() -> InMemoryRecipeApi:
    return InMemoryRecipeApi()


@pytest.fixture
def ingredient_api() -> InMemoryIngredientApi:
    return InMemoryIngredientApi()


@pytest.fixture
def tag_api() -> InMemoryTagApi:
    return InMemoryTagApi()


@pytest.fixture
def container(
    settings: Settings,
    recipe_api: InMemoryRecipeApi,
    ingredient_api: InMemoryIngredientApi,
    tag_api: InMemoryTagApi,
) -> AppContainer:
    user_api = FakeUserApi()

    def api_clients(tokens: TokenStore) -> ApiClients:
        return ApiClients(
            recipe_api=recipe_api,
            auth_api=FakeAuthApi(tokens),
            ingredient_api=ingredient_api,
            tag_api=tag_api,
            user_api=user_api,
        )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        api_clients=api_clients,
        browser_sessions=BrowserSessionService(),
        form_sessions=FormSessionService(),
        close_resources=close_resources,
    )
