"""Tests for the web backend endpoints."""

import asyncio
import json
from datetime import UTC, datetime

from fastapi.testclient import TestClient

from recipe_app.api.app import create_app
from recipe_app.containers import AppContainer
from recipe_app.domain.recipes import Difficulty, Recipe
from recipe_app.services.browser_sessions import SESSION_COOKIE
from tests.conftest import InMemoryIngredientApi, InMemoryRecipeApi, InMemoryTagApi


def _login(client: TestClient) -> None:
    response = client.post(
        "/auth/login", json={"email": "cook@example.com", "password": "password123"}
    )
    assert response.status_code == 200


def _recipe_form(**overrides: object) -> dict[str, object]:
    form: dict[str, object] = {
        "title": "Tomato soup",
        "description": "Warm and quick",
        "difficulty": "easy",
        "instructions": ["Chop tomatoes", "Simmer"],
        "servings": 2,
        "prep_time": 10,
    }
    form.update(overrides)
    return form


def test_health(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/health")

    assert response.json() == {"status": "ok"}


def test_login_reloads_page_and_flashes(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/auth/login", json={"email": "cook@example.com", "password": "password123"}
    )

    assert response.status_code == 200
    assert response.headers["HX-Refresh"] == "true"
    assert response.json()["data"]["email"] == "cook@example.com"
    assert client.get("/profile").json()["data"]["email"] == "cook@example.com"
    flash = client.get("/flash").json()["messages"]
    assert flash[0]["level"] == "success"


def test_login_failure_returns_error_envelope(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post(
        "/auth/login", json={"email": "cook@example.com", "password": "wrong"}
    )

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials"
    assert "HX-Refresh" not in response.headers
    messages = client.get("/flash").json()["messages"]
    assert messages[0]["text"] == "Invalid credentials"
    assert "bg-red-500" in messages[0]["css_class"]


def test_register_and_logout(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    registered = client.post(
        "/auth/register",
        json={"email": "new@example.com", "password": "secret123", "name": "New"},
    )
    logged_out = client.post("/auth/logout")

    assert registered.json()["data"]["name"] == "New"
    assert registered.headers["HX-Refresh"] == "true"
    assert logged_out.headers["HX-Refresh"] == "true"
    assert client.get("/profile").status_code == 401


def test_list_recipes_passes_filter(
    container: AppContainer, recipe_api: InMemoryRecipeApi
) -> None:
    now = datetime(2024, 5, 1, tzinfo=UTC)
    recipe_api.recipes[1] = Recipe(
        id=1,
        user_id=7,
        title="Soup",
        description=None,
        instructions="Boil",
        prep_time=None,
        cook_time=None,
        servings=1,
        difficulty=Difficulty.EASY,
        image_url=None,
        is_public=True,
        created_at=now,
        updated_at=now,
    )
    client = TestClient(create_app(container))

    response = client.get(
        "/recipes",
        params=[("tags", "vegan"), ("tags", "quick"), ("sort_by", "title")],
    )

    assert response.status_code == 200
    assert response.json()[0]["difficulty"] == "EASY"
    assert recipe_api.filters[0].tags == ["vegan", "quick"]
    assert recipe_api.filters[0].sort_by == "title"


def test_list_recipes_rejects_unknown_sort(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get("/recipes", params={"sort_by": "calories"})

    assert response.status_code == 400


def test_validate_reports_missing_fields(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post("/recipes/validate", json={"title": "Soup"})

    assert response.json() == {
        "errors": ["Description is required", "Difficulty level is required"]
    }


def test_create_recipe_requires_login(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.post("/recipes", json=_recipe_form())

    assert response.status_code == 401
    assert client.get("/flash").json()["messages"][0]["level"] == "warning"


def test_create_recipe_redirects_after_delay(
    container: AppContainer, recipe_api: InMemoryRecipeApi
) -> None:
    client = TestClient(create_app(container))
    _login(client)
    form_id = client.post("/forms/recipe").json()["id"]

    response = client.post("/recipes", json=_recipe_form(form_session_id=form_id))

    assert response.status_code == 201
    trigger = json.loads(response.headers["HX-Trigger"])
    assert trigger == {"navigate": {"url": "/recipes", "delay_ms": 1500}}
    created = recipe_api.recipes[1]
    assert created.difficulty is Difficulty.EASY
    assert created.instructions == "Chop tomatoes\nSimmer"
    assert created.user_id == 7
    assert response.json()["data"]["title"] == "Tomato soup"
    assert client.get(f"/forms/recipe/{form_id}").status_code == 404


def test_create_recipe_rejects_incomplete_form(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    _login(client)

    missing = client.post("/recipes", json=_recipe_form(title="", difficulty=""))
    invalid = client.post("/recipes", json=_recipe_form(difficulty="extreme"))

    assert missing.status_code == 422
    assert missing.json()["detail"]["errors"] == [
        "Recipe title is required",
        "Difficulty level is required",
    ]
    assert invalid.json()["detail"]["errors"] == ["Difficulty level is invalid"]


def test_form_session_rows(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    state = client.post("/forms/recipe").json()
    form_id = state["id"]
    assert state["instruction_count"] == 1

    client.post(f"/forms/recipe/{form_id}/instructions")
    client.post(f"/forms/recipe/{form_id}/instructions")
    state = client.delete(f"/forms/recipe/{form_id}/instructions/1").json()

    assert state["instruction_count"] == 2
    assert [row["label"] for row in state["instructions"]] == ["1.", "2."]
    assert state["instructions"][1]["field_name"] == "instructions[2]"

    state = client.post(f"/forms/recipe/{form_id}/ingredients").json()
    assert state["ingredients"][1]["fields"]["unit"] == "ingredients[1].unit"
    state = client.delete(f"/forms/recipe/{form_id}/ingredients/0").json()
    assert [row["index"] for row in state["ingredients"]] == [1]


def test_form_session_not_found(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    form_id = client.post("/forms/recipe").json()["id"]

    missing_row = client.delete(f"/forms/recipe/{form_id}/ingredients/9")
    missing_form = client.get("/forms/recipe/7f0c4f4e-8d5c-4b8e-9a57-1d0b5c9d2e11")

    assert missing_row.status_code == 404
    assert missing_form.status_code == 404


def test_ingredients_and_tags(
    container: AppContainer,
    ingredient_api: InMemoryIngredientApi,
    tag_api: InMemoryTagApi,
) -> None:
    client = TestClient(create_app(container))

    asyncio.run(ingredient_api.create("Flour"))
    asyncio.run(ingredient_api.create("Sugar"))
    asyncio.run(tag_api.create("Vegan", "#00ff00"))

    searched = client.get("/ingredients", params={"search": "flo"}).json()
    listed = client.get("/ingredients").json()
    tags = client.get("/tags").json()

    assert [item["name"] for item in searched] == ["Flour"]
    assert len(listed) == 2
    assert tags[0]["color"] == "#00ff00"


def test_profile_requires_login(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    assert client.get("/profile").status_code == 401


def test_profile_update(container: AppContainer) -> None:
    client = TestClient(create_app(container))
    _login(client)

    current = client.get("/profile").json()
    updated = client.put(
        "/profile", json={"name": "Chef", "email": "chef@example.com"}
    ).json()

    assert current["data"]["name"] == "Cook"
    assert updated["data"]["name"] == "Chef"
    assert updated["data"]["email"] == "chef@example.com"
    assert updated["data"]["id"] == current["data"]["id"]


def test_login_is_scoped_to_one_browser(
    container: AppContainer, recipe_api: InMemoryRecipeApi
) -> None:
    app = create_app(container)
    alice = TestClient(app)
    bob = TestClient(app)
    _login(alice)

    assert bob.get("/profile").status_code == 401
    assert bob.post("/recipes", json=_recipe_form()).status_code == 401
    assert recipe_api.recipes == {}
    bob_flash = [message["level"] for message in bob.get("/flash").json()["messages"]]
    assert bob_flash == ["warning", "warning"]

    assert alice.get("/profile").status_code == 200
    alice_flash = alice.get("/flash").json()["messages"]
    assert [message["text"] for message in alice_flash] == ["Welcome back, Cook"]


def test_session_cookie_is_issued_once(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    first = client.get("/health")
    second = client.get("/health")

    cookie = first.headers["set-cookie"]
    assert cookie.startswith(f"{SESSION_COOKIE}=")
    assert "HttpOnly" in cookie
    assert "samesite=lax" in cookie.lower()
    assert "set-cookie" not in second.headers
    assert container.browser_sessions.open_count == 1


def test_unknown_session_cookie_gets_a_fresh_session(container: AppContainer) -> None:
    client = TestClient(create_app(container))

    response = client.get(
        "/profile", headers={"Cookie": f"{SESSION_COOKIE}=forged"}
    )

    assert response.status_code == 401
    issued = response.headers["set-cookie"].split(";")[0].split("=", 1)[1]
    assert issued != "forged"


def test_list_recipes_accepts_form_style_difficulty(
    container: AppContainer, recipe_api: InMemoryRecipeApi
) -> None:
    client = TestClient(create_app(container))

    lowercase = client.get("/recipes", params={"difficulty": "easy"})
    unknown = client.get("/recipes", params={"difficulty": "extreme"})

    assert lowercase.status_code == 200
    assert recipe_api.filters[0].difficulty is Difficulty.EASY
    assert unknown.status_code == 400
