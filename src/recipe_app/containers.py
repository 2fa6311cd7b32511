"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace

from recipe_app.adapters.auth_api import AuthApi, HttpxAuthApi
from recipe_app.adapters.http_transport import ApiTransport, TokenStore
from recipe_app.adapters.ingredient_api import HttpxIngredientApi, IngredientApi
from recipe_app.adapters.recipe_api import HttpxRecipeApi, RecipeApi
from recipe_app.adapters.tag_api import HttpxTagApi, TagApi
from recipe_app.adapters.user_api import HttpxUserApi, UserApi
from recipe_app.config import Settings
from recipe_app.services.browser_sessions import BrowserSessionService
from recipe_app.services.form_sessions import FormSessionService


@dataclass(frozen=True)
class ApiClients:
    """Recipe service clients acting with one browser's token."""

    recipe_api: RecipeApi
    auth_api: AuthApi
    ingredient_api: IngredientApi
    tag_api: TagApi
    user_api: UserApi


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    api_clients: Callable[[TokenStore], ApiClients]
    browser_sessions: BrowserSessionService
    form_sessions: FormSessionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    transport = ApiTransport.create(
        resolved_settings.api_base_url,
        timeout_seconds=resolved_settings.request_timeout_seconds,
        retry_attempts=resolved_settings.retry_attempts,
        retry_delay_seconds=resolved_settings.retry_delay_seconds,
    )

    def api_clients(tokens: TokenStore) -> ApiClients:
        # One pooled HTTP session; only the token store differs per browser.
        bound = replace(transport, tokens=tokens)
        return ApiClients(
            recipe_api=HttpxRecipeApi(bound),
            auth_api=HttpxAuthApi(bound),
            ingredient_api=HttpxIngredientApi(bound),
            tag_api=HttpxTagApi(bound),
            user_api=HttpxUserApi(bound),
        )

    async def close_resources() -> None:
        await transport.close()

    return AppContainer(
        settings=resolved_settings,
        api_clients=api_clients,
        browser_sessions=BrowserSessionService(
            ttl_seconds=resolved_settings.browser_session_ttl_seconds,
            flash_dismiss_seconds=resolved_settings.flash_dismiss_seconds,
        ),
        form_sessions=FormSessionService(
            ttl_seconds=resolved_settings.form_session_ttl_seconds
        ),
        close_resources=close_resources,
    )
