"""FastAPI application factory."""

import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from uuid import UUID

from fastapi import FastAPI, HTTPException, Query, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from recipe_app.api.web_models import LoginForm, ProfileForm, RecipeForm, RegisterForm
from recipe_app.app_logging import configure_logging
from recipe_app.containers import ApiClients, AppContainer
from recipe_app.domain.auth import AuthResponse
from recipe_app.domain.envelopes import ApiResponse
from recipe_app.domain.errors import (
    MappingError,
    NotAuthenticatedError,
    ServerValidationError,
    TransportError,
)
from recipe_app.domain.recipes import Difficulty, RecipeFilter, SortOrder
from recipe_app.domain.users import ProfileUpdate
from recipe_app.services.browser_sessions import SESSION_COOKIE, BrowserSession
from recipe_app.web.forms import RecipeFormSession, draft_recipe, validate_recipe_form
from recipe_app.web.modals import (
    FORM_MESSAGE_ID,
    LOGIN_MODAL_ID,
    REGISTER_MODAL_ID,
    ModalController,
    NavigationAction,
    Redirect,
    Reload,
    RequestCompleted,
)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.debug)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.middleware("http")
    async def browser_session(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Attach the caller's browser session, issuing a cookie for new ones."""
        state_container: AppContainer = request.app.state.container
        presented = request.cookies.get(SESSION_COOKIE)
        session_id, session = state_container.browser_sessions.resolve(presented)
        request.state.browser = session
        response = await call_next(request)
        if session_id != presented:
            response.set_cookie(
                SESSION_COOKIE,
                session_id,
                max_age=int(state_container.browser_sessions.ttl_seconds),
                httponly=True,
                samesite="lax",
                secure=state_container.settings.session_cookie_secure,
            )
        return response

    @app.exception_handler(TransportError)
    async def transport_error(request: Request, exc: TransportError) -> JSONResponse:
        _browser(request).flash.show(exc.message, "error")
        status_code = exc.status_code or status.HTTP_502_BAD_GATEWAY
        content: dict[str, object] = _envelope(
            ApiResponse(message="Request failed", error=exc.message)
        )
        if isinstance(exc, ServerValidationError):
            content["errors"] = exc.errors
        return JSONResponse(status_code=status_code, content=content)

    @app.exception_handler(MappingError)
    async def mapping_error(request: Request, exc: MappingError) -> JSONResponse:
        logger.error("Unexpected payload from recipe service: %s", exc)
        _browser(request).flash.show("Unexpected server response", "error")
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=_envelope(ApiResponse(message="Request failed", error=str(exc))),
        )

    @app.exception_handler(NotAuthenticatedError)
    async def not_authenticated(
        request: Request, exc: NotAuthenticatedError
    ) -> JSONResponse:
        _browser(request).flash.show("Please log in first", "warning")
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=_envelope(ApiResponse(message="Login required", error=str(exc))),
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/auth/login")
    async def login(
        form: LoginForm, request: Request, response: Response
    ) -> dict[str, object]:
        """Submit the login modal."""
        state_container: AppContainer = request.app.state.container
        session = await _clients(request).auth_api.login(form.email, form.password)
        _browser(request).flash.show(f"Welcome back, {session.user.name}", "success")
        _complete(state_container, LOGIN_MODAL_ID, response)
        return _envelope(ApiResponse(message="Logged in", data=session.user))

    @app.post("/auth/register")
    async def register(
        form: RegisterForm, request: Request, response: Response
    ) -> dict[str, object]:
        """Submit the register modal."""
        state_container: AppContainer = request.app.state.container
        session = await _clients(request).auth_api.register(
            form.email, form.password, form.name
        )
        _browser(request).flash.show("Account created", "success")
        _complete(state_container, REGISTER_MODAL_ID, response)
        return _envelope(ApiResponse(message="Registered", data=session.user))

    @app.post("/auth/logout")
    async def logout(request: Request, response: Response) -> dict[str, object]:
        """Forget the current browser's session."""
        await _clients(request).auth_api.logout()
        _apply_navigation(response, Reload())
        return _envelope(ApiResponse(message="Logged out"))

    @app.get("/recipes")
    async def list_recipes(  # noqa: PLR0913
        request: Request,
        user_id: int | None = None,
        title: str | None = None,
        difficulty: str | None = None,
        tags: list[str] = Query(default=[]),  # noqa: B008
        is_public: bool | None = None,
        limit: int | None = Query(default=None, ge=1),
        offset: int | None = Query(default=None, ge=0),
        sort_by: str = "created_at",
        sort_order: str = "DESC",
    ) -> list[dict[str, object]]:
        """List recipes through the recipe service."""
        level = _form_difficulty(difficulty) if difficulty else None
        if difficulty and level is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unsupported difficulty: {difficulty}",
            )
        try:
            recipe_filter = RecipeFilter(
                user_id=user_id,
                title=title,
                difficulty=level,
                tags=tags,
                is_public=is_public,
                limit=limit,
                offset=offset,
                sort_by=sort_by,
                sort_order=SortOrder(sort_order.upper()),
            )
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        recipes = await _clients(request).recipe_api.list(recipe_filter)
        return jsonable_encoder(recipes)

    @app.post("/recipes/validate")
    async def validate_recipe(form: RecipeForm) -> dict[str, list[str]]:
        """Report missing required fields before submission."""
        return {"errors": validate_recipe_form(form.model_dump())}

    @app.post("/recipes", status_code=status.HTTP_201_CREATED)
    async def create_recipe(
        form: RecipeForm, request: Request, response: Response
    ) -> dict[str, object]:
        """Create a recipe from the new recipe form."""
        state_container: AppContainer = request.app.state.container
        errors = validate_recipe_form(form.model_dump())
        difficulty = _form_difficulty(form.difficulty)
        if form.difficulty and difficulty is None:
            errors.append("Difficulty level is invalid")
        if errors or difficulty is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={"message": "Validation failed", "errors": errors},
            )
        session = _require_session(request)
        draft = draft_recipe(
            user_id=session.user.id,
            title=form.title,
            description=form.description,
            instructions=form.instructions,
            servings=form.servings,
            difficulty=difficulty,
            now=datetime.now(tz=UTC),
            prep_time=form.prep_time,
            cook_time=form.cook_time,
            is_public=form.is_public,
        )
        created = await _clients(request).recipe_api.create(draft)
        logger.info("Created recipe %s for user %s", created.id, session.user.id)
        if form.form_session_id is not None:
            state_container.form_sessions.finish(form.form_session_id)
        _browser(request).flash.show("Recipe created successfully", "success")
        _complete(state_container, FORM_MESSAGE_ID, response)
        return _envelope(
            ApiResponse(message="Recipe created successfully", data=created)
        )

    @app.get("/ingredients")
    async def list_ingredients(
        request: Request, search: str | None = None
    ) -> list[dict[str, object]]:
        """List ingredients, or search them by name."""
        ingredient_api = _clients(request).ingredient_api
        if search:
            ingredients = await ingredient_api.search(search)
        else:
            ingredients = await ingredient_api.list()
        return jsonable_encoder(ingredients)

    @app.get("/tags")
    async def list_tags(request: Request) -> list[dict[str, object]]:
        """List tags for the recipe form."""
        return jsonable_encoder(await _clients(request).tag_api.list())

    @app.post("/forms/recipe", status_code=status.HTTP_201_CREATED)
    async def start_form(request: Request) -> dict[str, object]:
        """Open a new recipe form with one row of each kind."""
        state_container: AppContainer = request.app.state.container
        session_id = state_container.form_sessions.start()
        return _form_state(session_id, _form_session(state_container, session_id))

    @app.get("/forms/recipe/{session_id}")
    async def get_form(session_id: UUID, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        return _form_state(session_id, _form_session(state_container, session_id))

    @app.post("/forms/recipe/{session_id}/ingredients")
    async def add_ingredient(session_id: UUID, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        session = _form_session(state_container, session_id)
        session.add_ingredient()
        return _form_state(session_id, session)

    @app.delete("/forms/recipe/{session_id}/ingredients/{index}")
    async def remove_ingredient(
        session_id: UUID, index: int, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        session = _form_session(state_container, session_id)
        _remove_row(session.remove_ingredient, index)
        return _form_state(session_id, session)

    @app.post("/forms/recipe/{session_id}/instructions")
    async def add_instruction(session_id: UUID, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        session = _form_session(state_container, session_id)
        session.add_instruction()
        return _form_state(session_id, session)

    @app.delete("/forms/recipe/{session_id}/instructions/{index}")
    async def remove_instruction(
        session_id: UUID, index: int, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        session = _form_session(state_container, session_id)
        _remove_row(session.remove_instruction, index)
        return _form_state(session_id, session)

    @app.get("/flash")
    async def flash_messages(request: Request) -> dict[str, object]:
        """Return this browser's flash messages that have not been dismissed."""
        return {
            "messages": [
                {
                    "text": message.text,
                    "level": message.level.value,
                    "css_class": message.css_class,
                }
                for message in _browser(request).flash.active()
            ]
        }

    @app.get("/profile")
    async def get_profile(request: Request) -> dict[str, object]:
        _require_session(request)
        user = await _clients(request).user_api.get_profile()
        return _envelope(ApiResponse(message="Profile", data=user))

    @app.put("/profile")
    async def update_profile(form: ProfileForm, request: Request) -> dict[str, object]:
        """Save the profile settings form."""
        _require_session(request)
        user = await _clients(request).user_api.update_profile(
            ProfileUpdate(name=form.name, email=form.email)
        )
        _browser(request).flash.show("Profile updated", "success")
        return _envelope(ApiResponse(message="Profile updated", data=user))

    return app


def _browser(request: Request) -> BrowserSession:
    browser: BrowserSession = request.state.browser
    return browser


def _clients(request: Request) -> ApiClients:
    """Recipe service clients carrying the calling browser's token."""
    state_container: AppContainer = request.app.state.container
    return state_container.api_clients(_browser(request).tokens)


def _require_session(request: Request) -> AuthResponse:
    session = _browser(request).tokens.session
    if session is None:
        raise NotAuthenticatedError("This page requires a login")
    return session


def _envelope(response: ApiResponse[object]) -> dict[str, object]:
    """Serialize an ApiResponse for a JSON body."""
    return {
        "message": response.message,
        "data": jsonable_encoder(response.data),
        "error": response.error,
    }


def _complete(container: AppContainer, target_id: str, response: Response) -> None:
    """Apply the page reaction to a successful request from target_id."""
    controller = ModalController(
        redirect_delay_seconds=container.settings.redirect_delay_seconds
    )
    action = controller.handle_request_completed(
        RequestCompleted(target_id=target_id, successful=True)
    )
    if action is not None:
        _apply_navigation(response, action)


def _apply_navigation(response: Response, action: NavigationAction) -> None:
    """Translate a navigation action into HTMX response headers."""
    if isinstance(action, Reload):
        response.headers["HX-Refresh"] = "true"
        return
    if isinstance(action, Redirect) and action.delay_seconds <= 0:
        response.headers["HX-Redirect"] = action.url
        return
    response.headers["HX-Trigger"] = json.dumps(
        {
            "navigate": {
                "url": action.url,
                "delay_ms": int(action.delay_seconds * 1000),
            }
        }
    )


def _form_difficulty(value: str) -> Difficulty | None:
    """Read a difficulty chosen in the form; form values may be lowercase."""
    try:
        return Difficulty(value.strip().upper())
    except ValueError:
        return None


def _form_session(container: AppContainer, session_id: UUID) -> RecipeFormSession:
    session = container.form_sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return session


def _remove_row(remove: Callable[[int], None], index: int) -> None:
    try:
        remove(index)
    except KeyError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND) from exc


def _form_state(session_id: UUID, session: RecipeFormSession) -> dict[str, object]:
    return {
        "id": str(session_id),
        "ingredients": [
            {"index": row.index, "fields": row.field_names}
            for row in session.ingredients
        ],
        "instructions": [
            {
                "index": row.index,
                "field_name": row.field_name,
                "label": row.label,
                "placeholder": row.placeholder,
            }
            for row in session.instructions
        ],
        "instruction_count": session.instruction_count,
    }
