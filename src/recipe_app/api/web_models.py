"""Pydantic models for web form submissions."""

from uuid import UUID

from pydantic import BaseModel, Field


class LoginForm(BaseModel):
    """Login modal submission."""

    email: str
    password: str


class RegisterForm(BaseModel):
    """Register modal submission."""

    email: str
    password: str
    name: str


class RecipeForm(BaseModel):
    """New recipe form submission."""

    title: str = ""
    description: str = ""
    difficulty: str = ""
    instructions: list[str] = Field(default_factory=list)
    servings: int = Field(default=1, ge=1)
    prep_time: int | None = Field(default=None, ge=0)
    cook_time: int | None = Field(default=None, ge=0)
    is_public: bool = False
    form_session_id: UUID | None = None


class ProfileForm(BaseModel):
    """Profile settings submission."""

    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
