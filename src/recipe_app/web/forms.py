"""Recipe form state: dynamic ingredient and instruction rows."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime

from recipe_app.domain.recipes import Difficulty, Recipe

INGREDIENTS_LIST_ID = "ingredients-list"
INSTRUCTIONS_LIST_ID = "instructions-list"


@dataclass(frozen=True)
class IngredientRow:
    """An ingredient input row; its index only names the form fields."""

    index: int

    @property
    def field_names(self) -> dict[str, str]:
        prefix = f"ingredients[{self.index}]"
        return {
            "name": f"{prefix}.name",
            "quantity": f"{prefix}.quantity",
            "unit": f"{prefix}.unit",
        }


@dataclass
class InstructionRow:
    """An instruction textarea row labelled by its position."""

    index: int
    position: int

    @property
    def field_name(self) -> str:
        return f"instructions[{self.index}]"

    @property
    def label(self) -> str:
        return f"{self.position}."

    @property
    def placeholder(self) -> str:
        return f"Step {self.position}"


@dataclass
class RecipeFormSession:
    """Rows of one recipe form being edited."""

    ingredients: list[IngredientRow] = field(default_factory=list)
    instructions: list[InstructionRow] = field(default_factory=list)
    _next_ingredient_index: int = 0
    _next_instruction_index: int = 0

    @property
    def instruction_count(self) -> int:
        return len(self.instructions)

    def add_ingredient(self) -> IngredientRow:
        row = IngredientRow(index=self._next_ingredient_index)
        self._next_ingredient_index += 1
        self.ingredients.append(row)
        return row

    def remove_ingredient(self, index: int) -> None:
        """Remove an ingredient row; other rows keep their indices."""
        self.ingredients.remove(self._ingredient(index))

    def add_instruction(self) -> InstructionRow:
        row = InstructionRow(
            index=self._next_instruction_index,
            position=self.instruction_count + 1,
        )
        self._next_instruction_index += 1
        self.instructions.append(row)
        return row

    def remove_instruction(self, index: int) -> None:
        """Remove an instruction row and renumber the rest by position."""
        self.instructions.remove(self._instruction(index))
        for position, row in enumerate(self.instructions, start=1):
            row.position = position

    def _ingredient(self, index: int) -> IngredientRow:
        for row in self.ingredients:
            if row.index == index:
                return row
        raise KeyError(f"No ingredient row {index}")

    def _instruction(self, index: int) -> InstructionRow:
        for row in self.instructions:
            if row.index == index:
                return row
        raise KeyError(f"No instruction row {index}")


def validate_recipe_form(form: Mapping[str, object]) -> list[str]:
    """Return human-readable messages for missing required fields."""
    errors: list[str] = []
    if not _text(form.get("title")):
        errors.append("Recipe title is required")
    if not _text(form.get("description")):
        errors.append("Description is required")
    if not form.get("difficulty"):
        errors.append("Difficulty level is required")
    return errors


def draft_recipe(  # noqa: PLR0913
    *,
    user_id: int,
    title: str,
    description: str | None,
    instructions: list[str],
    servings: int,
    difficulty: Difficulty,
    now: datetime,
    prep_time: int | None = None,
    cook_time: int | None = None,
    is_public: bool = False,
) -> Recipe:
    """Build an unsaved recipe; the server assigns id and timestamps."""
    return Recipe(
        id=0,
        user_id=user_id,
        title=title.strip(),
        description=description,
        instructions="\n".join(step.strip() for step in instructions if step.strip()),
        prep_time=prep_time,
        cook_time=cook_time,
        servings=servings,
        difficulty=difficulty,
        image_url=None,
        is_public=is_public,
        created_at=now,
        updated_at=now,
    )


def _text(value: object) -> str:
    return value.strip() if isinstance(value, str) else ""
