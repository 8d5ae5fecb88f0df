from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal
from uuid import UUID

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    model_validator,
)


class ShapeViolation(ValueError):
    """Data crossing a boundary does not match its declared shape."""


class PayloadShapeError(ShapeViolation):
    """The backend answered with a payload we cannot use."""


class FormShapeError(ShapeViolation):
    """Submitted form data does not describe a valid DTO."""


class Diet(str, Enum):
    vegan = "vegan"
    vegetarian = "vegetarian"
    gluten_free = "gluten_free"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").capitalize()


def _unique(diets: list[Diet]) -> list[Diet]:
    if len(set(diets)) != len(diets):
        raise ValueError("diet tags must not repeat")
    return diets


type DietTags = Annotated[list[Diet], AfterValidator(_unique)]


class DTO(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class IngredientDTO(DTO):
    id: UUID
    name: str
    description: str
    diet_violations: DietTags


type Unit = Literal["Mililiters", "Grams", "Teaspoons", "Cup", "Other"]


class Quantity(DTO):
    amount: float = Field(ge=0)
    unit: str | None = None


def _single_unit(amount: dict[Unit, Quantity]) -> dict[Unit, Quantity]:
    if len(amount) != 1:
        raise ValueError("an amount carries exactly one unit")
    ((unit, quantity),) = amount.items()
    if (unit == "Other") != (quantity.unit is not None):
        raise ValueError("only the Other unit names its own unit")
    return amount


type Amount = Annotated[dict[Unit, Quantity], AfterValidator(_single_unit)]


class RecipeIngredientDTO(DTO):
    ingredient: IngredientDTO
    amount: Amount
    notes: str | None = None
    optional: bool


class ExactServings(DTO):
    exact: int = Field(gt=0)


class RangeServings(DTO):
    from_to: tuple[Annotated[int, Field(gt=0)], Annotated[int, Field(gt=0)]]

    @model_validator(mode="after")
    def ordered(self) -> "RangeServings":
        lower, upper = self.from_to
        if lower > upper:
            raise ValueError("serving range must be ascending")
        return self


type Servings = ExactServings | RangeServings


class RecipeDTO(DTO):
    name: str
    description: str
    ingredients: list[RecipeIngredientDTO]
    steps: list[str]
    servings: Servings
    time: dict[str, Annotated[int, Field(ge=0)]]
    created_at: datetime
    updated_at: datetime
    diet_violations: DietTags


class CreateIngredientDTO(DTO):
    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    dietFriendly: DietTags | None = None

    def payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


INGREDIENTS = TypeAdapter(list[IngredientDTO])
SERVINGS: TypeAdapter[Servings] = TypeAdapter(Servings)


def validate_payload[T: BaseModel](model: type[T], raw: str | bytes) -> T:
    """Parse a backend JSON body into `model`, or raise `PayloadShapeError`."""
    try:
        return model.model_validate_json(raw)
    except ValidationError as e:
        raise PayloadShapeError(f"{model.__name__}: {e}") from e


def validate_ingredients(raw: str | bytes) -> list[IngredientDTO]:
    try:
        return INGREDIENTS.validate_json(raw)
    except ValidationError as e:
        raise PayloadShapeError(f"list[IngredientDTO]: {e}") from e
