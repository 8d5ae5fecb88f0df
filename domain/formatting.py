"""Pure helpers turning DTO values into display text."""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from domain.models import (
    SERVINGS,
    ExactServings,
    PayloadShapeError,
    Quantity,
    RecipeDTO,
    Servings,
)


SITE_NAME = "deepdi.sh"

DATE_FORMAT = "%I:%M%p, %d %b %Y"

DURATION_UNITS = (
    ("day", 24 * 60 * 60),
    ("hour", 60 * 60),
    ("minute", 60),
    ("second", 1),
)

UNIT_SUFFIXES = {
    "Mililiters": "ml",
    "Grams": "g",
    "Teaspoons": "tsp",
    "Cup": "cup",
}


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


def format_duration(seconds: int | float) -> str:
    remaining = int(seconds)
    if remaining < 0:
        raise ValueError(f"negative duration: {seconds}")
    parts: list[str] = []
    for word, size in DURATION_UNITS:
        n, remaining = divmod(remaining, size)
        if n:
            parts.append(_plural(n, word))
    return " ".join(parts) or _plural(0, "second")


def _as_datetime(value: datetime | str) -> datetime:
    """Timestamps without an offset are taken to be UTC."""
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def format_date(value: datetime | str) -> str:
    return _as_datetime(value).strftime(DATE_FORMAT)


def date_text(created: datetime | str, updated: datetime | str) -> str:
    text = f"Created at {format_date(created)}"
    if _as_datetime(created) != _as_datetime(updated):
        text += f" (updated at {format_date(updated)})"
    return text


def format_servings(servings: Servings | Mapping[str, Any]) -> str:
    if isinstance(servings, Mapping):
        try:
            servings = SERVINGS.validate_python(servings)
        except ValidationError as e:
            raise PayloadShapeError(f"servings: {e}") from e
    if isinstance(servings, ExactServings):
        return str(servings.exact)
    lower, upper = servings.from_to
    return f"between {lower} and {upper}"


def _number(n: float) -> str:
    return f"{n:g}"


def format_amount(amount: Mapping[str, Quantity]) -> str:
    ((unit, quantity),) = amount.items()
    if unit == "Other":
        return f"{_number(quantity.amount)} {quantity.unit}"
    return f"{_number(quantity.amount)} {UNIT_SUFFIXES[unit]}"


def recipe_metadata(recipe: RecipeDTO) -> dict[str, str]:
    # TODO: sort once the backend fixes a canonical set of duration kinds
    metadata = {kind: format_duration(seconds) for kind, seconds in recipe.time.items()}
    metadata["Serves"] = format_servings(recipe.servings)
    return metadata


def make_title(name: str | None = None) -> str:
    return f"{name} | {SITE_NAME}" if name else SITE_NAME
