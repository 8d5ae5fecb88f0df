from datetime import datetime, timezone
from typing import Any

import pytest

from domain.formatting import (
    date_text,
    format_amount,
    format_date,
    format_duration,
    format_servings,
    make_title,
    recipe_metadata,
)
from domain.models import (
    ExactServings,
    PayloadShapeError,
    Quantity,
    RangeServings,
    RecipeDTO,
)


@pytest.mark.parametrize(
    "servings,expected",
    (
        ({"exact": 4}, "4"),
        ({"from_to": [2, 3]}, "between 2 and 3"),
        (ExactServings(exact=1), "1"),
        (RangeServings(from_to=(4, 6)), "between 4 and 6"),
    ),
)
def test_format_servings(servings: Any, expected: str) -> None:
    assert format_servings(servings) == expected


@pytest.mark.parametrize("servings", ({"exact": 0}, {"from_to": [3, 2]}, {"some": 4}))
def test_format_servings_rejects_bad_mappings(servings: dict[str, Any]) -> None:
    with pytest.raises(PayloadShapeError):
        format_servings(servings)


@pytest.mark.parametrize(
    "seconds,expected",
    (
        (0, "0 seconds"),
        (1, "1 second"),
        (59, "59 seconds"),
        (60, "1 minute"),
        (900, "15 minutes"),
        (5400, "1 hour 30 minutes"),
        (7261, "2 hours 1 minute 1 second"),
        (90000, "1 day 1 hour"),
    ),
)
def test_format_duration(seconds: int, expected: str) -> None:
    assert format_duration(seconds) == expected


def test_format_duration_rejects_negative() -> None:
    with pytest.raises(ValueError):
        format_duration(-1)


def test_format_date() -> None:
    assert format_date("2024-03-07T15:05:00Z") == "03:05PM, 07 Mar 2024"
    assert format_date(datetime(2024, 1, 2, 9, 30)) == "09:30AM, 02 Jan 2024"


def test_date_text_same_timestamps_omits_update() -> None:
    got = date_text("2024-03-07T15:05:00Z", "2024-03-07T15:05:00Z")
    assert got == "Created at 03:05PM, 07 Mar 2024"
    assert "updated" not in got


def test_date_text_distinct_timestamps_shows_update() -> None:
    got = date_text("2024-03-07T15:05:00Z", "2024-03-09T08:00:00Z")
    assert got == (
        "Created at 03:05PM, 07 Mar 2024 (updated at 08:00AM, 09 Mar 2024)"
    )


def test_date_text_naive_and_utc_are_the_same_instant() -> None:
    got = date_text("2024-03-07T15:05:00", "2024-03-07T15:05:00Z")
    assert got == "Created at 03:05PM, 07 Mar 2024"
    got = date_text(datetime(2024, 3, 7, 15, 5), "2024-03-07T15:05:00+00:00")
    assert "updated" not in got


def test_date_text_accepts_datetimes() -> None:
    ts = datetime(2024, 3, 7, 15, 5, tzinfo=timezone.utc)
    assert date_text(ts, ts) == "Created at 03:05PM, 07 Mar 2024"


@pytest.mark.parametrize(
    "amount,expected",
    (
        ({"Grams": Quantity(amount=125)}, "125 g"),
        ({"Mililiters": Quantity(amount=12.5)}, "12.5 ml"),
        ({"Teaspoons": Quantity(amount=2)}, "2 tsp"),
        ({"Cup": Quantity(amount=0.5)}, "0.5 cup"),
        ({"Other": Quantity(amount=1, unit="pinch")}, "1 pinch"),
    ),
)
def test_format_amount(amount: dict[str, Quantity], expected: str) -> None:
    assert format_amount(amount) == expected


def test_recipe_metadata_keeps_insertion_order(recipe_payload: dict[str, Any]) -> None:
    recipe_payload["time"] = {"Cooking": 60, "Preparation": 5400, "Baking": 120}
    recipe = RecipeDTO.model_validate(recipe_payload)
    got = recipe_metadata(recipe)
    assert list(got.items()) == [
        ("Cooking", "1 minute"),
        ("Preparation", "1 hour 30 minutes"),
        ("Baking", "2 minutes"),
        ("Serves", "between 8 and 12"),
    ]


def test_make_title() -> None:
    assert make_title("Butter") == "Butter | deepdi.sh"
    assert make_title() == "deepdi.sh"
    assert make_title(None) == "deepdi.sh"
