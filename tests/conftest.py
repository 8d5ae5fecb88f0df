import json
from typing import Any, Callable

import httpx
import pytest

from domain.repository import BackendRepository


INGREDIENT_ID = "0190b7c2-6f3a-7d1e-9c4b-2a5d8e1f3b6c"


def document(*paragraphs: str) -> str:
    return json.dumps(
        {
            "root": {
                "type": "root",
                "children": [
                    {
                        "type": "paragraph",
                        "children": [{"type": "text", "text": p, "format": 0}],
                    }
                    for p in paragraphs
                ],
            }
        }
    )


@pytest.fixture
def ingredient_payload() -> dict[str, Any]:
    return {
        "id": INGREDIENT_ID,
        "name": "Butter",
        "description": document("Churned cream."),
        "diet_violations": ["vegan"],
    }


@pytest.fixture
def recipe_payload(ingredient_payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "name": "Shortbread",
        "description": document("Three ingredients, one tin."),
        "ingredients": [
            {
                "ingredient": ingredient_payload,
                "amount": {"Grams": {"amount": 125}},
                "notes": "softened",
                "optional": False,
            },
            {
                "ingredient": {
                    **ingredient_payload,
                    "id": "0190b7c2-6f3a-7d1e-9c4b-2a5d8e1f3b6d",
                    "name": "Salt",
                    "diet_violations": [],
                },
                "amount": {"Other": {"amount": 1, "unit": "pinch"}},
                "notes": None,
                "optional": True,
            },
        ],
        "steps": [document("Cream the butter."), document("Bake.")],
        "servings": {"from_to": [8, 12]},
        "time": {"Preparation": 900, "Baking": 2700},
        "created_at": "2024-03-07T15:05:00Z",
        "updated_at": "2024-03-07T15:05:00Z",
        "diet_violations": ["vegan"],
    }


type Handler = Callable[[httpx.Request], httpx.Response]


class FakeBackend:
    """Records requests and answers them with `handler`."""

    def __init__(self, handler: Handler) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


@pytest.fixture
def backend() -> Callable[[Handler], tuple[FakeBackend, BackendRepository]]:
    def make(handler: Handler) -> tuple[FakeBackend, BackendRepository]:
        fake = FakeBackend(handler)
        client = httpx.AsyncClient(
            base_url="http://backend.test", transport=httpx.MockTransport(fake)
        )
        return fake, BackendRepository(client=client)

    return make
