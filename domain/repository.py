import logging
from urllib.parse import quote

import httpx
from opentelemetry import trace
from opentelemetry.trace import Span, StatusCode

from domain.models import (
    CreateIngredientDTO,
    IngredientDTO,
    RecipeDTO,
    validate_ingredients,
    validate_payload,
)


logger = logging.getLogger(__name__)

tracer = trace.get_tracer("deepdish.frontend")


class BackendRepository:
    """Reads and writes recipes and ingredients through the backend API.

    Every lookup returns the validated DTO or `None` when the backend has
    nothing for us. A body that does not match its DTO raises
    `PayloadShapeError`.
    """

    def __init__(
        self,
        *,
        base_url: str = "http://localhost:8111",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.client = (
            httpx.AsyncClient(base_url=base_url, timeout=None)
            if client is None
            else client
        )

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _send(
        self,
        span: Span,
        method: str,
        path: str,
        json: dict[str, object] | None = None,
    ) -> httpx.Response | None:
        try:
            resp = await self.client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %r", method, path, e)
            span.record_exception(e)
            span.set_status(StatusCode.ERROR, f"Could not reach backend for {path}")
            return None

        span.add_event("finished fetching")
        span.set_attribute("http.response.status_code", resp.status_code)
        if not resp.is_success:
            logger.info("%s %s answered %d", method, path, resp.status_code)
            span.set_status(StatusCode.ERROR, f"Could not fetch {path}")
            return None
        return resp

    async def list_ingredients(self) -> list[IngredientDTO] | None:
        with tracer.start_as_current_span("load ingredients") as span:
            resp = await self._send(span, "GET", "/ingredient")
            if resp is None:
                return None
            return validate_ingredients(resp.content)

    async def get_ingredient(self, id: str | None) -> IngredientDTO | None:
        if not id:
            return None
        with tracer.start_as_current_span("load ingredient") as span:
            span.set_attribute("ingredient.id", id)
            resp = await self._send(span, "GET", f"/ingredient/{quote(id, safe='')}")
            if resp is None:
                return None
            return validate_payload(IngredientDTO, resp.content)

    async def get_recipe(self, id: str | None) -> RecipeDTO | None:
        if not id:
            return None
        with tracer.start_as_current_span("load recipe") as span:
            span.set_attribute("recipe.id", id)
            resp = await self._send(span, "GET", f"/recipe/{quote(id, safe='')}")
            if resp is None:
                return None
            return validate_payload(RecipeDTO, resp.content)

    async def create_ingredient(
        self, ingredient: CreateIngredientDTO
    ) -> IngredientDTO | None:
        with tracer.start_as_current_span("create ingredient") as span:
            resp = await self._send(
                span, "POST", "/ingredient/create", json=ingredient.payload()
            )
            if resp is None:
                return None
            return validate_payload(IngredientDTO, resp.content)
