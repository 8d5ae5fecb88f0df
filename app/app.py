import contextlib
import functools
import json
import logging
from typing import Any, AsyncIterator, Awaitable, Callable

from jinja2 import Environment, FileSystemLoader, select_autoescape
from starlette.applications import Starlette
from starlette.datastructures import FormData
from starlette.requests import Request
from starlette.responses import HTMLResponse, RedirectResponse, Response
from starlette.routing import Mount, Route
from starlette.staticfiles import StaticFiles

from app import config
from app.html.ingredient_detail import IngredientDetail
from app.html.recipe_detail import RecipeDetail
from domain.formatting import make_title
from domain.models import Diet, FormShapeError, PayloadShapeError
from domain.repository import BackendRepository
from domain.rich_text import document_from_text
from domain.services import create_ingredient
from telemetry import shutdown_telemetry


logger = logging.getLogger(__name__)


CONFIG = config.Config()


TEMPLATES = Environment(
    loader=FileSystemLoader(CONFIG.html_dir),
    autoescape=select_autoescape(),
)


type Page = str | tuple[str, int] | Response


def aHTMLResponse(route: Callable[..., Awaitable[Page]]):
    """Wrap a route returning html (and maybe a status) in an `HTMLResponse`.

    Routes that decide to redirect return the response as is.
    """

    @functools.wraps(route)
    async def wrapper(*args: Any, **kwargs: Any) -> Response:
        resp = await route(*args, **kwargs)
        if isinstance(resp, Response):
            return resp
        if not isinstance(resp, tuple):
            html, code = resp, 200
        else:
            html, code = resp
        return HTMLResponse(html, status_code=code)

    return wrapper


def home() -> RedirectResponse:
    return RedirectResponse("/", status_code=303)


def repository(request: Request) -> BackendRepository:
    return request.app.state.repo


def with_document_description(form: FormData) -> FormData:
    """Serialise the plain `description_text` the create page posts.

    Blank text is dropped, leaving the description missing.
    """
    text = form.get("description_text")
    items = [(k, v) for k, v in form.multi_items() if k != "description_text"]
    if isinstance(text, str) and text.strip():
        items = [(k, v) for k, v in items if k != "description"]
        items.append(("description", json.dumps(document_from_text(text))))
    return FormData(items)


@aHTMLResponse
async def homepage(request: Request) -> str:
    return TEMPLATES.get_template("index.html").render()


@aHTMLResponse
async def ingredient_list(request: Request) -> Page:
    ingredients = await repository(request).list_ingredients()
    if ingredients is None:
        return home()
    return TEMPLATES.get_template("ingredient-list.html").render(
        title=make_title("Ingredients"),
        ingredients=ingredients,
    )


@aHTMLResponse
async def ingredient_detail(request: Request) -> Page:
    ingredient = await repository(request).get_ingredient(
        request.path_params.get("id")
    )
    if ingredient is None:
        return home()
    return IngredientDetail(ingredient, environment=TEMPLATES).render()


@aHTMLResponse
async def ingredient_create(request: Request) -> Page:
    match request.method.lower():
        case "get":
            return TEMPLATES.get_template("ingredient-create.html").render(
                title=make_title("New ingredient"),
                diets=list(Diet),
            )
        case "post":
            async with request.form() as form:
                created = await create_ingredient(
                    with_document_description(form), repository=repository(request)
                )
            if created is None:
                return home()
            return RedirectResponse(f"/ingredient/{created.id}", status_code=303)
        case _:
            raise ValueError("Unsupported method.")


@aHTMLResponse
async def recipe_detail(request: Request) -> Page:
    recipe = await repository(request).get_recipe(request.path_params.get("id"))
    if recipe is None:
        return home()
    return RecipeDetail(recipe, environment=TEMPLATES).render()


def error_page(heading: str, message: str, code: int) -> HTMLResponse:
    html = TEMPLATES.get_template("error.html").render(heading=heading, message=message)
    return HTMLResponse(html, status_code=code)


async def form_shape_error(request: Request, exc: Exception) -> Response:
    logger.warning("Rejected form on %s: %s", request.url.path, exc)
    return error_page("That did not look right", str(exc), 400)


async def payload_shape_error(request: Request, exc: Exception) -> Response:
    logger.error("Malformed backend payload on %s: %s", request.url.path, exc)
    return error_page("Something went wrong", "The kitchen sent us nonsense.", 502)


@contextlib.asynccontextmanager
async def lifespan(app: Starlette) -> AsyncIterator[None]:
    yield
    await app.state.repo.aclose()
    shutdown_telemetry()


app = Starlette(
    debug=True if CONFIG.env == config.Env.local else False,
    routes=[
        Route("/", homepage),
        Route("/ingredient", ingredient_list),
        Route("/ingredient/create", ingredient_create, methods=["GET", "POST"]),
        Route("/ingredient/{id}", ingredient_detail),
        Route("/recipe/{id}", recipe_detail),
        Mount("/assets", StaticFiles(directory=CONFIG.assets_dir), name="assets"),
    ],
    exception_handlers={
        FormShapeError: form_shape_error,
        PayloadShapeError: payload_shape_error,
    },
    lifespan=lifespan,
)

app.state.repo = BackendRepository(base_url=CONFIG.backend_url)
