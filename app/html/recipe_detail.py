from jinja2 import Environment
from markupsafe import Markup

from app.html.diet_list import DietList
from domain.formatting import date_text, format_amount, make_title, recipe_metadata
from domain.models import RecipeDTO, RecipeIngredientDTO
from domain.rich_text import parse_document, render_document, safe_parse_document


class IngredientLine:
    def __init__(self, item: RecipeIngredientDTO) -> None:
        self.item = item

    @property
    def id(self) -> str:
        return str(self.item.ingredient.id)

    @property
    def name(self) -> str:
        return self.item.ingredient.name

    @property
    def amount(self) -> str:
        return format_amount(self.item.amount)

    @property
    def notes(self) -> str | None:
        return self.item.notes

    @property
    def optional(self) -> bool:
        return self.item.optional


class RecipeDetail:
    def __init__(
        self,
        recipe: RecipeDTO,
        *,
        environment: Environment,
        template_name: str = "recipe-detail.html",
    ) -> None:
        self.recipe = recipe
        self.env = environment
        self.name = template_name

    @property
    def title(self) -> str:
        return make_title(self.recipe.name)

    @property
    def dates(self) -> str:
        return date_text(self.recipe.created_at, self.recipe.updated_at)

    @property
    def description(self) -> Markup:
        return render_document(safe_parse_document(self.recipe.description))

    @property
    def metadata(self) -> dict[str, str]:
        return recipe_metadata(self.recipe)

    @property
    def ingredients(self) -> list[IngredientLine]:
        return [IngredientLine(i) for i in self.recipe.ingredients]

    @property
    def steps(self) -> list[Markup]:
        """Steps are always stored as documents, anything else is a defect."""
        return [render_document(parse_document(step)) for step in self.recipe.steps]

    @property
    def diets(self) -> DietList:
        return DietList(self.recipe.diet_violations, kind="recipe")

    def render(self) -> str:
        return self.env.get_template(self.name).render(recipe=self)
