from jinja2 import Environment
from markupsafe import Markup

from app.html.diet_list import DietList
from domain.formatting import make_title
from domain.models import IngredientDTO
from domain.rich_text import render_document, safe_parse_document


class IngredientDetail:
    def __init__(
        self,
        ingredient: IngredientDTO,
        *,
        environment: Environment,
        template_name: str = "ingredient-detail.html",
    ) -> None:
        self.ingredient = ingredient
        self.env = environment
        self.name = template_name

    @property
    def title(self) -> str:
        return make_title(self.ingredient.name)

    @property
    def description(self) -> Markup:
        return render_document(safe_parse_document(self.ingredient.description))

    @property
    def diets(self) -> DietList:
        return DietList(self.ingredient.diet_violations)

    def render(self) -> str:
        return self.env.get_template(self.name).render(ingredient=self)
