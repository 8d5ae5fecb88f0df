from collections.abc import Mapping
import logging
from typing import Any

from pydantic import ValidationError
from starlette.datastructures import UploadFile

from domain.models import CreateIngredientDTO, FormShapeError, IngredientDTO
from domain.repository import BackendRepository


logger = logging.getLogger(__name__)


MULTI_VALUED = frozenset({"dietFriendly"})


def _values(form: Mapping[str, Any], field: str) -> list[Any]:
    getlist = getattr(form, "getlist", None)
    if getlist is not None:
        return list(getlist(field))
    value = form.get(field)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def marshal_create_ingredient(form: Mapping[str, Any]) -> CreateIngredientDTO:
    """Turn submitted form fields into a `CreateIngredientDTO`.

    The description arrives as an already serialised document and is passed on
    untouched. Uploaded files are never valid field values.
    """
    parsed: dict[str, Any] = {}
    for field in form.keys():
        values = _values(form, field)
        if any(isinstance(v, UploadFile) for v in values):
            raise FormShapeError(f"{field}: files are not accepted")
        if field in MULTI_VALUED:
            parsed[field] = values
        elif values:
            parsed[field] = values[-1]

    try:
        return CreateIngredientDTO.model_validate(parsed)
    except ValidationError as e:
        raise FormShapeError(str(e)) from e


async def create_ingredient(
    form: Mapping[str, Any],
    *,
    repository: BackendRepository,
) -> IngredientDTO | None:
    ingredient = marshal_create_ingredient(form)
    created = await repository.create_ingredient(ingredient)
    if created is not None:
        logger.info("Created ingredient %s (%s)", created.name, created.id)
    return created
