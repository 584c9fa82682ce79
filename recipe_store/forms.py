"""Coercion of HTML form fields into store inputs.

Handlers pass the raw form mapping (``await request.form()`` or a plain
dict). Numeric fields that are missing or do not parse raise
InvalidRecipeInput instead of defaulting to zero.
"""
from typing import List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import InvalidRecipeInput
from .formatting import DELIMITER
from .schemas import RecipeCreate, RecipeUpdate


class RecipeUpdateForm(BaseModel):
    title: str = ""
    description: str = ""
    preparation_time: int = Field(alias="preparation-time")
    serving: str = ""
    img_url: str = Field("", alias="imgURL")

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class NewRecipeForm(RecipeUpdateForm):
    category: int
    difficulty: int
    ingredients: str = ""
    steps: str = ""
    author: Optional[int] = None


def _split_form_list(value: str) -> List[str]:
    return [x.strip() for x in value.split(DELIMITER) if x and x.strip()]


def _validate(model, form: Mapping[str, str]):
    # an empty optional field is "not given"
    data = {k: v for k, v in form.items() if not (k == "author" and not str(v).strip())}
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        err = exc.errors()[0]
        field = ".".join(str(p) for p in err["loc"]) or "form"
        raise InvalidRecipeInput(field, err["msg"]) from exc


def parse_recipe_update_form(form: Mapping[str, str]) -> RecipeUpdate:
    parsed = _validate(RecipeUpdateForm, form)
    return RecipeUpdate(
        title=parsed.title,
        description=parsed.description,
        preparation_time=parsed.preparation_time,
        serving=parsed.serving,
        image_url=parsed.img_url,
    )


def parse_new_recipe_form(form: Mapping[str, str]) -> RecipeCreate:
    parsed = _validate(NewRecipeForm, form)
    return RecipeCreate(
        title=parsed.title,
        description=parsed.description,
        category_id=parsed.category,
        difficulty_id=parsed.difficulty,
        preparation_time=parsed.preparation_time,
        serving=parsed.serving,
        ingredients=_split_form_list(parsed.ingredients),
        steps=_split_form_list(parsed.steps),
        image_url=parsed.img_url,
        author_id=parsed.author,
    )
