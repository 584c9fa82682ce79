# flake8: noqa
import pytest

from recipe_store.errors import InvalidRecipeInput
from recipe_store.forms import parse_new_recipe_form, parse_recipe_update_form

FORM = {
    "title": "Pancakes",
    "description": "Fluffy",
    "category": "1",
    "difficulty": "2",
    "preparation-time": "20",
    "serving": "4 people",
    "ingredients": "eggs|flour||milk|",
    "steps": "mix|fry",
    "imgURL": "http://img/pancakes.png",
}


def test_parse_new_recipe_form():
    recipe = parse_new_recipe_form(FORM)
    assert recipe.title == "Pancakes"
    assert recipe.category_id == 1
    assert recipe.difficulty_id == 2
    assert recipe.preparation_time == 20
    assert recipe.serving == "4 people"
    # blank elements are dropped
    assert recipe.ingredients == ["eggs", "flour", "milk"]
    assert recipe.steps == ["mix", "fry"]
    assert recipe.image_url == "http://img/pancakes.png"
    assert recipe.author_id is None


def test_parse_new_recipe_form_with_author():
    recipe = parse_new_recipe_form({**FORM, "author": "5"})
    assert recipe.author_id == 5
    assert parse_new_recipe_form({**FORM, "author": ""}).author_id is None


@pytest.mark.parametrize("field", ["category", "difficulty", "preparation-time"])
def test_unparseable_numbers_are_rejected(field):
    with pytest.raises(InvalidRecipeInput) as exc:
        parse_new_recipe_form({**FORM, field: "abc"})
    assert exc.value.field == field


def test_missing_number_is_rejected():
    form = dict(FORM)
    del form["category"]
    with pytest.raises(InvalidRecipeInput) as exc:
        parse_new_recipe_form(form)
    assert exc.value.field == "category"


def test_parse_recipe_update_form():
    update = parse_recipe_update_form({
        "title": "Crepes",
        "description": "Thin",
        "preparation-time": "15",
        "serving": "2",
        "imgURL": "http://img/crepes.png",
    })
    assert update.title == "Crepes"
    assert update.preparation_time == 15
    assert update.image_url == "http://img/crepes.png"

    with pytest.raises(InvalidRecipeInput):
        parse_recipe_update_form({"title": "Crepes", "preparation-time": "1.5x"})
