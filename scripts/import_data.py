"""Seed the recipe store from data/recipes.json.

The file holds ``authors``, ``categories`` and ``difficulties`` lists of
``{"id", "name"}`` objects and a ``recipes`` list shaped like RecipeCreate.
"""
import json
from pathlib import Path

from recipe_store import models
from recipe_store.db import init_db
from recipe_store.schemas import RecipeCreate
from recipe_store.store import RecipeStore

LOOKUPS = (
    ("authors", models.Author),
    ("categories", models.Category),
    ("difficulties", models.Difficulty),
)


def main():
    p = Path(__file__).resolve().parents[1] / 'data' / 'recipes.json'
    if not p.exists():
        print('data/recipes.json not found')
        return
    data = json.loads(p.read_text(encoding='utf-8'))

    with RecipeStore.from_settings() as store:
        init_db(store.engine)
        with store.session() as s:
            for key, model in LOOKUPS:
                for item in data.get(key, []):
                    if s.get(model, item['id']) is None:
                        s.add(model(id=item['id'], name=item['name']))
            s.commit()

        added = 0
        for r in data.get('recipes', []):
            if not r.get('title'):
                continue
            store.insert_recipe(RecipeCreate(**r))
            added += 1
    print(f'Imported {added} recipes')


if __name__ == '__main__':
    main()
