from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Lookup(BaseModel):
    id: int
    name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class RecipeAuthor(Lookup):
    pass


class RecipeCategory(Lookup):
    pass


class RecipeDifficulty(Lookup):
    pass


class RecipePreview(BaseModel):
    id: int
    title: str
    description: str

    model_config = ConfigDict(from_attributes=True)


class Recipe(BaseModel):
    id: int
    title: str
    description: str
    author: RecipeAuthor
    category: RecipeCategory
    difficulty: RecipeDifficulty
    rating: float
    preparation_time: int
    serving: str
    ingredients: List[str] = Field(default_factory=list)
    steps: List[str] = Field(default_factory=list)
    access_count: int
    image_url: str
    published_date: Optional[str] = Field(
        None, json_schema_extra={"example": "02/Jan/2021"}
    )


class RecipeUpdate(BaseModel):
    """Columns an update may change."""

    title: str
    description: str = ""
    preparation_time: int = 0
    serving: str = ""
    image_url: str = ""


class RecipeCreate(RecipeUpdate):
    category_id: int
    difficulty_id: int
    ingredients: List[str] = Field(
        default_factory=list,
        json_schema_extra={"example": ["flour", "milk", "egg"]},
    )
    steps: List[str] = Field(
        default_factory=list,
        json_schema_extra={
            "example": [
                "Mix dry ingredients",
                "Add wet ingredients",
                "Cook on skillet until golden",
            ]
        },
    )
    # None means the store's configured default author
    author_id: Optional[int] = None
