from .errors import (
    InvalidRecipeInput,
    RecipeStoreError,
    StoreFailure,
    StoreTimeout,
    StoreUnavailable,
)
from .store import RecipeStore

__all__ = [
    "InvalidRecipeInput",
    "RecipeStore",
    "RecipeStoreError",
    "StoreFailure",
    "StoreTimeout",
    "StoreUnavailable",
]
