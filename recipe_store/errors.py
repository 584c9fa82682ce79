"""Errors raised by the recipe store.

A single-row fetch that matches nothing is not an error: it returns None.
"""


class RecipeStoreError(Exception):
    """Base class for everything this package raises."""


class StoreFailure(RecipeStoreError):
    """The backing store rejected or failed a call.

    The driver exception is chained as ``__cause__``.
    """


class StoreTimeout(StoreFailure):
    """A store call ran past its deadline and was interrupted."""

    def __init__(self, timeout: float):
        super().__init__(f"store call exceeded its {timeout:g}s deadline")
        self.timeout = timeout


class StoreUnavailable(StoreFailure):
    """The store could not be opened or reached at startup."""


class InvalidRecipeInput(RecipeStoreError):
    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message
