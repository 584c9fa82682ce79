from datetime import date, datetime
from typing import Iterable, List, Optional, Union

from .errors import InvalidRecipeInput

DELIMITER = "|"

_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def split_list(value: Optional[str]) -> List[str]:
    """Split a stored "|"-delimited column into its ordered elements.

    An empty or NULL column is an empty list; otherwise every element is
    kept, including empty ones between adjacent delimiters.
    """
    if not value:
        return []
    return value.split(DELIMITER)


def join_list(field: str, items: Iterable[str]) -> str:
    """Encode ``items`` for a delimited column.

    Empty elements are rejected: ``[""]`` would be stored as ``""`` and
    read back as ``[]``.
    """
    items = list(items)
    for item in items:
        if not item:
            raise InvalidRecipeInput(field, "elements must not be empty")
        if DELIMITER in item:
            raise InvalidRecipeInput(
                field, f"element {item!r} contains the {DELIMITER!r} delimiter"
            )
    return DELIMITER.join(items)


def format_published_date(value: Union[datetime, date, str, None]) -> Optional[str]:
    """Render a published timestamp as ``DD/Mon/YYYY``.

    Only the date portion of the value is used, as written, so
    ``2021-01-02T00:00:00Z`` becomes ``02/Jan/2021`` whatever the zone.
    """
    if value is None:
        return None
    if isinstance(value, (datetime, date)):
        value = value.isoformat()
    day = datetime.strptime(value[:10], "%Y-%m-%d").date()
    return f"{day.day:02d}/{_MONTHS[day.month - 1]}/{day.year:04d}"
