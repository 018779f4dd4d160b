from typing import Tuple

# Fixed, read-only category set
CATEGORIES: Tuple[str, ...] = (
    "Food",
    "Transport",
    "Entertainment",
    "Shopping",
    "Bills",
    "Healthcare",
    "Education",
    "Other",
)


def is_category(value: object) -> bool:
    return isinstance(value, str) and value in CATEGORIES
