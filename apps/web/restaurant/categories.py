"""Menu category normalization."""

from collections import defaultdict
from collections.abc import Iterable
from typing import TypeVar

_T = TypeVar("_T")


def normalize_category(value: str) -> str:
    """
    Normalize a free-text category for storage and grouping.

    Each whitespace-separated word gets an uppercase first letter and a
    lowercase remainder; words are rejoined with single spaces, so
    "main course", "Main Course" and "MAIN  COURSE" all become "Main Course".
    """
    return " ".join(word[:1].upper() + word[1:].lower() for word in value.split())


def group_by_category(
    items: Iterable[_T], key: str = "category"
) -> dict[str, list[_T]]:
    """
    Group items by normalized category, categories sorted by name.

    Items keep their relative order within a category.
    """
    groups: dict[str, list[_T]] = defaultdict(list)
    for item in items:
        groups[normalize_category(getattr(item, key))].append(item)
    return {name: groups[name] for name in sorted(groups, key=str.casefold)}
