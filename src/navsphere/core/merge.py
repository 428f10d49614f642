"""Navigation item reconciliation.

Combines a stored navigation item with a (possibly partial) update sent by
the admin UI. Sub-categories are matched by id instead of being replaced,
so an update that only carries some categories never drops the others.
"""

import copy
from collections.abc import Iterable, Mapping
from typing import Any, cast

from navsphere.core.types import (
    NavigationCategoryDict,
    NavigationItemDict,
    NavigationSubItemDict,
)


def merge_navigation_item(
    existing: Mapping[str, Any],
    incoming: Mapping[str, Any],
    item_id: str,
) -> NavigationItemDict:
    """Merge an incoming update into an existing navigation item.

    Args:
        existing: Item currently stored in navigation.json
        incoming: Item body submitted by the client
        item_id: Identifier from the request path, always kept

    Returns:
        New merged item. Neither input is modified.
    """
    merged: dict[str, Any] = {**existing, **incoming}
    merged["id"] = item_id

    items = incoming.get("items")
    if items is None:
        items = existing.get("items")
    merged["items"] = list(items) if items is not None else []

    merged["subCategories"] = merge_sub_categories(
        [
            *(existing.get("subCategories") or []),
            *(incoming.get("subCategories") or []),
        ]
    )
    return cast(NavigationItemDict, copy.deepcopy(merged))


def merge_sub_categories(
    categories: Iterable[Mapping[str, Any]],
) -> list[NavigationCategoryDict]:
    """Fold categories sharing an id into one entry.

    Later keys win, nested ``items`` lists are concatenated in encounter
    order without deduplication. Output order follows first appearance.
    """
    by_id: dict[Any, dict[str, Any]] = {}
    for category in categories:
        key = category.get("id")
        previous = by_id.get(key, {})
        previous_items: list[NavigationSubItemDict] = previous.get("items") or []
        by_id[key] = {
            **previous,
            **category,
            "items": [*previous_items, *(category.get("items") or [])],
        }
    return [cast(NavigationCategoryDict, category) for category in by_id.values()]
