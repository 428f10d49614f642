"""Navigation repository.

Reads navigation.json from the content store, applies a change in memory and
commits the whole document back. Every mutating method takes the access token
of the user making the change; that token authors the commit.
"""

import logging
import uuid
from collections.abc import Callable, Mapping
from typing import Any, cast

from navsphere.core.merge import merge_navigation_item
from navsphere.core.types import (
    NavigationCategoryDict,
    NavigationDataDict,
    NavigationItemDict,
    NavigationSubItemDict,
    StatusFilter,
)
from navsphere.errors import (
    CategoryNotFoundError,
    ContentNotFoundError,
    FieldErrorDict,
    NavigationNotFoundError,
    ValidationError,
)
from navsphere.store.github import GitHubContentStore

logger = logging.getLogger(__name__)

STATUS_FILTERS: tuple[StatusFilter, ...] = ("all", "enabled", "disabled")


def new_id() -> str:
    """Generate an identifier for a new item."""
    return uuid.uuid4().hex[:12]


class NavigationRepository:
    """CRUD over the navigation document stored in the repository."""

    def __init__(self, store: GitHubContentStore, path: str) -> None:
        """Initialize repository.

        Args:
            store: Content store used for reads and commits
            path: Path of navigation.json inside the repository
        """
        self._store = store
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    async def load(self) -> NavigationDataDict:
        """Load the navigation document.

        A missing file is treated as an empty navigation.
        """
        try:
            data = await self._store.get_file_content(self._path)
        except ContentNotFoundError:
            logger.warning(f"{self._path} not found, starting with empty navigation")
            return {"navigationItems": []}

        if not isinstance(data, dict):
            raise ValueError(f"{self._path} must contain a JSON object")
        items = data.get("navigationItems") or []
        if not isinstance(items, list):
            raise ValueError(f"{self._path}: navigationItems must be a list")
        if not all(isinstance(item, dict) for item in items):
            raise ValueError(f"{self._path}: navigationItems must contain objects")
        return {"navigationItems": items}

    async def _save(
        self, items: list[NavigationItemDict], message: str, token: str
    ) -> None:
        data: NavigationDataDict = {"navigationItems": items}
        await self._store.commit_json(self._path, data, message, token)

    async def list_items(self) -> list[NavigationItemDict]:
        data = await self.load()
        return data["navigationItems"]

    async def get_item(self, item_id: str) -> NavigationItemDict:
        """Return a navigation item by id.

        Raises:
            NavigationNotFoundError: If no item has this id
        """
        for item in await self.list_items():
            if item.get("id") == item_id:
                return item
        raise NavigationNotFoundError(item_id)

    async def create_item(
        self, values: Mapping[str, Any], token: str
    ) -> NavigationItemDict:
        """Append a new navigation item.

        Raises:
            ValidationError: If the title is missing or the id is taken
        """
        items = await self.list_items()
        item = cast(NavigationItemDict, dict(values))
        item_id = item.get("id") or new_id()
        item["id"] = item_id

        errors = _shape_errors(item)
        if not isinstance(item_id, str):
            errors.append({"field": "id", "message": "Must be a string"})
        if not _is_filled(item.get("title")):
            errors.append({"field": "title", "message": "Title is required"})
        if any(existing.get("id") == item_id for existing in items):
            errors.append({"field": "id", "message": f"Id already exists: {item_id}"})
        if errors:
            raise ValidationError(errors)

        item.setdefault("items", [])
        item.setdefault("subCategories", [])
        items.append(item)
        await self._save(items, "Add navigation item", token)
        return item

    async def update_item(
        self, item_id: str, incoming: Mapping[str, Any], token: str
    ) -> NavigationItemDict:
        """Merge an update into an existing item and commit.

        Raises:
            NavigationNotFoundError: If no item has this id
            ValidationError: If items or subCategories are malformed
        """
        validate_item_shape(incoming)
        items = await self.list_items()
        index = _find_index(items, item_id)
        merged = merge_navigation_item(items[index], incoming, item_id)
        items[index] = merged
        await self._save(items, "Update navigation item", token)
        return merged

    async def delete_item(self, item_id: str, token: str) -> None:
        items = await self.list_items()
        remaining = [item for item in items if item.get("id") != item_id]
        await self._save(remaining, "Delete navigation item", token)

    async def reorder_items(
        self, ordered_ids: list[str], token: str
    ) -> list[NavigationItemDict]:
        """Reorder top-level items.

        Raises:
            ValidationError: If ordered_ids is not a permutation of existing ids
        """
        items = await self.list_items()
        by_id = {item.get("id"): item for item in items}
        if len(ordered_ids) != len(items) or set(ordered_ids) != set(by_id):
            raise ValidationError(
                [{"field": "ids", "message": "Must list every navigation item id once"}]
            )
        reordered = [by_id[item_id] for item_id in ordered_ids]
        await self._save(reordered, "Reorder navigation items", token)
        return reordered

    # Category items

    async def get_category(
        self, item_id: str, category_id: str
    ) -> NavigationCategoryDict:
        item = await self.get_item(item_id)
        return _find_category(item, category_id)

    async def list_category_items(
        self,
        item_id: str,
        category_id: str,
        query: str = "",
        status: StatusFilter = "all",
    ) -> list[NavigationSubItemDict]:
        """List links of a category, optionally filtered.

        Args:
            item_id: Navigation item id
            category_id: Sub-category id
            query: Case-insensitive substring matched against title, href
                and description
            status: "all", "enabled" or "disabled"
        """
        if status not in STATUS_FILTERS:
            raise ValidationError(
                [{"field": "status", "message": f"Unknown status filter: {status}"}]
            )
        category = await self.get_category(item_id, category_id)
        return [
            sub_item
            for sub_item in category.get("items") or []
            if _matches_query(sub_item, query) and _matches_status(sub_item, status)
        ]

    async def add_category_item(
        self,
        item_id: str,
        category_id: str,
        values: Mapping[str, Any],
        token: str,
    ) -> NavigationSubItemDict:
        sub_item = validate_sub_item(values)

        def apply(category_items: list[NavigationSubItemDict]) -> None:
            category_items.append(sub_item)

        await self._modify_category_items(
            item_id, category_id, apply, "Add category item", token
        )
        return sub_item

    async def update_category_item(
        self,
        item_id: str,
        category_id: str,
        index: int,
        values: Mapping[str, Any],
        token: str,
    ) -> NavigationSubItemDict:
        """Replace the link at index.

        Raises:
            IndexError: If index is out of range
        """
        sub_item = validate_sub_item(values)

        def apply(category_items: list[NavigationSubItemDict]) -> None:
            _check_index(category_items, index)
            category_items[index] = sub_item

        await self._modify_category_items(
            item_id, category_id, apply, "Update category item", token
        )
        return sub_item

    async def delete_category_item(
        self, item_id: str, category_id: str, index: int, token: str
    ) -> NavigationSubItemDict:
        removed: list[NavigationSubItemDict] = []

        def apply(category_items: list[NavigationSubItemDict]) -> None:
            _check_index(category_items, index)
            removed.append(category_items.pop(index))

        await self._modify_category_items(
            item_id, category_id, apply, "Delete category item", token
        )
        return removed[0]

    async def move_category_item(
        self,
        item_id: str,
        category_id: str,
        from_index: int,
        to_index: int,
        token: str,
    ) -> list[NavigationSubItemDict]:
        """Move a link within its category.

        Moving an item onto its own position does not commit.

        Returns:
            Category links in their new order
        """
        category = await self.get_category(item_id, category_id)
        current = list(category.get("items") or [])
        _check_index(current, from_index)
        _check_index(current, to_index)
        if from_index == to_index:
            return current

        def apply(category_items: list[NavigationSubItemDict]) -> None:
            moved = category_items.pop(from_index)
            category_items.insert(to_index, moved)

        return await self._modify_category_items(
            item_id, category_id, apply, "Move category item", token
        )

    async def move_category_item_to_top(
        self, item_id: str, category_id: str, index: int, token: str
    ) -> list[NavigationSubItemDict]:
        return await self.move_category_item(item_id, category_id, index, 0, token)

    async def move_category_item_to_bottom(
        self, item_id: str, category_id: str, index: int, token: str
    ) -> list[NavigationSubItemDict]:
        category = await self.get_category(item_id, category_id)
        last = len(category.get("items") or []) - 1
        return await self.move_category_item(item_id, category_id, index, last, token)

    async def _modify_category_items(
        self,
        item_id: str,
        category_id: str,
        apply: Callable[[list[NavigationSubItemDict]], None],
        message: str,
        token: str,
    ) -> list[NavigationSubItemDict]:
        # Writes the category list directly; merge_navigation_item would
        # concatenate it with the stored one.
        items = await self.list_items()
        index = _find_index(items, item_id)
        category = _find_category(items[index], category_id)
        category_items = list(category.get("items") or [])
        apply(category_items)
        category["items"] = category_items
        await self._save(items, message, token)
        return category_items


def validate_sub_item(values: Mapping[str, Any]) -> NavigationSubItemDict:
    """Validate a category link and fill in defaults.

    Raises:
        ValidationError: If title/href are missing or enabled is not a boolean
    """
    errors: list[FieldErrorDict] = []
    if not _is_filled(values.get("title")):
        errors.append({"field": "title", "message": "Title is required"})
    if not _is_filled(values.get("href")):
        errors.append({"field": "href", "message": "Link is required"})
    enabled = values.get("enabled", True)
    if not isinstance(enabled, bool):
        errors.append({"field": "enabled", "message": "Must be a boolean"})
    for key in ("icon", "description"):
        value = values.get(key)
        if value is not None and not isinstance(value, str):
            errors.append({"field": key, "message": "Must be a string"})
    if errors:
        raise ValidationError(errors)

    sub_item = cast(NavigationSubItemDict, dict(values))
    sub_item["id"] = values.get("id") or new_id()
    sub_item["enabled"] = enabled
    return sub_item


def _is_filled(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _find_index(items: list[NavigationItemDict], item_id: str) -> int:
    for index, item in enumerate(items):
        if item.get("id") == item_id:
            return index
    raise NavigationNotFoundError(item_id)


def _find_category(
    item: NavigationItemDict, category_id: str
) -> NavigationCategoryDict:
    for category in item.get("subCategories") or []:
        if category.get("id") == category_id:
            return category
    raise CategoryNotFoundError(item["id"], category_id)


def _check_index(items: list[NavigationSubItemDict], index: int) -> None:
    if not 0 <= index < len(items):
        raise IndexError(f"Item index out of range: {index}")


def _matches_query(sub_item: NavigationSubItemDict, query: str) -> bool:
    if not query:
        return True
    needle = query.lower()
    haystacks = (
        sub_item.get("title") or "",
        sub_item.get("href") or "",
        sub_item.get("description") or "",
    )
    return any(
        isinstance(value, str) and needle in value.lower() for value in haystacks
    )


def _matches_status(sub_item: NavigationSubItemDict, status: StatusFilter) -> bool:
    if status == "all":
        return True
    enabled = bool(sub_item.get("enabled", False))
    return enabled if status == "enabled" else not enabled


def validate_item_shape(values: Mapping[str, Any]) -> None:
    """Check the collections of a navigation item body.

    Raises:
        ValidationError: If items or subCategories are not lists of objects
    """
    errors = _shape_errors(values)
    if errors:
        raise ValidationError(errors)


def _shape_errors(values: Mapping[str, Any]) -> list[FieldErrorDict]:
    errors: list[FieldErrorDict] = []
    for key in ("items", "subCategories"):
        value = values.get(key)
        if value is None:
            continue
        if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
            errors.append({"field": key, "message": "Must be a list of objects"})
    categories = values.get("subCategories")
    if not isinstance(categories, list):
        return errors
    for category in categories:
        if isinstance(category, dict) and not isinstance(category.get("id"), str | None):
            errors.append(
                {"field": "subCategories.id", "message": "Must be a string"}
            )
            break
    for category in categories:
        if not isinstance(category, dict):
            continue
        nested = category.get("items")
        if nested is not None and (
            not isinstance(nested, list) or not all(isinstance(v, dict) for v in nested)
        ):
            errors.append(
                {"field": "subCategories.items", "message": "Must be a list of objects"}
            )
            break
    return errors
