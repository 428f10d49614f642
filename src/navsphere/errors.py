"""Exceptions raised by Navsphere repositories and the content store."""

from typing import TypedDict


class FieldErrorDict(TypedDict):
    """Single validation failure for a field."""

    field: str
    message: str


class NavsphereError(Exception):
    """Base class for all Navsphere errors."""


class ContentStoreError(NavsphereError):
    """Remote content store request failed."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ContentNotFoundError(ContentStoreError):
    """Requested file does not exist in the repository."""

    def __init__(self, path: str) -> None:
        super().__init__(f"File not found: {path}", status_code=404)
        self.path = path


class NavigationNotFoundError(NavsphereError):
    """Navigation item with the given id does not exist."""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Navigation item not found: {item_id}")
        self.item_id = item_id


class CategoryNotFoundError(NavsphereError):
    """Sub-category with the given id does not exist in the navigation item."""

    def __init__(self, item_id: str, category_id: str) -> None:
        super().__init__(f"Category not found: {item_id}/{category_id}")
        self.item_id = item_id
        self.category_id = category_id


class ValidationError(NavsphereError, ValueError):
    """Submitted data failed validation."""

    def __init__(self, errors: list[FieldErrorDict]) -> None:
        fields = ", ".join(error["field"] for error in errors)
        super().__init__(f"Invalid fields: {fields}")
        self.errors = errors
