"""Navigation API endpoints.

Provides CRUD over navigation items and the links of their sub-categories.
"""

import logging

from aiohttp import web

from navsphere.api.common import (
    not_found_response,
    read_json,
    read_json_object,
    require_access_token,
    validation_error_response,
)
from navsphere.app_keys import navigation_key
from navsphere.errors import (
    CategoryNotFoundError,
    ContentStoreError,
    NavigationNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

CATEGORY_ITEMS = "/api/navigation/{id}/categories/{category_id}/items"


def create_navigation_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/navigation", list_navigation),
        web.post("/api/navigation", create_navigation),
        # Registered before /{id} so "order" is not taken for an item id
        web.put("/api/navigation/order", reorder_navigation),
        web.get("/api/navigation/{id}", get_navigation),
        web.put("/api/navigation/{id}", update_navigation),
        web.delete("/api/navigation/{id}", delete_navigation),
        web.get(CATEGORY_ITEMS, list_category_items),
        web.post(CATEGORY_ITEMS, add_category_item),
        web.post(CATEGORY_ITEMS + "/move", move_category_item),
        web.put(CATEGORY_ITEMS + r"/{index:\d+}", update_category_item),
        web.delete(CATEGORY_ITEMS + r"/{index:\d+}", delete_category_item),
    ]


def _failure(message: str) -> web.Response:
    return web.json_response({"error": message}, status=500)


async def list_navigation(request: web.Request) -> web.Response:
    navigation = request.app[navigation_key]
    try:
        data = await navigation.load()
    except (ContentStoreError, ValueError):
        logger.exception("Fetch error")
        return _failure("Failed to fetch navigation")
    return web.json_response(data)


async def create_navigation(request: web.Request) -> web.Response:
    token = require_access_token(request)
    values = await read_json_object(request)
    navigation = request.app[navigation_key]
    try:
        item = await navigation.create_item(values, token)
    except ValidationError as e:
        return validation_error_response(e)
    except (ContentStoreError, ValueError):
        logger.exception("Create error")
        return _failure("Failed to create navigation")
    return web.json_response(item, status=201)


async def reorder_navigation(request: web.Request) -> web.Response:
    token = require_access_token(request)
    body = await read_json(request)
    ids = body.get("ids") if isinstance(body, dict) else body
    if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
        return web.json_response(
            {"error": "Expected a list of navigation item ids"}, status=400
        )
    navigation = request.app[navigation_key]
    try:
        items = await navigation.reorder_items(ids, token)
    except ValidationError as e:
        return validation_error_response(e)
    except (ContentStoreError, ValueError):
        logger.exception("Reorder error")
        return _failure("Failed to reorder navigation")
    return web.json_response({"navigationItems": items})


async def get_navigation(request: web.Request) -> web.Response:
    item_id = request.match_info["id"]
    navigation = request.app[navigation_key]
    try:
        item = await navigation.get_item(item_id)
    except NavigationNotFoundError:
        return not_found_response()
    except (ContentStoreError, ValueError):
        logger.exception("Fetch error")
        return _failure("Failed to fetch navigation item")
    return web.json_response(item)


async def update_navigation(request: web.Request) -> web.Response:
    item_id = request.match_info["id"]
    token = require_access_token(request)
    incoming = await read_json_object(request)
    navigation = request.app[navigation_key]
    try:
        merged = await navigation.update_item(item_id, incoming, token)
    except NavigationNotFoundError:
        return web.Response(text="Navigation item not found", status=404)
    except ValidationError as e:
        return validation_error_response(e)
    except (ContentStoreError, ValueError):
        logger.exception("Update error")
        return _failure("Failed to update navigation")
    return web.json_response(merged)


async def delete_navigation(request: web.Request) -> web.Response:
    item_id = request.match_info["id"]
    token = require_access_token(request)
    navigation = request.app[navigation_key]
    try:
        await navigation.delete_item(item_id, token)
    except (ContentStoreError, ValueError):
        logger.exception("Delete error")
        return _failure("Failed to delete navigation")
    return web.json_response({"success": True})


async def list_category_items(request: web.Request) -> web.Response:
    item_id = request.match_info["id"]
    category_id = request.match_info["category_id"]
    query = request.query.get("q", "")
    status = request.query.get("status", "all")
    navigation = request.app[navigation_key]
    try:
        items = await navigation.list_category_items(
            item_id,
            category_id,
            query=query,
            status=status,  # type: ignore[arg-type]
        )
    except (NavigationNotFoundError, CategoryNotFoundError):
        return not_found_response()
    except ValidationError as e:
        return validation_error_response(e)
    except (ContentStoreError, ValueError):
        logger.exception("Fetch error")
        return _failure("Failed to fetch category items")
    return web.json_response({"items": items})


async def add_category_item(request: web.Request) -> web.Response:
    item_id = request.match_info["id"]
    category_id = request.match_info["category_id"]
    token = require_access_token(request)
    values = await read_json_object(request)
    navigation = request.app[navigation_key]
    try:
        sub_item = await navigation.add_category_item(
            item_id, category_id, values, token
        )
    except (NavigationNotFoundError, CategoryNotFoundError):
        return not_found_response()
    except ValidationError as e:
        return validation_error_response(e)
    except (ContentStoreError, ValueError):
        logger.exception("Add item error")
        return _failure("Failed to save")
    return web.json_response(sub_item, status=201)


async def update_category_item(request: web.Request) -> web.Response:
    item_id = request.match_info["id"]
    category_id = request.match_info["category_id"]
    index = int(request.match_info["index"])
    token = require_access_token(request)
    values = await read_json_object(request)
    navigation = request.app[navigation_key]
    try:
        sub_item = await navigation.update_category_item(
            item_id, category_id, index, values, token
        )
    except (NavigationNotFoundError, CategoryNotFoundError, IndexError):
        return not_found_response()
    except ValidationError as e:
        return validation_error_response(e)
    except (ContentStoreError, ValueError):
        logger.exception("Update item error")
        return _failure("Failed to update")
    return web.json_response(sub_item)


async def delete_category_item(request: web.Request) -> web.Response:
    item_id = request.match_info["id"]
    category_id = request.match_info["category_id"]
    index = int(request.match_info["index"])
    token = require_access_token(request)
    navigation = request.app[navigation_key]
    try:
        removed = await navigation.delete_category_item(
            item_id, category_id, index, token
        )
    except (NavigationNotFoundError, CategoryNotFoundError, IndexError):
        return not_found_response()
    except (ContentStoreError, ValueError):
        logger.exception("Delete item error")
        return _failure("Failed to delete")
    return web.json_response({"success": True, "item": removed})


async def move_category_item(request: web.Request) -> web.Response:
    item_id = request.match_info["id"]
    category_id = request.match_info["category_id"]
    token = require_access_token(request)
    body = await read_json_object(request)
    from_index = body.get("from")
    to_index = body.get("to")
    if not _is_index(from_index) or not _is_index(to_index):
        return web.json_response(
            {"error": '"from" and "to" must be non-negative integers'}, status=400
        )
    navigation = request.app[navigation_key]
    try:
        items = await navigation.move_category_item(
            item_id, category_id, from_index, to_index, token
        )
    except (NavigationNotFoundError, CategoryNotFoundError, IndexError):
        return not_found_response()
    except (ContentStoreError, ValueError):
        logger.exception("Move item error")
        return _failure("Failed to move item")
    return web.json_response({"items": items})


def _is_index(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0
