"""Site configuration API endpoints."""

import logging

from aiohttp import web

from navsphere.api.common import (
    read_json,
    require_access_token,
    validation_error_response,
)
from navsphere.app_keys import site_key
from navsphere.errors import ContentStoreError, ValidationError

logger = logging.getLogger(__name__)


def create_site_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/site", get_site_config),
        web.put("/api/site", update_site_config),
    ]


async def get_site_config(request: web.Request) -> web.Response:
    site = request.app[site_key]
    try:
        config = await site.get()
    except (ContentStoreError, ValueError):
        logger.exception("Fetch site config error")
        return web.json_response({"error": "Failed to fetch site config"}, status=500)
    return web.json_response(config)


async def update_site_config(request: web.Request) -> web.Response:
    token = require_access_token(request)
    values = await read_json(request)
    site = request.app[site_key]
    try:
        config = await site.update(values, token)
    except ValidationError as e:
        return validation_error_response(e)
    except ContentStoreError:
        logger.exception("Update site config error")
        return web.json_response({"error": "Failed to update site config"}, status=500)
    return web.json_response(config)
