"""Request helpers shared by API handlers."""

import json
from typing import Any

from aiohttp import web

from navsphere.errors import ValidationError


def require_access_token(request: web.Request) -> str:
    """Return the caller's access token from the Authorization header.

    Raises:
        web.HTTPUnauthorized: If no bearer token is present
    """
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise web.HTTPUnauthorized(text="Unauthorized")
    return token


async def read_json(request: web.Request) -> Any:
    """Parse the request body as JSON.

    Raises:
        web.HTTPBadRequest: If the body is not valid JSON
    """
    try:
        return await request.json()
    except json.JSONDecodeError as e:
        raise web.HTTPBadRequest(
            text=json.dumps({"error": f"Invalid JSON: {e.msg}"}),
            content_type="application/json",
        ) from e
    except UnicodeDecodeError as e:
        raise web.HTTPBadRequest(
            text=json.dumps({"error": "Invalid JSON: body is not valid UTF-8"}),
            content_type="application/json",
        ) from e


async def read_json_object(request: web.Request) -> dict[str, Any]:
    data = await read_json(request)
    if not isinstance(data, dict):
        raise web.HTTPBadRequest(
            text=json.dumps({"error": "Request body must be a JSON object"}),
            content_type="application/json",
        )
    return data


def validation_error_response(error: ValidationError) -> web.Response:
    return web.json_response(
        {"error": "Validation failed", "errors": error.errors},
        status=400,
    )


def not_found_response() -> web.Response:
    return web.Response(text="Not Found", status=404)
