"""Health API endpoint."""

from aiohttp import web

from navsphere.app_keys import store_key


def create_health_routes() -> list[web.RouteDef]:
    return [web.get("/api/health", get_health)]


async def get_health(request: web.Request) -> web.Response:
    store = request.app[store_key]
    return web.json_response(
        {"status": "ok", "repo": store.repo, "branch": store.branch}
    )
