"""aiohttp server for Navsphere.

Application factory and route registration.
"""

import logging

import httpx
from aiohttp import web

from navsphere.api.health import create_health_routes
from navsphere.api.navigation import create_navigation_routes
from navsphere.api.site import create_site_routes
from navsphere.app_keys import (
    config_key,
    http_client_key,
    navigation_key,
    site_key,
    store_key,
)
from navsphere.config import Config
from navsphere.core.navigation import NavigationRepository
from navsphere.core.site import SiteConfigRepository
from navsphere.store.github import GitHubContentStore, create_http_client

logger = logging.getLogger(__name__)


def create_app(
    config: Config,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        transport: Optional httpx transport for the content store client

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    http_client = create_http_client(config.github.timeout, transport=transport)
    store = GitHubContentStore(
        http_client,
        config.github.repo,
        branch=config.github.branch,
        api_url=config.github.api_url,
        token=config.github.token,
    )

    app[config_key] = config
    app[http_client_key] = http_client
    app[store_key] = store
    app[navigation_key] = NavigationRepository(store, config.content.navigation_path)
    app[site_key] = SiteConfigRepository(store, config.content.site_path)

    app.router.add_routes(create_health_routes())
    app.router.add_routes(create_navigation_routes())
    app.router.add_routes(create_site_routes())

    app.on_cleanup.append(_close_http_client)

    return app


async def _close_http_client(app: web.Application) -> None:
    """Close the content store client on application cleanup."""
    await app[http_client_key].aclose()


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    if not config.github.repo:
        logger.warning("github.repo is not set, content requests will fail")
    app = create_app(config)
    web.run_app(app, host=config.server.host, port=config.server.port)
