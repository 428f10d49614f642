"""Application keys for type-safe app configuration access."""

import httpx
from aiohttp import web

from navsphere.config import Config
from navsphere.core.navigation import NavigationRepository
from navsphere.core.site import SiteConfigRepository
from navsphere.store.github import GitHubContentStore

config_key = web.AppKey("config", Config)
http_client_key = web.AppKey("http_client", httpx.AsyncClient)
store_key = web.AppKey("store", GitHubContentStore)
navigation_key = web.AppKey("navigation", NavigationRepository)
site_key = web.AppKey("site", SiteConfigRepository)
