"""Shared test fixtures."""

from collections.abc import AsyncIterator
from typing import Any

import httpx
import pytest
from navsphere.config import Config, ContentConfig, GitHubConfig, ServerConfig
from navsphere.store.github import GitHubContentStore

from tests.fakes import REPO, FakeGitHub


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def test_config() -> Config:
    """Create a test configuration pointing at the fake repository."""
    return Config(
        server=ServerConfig(),
        github=GitHubConfig(repo=REPO, branch="main", token="read-token"),
        content=ContentConfig(),
    )


@pytest.fixture
def sample_navigation() -> dict[str, Any]:
    return {
        "navigationItems": [
            {
                "id": "tools",
                "title": "Tools",
                "icon": "wrench",
                "items": [
                    {"id": "gh", "title": "GitHub", "href": "https://github.com", "enabled": True}
                ],
                "subCategories": [
                    {
                        "id": "editors",
                        "title": "Editors",
                        "items": [
                            {
                                "id": "vim",
                                "title": "Vim",
                                "href": "https://www.vim.org",
                                "description": "Modal editor",
                                "enabled": True,
                            },
                            {
                                "id": "emacs",
                                "title": "Emacs",
                                "href": "https://www.gnu.org/software/emacs/",
                                "enabled": False,
                            },
                            {
                                "id": "code",
                                "title": "VS Code",
                                "href": "https://code.visualstudio.com",
                                "enabled": True,
                            },
                        ],
                    },
                    {"id": "empty", "title": "Empty"},
                ],
            },
            {"id": "docs", "title": "Docs", "items": [], "subCategories": []},
        ]
    }


@pytest.fixture
async def store(fake_github: FakeGitHub) -> AsyncIterator[GitHubContentStore]:
    """Content store talking to the fake repository."""
    async with httpx.AsyncClient(transport=fake_github.transport()) as client:
        yield GitHubContentStore(client, REPO, branch="main", token="read-token")
