"""Tests for the GitHub content store."""

import base64
import json

import httpx
import pytest
from navsphere.errors import ContentNotFoundError, ContentStoreError
from navsphere.store.github import GitHubContentStore, dump_json

from tests.fakes import NAVIGATION_PATH, REPO, TOKEN, FakeGitHub


class TestGetFileContent:
    """Tests for GitHubContentStore.get_file_content()."""

    @pytest.mark.asyncio
    async def test__existing_file__returns_parsed_json(
        self, fake_github: FakeGitHub, store: GitHubContentStore
    ) -> None:
        fake_github.put_json(NAVIGATION_PATH, {"navigationItems": [{"id": "a"}]})

        data = await store.get_file_content(NAVIGATION_PATH)

        assert data == {"navigationItems": [{"id": "a"}]}

    @pytest.mark.asyncio
    async def test__missing_file__raises_not_found(
        self, store: GitHubContentStore
    ) -> None:
        with pytest.raises(ContentNotFoundError) as exc_info:
            await store.get_file_content("missing.json")

        assert exc_info.value.status_code == 404
        assert exc_info.value.path == "missing.json"

    @pytest.mark.asyncio
    async def test__invalid_json__raises_store_error(
        self, fake_github: FakeGitHub, store: GitHubContentStore
    ) -> None:
        fake_github.files[NAVIGATION_PATH] = "{not json"

        with pytest.raises(ContentStoreError, match="Invalid JSON"):
            await store.get_file_content(NAVIGATION_PATH)

    @pytest.mark.asyncio
    async def test__server_error__raises_with_status(
        self, fake_github: FakeGitHub, store: GitHubContentStore
    ) -> None:
        fake_github.fail_with = 502

        with pytest.raises(ContentStoreError) as exc_info:
            await store.get_file_content(NAVIGATION_PATH)

        assert exc_info.value.status_code == 502
        assert "Server Error" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test__request__sends_github_headers(self) -> None:
        """Reads send the API version, ref and the store token."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            content = base64.b64encode(b"{}").decode("ascii")
            return httpx.Response(
                200,
                json={"type": "file", "path": "x.json", "sha": "abc", "size": 2, "content": content},
            )

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            store = GitHubContentStore(
                client,
                REPO,
                branch="content",
                api_url="https://ghe.example.com/api/v3/",
                token="read-token",
            )
            await store.get_file_content("/x.json")

        request = seen[0]
        assert str(request.url).startswith(
            "https://ghe.example.com/api/v3/repos/acme/site/contents/x.json"
        )
        assert request.url.params["ref"] == "content"
        assert request.headers["Authorization"] == "Bearer read-token"
        assert request.headers["Accept"] == "application/vnd.github+json"
        assert request.headers["X-GitHub-Api-Version"] == "2022-11-28"

    @pytest.mark.asyncio
    async def test__network_error__raises_store_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            store = GitHubContentStore(client, REPO)
            with pytest.raises(ContentStoreError, match="connection refused"):
                await store.get_file_content(NAVIGATION_PATH)


class TestCommitFile:
    """Tests for GitHubContentStore.commit_file()."""

    @pytest.mark.asyncio
    async def test__new_file__creates_commit(
        self, fake_github: FakeGitHub, store: GitHubContentStore
    ) -> None:
        result = await store.commit_file("new.json", "{}", "Create", TOKEN)

        assert result.commit_sha == "commit-1"
        assert result.path == "new.json"
        assert fake_github.files["new.json"] == "{}"
        commit = fake_github.commits[0]
        assert commit.message == "Create"
        assert commit.branch == "main"
        assert commit.token == TOKEN

    @pytest.mark.asyncio
    async def test__existing_file__sends_current_sha(
        self, fake_github: FakeGitHub, store: GitHubContentStore
    ) -> None:
        """Updating a file passes its sha so GitHub accepts the write."""
        fake_github.put_json(NAVIGATION_PATH, {"navigationItems": []})

        await store.commit_file(NAVIGATION_PATH, '{"navigationItems": [1]}', "Update", TOKEN)

        assert fake_github.read_json(NAVIGATION_PATH) == {"navigationItems": [1]}

    @pytest.mark.asyncio
    async def test__rejected_commit__raises_store_error(
        self, fake_github: FakeGitHub, store: GitHubContentStore
    ) -> None:
        fake_github.fail_with = 403

        with pytest.raises(ContentStoreError) as exc_info:
            await store.commit_file(NAVIGATION_PATH, "{}", "Update", TOKEN)

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test__commit_json__keeps_non_ascii_and_indents(
        self, fake_github: FakeGitHub, store: GitHubContentStore
    ) -> None:
        data = {"navigationItems": [{"id": "a", "title": "常用工具"}]}

        await store.commit_json(NAVIGATION_PATH, data, "Update", TOKEN)

        stored = fake_github.files[NAVIGATION_PATH]
        assert "常用工具" in stored
        assert stored == dump_json(data)
        assert json.loads(stored) == data
        assert stored.startswith('{\n  "navigationItems"')


class TestGetFileSha:
    @pytest.mark.asyncio
    async def test__missing_file__returns_none(self, store: GitHubContentStore) -> None:
        assert await store.get_file_sha("missing.json") is None
