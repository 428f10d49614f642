"""GitHub contents API client.

Reads and commits whole JSON documents through the repository contents
endpoint. Every write is a commit on the configured branch.
"""

import base64
import json
import logging
from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict

import httpx

from navsphere.errors import ContentNotFoundError, ContentStoreError

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
GITHUB_API_VERSION = "2022-11-28"
USER_AGENT = "navsphere-admin"


# GitHub API Response TypedDicts


class GitHubContentResponseDict(TypedDict):
    """File entry returned by GET /repos/{repo}/contents/{path}."""

    type: str
    path: str
    sha: str
    size: int
    encoding: NotRequired[str]
    content: NotRequired[str]


class GitHubCommitDict(TypedDict):
    sha: str
    message: str


class GitHubCommitResponseDict(TypedDict):
    """Response of PUT /repos/{repo}/contents/{path}."""

    content: GitHubContentResponseDict
    commit: GitHubCommitDict


@dataclass
class CommitResult:
    """Outcome of a file commit."""

    path: str
    content_sha: str
    commit_sha: str


def dump_json(data: Any) -> str:
    """Serialize a document the way it is stored in the repository."""
    return json.dumps(data, indent=2, ensure_ascii=False)


class GitHubContentStore:
    """Async client for reading and committing repository files."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        repo: str,
        branch: str = "main",
        api_url: str = GITHUB_API_URL,
        token: str | None = None,
    ):
        """Initialize content store.

        Args:
            client: httpx AsyncClient used for all requests
            repo: Repository in "owner/name" form
            branch: Branch to read from and commit to
            api_url: GitHub API base URL (GitHub Enterprise uses /api/v3)
            token: Token used for reads when the caller supplies none
        """
        self.client = client
        self.repo = repo
        self.branch = branch
        self.api_url = api_url.rstrip("/")
        self.token = token

    def _contents_url(self, path: str) -> str:
        return f"{self.api_url}/repos/{self.repo}/contents/{path.lstrip('/')}"

    def _headers(self, token: str | None) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "User-Agent": USER_AGENT,
        }
        effective_token = token or self.token
        if effective_token:
            headers["Authorization"] = f"Bearer {effective_token}"
        return headers

    async def _get_contents(
        self, path: str, token: str | None = None
    ) -> GitHubContentResponseDict:
        logger.debug(f"Fetching {path} from {self.repo}@{self.branch}")
        try:
            response = await self.client.get(
                self._contents_url(path),
                params={"ref": self.branch},
                headers=self._headers(token),
            )
        except httpx.HTTPError as e:
            raise ContentStoreError(f"Failed to fetch {path}: {e}") from e

        if response.status_code == 404:
            raise ContentNotFoundError(path)
        if response.status_code >= 400:
            logger.error(f"Error response: {response.text}")
            raise ContentStoreError(
                f"Failed to fetch {path}: {_error_message(response)}",
                status_code=response.status_code,
            )

        data = response.json()
        if not isinstance(data, dict) or data.get("type") != "file":
            raise ContentStoreError(f"Not a file: {path}")
        return data

    async def get_file_content(self, path: str, token: str | None = None) -> Any:
        """Fetch a JSON file and return the parsed document.

        Args:
            path: File path inside the repository
            token: Optional caller token, falls back to the store token

        Returns:
            Parsed JSON value

        Raises:
            ContentNotFoundError: If the file does not exist
            ContentStoreError: If the request fails or content is not JSON
        """
        data = await self._get_contents(path, token)
        raw = base64.b64decode(data.get("content", "")).decode("utf-8")
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            raise ContentStoreError(f"Invalid JSON in {path}: {e}") from e

    async def get_file_sha(self, path: str, token: str | None = None) -> str | None:
        """Return the blob sha of a file, or None if it does not exist."""
        try:
            data = await self._get_contents(path, token)
        except ContentNotFoundError:
            return None
        return data["sha"]

    async def commit_file(
        self,
        path: str,
        content: str,
        message: str,
        token: str,
    ) -> CommitResult:
        """Create or update a file with a single commit.

        Args:
            path: File path inside the repository
            content: Full new file content
            message: Commit message
            token: Access token of the user performing the change

        Returns:
            Shas of the new blob and commit

        Raises:
            ContentStoreError: If the commit is rejected
        """
        sha = await self.get_file_sha(path, token)
        payload: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": self.branch,
        }
        if sha:
            payload["sha"] = sha

        logger.info(f'Committing {path} to {self.repo}@{self.branch}: "{message}"')
        try:
            response = await self.client.put(
                self._contents_url(path),
                json=payload,
                headers=self._headers(token),
            )
        except httpx.HTTPError as e:
            raise ContentStoreError(f"Failed to commit {path}: {e}") from e

        if response.status_code >= 400:
            logger.error(f"Commit error response: {response.text}")
            raise ContentStoreError(
                f"Failed to commit {path}: {_error_message(response)}",
                status_code=response.status_code,
            )

        data: GitHubCommitResponseDict = response.json()
        logger.info(f"Committed {path} as {data['commit']['sha']}")
        return CommitResult(
            path=path,
            content_sha=data["content"]["sha"],
            commit_sha=data["commit"]["sha"],
        )

    async def commit_json(
        self, path: str, data: Any, message: str, token: str
    ) -> CommitResult:
        """Serialize a document and commit it."""
        return await self.commit_file(path, dump_json(data), message, token)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:300]
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return response.text[:300]


def create_http_client(
    timeout: float = 15.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the httpx client shared by the content store."""
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=False,
        transport=transport,
    )
