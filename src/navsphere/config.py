"""Configuration management for Navsphere.

Supports TOML configuration format with auto-discovery.
"""

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

CONFIG_FILENAME = "navsphere.toml"
TOKEN_ENV_VAR = "NAVSPHERE_GITHUB_TOKEN"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class GitHubConfig:
    """Content repository configuration."""

    repo: str = ""
    branch: str = "main"
    api_url: str = "https://api.github.com"
    token: str | None = None
    timeout: float = 15.0


@dataclass
class ContentConfig:
    """Location of the JSON documents inside the repository."""

    dir: str = "navsphere/content"
    navigation_file: str = "navigation.json"
    site_file: str = "site.json"

    @property
    def navigation_path(self) -> str:
        return f"{self.dir.strip('/')}/{self.navigation_file}"

    @property
    def site_path(self) -> str:
        return f"{self.dir.strip('/')}/{self.site_file}"


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    github: GitHubConfig
    content: ContentConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for navsphere.toml in current directory and parents.
        The NAVSPHERE_GITHUB_TOKEN environment variable overrides github.token.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            config = cls._load_from_file(config_path)
        else:
            discovered_path = cls._discover_config()
            if discovered_path is None:
                config = cls._default()
            else:
                config = cls._load_from_file(discovered_path)

        env_token = os.environ.get(TOKEN_ENV_VAR)
        if env_token:
            config = replace(config, github=replace(config.github, token=env_token))
        return config

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents.

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> "Config":
        return cls(
            server=ServerConfig(),
            github=GitHubConfig(),
            content=ContentConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        if not isinstance(data, dict):
            raise ValueError("Configuration must be a dictionary")

        return cls(
            server=cls._parse_server(data.get("server")),
            github=cls._parse_github(data.get("github")),
            content=cls._parse_content(data.get("content")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_github(cls, data: object) -> GitHubConfig:
        """Parse github configuration section.

        Args:
            data: Raw github section data

        Returns:
            GitHubConfig instance
        """
        if data is None:
            return GitHubConfig()

        if not isinstance(data, dict):
            raise ValueError("github section must be a dictionary")

        repo = data.get("repo", "")
        if not isinstance(repo, str):
            raise ValueError("github.repo must be a string")
        if repo and repo.count("/") != 1:
            raise ValueError('github.repo must look like "owner/name"')

        branch = data.get("branch", "main")
        if not isinstance(branch, str):
            raise ValueError("github.branch must be a string")

        api_url = data.get("api_url", "https://api.github.com")
        if not isinstance(api_url, str):
            raise ValueError("github.api_url must be a string")

        token = data.get("token")
        if token is not None and not isinstance(token, str):
            raise ValueError("github.token must be a string")

        timeout = data.get("timeout", 15.0)
        if isinstance(timeout, bool) or not isinstance(timeout, int | float):
            raise ValueError("github.timeout must be a number")

        return GitHubConfig(
            repo=repo,
            branch=branch,
            api_url=api_url,
            token=token,
            timeout=float(timeout),
        )

    @classmethod
    def _parse_content(cls, data: object) -> ContentConfig:
        if data is None:
            return ContentConfig()

        if not isinstance(data, dict):
            raise ValueError("content section must be a dictionary")

        values: dict[str, str] = {}
        for key in ("dir", "navigation_file", "site_file"):
            if key not in data:
                continue
            value = data[key]
            if not isinstance(value, str) or not value:
                raise ValueError(f"content.{key} must be a non-empty string")
            values[key] = value

        return ContentConfig(**values)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        repo: str | None = None,
        branch: str | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config.

        Args:
            host: Override server.host
            port: Override server.port
            repo: Override github.repo
            branch: Override github.branch

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        github = self.github
        if repo is not None or branch is not None:
            github = replace(
                self.github,
                repo=repo if repo is not None else self.github.repo,
                branch=branch if branch is not None else self.github.branch,
            )

        return replace(self, server=server, github=github)
