"""Tests for configuration loading."""

from pathlib import Path
from unittest.mock import patch

import pytest
from navsphere.config import (
    Config,
    ContentConfig,
    GitHubConfig,
    ServerConfig,
)


class TestConfigLoad:
    """Tests for Config.load()."""

    def test__explicit_path__loads_config(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Load config from explicit path."""
        monkeypatch.delenv("NAVSPHERE_GITHUB_TOKEN", raising=False)
        config_file = tmp_path / "navsphere.toml"
        config_file.write_text("""
[server]
host = "0.0.0.0"
port = 3000

[github]
repo = "acme/site"
branch = "content"
api_url = "https://ghe.example.com/api/v3"
token = "secret"
timeout = 5

[content]
dir = "data/"
navigation_file = "nav.json"
site_file = "settings.json"
""")

        config = Config.load(config_file)

        assert config.server.host == "0.0.0.0"
        assert config.server.port == 3000
        assert config.github.repo == "acme/site"
        assert config.github.branch == "content"
        assert config.github.api_url == "https://ghe.example.com/api/v3"
        assert config.github.token == "secret"
        assert config.github.timeout == 5.0
        assert config.content.navigation_path == "data/nav.json"
        assert config.content.site_path == "data/settings.json"
        assert config.config_path == config_file

    def test__minimal_config__uses_defaults(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("NAVSPHERE_GITHUB_TOKEN", raising=False)
        config_file = tmp_path / "navsphere.toml"
        config_file.write_text("")

        config = Config.load(config_file)

        assert config.server.host == "127.0.0.1"
        assert config.server.port == 8080
        assert config.github.repo == ""
        assert config.github.branch == "main"
        assert config.github.api_url == "https://api.github.com"
        assert config.github.token is None
        assert config.content.navigation_path == "navsphere/content/navigation.json"
        assert config.content.site_path == "navsphere/content/site.json"

    def test__missing_explicit_path__raises_error(self, tmp_path: Path) -> None:
        config_file = tmp_path / "nonexistent.toml"

        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            Config.load(config_file)

    def test__no_path_no_discovery__returns_defaults(self) -> None:
        with patch.object(Config, "_discover_config", return_value=None):
            config = Config.load()

        assert config.server.port == 8080
        assert config.github.repo == ""
        assert config.config_path is None

    def test__env_token__overrides_file_token(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        config_file = tmp_path / "navsphere.toml"
        config_file.write_text('[github]\nrepo = "acme/site"\ntoken = "from-file"')
        monkeypatch.setenv("NAVSPHERE_GITHUB_TOKEN", "from-env")

        config = Config.load(config_file)

        assert config.github.token == "from-env"


class TestConfigDiscovery:
    """Tests for config file discovery."""

    def test__config_in_current_dir__found(self, tmp_path: Path) -> None:
        config_file = tmp_path / "navsphere.toml"
        config_file.write_text("[server]\nport = 9000")

        with patch("pathlib.Path.cwd", return_value=tmp_path):
            discovered = Config._discover_config()

        assert discovered == config_file

    def test__config_in_parent_dir__found(self, tmp_path: Path) -> None:
        config_file = tmp_path / "navsphere.toml"
        config_file.write_text("[server]\nport = 9000")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        with patch("pathlib.Path.cwd", return_value=nested):
            discovered = Config._discover_config()

        assert discovered == config_file


class TestConfigValidation:
    """Tests for invalid configuration values."""

    @pytest.mark.parametrize(
        ("content", "message"),
        [
            ('server = "x"', "server section must be a dictionary"),
            ('[server]\nport = "80"', "server.port must be an integer"),
            ("[github]\nrepo = 1", "github.repo must be a string"),
            ('[github]\nrepo = "no-slash"', 'github.repo must look like "owner/name"'),
            ("[github]\ntoken = 1", "github.token must be a string"),
            ("[github]\ntimeout = true", "github.timeout must be a number"),
            ('[content]\ndir = ""', "content.dir must be a non-empty string"),
        ],
    )
    def test__invalid_value__raises_value_error(
        self, tmp_path: Path, content: str, message: str
    ) -> None:
        config_file = tmp_path / "navsphere.toml"
        config_file.write_text(content)

        with pytest.raises(ValueError, match=message):
            Config.load(config_file)


class TestWithOverrides:
    """Tests for Config.with_overrides()."""

    def _config(self) -> Config:
        return Config(
            server=ServerConfig(),
            github=GitHubConfig(repo="acme/site"),
            content=ContentConfig(),
        )

    def test__overrides__applied_without_mutating(self) -> None:
        config = self._config()

        updated = config.with_overrides(port=9999, branch="preview")

        assert updated.server.port == 9999
        assert updated.server.host == "127.0.0.1"
        assert updated.github.branch == "preview"
        assert updated.github.repo == "acme/site"
        assert config.server.port == 8080
        assert config.github.branch == "main"

    def test__no_overrides__returns_equal_config(self) -> None:
        config = self._config()

        assert config.with_overrides() == config
