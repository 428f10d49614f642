"""CLI interface for Navsphere.

Command-line tool for serving the admin API and inspecting stored content.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

import click

from navsphere.config import Config
from navsphere.core.navigation import NavigationRepository
from navsphere.core.site import SiteConfigRepository
from navsphere.errors import NavsphereError
from navsphere.store.github import GitHubContentStore, create_http_client

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover navsphere.toml)",
)


@click.group()
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
def cli(verbose: bool) -> None:
    """Navsphere - navigation admin backed by a Git repository."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group()
def navigation() -> None:
    """Navigation content commands."""


@click.group()
def site() -> None:
    """Site configuration commands."""


cli.add_command(navigation)
cli.add_command(site)


@cli.command()
@config_option
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--repo",
    default=None,
    help="Content repository as owner/name (overrides config)",
)
@click.option(
    "--branch",
    default=None,
    help="Content branch (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging",
)
def serve(
    config_path: Path | None,
    host: str | None,
    port: int | None,
    repo: str | None,
    branch: str | None,
    verbose: bool,
) -> None:
    """Start the admin API server."""
    from navsphere.server import run_server

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    config = _load_config(config_path).with_overrides(
        host=host, port=port, repo=repo, branch=branch
    )
    _require_repo(config)

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Repository: {config.github.repo}@{config.github.branch}")
    click.echo(f"Navigation: {config.content.navigation_path}")
    click.echo(f"Site config: {config.content.site_path}")
    if not config.github.token:
        click.echo("Read token: none (public repository access)")

    run_server(config)


@navigation.command("list")
@config_option
def list_navigation(config_path: Path | None) -> None:
    """List navigation items with their categories."""
    config = _load_config(config_path)
    _require_repo(config)

    async def _list(store: GitHubContentStore) -> list[dict[str, Any]]:
        repository = NavigationRepository(store, config.content.navigation_path)
        return list(await repository.list_items())

    items = _run(config, _list)
    if not items:
        click.echo("No navigation items.")
        return
    for item in items:
        links = len(item.get("items") or [])
        click.echo(f"{item.get('id')}  {item.get('title')}  ({links} links)")
        for category in item.get("subCategories") or []:
            category_links = len(category.get("items") or [])
            click.echo(
                f"  - {category.get('id')}  {category.get('title')}"
                f"  ({category_links} links)"
            )


@navigation.command("show")
@click.argument("item_id")
@config_option
def show_navigation(item_id: str, config_path: Path | None) -> None:
    """Print a navigation item as JSON."""
    config = _load_config(config_path)
    _require_repo(config)

    async def _show(store: GitHubContentStore) -> dict[str, Any]:
        repository = NavigationRepository(store, config.content.navigation_path)
        return dict(await repository.get_item(item_id))

    item = _run(config, _show)
    click.echo(json.dumps(item, indent=2, ensure_ascii=False))


@site.command("show")
@config_option
def show_site(config_path: Path | None) -> None:
    """Print the site configuration as JSON."""
    config = _load_config(config_path)
    _require_repo(config)

    async def _show(store: GitHubContentStore) -> dict[str, Any]:
        repository = SiteConfigRepository(store, config.content.site_path)
        return dict(await repository.get())

    site_config = _run(config, _show)
    click.echo(json.dumps(site_config, indent=2, ensure_ascii=False))


def _load_config(config_path: Path | None) -> Config:
    try:
        return Config.load(config_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


def _require_repo(config: Config) -> None:
    """Exit unless a content repository is configured.

    Raises:
        SystemExit: If github.repo is empty
    """
    if not config.github.repo:
        click.echo(
            click.style(
                "Error: github.repo required in navsphere.toml",
                fg="red",
            ),
            err=True,
        )
        click.echo("\nAdd the following to your navsphere.toml:")
        click.echo("\n[github]")
        click.echo('repo = "owner/name"')
        click.echo('branch = "main"')
        sys.exit(1)


def _run(config: Config, action: Any) -> Any:
    """Run an async action against a freshly created content store."""

    async def _main() -> Any:
        async with create_http_client(config.github.timeout) as client:
            store = GitHubContentStore(
                client,
                config.github.repo,
                branch=config.github.branch,
                api_url=config.github.api_url,
                token=config.github.token,
            )
            return await action(store)

    try:
        return asyncio.run(_main())
    except (NavsphereError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
