"""Site configuration repository and validation."""

import copy
import logging
import re
from collections.abc import Mapping
from typing import Any, cast

from navsphere.core.types import SiteConfigDict
from navsphere.errors import ContentNotFoundError, FieldErrorDict, ValidationError
from navsphere.store.github import GitHubContentStore

logger = logging.getLogger(__name__)

URL_OR_PATH_RE = re.compile(r"^(https?://|/)\S+$", re.IGNORECASE)

THEMES = ("light", "dark", "system")
LINK_TARGETS = ("_blank", "_self")

DEFAULT_SITE_CONFIG: SiteConfigDict = {
    "basic": {"title": "", "description": "", "keywords": ""},
    "appearance": {"logo": "", "favicon": "", "theme": "system"},
    "navigation": {"linkTarget": "_blank"},
}


def default_site_config() -> SiteConfigDict:
    return copy.deepcopy(DEFAULT_SITE_CONFIG)


def validate_site_config(values: object) -> SiteConfigDict:
    """Validate a submitted site configuration.

    Args:
        values: Parsed request body

    Returns:
        Validated configuration containing only known sections and fields

    Raises:
        ValidationError: Listing every invalid field
    """
    errors: list[FieldErrorDict] = []
    if not isinstance(values, Mapping):
        raise ValidationError([{"field": "", "message": "Must be an object"}])

    basic = _section(values, "basic", errors)
    appearance = _section(values, "appearance", errors)
    navigation = _section(values, "navigation", errors)

    title = _string(basic, "basic.title", errors)
    if title is not None and len(title) < 2:
        errors.append(
            {"field": "basic.title", "message": "Title must be at least 2 characters"}
        )

    description = _string(basic, "basic.description", errors)
    if description is not None and len(description) < 10:
        errors.append(
            {
                "field": "basic.description",
                "message": "Description must be at least 10 characters",
            }
        )

    keywords = _string(basic, "basic.keywords", errors)

    logo = _string(appearance, "appearance.logo", errors)
    if logo is not None and not URL_OR_PATH_RE.match(logo):
        errors.append(
            {"field": "appearance.logo", "message": "Must be a URL or absolute path"}
        )

    favicon = _string(appearance, "appearance.favicon", errors)
    if favicon is not None and not URL_OR_PATH_RE.match(favicon):
        errors.append(
            {"field": "appearance.favicon", "message": "Must be a URL or absolute path"}
        )

    theme = _choice(appearance, "appearance.theme", THEMES, errors)
    link_target = _choice(navigation, "navigation.linkTarget", LINK_TARGETS, errors)

    if errors:
        raise ValidationError(errors)

    return cast(
        SiteConfigDict,
        {
            "basic": {
                "title": title,
                "description": description,
                "keywords": keywords,
            },
            "appearance": {"logo": logo, "favicon": favicon, "theme": theme},
            "navigation": {"linkTarget": link_target},
        },
    )


def _section(
    values: Mapping[str, Any], name: str, errors: list[FieldErrorDict]
) -> Mapping[str, Any]:
    section = values.get(name)
    if not isinstance(section, Mapping):
        errors.append({"field": name, "message": "Must be an object"})
        return {}
    return section


def _string(
    section: Mapping[str, Any], field: str, errors: list[FieldErrorDict]
) -> str | None:
    value = section.get(field.split(".")[-1])
    if not isinstance(value, str):
        errors.append({"field": field, "message": "Must be a string"})
        return None
    return value


def _choice(
    section: Mapping[str, Any],
    field: str,
    choices: tuple[str, ...],
    errors: list[FieldErrorDict],
) -> str | None:
    value = section.get(field.split(".")[-1])
    if value not in choices:
        errors.append(
            {"field": field, "message": f"Must be one of: {', '.join(choices)}"}
        )
        return None
    return value


class SiteConfigRepository:
    """Reads and commits site.json."""

    def __init__(self, store: GitHubContentStore, path: str) -> None:
        self._store = store
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    async def get(self) -> SiteConfigDict:
        """Return the stored site configuration, or defaults if missing.

        Sections missing from the stored file are filled from defaults.
        """
        try:
            data = await self._store.get_file_content(self._path)
        except ContentNotFoundError:
            logger.warning(f"{self._path} not found, using default site config")
            return default_site_config()

        if not isinstance(data, dict):
            raise ValueError(f"{self._path} must contain a JSON object")

        config = default_site_config()
        for section_name, defaults in config.items():
            stored = data.get(section_name)
            if isinstance(stored, dict):
                cast(dict[str, Any], defaults).update(stored)
        return config

    async def update(self, values: object, token: str) -> SiteConfigDict:
        """Validate and commit a new site configuration.

        Raises:
            ValidationError: If any field is invalid
        """
        config = validate_site_config(values)
        await self._store.commit_json(self._path, config, "Update site config", token)
        return config
