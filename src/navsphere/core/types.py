"""Core type definitions.

Shapes of the JSON documents stored in the content repository.
"""

from typing import Literal, NotRequired, TypedDict


class NavigationSubItemDict(TypedDict):
    """Link shown inside a navigation item or category."""

    id: str
    title: str
    href: str
    icon: NotRequired[str]
    description: NotRequired[str]
    enabled: bool


class NavigationCategoryDict(TypedDict):
    """Sub-category grouping links under a navigation item."""

    id: str
    title: str
    icon: NotRequired[str]
    description: NotRequired[str]
    items: NotRequired[list[NavigationSubItemDict]]


class NavigationItemDict(TypedDict):
    """Top-level navigation entry."""

    id: str
    title: str
    icon: NotRequired[str]
    description: NotRequired[str]
    items: NotRequired[list[NavigationSubItemDict]]
    subCategories: NotRequired[list[NavigationCategoryDict]]


class NavigationDataDict(TypedDict):
    """Contents of navigation.json."""

    navigationItems: list[NavigationItemDict]


Theme = Literal["light", "dark", "system"]
LinkTarget = Literal["_blank", "_self"]
StatusFilter = Literal["all", "enabled", "disabled"]


class BasicSettingsDict(TypedDict):
    title: str
    description: str
    keywords: str


class AppearanceSettingsDict(TypedDict):
    logo: str
    favicon: str
    theme: Theme


class NavigationSettingsDict(TypedDict):
    linkTarget: LinkTarget


class SiteConfigDict(TypedDict):
    """Contents of site.json."""

    basic: BasicSettingsDict
    appearance: AppearanceSettingsDict
    navigation: NavigationSettingsDict
