from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from .store import DEFAULT_EXCERPT_SEPARATOR

CONFIG_FILENAME = "_config.yml"


class ConfigError(ValueError):
    """The site configuration file cannot be used."""


@dataclass(frozen=True)
class SiteConfig:
    title: str = "Blog"
    description: str = ""
    baseurl: str = ""
    excerpt_separator: str = DEFAULT_EXCERPT_SEPARATOR

    def with_overrides(
        self, title: Optional[str] = None, baseurl: Optional[str] = None
    ) -> "SiteConfig":
        """Apply command line values on top of the file settings."""
        changes: dict[str, Any] = {}
        if title is not None:
            changes["title"] = title
        if baseurl is not None:
            changes["baseurl"] = baseurl.rstrip("/")
        return replace(self, **changes)


def _text(data: dict, key: str, default: str) -> str:
    value = data.get(key)
    if value is None:
        return default
    return str(value)


def load_config(path: Path) -> SiteConfig:
    """Load ``_config.yml``; a missing file means defaults."""
    if not path.exists():
        return SiteConfig()

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: invalid YAML ({exc})") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")

    defaults = SiteConfig()
    return SiteConfig(
        title=_text(data, "title", defaults.title),
        description=_text(data, "description", defaults.description),
        # trailing slash would double up with post urls
        baseurl=_text(data, "baseurl", defaults.baseurl).rstrip("/"),
        excerpt_separator=_text(data, "excerpt_separator", defaults.excerpt_separator),
    )
