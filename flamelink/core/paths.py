"""Store path construction for Flamelink resources.

Layout:
- /environments/{env}/content/{contentType}/{locale}/{entryKey}
- /environments/{env}/navigation/{navKey}/{locale}
- /schemas/{schemaKey}
- /settings/{settingsKey}
"""
from typing import Optional, Union

from flamelink.errors import MissingArgumentError

Key = Union[str, int]


def _is_missing(value) -> bool:
    return value is None or value == ""


def _require(*components) -> None:
    if any(_is_missing(component) for component in components):
        raise MissingArgumentError(
            "The reference, environment and locale arguments are all required"
        )


def join_path(base: str, *children: Optional[Key]) -> str:
    """Append non-empty child keys to a path."""
    parts = [base.rstrip("/")]
    parts.extend(str(child).strip("/") for child in children if not _is_missing(child))
    return "/".join(parts)


def build_content_path(key: Key, env: str, locale: str) -> str:
    _require(key, env, locale)
    return f"/environments/{env}/content/{key}/{locale}"


def build_navigation_path(key: Key, env: str, locale: str) -> str:
    _require(key, env, locale)
    return f"/environments/{env}/navigation/{key}/{locale}"


def build_schema_path(key: Optional[Key] = None) -> str:
    """Schema path; the schemas root when no key is given."""
    return join_path("/schemas", key)


def build_settings_path(key: Optional[Key] = None) -> str:
    """Settings path; `key` may be nested, e.g. "general/imageSizes"."""
    return join_path("/settings", key)
