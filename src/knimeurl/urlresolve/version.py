"""
Item Versions
=============
Item-version variants and the ``version`` query parameter of KNIME URLs.

Textual forms:
- ``current-state``  -> CurrentState (never emitted; absence means current state)
- ``most-recent``    -> MostRecent
- ``<n>``            -> SpecificVersion(n), n a non-negative integer

Any other value is a parse failure: ``parse_version`` returns None and callers
fall back to "no version". The deprecated ``spaceVersion`` parameter is
migrated to ``version`` before classification.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import parse_qsl

logger = logging.getLogger(__name__)

VERSION_PARAM = "version"
LEGACY_VERSION_PARAM = "spaceVersion"

CURRENT_STATE = "current-state"
MOST_RECENT = "most-recent"


class ItemVersion:
    """Base of the three item-version variants."""

    @property
    def query_value(self) -> Optional[str]:
        """Value of the ``version`` query parameter, None if it is omitted."""
        raise NotImplementedError


@dataclass(frozen=True)
class CurrentState(ItemVersion):
    """The working state of an item, i.e. no version at all."""

    @property
    def query_value(self) -> Optional[str]:
        return None

    def __str__(self) -> str:
        return CURRENT_STATE


@dataclass(frozen=True)
class MostRecent(ItemVersion):
    """The newest version created for an item."""

    @property
    def query_value(self) -> Optional[str]:
        return MOST_RECENT

    def __str__(self) -> str:
        return MOST_RECENT


@dataclass(frozen=True)
class SpecificVersion(ItemVersion):
    """A fixed, numbered version of an item."""

    version: int

    def __post_init__(self):
        if self.version < 0:
            raise ValueError(f"Item versions are non-negative, got {self.version}")

    @property
    def query_value(self) -> Optional[str]:
        return str(self.version)

    def __str__(self) -> str:
        return str(self.version)


def parse_version(text: Optional[str]) -> Optional[ItemVersion]:
    """
    Parse the textual form of an item version.

    Args:
        text: Value of a ``version`` query parameter

    Returns:
        The version, or None if the text is not one of the three known forms
    """
    if text is None:
        return None
    value = text.strip()
    if value == CURRENT_STATE:
        return CurrentState()
    if value == MOST_RECENT:
        return MostRecent()
    if value.isdigit() and value.isascii():
        return SpecificVersion(int(value))
    return None


def format_version(version: Optional[ItemVersion]) -> Optional[str]:
    """Inverse of ``parse_version``; current state and None both map to None."""
    if version is None:
        return None
    return version.query_value


def is_versioned(version: Optional[ItemVersion]) -> bool:
    """True if the version selects something other than the current state."""
    return version is not None and not isinstance(version, CurrentState)


def _migrate_legacy_value(value: str) -> str:
    """Translate a ``spaceVersion`` value to the ``version`` vocabulary."""
    value = value.strip()
    if value == "latest":
        return MOST_RECENT
    if value == "-1":
        return CURRENT_STATE
    return value


def version_from_query(query: str) -> Optional[ItemVersion]:
    """
    Extract the item version from a URL query string.

    Multiple ``version`` parameters are accepted for compatibility: the first
    occurrence wins and a warning is logged.

    Args:
        query: Raw (still percent-encoded) query string of a URL

    Returns:
        Parsed version or None if absent or unparseable
    """
    if not query:
        return None

    params = parse_qsl(query, keep_blank_values=True)
    values: List[str] = [v for k, v in params if k == VERSION_PARAM]

    if not values:
        legacy = [v for k, v in params if k == LEGACY_VERSION_PARAM]
        if legacy:
            logger.warning(
                "Deprecated query parameter '%s' migrated to '%s'",
                LEGACY_VERSION_PARAM,
                VERSION_PARAM,
            )
            values = [_migrate_legacy_value(v) for v in legacy]

    if not values:
        return None

    if len(values) > 1:
        logger.warning(
            "Multiple version parameters in query '%s', using the first one (%s)",
            query,
            values[0],
        )

    return parse_version(values[0])


def version_query(version: Optional[ItemVersion]) -> str:
    """Render ``?version=...`` for a URL, or an empty string for no version."""
    value = format_version(version)
    return f"?{VERSION_PARAM}={value}" if value is not None else ""
