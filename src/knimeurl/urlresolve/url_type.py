"""
KNIME URL Classifier
====================
Determines the category of a ``knime://`` URL from its authority alone and
extracts the decoded relative path and the optional item version.

URL Patterns:
- knime://knime.mountpoint/<path>   mountpoint-relative
- knime://knime.space/<path>        Hub space-relative
- knime://knime.workflow/<path>     workflow-relative
- knime://knime.node/<path>         node-relative
- knime://<mount-id>/<path>         mountpoint-absolute (any other authority)

Each form may carry ``?version=<v>``.

Usage:
    from knimeurl.urlresolve.url_type import classify, KnimeUrlType

    parsed = classify("knime://knime.workflow/../data.csv?version=3")
    parsed.url_type   # KnimeUrlType.WORKFLOW_RELATIVE
    parsed.path       # "../data.csv"
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from urllib.parse import urlsplit

from knimeurl.urlresolve.errors import UnrecognizedUrlError
from knimeurl.urlresolve.paths import decode_url_path, encode_path
from knimeurl.urlresolve.version import ItemVersion, version_from_query, version_query

SCHEME = "knime"


class KnimeUrlType(Enum):
    """Resolution category of a KNIME URL."""

    MOUNTPOINT_ABSOLUTE = None  # explicit mount id as authority
    MOUNTPOINT_RELATIVE = "knime.mountpoint"
    HUB_SPACE_RELATIVE = "knime.space"
    WORKFLOW_RELATIVE = "knime.workflow"
    NODE_RELATIVE = "knime.node"

    @property
    def authority(self) -> Optional[str]:
        """Reserved authority of the category, None for mountpoint-absolute."""
        return self.value

    @property
    def label(self) -> str:
        return self.name.lower().replace("_", "-")

    @classmethod
    def from_authority(cls, authority: str) -> "KnimeUrlType":
        """Map an authority verbatim; unknown authorities are mount ids."""
        for url_type in cls:
            if url_type.value is not None and url_type.value == authority:
                return url_type
        return cls.MOUNTPOINT_ABSOLUTE

    @classmethod
    def from_label(cls, label: str) -> "KnimeUrlType":
        """Inverse of ``label`` (e.g. ``workflow-relative``)."""
        normalized = label.strip().upper().replace("-", "_")
        try:
            return cls[normalized]
        except KeyError:
            raise ValueError(f"Unknown KNIME URL type: {label}") from None


@dataclass(frozen=True)
class ParsedKnimeUrl:
    """
    A classified KNIME URL.

    Attributes:
        url: The original URL string
        url_type: Category derived from the authority
        authority: Authority as written in the URL
        path: Decoded relative path without leading slash
        version: Item version from the query, if any
    """

    url: str
    url_type: KnimeUrlType
    authority: str
    path: str
    version: Optional[ItemVersion] = None

    @property
    def mount_id(self) -> Optional[str]:
        """Explicit mount id, only for mountpoint-absolute URLs."""
        if self.url_type is KnimeUrlType.MOUNTPOINT_ABSOLUTE:
            return self.authority
        return None


def is_knime_url(url: str) -> bool:
    """Cheap check for the ``knime:`` scheme."""
    return urlsplit(url).scheme.lower() == SCHEME


def classify(url: str) -> ParsedKnimeUrl:
    """
    Classify a KNIME URL.

    Args:
        url: URL string such as ``knime://knime.workflow/data/x.csv``

    Returns:
        ParsedKnimeUrl with category, decoded path and version

    Raises:
        UnrecognizedUrlError: if the scheme is not ``knime`` or the
            authority is missing
    """
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise UnrecognizedUrlError(f"'{url}' is not a valid KNIME URL: {e}") from e

    if parts.scheme.lower() != SCHEME:
        raise UnrecognizedUrlError(
            f"'{url}' is not a valid KNIME URL, unexpected protocol '{parts.scheme}'"
        )
    if not parts.netloc:
        raise UnrecognizedUrlError(f"'{url}' is not a valid KNIME URL, authority is missing")

    authority = parts.netloc
    return ParsedKnimeUrl(
        url=url,
        url_type=KnimeUrlType.from_authority(authority),
        authority=authority,
        path=decode_url_path(parts.path),
        version=version_from_query(parts.query),
    )


def build_knime_url(
    authority: str,
    path: str = "",
    version: Optional[ItemVersion] = None,
) -> str:
    """
    Build a ``knime://`` URL from an authority and a decoded relative path.

    The root of the authority is rendered without trailing slash
    (``knime://knime.workflow``).
    """
    encoded = encode_path(path.strip("/"))
    location = f"{SCHEME}://{authority}/{encoded}" if encoded else f"{SCHEME}://{authority}"
    return location + version_query(version)
