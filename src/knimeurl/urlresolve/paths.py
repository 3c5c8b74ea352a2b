"""
Path Utilities
==============
Pure helpers for the relative, POSIX-style paths inside KNIME URLs and for
building the concrete URLs they resolve to.

Paths relative to a mount point root are ``PurePosixPath`` values; the root
itself is the empty path (no parts). Local directories are ``PurePath``
values of either flavor so that UNC shares can be expressed on any platform.
"""
from __future__ import annotations

from pathlib import PurePath, PurePosixPath, PureWindowsPath
from typing import List, Optional
from urllib.parse import quote, unquote

from knimeurl.urlresolve.errors import ScopeViolationError
from knimeurl.urlresolve.version import ItemVersion, version_query

# Characters left unescaped in URL paths (RFC 3986 pchar minus unreserved, plus "/")
PATH_SAFE = "/:@!$&'()*+,;="

PARENT = ".."
DATA_SUFFIX = ":data"
ROOT = PurePosixPath()


def decode_url_path(raw_path: str) -> str:
    """
    Percent-decode a URL path and turn it into a relative path.

    Leading slashes and empty or ``.`` segments are dropped; ``..`` segments
    are kept so that ``leaves_scope`` can still see them.

    Example:
        decode_url_path("//a/./b%20c/../d") -> "a/b c/../d"
    """
    segments = [s for s in unquote(raw_path).split("/") if s not in ("", ".")]
    return "/".join(segments)


def leaves_scope(path: str) -> bool:
    """True iff the first segment of ``path`` is literally ``..``."""
    segments = [s for s in path.split("/") if s not in ("", ".")]
    return bool(segments) and segments[0] == PARENT


def path_string(path: Optional[PurePath]) -> str:
    """Slash-joined parts of a relative path; the root renders as ``""``."""
    if path is None:
        return ""
    return "/".join(path.parts)


def is_within(path: PurePosixPath, root: PurePosixPath) -> bool:
    """True if ``path`` equals ``root`` or lies below it."""
    if path.parts and path.parts[0] == PARENT:
        return False
    return path.parts[: len(root.parts)] == root.parts


def is_strictly_within(path: PurePosixPath, root: PurePosixPath) -> bool:
    """True if ``path`` lies below ``root`` (but is not ``root`` itself)."""
    return is_within(path, root) and len(path.parts) > len(root.parts)


def relative_to(path: PurePosixPath, root: PurePosixPath) -> PurePosixPath:
    """Path of ``path`` relative to ``root``; ``path`` must be within ``root``."""
    return PurePosixPath(*path.parts[len(root.parts):])


def normalize(base: PurePosixPath, suffix: str) -> PurePosixPath:
    """
    Lexically append ``suffix`` to ``base`` and collapse ``.`` and ``..``.

    A ``..`` that climbs above the mount point root is kept as a leading
    ``..`` part, which no root contains.
    """
    parts: List[str] = list(base.parts)
    for segment in suffix.split("/"):
        if segment in ("", "."):
            continue
        if segment == PARENT:
            if parts and parts[-1] != PARENT:
                parts.pop()
            else:
                parts.append(PARENT)
        else:
            parts.append(segment)
    return PurePosixPath(*parts)


def append_and_contain(
    root: PurePosixPath,
    suffix: str,
    boundary: Optional[PurePosixPath] = None,
    scope: str = "the mount point",
    url_kind: Optional[str] = None,
) -> PurePosixPath:
    """
    Resolve ``suffix`` against ``root`` and check that the result stays inside.

    Args:
        root: Base path the suffix is relative to
        suffix: Decoded relative path, may contain ``..`` segments
        boundary: Wider root that may be entered instead of ``root``
            (e.g. the space when deliberately leaving the workflow)
        scope: Human-readable name of the boundary for the error message
        url_kind: Kind of URL being resolved, for the error message

    Returns:
        Normalized path relative to the mount point root

    Raises:
        ScopeViolationError: if the result is not within the boundary
    """
    limit = root if boundary is None else boundary
    resolved = normalize(root, suffix)
    if not is_within(resolved, limit):
        for_kind = f" for {url_kind} URLs" if url_kind else ""
        raise ScopeViolationError(
            f"Leaving {scope} is not allowed{for_kind}: "
            f"'{path_string(resolved)}' is not inside '{path_string(limit)}'",
            resolved=path_string(resolved),
            root=path_string(limit),
        )
    return resolved


def relativize(base: PurePosixPath, target: PurePosixPath) -> str:
    """
    Relative path leading from directory ``base`` to ``target``.

    Example:
        relativize(PurePosixPath("g/wf"), PurePosixPath("g/wf2")) -> "../wf2"
    """
    common = 0
    for left, right in zip(base.parts, target.parts):
        if left != right:
            break
        common += 1
    ups = [PARENT] * (len(base.parts) - common)
    return "/".join(ups + list(target.parts[common:]))


def is_hub_item_id(path: PurePosixPath) -> bool:
    """True for opaque Hub-ID references: a single segment starting with ``*``."""
    return len(path.parts) == 1 and path.parts[0].startswith("*")


def encode_path(path: str) -> str:
    """Percent-encode a slash-separated path for use in a URL."""
    return quote(path, safe=PATH_SAFE)


def local_path(root: PurePath, relative: PurePosixPath) -> PurePath:
    """Join a relative POSIX path onto a local directory of either flavor."""
    return root.joinpath(*relative.parts)


def to_file_url(path: PurePath) -> str:
    """
    Build a percent-encoded ``file:`` URL for an absolute local path.

    UNC paths (``\\\\server\\share\\...``) get four leading slashes so that
    the host survives a round trip through ``file:`` URL parsers.
    """
    if isinstance(path, PureWindowsPath):
        drive = path.drive
        rest = "/".join(path.parts[1:])
        if drive.startswith("\\\\"):
            share = drive.strip("\\").replace("\\", "/")
            location = f"{share}/{rest}" if rest else share
            return "file:////" + encode_path(location)
        return "file:///" + encode_path(f"{drive}/{rest}")
    return "file://" + encode_path(path.as_posix())


def repository_url(
    repository_address: str,
    path: PurePosixPath,
    version: Optional[ItemVersion] = None,
) -> str:
    """
    Build the REST repository URL requesting an item's data.

    The ``:data`` suffix is appended to the last path segment, or forms a
    synthetic segment of its own when the path is the repository root.
    """
    base = repository_address.rstrip("/")
    encoded = encode_path(path_string(path))
    return f"{base}/{encoded}{DATA_SUFFIX}{version_query(version)}"
