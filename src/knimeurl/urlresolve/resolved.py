"""
Resolution Results
==================
Immutable records produced by the resolvers.

- ContextPaths: space and workflow path of the current workflow
- ResolvedUrl:  full result of resolving one KNIME URL
- Resolution:   value-or-error envelope returned by the public operations
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Dict, Optional

from knimeurl.urlresolve.errors import ResolutionError
from knimeurl.urlresolve.paths import is_within, path_string
from knimeurl.urlresolve.url_type import KnimeUrlType
from knimeurl.urlresolve.version import ItemVersion, format_version


@dataclass(frozen=True)
class ContextPaths:
    """
    Location of the current workflow relative to its mount point root.

    ``space_path`` is a prefix of ``workflow_path`` when the workflow lives in
    a Hub space, and empty otherwise.
    """

    space_path: PurePosixPath
    workflow_path: PurePosixPath

    def __post_init__(self):
        if not is_within(self.workflow_path, self.space_path):
            raise ValueError(
                f"Workflow '{path_string(self.workflow_path)}' is not inside "
                f"space '{path_string(self.space_path)}'"
            )


@dataclass(frozen=True)
class ResolvedUrl:
    """
    Result of resolving a KNIME URL.

    Attributes:
        mount_id: Mount id of the referenced item's mount point, if known
        path: Path from the mount point root to the referenced item
        version: Item version requested by the URL
        path_inside_workflow: Path from the current workflow's root, only for
            items inside the current workflow's directory
        resource_url: Concrete URL the item can be fetched from
        cannot_be_relativized: True if the reference crosses mount points or
            spaces, or is an opaque Hub-ID reference
    """

    mount_id: Optional[str]
    path: Optional[PurePosixPath]
    version: Optional[ItemVersion]
    path_inside_workflow: Optional[PurePosixPath]
    resource_url: str
    cannot_be_relativized: bool = False

    @property
    def can_be_relativized(self) -> bool:
        return not self.cannot_be_relativized

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "mount_id": self.mount_id,
            "path": path_string(self.path) if self.path is not None else None,
            "version": format_version(self.version),
            "path_inside_workflow": (
                path_string(self.path_inside_workflow)
                if self.path_inside_workflow is not None
                else None
            ),
            "resource_url": self.resource_url,
            "cannot_be_relativized": self.cannot_be_relativized,
        }


@dataclass(frozen=True)
class Resolution:
    """
    Outcome of one resolver operation: either a value or an error.

    Attributes:
        url: The KNIME URL that was resolved
        url_type: Category of the URL, None if it could not be classified
        value: Operation-specific result (may legitimately be None)
        error: The error that stopped the resolution
    """

    url: str
    url_type: Optional[KnimeUrlType] = None
    value: Any = None
    error: Optional[ResolutionError] = None

    @property
    def is_resolved(self) -> bool:
        """True if the operation completed without error."""
        return self.error is None

    @property
    def is_broken(self) -> bool:
        """True if the operation failed."""
        return self.error is not None

    def unwrap(self) -> Any:
        """Return the value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value
