"""
Execution Contexts
==================
Immutable descriptors of the environment a workflow runs in. Exactly one
variant is active per workflow run; ``VirtualNodeContext`` always wraps one
of the five others.

Variants:
- AnalyticsPlatformLocal:    workflow stored in a local mount point (or loose on disk)
- AnalyticsPlatformTempCopy: remote Hub/Server workflow opened as a local temp copy
- HubExecutor:               job running on a Hub executor
- ServerExecutor:            job running on a (legacy) Server executor
- RemoteExecutorEditor:      local dialogs of a workflow running remotely
- VirtualNodeContext:        sandbox restrictions around one of the above
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath, PurePosixPath
from typing import Dict, FrozenSet, Optional, Union
from urllib.parse import urlsplit

from knimeurl.urlresolve.paths import decode_url_path


def _mount_relative(path: str) -> PurePosixPath:
    """Turn ``/Users/john/Private`` into a path relative to the mount point root."""
    return PurePosixPath(*[s for s in path.split("/") if s not in ("", ".")])


@dataclass(frozen=True)
class MountpointInfo:
    """A locally mounted mount point: its id and its root directory on disk."""

    mount_id: str
    root: PurePath


@dataclass(frozen=True)
class ExecutorInfo:
    """Where an executor keeps its local copy of the workflow."""

    local_workflow_path: PurePath


@dataclass(frozen=True)
class HubSpaceLocation:
    """
    Location of a workflow inside a Hub space.

    Attributes:
        repository_address: REST repository endpoint of the Hub
        workflow_path: Absolute path of the workflow on the Hub (``/Users/x/Space/wf``)
        default_mount_id: Mount id the Hub is known under by default
        space_path: Absolute path of the space containing the workflow
        space_item_id: Hub item id of the space
        workflow_item_id: Hub item id of the workflow
    """

    repository_address: str
    workflow_path: str
    default_mount_id: str
    space_path: str
    space_item_id: Optional[str] = None
    workflow_item_id: Optional[str] = None

    @property
    def workflow(self) -> PurePosixPath:
        return _mount_relative(self.workflow_path)

    @property
    def space(self) -> PurePosixPath:
        return _mount_relative(self.space_path)

    def item_paths(self) -> Dict[str, PurePosixPath]:
        """Known Hub item ids (without the leading ``*``) mapped to their paths."""
        ids = {}
        if self.space_item_id:
            ids[self.space_item_id.lstrip("*")] = self.space
        if self.workflow_item_id:
            ids[self.workflow_item_id.lstrip("*")] = self.workflow
        return ids


@dataclass(frozen=True)
class ServerLocation:
    """Location of a workflow in a Server repository (no spaces, no versions)."""

    repository_address: str
    workflow_path: str
    default_mount_id: str

    @property
    def workflow(self) -> PurePosixPath:
        return _mount_relative(self.workflow_path)

    @property
    def space(self) -> PurePosixPath:
        return PurePosixPath()


RestLocation = Union[HubSpaceLocation, ServerLocation]


@dataclass(frozen=True)
class MountpointUri:
    """A ``knime://<mount-id>/<path>`` URI naming a workflow by mount point."""

    mount_id: str
    path: PurePosixPath

    @classmethod
    def parse(cls, uri: str) -> "MountpointUri":
        parts = urlsplit(uri)
        if parts.scheme.lower() != "knime" or not parts.netloc:
            raise ValueError(f"Not a mountpoint URI: {uri}")
        return cls(mount_id=parts.netloc, path=_mount_relative(decode_url_path(parts.path)))


class Restriction(Enum):
    """Resource classes a virtual node context can deny."""

    WORKFLOW_RELATIVE_RESOURCE_ACCESS = "WORKFLOW_RELATIVE_RESOURCE_ACCESS"
    WORKFLOW_DATA_AREA_ACCESS = "WORKFLOW_DATA_AREA_ACCESS"


@dataclass(frozen=True)
class AnalyticsPlatformLocal:
    """Workflow opened from a local mount point, or loose on disk without one."""

    local_workflow_path: PurePath
    mountpoint: Optional[MountpointInfo] = None


@dataclass(frozen=True)
class AnalyticsPlatformTempCopy:
    """
    Remote workflow opened locally as a temporary copy.

    ``mountpoint_uri`` names the remote origin under its local mount id; it is
    None while the copy has no logical mount point.
    """

    local_workflow_path: PurePath
    rest_location: RestLocation
    mountpoint_uri: Optional[MountpointUri] = None


@dataclass(frozen=True)
class HubExecutor:
    executor: ExecutorInfo
    location: HubSpaceLocation


@dataclass(frozen=True)
class ServerExecutor:
    executor: ExecutorInfo
    location: ServerLocation


@dataclass(frozen=True)
class RemoteExecutorEditor:
    """Browsing the dialogs of a workflow that executes remotely."""

    mountpoint_uri: MountpointUri
    space_location: Optional[HubSpaceLocation] = None


@dataclass(frozen=True)
class VirtualNodeContext:
    """Sandbox around another context, e.g. for isolated execution."""

    delegate: "ExecutionContext"
    restrictions: FrozenSet[Restriction] = field(default_factory=frozenset)
    virtual_data_area: Optional[PurePath] = None

    def __post_init__(self):
        if isinstance(self.delegate, VirtualNodeContext):
            raise ValueError("A virtual node context cannot wrap another virtual node context")

    def is_restricted(self, restriction: Restriction) -> bool:
        return restriction in self.restrictions


ExecutionContext = Union[
    AnalyticsPlatformLocal,
    AnalyticsPlatformTempCopy,
    HubExecutor,
    ServerExecutor,
    RemoteExecutorEditor,
    VirtualNodeContext,
]


@dataclass(frozen=True)
class NodeContext:
    """
    The node a resolution call is made for.

    ``directory`` is the directory of the node's workflow on disk, None if the
    workflow has never been saved.
    """

    directory: Optional[PurePath] = None
