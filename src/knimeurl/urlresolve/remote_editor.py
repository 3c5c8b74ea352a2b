"""
Remote Workflow Editor Resolver
===============================
Resolves KNIME URLs while browsing the dialogs of a workflow that executes on
a remote executor. There is no local copy of the workflow: every item is
addressed as ``knime://<mount-id>/<path>`` and left to the local mount table.

Node-relative URLs are rejected, no local node directory exists here.
"""
from __future__ import annotations

from pathlib import PurePosixPath
from typing import Optional

from knimeurl.urlresolve.context import NodeContext, RemoteExecutorEditor
from knimeurl.urlresolve.errors import NodeRelativeNotSupportedError, UnknownMountIdError
from knimeurl.urlresolve.paths import ROOT, path_string
from knimeurl.urlresolve.repository import RemoteLocationResolver
from knimeurl.urlresolve.resolved import ContextPaths, ResolvedUrl
from knimeurl.urlresolve.url_type import build_knime_url
from knimeurl.urlresolve.version import ItemVersion


class RemoteExecutorEditorResolver(RemoteLocationResolver):
    """Resolver for the remote workflow editor."""

    def __init__(self, context: RemoteExecutorEditor):
        self._mountpoint_uri = context.mountpoint_uri
        space_location = context.space_location
        space = space_location.space if space_location is not None else ROOT
        mount_id = (
            space_location.default_mount_id
            if space_location is not None
            else self._mountpoint_uri.mount_id
        )
        super().__init__(
            mount_id=mount_id,
            paths=ContextPaths(space, self._mountpoint_uri.path),
            supports_versions=space_location is not None,
            known_mount_ids=[self._mountpoint_uri.mount_id],
            item_ids=space_location.item_paths() if space_location is not None else None,
        )

    def _serves_local_copy(self) -> bool:
        # contents are addressed through the mount table like any other item
        return False

    def _item_url(self, target: PurePosixPath, version: Optional[ItemVersion]) -> str:
        return build_knime_url(self._mountpoint_uri.mount_id, path_string(target), version)

    def _contents_url(self, url: str, inside: PurePosixPath) -> str:
        return self._item_url(self._paths.workflow_path.joinpath(*inside.parts), None)

    def _foreign_mount(
        self, url: str, mount_id: str, target: PurePosixPath, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        raise UnknownMountIdError(
            f"Mount id '{mount_id}' does not belong to the remote workflow's mount point "
            f"'{self._mountpoint_uri.mount_id}': '{url}'"
        )

    def resolve_node_relative(
        self, url: str, path: str, node: Optional[NodeContext]
    ) -> ResolvedUrl:
        raise NodeRelativeNotSupportedError(
            f"Node-relative URLs cannot be resolved in the remote workflow editor: '{url}'"
        )
