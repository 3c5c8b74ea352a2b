"""
Virtual Node Context Resolver
=============================
Decorates another resolver with the restrictions of a virtual node context
(a sandbox used e.g. for isolated execution).

- all URL kinds except workflow- and node-relative go to the wrapped resolver
- workflow-relative URLs into the ``data`` area are redirected to the
  sandbox's virtual data area, or rejected if data-area access is restricted
- other workflow-relative URLs are rejected if workflow-relative access is
  restricted
- node-relative URLs are always rejected
"""
from __future__ import annotations

from pathlib import PurePosixPath
from typing import Optional

from knimeurl.urlresolve.base import WORKFLOW_SCOPE, BaseUrlResolver
from knimeurl.urlresolve.context import NodeContext, Restriction, VirtualNodeContext
from knimeurl.urlresolve.errors import (
    DataAreaAccessDeniedError,
    NodeRelativeNotSupportedError,
    WorkflowRelativeAccessDeniedError,
)
from knimeurl.urlresolve.paths import (
    ROOT,
    append_and_contain,
    leaves_scope,
    local_path,
    relative_to,
    to_file_url,
)
from knimeurl.urlresolve.resolved import ContextPaths, ResolvedUrl
from knimeurl.urlresolve.version import ItemVersion

DATA_AREA = PurePosixPath("data")


class VirtualNodeContextResolver(BaseUrlResolver):
    """Resolver wrapping another one with sandbox restrictions."""

    def __init__(self, context: VirtualNodeContext, delegate: BaseUrlResolver):
        self._context = context
        self._delegate = delegate

    @property
    def delegate(self) -> BaseUrlResolver:
        return self._delegate

    def context_paths(self) -> Optional[ContextPaths]:
        return self._delegate.context_paths()

    def _serves_local_copy(self) -> bool:
        return self._delegate._serves_local_copy()

    def resolve_mountpoint_absolute(
        self, url: str, mount_id: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        return self._delegate.resolve_mountpoint_absolute(url, mount_id, path, version)

    def resolve_mountpoint_relative(
        self, url: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        return self._delegate.resolve_mountpoint_relative(url, path, version)

    def resolve_space_relative(
        self, url: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        return self._delegate.resolve_space_relative(url, path, version)

    def resolve_workflow_relative(
        self, url: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        inner = self._data_area_path(path)
        if inner is not None:
            area = self._context.virtual_data_area
            if area is not None:
                self._reject_version(url, version, "The virtual data area has no versions")
                return ResolvedUrl(
                    mount_id=None,
                    path=None,
                    version=None,
                    path_inside_workflow=inner,
                    resource_url=to_file_url(local_path(area, relative_to(inner, DATA_AREA))),
                    cannot_be_relativized=True,
                )
            if self._context.is_restricted(Restriction.WORKFLOW_DATA_AREA_ACCESS):
                raise DataAreaAccessDeniedError(
                    f"Access to the workflow data area is restricted in this node context: '{url}'"
                )

        if self._context.is_restricted(Restriction.WORKFLOW_RELATIVE_RESOURCE_ACCESS):
            raise WorkflowRelativeAccessDeniedError(
                f"Workflow-relative resources cannot be accessed in this node context: '{url}'"
            )
        return self._delegate.resolve_workflow_relative(url, path, version)

    def resolve_node_relative(
        self, url: str, path: str, node: Optional[NodeContext]
    ) -> ResolvedUrl:
        raise NodeRelativeNotSupportedError(
            f"Node-relative URLs cannot be resolved in a virtual node context: '{url}'"
        )

    @staticmethod
    def _data_area_path(path: str) -> Optional[PurePosixPath]:
        """Normalized path inside the workflow if it lies in the data area."""
        if leaves_scope(path):
            return None
        inner = append_and_contain(ROOT, path, scope=WORKFLOW_SCOPE, url_kind="workflow relative")
        if inner.parts[:1] == DATA_AREA.parts:
            return inner
        return None
