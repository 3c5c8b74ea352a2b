"""
Analytics Platform Resolver (local)
===================================
Resolves KNIME URLs for workflows opened from the local file system.

Resolution: everything maps to ``file:`` URLs below the local mount point
root. Workflows without a mount point (e.g. extracted from a ``.knwf``
archive) have no context paths; their workflow-relative URLs resolve inside
the workflow's parent directory.
"""
from __future__ import annotations

import logging
from pathlib import PurePath, PurePosixPath
from typing import Optional

from knimeurl.urlresolve.base import MOUNT_POINT_SCOPE, BaseUrlResolver
from knimeurl.urlresolve.context import AnalyticsPlatformLocal
from knimeurl.urlresolve.errors import MissingContextError
from knimeurl.urlresolve.paths import ROOT, append_and_contain, local_path, to_file_url
from knimeurl.urlresolve.resolved import ContextPaths, ResolvedUrl
from knimeurl.urlresolve.version import ItemVersion

logger = logging.getLogger(__name__)

NO_VERSIONS = "Local mount points do not support item versions"


def relative_local_path(path: PurePath, root: PurePath) -> Optional[PurePosixPath]:
    """Lexical path of ``path`` below ``root``, None if it is not below it."""
    try:
        return PurePosixPath(*path.relative_to(root).parts)
    except ValueError:
        return None


class AnalyticsPlatformLocalResolver(BaseUrlResolver):
    """Resolver for workflows stored on the local file system."""

    def __init__(self, context: AnalyticsPlatformLocal):
        self._mountpoint = context.mountpoint
        workflow_dir = context.local_workflow_path

        relative = (
            relative_local_path(workflow_dir, self._mountpoint.root)
            if self._mountpoint is not None
            else None
        )
        if relative is not None:
            self._root = self._mountpoint.root
            self._paths: Optional[ContextPaths] = ContextPaths(ROOT, relative)
            self._workflow_paths = self._paths
            self._wider_scope = MOUNT_POINT_SCOPE
        else:
            # no usable mount point, the parent directory is the widest scope
            self._root = workflow_dir.parent
            self._paths = None
            self._workflow_paths = ContextPaths(ROOT, PurePosixPath(workflow_dir.name))
            self._wider_scope = "the workflow's parent directory"

    @property
    def mount_id(self) -> Optional[str]:
        return self._mountpoint.mount_id if self._mountpoint is not None else None

    def context_paths(self) -> Optional[ContextPaths]:
        return self._paths

    def resolve_mountpoint_absolute(
        self, url: str, mount_id: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        target = append_and_contain(
            ROOT, path, scope=MOUNT_POINT_SCOPE, url_kind="mountpoint absolute"
        )
        if mount_id != self.mount_id:
            logger.debug("Mount id '%s' is resolved by the mount table: %s", mount_id, url)
            return ResolvedUrl(
                mount_id=mount_id,
                path=target,
                version=version,
                path_inside_workflow=None,
                resource_url=url,
                cannot_be_relativized=True,
            )
        return self._local_item(url, target, version)

    def resolve_mountpoint_relative(
        self, url: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        return self._resolve_in_mountpoint(url, path, version, "mountpoint relative")

    def resolve_space_relative(
        self, url: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        # local mount points have no spaces, the mount point root takes their role
        return self._resolve_in_mountpoint(url, path, version, "space relative")

    def resolve_workflow_relative(
        self, url: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        target = self._contain_workflow_relative(self._workflow_paths, path, self._wider_scope)
        if self._paths is not None:
            return self._local_item(url, target, version)

        self._reject_version(url, version, NO_VERSIONS)
        inside = self._inside_workflow(self._workflow_paths, target)
        return ResolvedUrl(
            mount_id=None,
            path=None,
            version=None,
            path_inside_workflow=inside,
            resource_url=to_file_url(local_path(self._root, target)),
            cannot_be_relativized=inside is None,
        )

    def _resolve_in_mountpoint(
        self, url: str, path: str, version: Optional[ItemVersion], url_kind: str
    ) -> ResolvedUrl:
        if self._mountpoint is None:
            raise MissingContextError(
                f"The workflow is not stored in a mount point, cannot resolve '{url}'"
            )
        target = append_and_contain(ROOT, path, scope=MOUNT_POINT_SCOPE, url_kind=url_kind)
        return self._local_item(url, target, version)

    def _local_item(
        self, url: str, target: PurePosixPath, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        self._reject_version(url, version, NO_VERSIONS)
        return ResolvedUrl(
            mount_id=self.mount_id,
            path=target,
            version=None,
            path_inside_workflow=self._inside_workflow(self._paths, target),
            resource_url=to_file_url(local_path(self._mountpoint.root, target)),
        )
