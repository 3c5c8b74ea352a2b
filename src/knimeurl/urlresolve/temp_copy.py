"""
Temporary Copy Resolver
=======================
Resolves KNIME URLs for remote workflows (Hub or Server) that are opened in
the Analytics Platform as a local temporary copy.

Resolution:
- workflow-relative URLs inside the workflow -> the local temp copy
- other items -> ``knime://<local-mount-id>/<path>`` when the origin is
  mounted locally (the mount table finishes resolution), otherwise the
  repository's ``<path>:data`` URL
- Hub-ID references (``knime://<mount>/*<id>``) stay opaque

The temp copy is not what the repository holds, so reaching into the
current workflow's contents through any other URL kind is an error.
"""
from __future__ import annotations

from pathlib import PurePosixPath
from typing import Optional

from knimeurl.urlresolve.context import AnalyticsPlatformTempCopy, HubSpaceLocation
from knimeurl.urlresolve.errors import ScopeViolationError
from knimeurl.urlresolve.paths import path_string, repository_url
from knimeurl.urlresolve.repository import RemoteLocationResolver
from knimeurl.urlresolve.resolved import ContextPaths, ResolvedUrl
from knimeurl.urlresolve.url_type import build_knime_url
from knimeurl.urlresolve.version import ItemVersion


class AnalyticsPlatformTempCopyResolver(RemoteLocationResolver):
    """Resolver for local temporary copies of remote workflows."""

    def __init__(self, context: AnalyticsPlatformTempCopy):
        location = context.rest_location
        self._mountpoint_uri = context.mountpoint_uri
        known = [self._mountpoint_uri.mount_id] if self._mountpoint_uri is not None else []
        # the copy's own contents report the origin's default mount id as well
        super().__init__(
            mount_id=location.default_mount_id,
            paths=ContextPaths(location.space, location.workflow),
            supports_versions=isinstance(location, HubSpaceLocation),
            local_workflow_path=context.local_workflow_path,
            known_mount_ids=known,
            item_ids=location.item_paths() if isinstance(location, HubSpaceLocation) else None,
        )
        self._repository_address = location.repository_address

    def context_paths(self) -> Optional[ContextPaths]:
        # no logical mount point until the copy is associated with one
        if self._mountpoint_uri is None:
            return None
        return self._paths

    def _item_url(self, target: PurePosixPath, version: Optional[ItemVersion]) -> str:
        if self._mountpoint_uri is not None:
            return build_knime_url(self._mountpoint_uri.mount_id, path_string(target), version)
        return repository_url(self._repository_address, target, version)

    def _contents(
        self, url: str, target: PurePosixPath, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        raise ScopeViolationError(
            f"Accessing the current workflow's contents is not allowed: '{url}' points to "
            f"'{path_string(target)}' inside '{path_string(self._paths.workflow_path)}'",
            resolved=path_string(target),
            root=path_string(self._paths.workflow_path),
        )
