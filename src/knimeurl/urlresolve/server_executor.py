"""
Server Executor Resolver
========================
Resolves KNIME URLs for jobs running on a (legacy) Server executor.

Servers know neither spaces nor item versions: the space path is always
empty and any ``version`` parameter is rejected, whatever the URL kind.
"""
from __future__ import annotations

from pathlib import PurePosixPath
from typing import Optional

from knimeurl.urlresolve.context import ServerExecutor
from knimeurl.urlresolve.paths import repository_url
from knimeurl.urlresolve.repository import RemoteLocationResolver
from knimeurl.urlresolve.resolved import ContextPaths
from knimeurl.urlresolve.version import ItemVersion


class ServerExecutorResolver(RemoteLocationResolver):
    """Resolver for workflows executed on a Server."""

    def __init__(self, context: ServerExecutor):
        location = context.location
        super().__init__(
            mount_id=location.default_mount_id,
            paths=ContextPaths(location.space, location.workflow),
            supports_versions=False,
            local_workflow_path=context.executor.local_workflow_path,
        )
        self._repository_address = location.repository_address

    def _item_url(self, target: PurePosixPath, version: Optional[ItemVersion]) -> str:
        return repository_url(self._repository_address, target)
