"""
Hub Executor Resolver
=====================
Resolves KNIME URLs for jobs running on a Hub executor.

Resolution: items are addressed through the Hub's REST repository
(``<repository>/<path>:data[?version=<v>]``). Workflow-relative URLs that stay
inside the workflow directory resolve to the executor's local copy.
"""
from __future__ import annotations

from pathlib import PurePosixPath
from typing import Optional

from knimeurl.urlresolve.context import HubExecutor
from knimeurl.urlresolve.paths import repository_url
from knimeurl.urlresolve.repository import RemoteLocationResolver
from knimeurl.urlresolve.resolved import ContextPaths
from knimeurl.urlresolve.version import ItemVersion


class HubExecutorResolver(RemoteLocationResolver):
    """Resolver for workflows executed on a Hub."""

    def __init__(self, context: HubExecutor):
        location = context.location
        super().__init__(
            mount_id=location.default_mount_id,
            paths=ContextPaths(location.space, location.workflow),
            supports_versions=True,
            local_workflow_path=context.executor.local_workflow_path,
            item_ids=location.item_paths(),
        )
        self._repository_address = location.repository_address

    def _item_url(self, target: PurePosixPath, version: Optional[ItemVersion]) -> str:
        return repository_url(self._repository_address, target, version)
