"""
Contextless Resolver
====================
Used when no workflow context is available at all. Mountpoint-absolute URLs
pass through unchanged for an external mount table; every other kind except
node-relative needs a workflow and fails.
"""
from __future__ import annotations

from typing import Optional

from knimeurl.urlresolve.base import MOUNT_POINT_SCOPE, BaseUrlResolver
from knimeurl.urlresolve.errors import MissingContextError
from knimeurl.urlresolve.paths import ROOT, append_and_contain
from knimeurl.urlresolve.resolved import ContextPaths, ResolvedUrl
from knimeurl.urlresolve.version import ItemVersion


class ContextlessResolver(BaseUrlResolver):
    """Resolver without any workflow context."""

    def context_paths(self) -> Optional[ContextPaths]:
        return None

    def resolve_mountpoint_absolute(
        self, url: str, mount_id: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        target = append_and_contain(
            ROOT, path, scope=MOUNT_POINT_SCOPE, url_kind="mountpoint absolute"
        )
        return ResolvedUrl(
            mount_id=mount_id,
            path=target,
            version=version,
            path_inside_workflow=None,
            resource_url=url,
            cannot_be_relativized=True,
        )

    def resolve_mountpoint_relative(
        self, url: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        raise self._no_context(url)

    def resolve_space_relative(
        self, url: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        raise self._no_context(url)

    def resolve_workflow_relative(
        self, url: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        raise self._no_context(url)

    @staticmethod
    def _no_context(url: str) -> MissingContextError:
        return MissingContextError(f"No context available to resolve relative URL '{url}'")
