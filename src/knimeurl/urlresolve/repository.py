"""
Remote Location Resolver
========================
Shared logic of the resolvers whose workflow lives in a remote repository
(Hub space or Server): executors, temporary copies and the remote workflow
editor.

All URL kinds are normalized to a path below the repository's mount point
root and checked against the applicable boundary:
- mountpoint-absolute / -relative:  the mount point root
- space-relative:                   the Hub space (root on Servers)
- workflow-relative:                the workflow, or the space with a leading ``..``

Items inside the current workflow's directory are served from the local copy
of the workflow; everything else from the repository. How a repository item
is addressed is up to the subclass (``_item_url``).
"""
from __future__ import annotations

import logging
from abc import abstractmethod
from pathlib import PurePath, PurePosixPath
from typing import Dict, Iterable, Optional

from knimeurl.urlresolve.base import MOUNT_POINT_SCOPE, SPACE_SCOPE, BaseUrlResolver
from knimeurl.urlresolve.errors import VersioningNotSupportedError
from knimeurl.urlresolve.paths import (
    ROOT,
    append_and_contain,
    is_hub_item_id,
    is_within,
    leaves_scope,
    local_path,
    relative_to,
    to_file_url,
)
from knimeurl.urlresolve.resolved import ContextPaths, ResolvedUrl
from knimeurl.urlresolve.version import ItemVersion

logger = logging.getLogger(__name__)


class RemoteLocationResolver(BaseUrlResolver):
    """
    Base class for resolvers backed by a remote repository.

    Attributes:
        mount_id: Mount id reported in results (the location's default)
        supports_versions: True for Hub-backed locations
    """

    def __init__(
        self,
        mount_id: str,
        paths: ContextPaths,
        supports_versions: bool,
        local_workflow_path: Optional[PurePath] = None,
        known_mount_ids: Iterable[str] = (),
        item_ids: Optional[Dict[str, PurePosixPath]] = None,
    ):
        """
        Args:
            item_ids: Hub item ids (without ``*``) of the current space and
                workflow, mapped to their paths below the mount point root
        """
        self.mount_id = mount_id
        self.supports_versions = supports_versions
        self._paths = paths
        self._local_workflow_path = local_workflow_path
        self._known_mount_ids = frozenset(known_mount_ids) | {mount_id}
        self._item_ids = dict(item_ids or {})
        self._space_scope = SPACE_SCOPE if supports_versions else MOUNT_POINT_SCOPE

    # -------------------------------------------------------------------------
    # Subclass hooks
    # -------------------------------------------------------------------------

    @abstractmethod
    def _item_url(self, target: PurePosixPath, version: Optional[ItemVersion]) -> str:
        """Concrete URL of a repository item outside the current workflow."""

    def _contents_url(self, url: str, inside: PurePosixPath) -> str:
        """Concrete URL of an item inside the current workflow (local copy)."""
        return to_file_url(local_path(self._local_workflow_path, inside))

    def _contents(
        self, url: str, target: PurePosixPath, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        """Resolve a non-workflow-relative URL pointing into the workflow's contents."""
        return self._workflow_item(url, target, version)

    def _foreign_mount(
        self, url: str, mount_id: str, target: PurePosixPath, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        """Mount id unknown here: leave it to an external mount table."""
        logger.debug("Unknown mount id '%s', assuming an external mount table: %s", mount_id, url)
        return ResolvedUrl(
            mount_id=mount_id,
            path=target,
            version=version,
            path_inside_workflow=None,
            resource_url=url,
            cannot_be_relativized=True,
        )

    def _serves_local_copy(self) -> bool:
        return True

    # -------------------------------------------------------------------------
    # Contract
    # -------------------------------------------------------------------------

    def context_paths(self) -> Optional[ContextPaths]:
        return self._paths

    def resolve_mountpoint_absolute(
        self, url: str, mount_id: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        self._check_version(url, version)
        target = append_and_contain(
            ROOT, path, scope=MOUNT_POINT_SCOPE, url_kind="mountpoint absolute"
        )
        if mount_id not in self._known_mount_ids:
            return self._foreign_mount(url, mount_id, target, version)
        if self.supports_versions and is_hub_item_id(target):
            known = self._item_ids.get(target.parts[0].lstrip("*"))
            if known is not None:
                # the current space or workflow, referenced by id
                return self._item(url, known, version)
            return ResolvedUrl(
                mount_id=self.mount_id,
                path=target,
                version=version,
                path_inside_workflow=None,
                resource_url=self._item_url(target, version),
                cannot_be_relativized=True,
            )
        return self._item(url, target, version)

    def resolve_mountpoint_relative(
        self, url: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        self._check_version(url, version)
        target = append_and_contain(
            ROOT, path, scope=MOUNT_POINT_SCOPE, url_kind="mountpoint relative"
        )
        return self._item(url, target, version)

    def resolve_space_relative(
        self, url: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        self._check_version(url, version)
        target = append_and_contain(
            self._paths.space_path, path, scope=self._space_scope, url_kind="space relative"
        )
        return self._item(url, target, version)

    def resolve_workflow_relative(
        self, url: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        self._check_version(url, version)
        target = self._contain_workflow_relative(self._paths, path, self._space_scope)
        if not leaves_scope(path):
            return self._workflow_item(url, target, version)
        return self._item(url, target, version)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _check_version(self, url: str, version: Optional[ItemVersion]) -> None:
        if version is not None and not self.supports_versions:
            raise VersioningNotSupportedError(
                f"The workflow's location does not support item versions: '{url}'"
            )

    def _item(
        self, url: str, target: PurePosixPath, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        if self._in_workflow_contents(self._paths, target):
            return self._contents(url, target, version)
        return ResolvedUrl(
            mount_id=self.mount_id,
            path=target,
            version=version,
            path_inside_workflow=None,
            resource_url=self._item_url(target, version),
            cannot_be_relativized=not is_within(target, self._paths.space_path),
        )

    def _workflow_item(
        self, url: str, target: PurePosixPath, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        self._reject_version(url, version, "Items inside the current workflow have no versions")
        inside = relative_to(target, self._paths.workflow_path)
        return ResolvedUrl(
            mount_id=self.mount_id,
            path=target,
            version=None,
            path_inside_workflow=inside,
            resource_url=self._contents_url(url, inside),
        )
