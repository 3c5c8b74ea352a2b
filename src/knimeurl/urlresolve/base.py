"""
KNIME URL Resolver Contract
===========================
Abstract base of all concrete resolvers plus the operations every resolver
shares.

Each concrete resolver implements one method per URL category:
- resolve_mountpoint_absolute(url, mount_id, path, version)
- resolve_mountpoint_relative(url, path, version)
- resolve_space_relative(url, path, version)
- resolve_workflow_relative(url, path, version)
- resolve_node_relative(url, path, node)
and ``context_paths()``. The public operations classify the URL, route it
to the matching method and convert raised ``ResolutionError``s into
``Resolution`` records:
- resolve_internal(url)   -> Resolution(value=ResolvedUrl)
- resolve(url)            -> Resolution(value=<resource URL>)
- resolve_to_absolute(url)-> Resolution(value=<knime://mount-id/... URL or None>)
- change_link_type(url)   -> Resolution(value={KnimeUrlType: <knime URL>})
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import PurePosixPath
from typing import Dict, Optional

from knimeurl.urlresolve.context import NodeContext
from knimeurl.urlresolve.errors import (
    MissingContextError,
    ResolutionError,
    VersioningNotSupportedError,
    WorkflowNotSavedError,
)
from knimeurl.urlresolve.paths import (
    PARENT,
    ROOT,
    append_and_contain,
    is_strictly_within,
    is_within,
    leaves_scope,
    local_path,
    path_string,
    relative_to,
    relativize,
    to_file_url,
)
from knimeurl.urlresolve.resolved import ContextPaths, Resolution, ResolvedUrl
from knimeurl.urlresolve.url_type import KnimeUrlType, ParsedKnimeUrl, build_knime_url, classify
from knimeurl.urlresolve.version import ItemVersion, is_versioned

MOUNT_POINT_SCOPE = "the mount point"
SPACE_SCOPE = "the Hub space"
WORKFLOW_SCOPE = "the workflow"


class BaseUrlResolver(ABC):
    """Base class for KNIME URL resolvers with the shared operations."""

    # -------------------------------------------------------------------------
    # Contract
    # -------------------------------------------------------------------------

    @abstractmethod
    def context_paths(self) -> Optional[ContextPaths]:
        """Space and workflow path of the current workflow, if it has a mount point."""

    @abstractmethod
    def resolve_mountpoint_absolute(
        self, url: str, mount_id: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        """Resolve ``knime://<mount-id>/<path>``."""

    @abstractmethod
    def resolve_mountpoint_relative(
        self, url: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        """Resolve ``knime://knime.mountpoint/<path>``."""

    @abstractmethod
    def resolve_space_relative(
        self, url: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        """Resolve ``knime://knime.space/<path>``."""

    @abstractmethod
    def resolve_workflow_relative(
        self, url: str, path: str, version: Optional[ItemVersion]
    ) -> ResolvedUrl:
        """Resolve ``knime://knime.workflow/<path>``."""

    def resolve_node_relative(
        self, url: str, path: str, node: Optional[NodeContext]
    ) -> ResolvedUrl:
        """
        Resolve ``knime://knime.node/<path>`` against the node's directory.

        The resolved file has to stay inside the directory, a leading ``..``
        does not widen the scope.
        """
        if node is None:
            raise MissingContextError(f"No node context available to resolve '{url}'")
        if node.directory is None:
            raise WorkflowNotSavedError(
                f"Workflow must be saved before node-relative URLs can be used: '{url}'"
            )
        inner = append_and_contain(ROOT, path, scope=WORKFLOW_SCOPE, url_kind="node relative")
        return ResolvedUrl(
            mount_id=None,
            path=None,
            version=None,
            path_inside_workflow=None,
            resource_url=to_file_url(local_path(node.directory, inner)),
            cannot_be_relativized=True,
        )

    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------

    def resolve_internal(self, url: str, node: Optional[NodeContext] = None) -> Resolution:
        """
        Resolve a KNIME URL to a full ``ResolvedUrl`` record.

        Args:
            url: The KNIME URL
            node: Node the call is made for, needed for node-relative URLs

        Returns:
            Resolution whose value is the ResolvedUrl
        """
        try:
            parsed = classify(url)
        except ResolutionError as e:
            return Resolution(url=url, error=e)

        try:
            resolved = self._dispatch(parsed, node)
        except ResolutionError as e:
            return Resolution(url=url, url_type=parsed.url_type, error=e)

        return Resolution(url=url, url_type=parsed.url_type, value=resolved)

    def resolve(self, url: str, node: Optional[NodeContext] = None) -> Resolution:
        """Resolve a KNIME URL to the concrete URL the resource can be fetched from."""
        resolution = self.resolve_internal(url, node)
        if resolution.is_broken:
            return resolution
        return Resolution(
            url=url, url_type=resolution.url_type, value=resolution.value.resource_url
        )

    def resolve_to_absolute(self, url: str, node: Optional[NodeContext] = None) -> Resolution:
        """
        Convert a KNIME URL into its mountpoint-absolute form.

        The value is None if the item has no stable absolute address, e.g.
        because it lies inside the current workflow's directory.
        """
        resolution = self.resolve_internal(url, node)
        if resolution.is_broken:
            return resolution
        absolute = self._absolute_url(url, resolution.url_type, resolution.value)
        return Resolution(url=url, url_type=resolution.url_type, value=absolute)

    def change_link_type(self, url: str, node: Optional[NodeContext] = None) -> Resolution:
        """
        Compute every KNIME URL form the referenced item can be addressed with.

        Node-relative URLs are only offered for node-relative input. The
        relative forms need context paths and a relativizable result.

        Returns:
            Resolution whose value maps KnimeUrlType to a KNIME URL
        """
        resolution = self.resolve_internal(url, node)
        if resolution.is_broken:
            return resolution

        url_type = resolution.url_type
        resolved: ResolvedUrl = resolution.value
        links: Dict[KnimeUrlType, str] = {}

        if url_type is KnimeUrlType.NODE_RELATIVE:
            links[KnimeUrlType.NODE_RELATIVE] = url
            return Resolution(url=url, url_type=url_type, value=links)

        absolute = self._absolute_url(url, url_type, resolved)
        if absolute is not None:
            links[KnimeUrlType.MOUNTPOINT_ABSOLUTE] = absolute

        paths = self.context_paths()
        if paths is not None and resolved.can_be_relativized and resolved.path is not None:
            links.update(self._relative_links(paths, resolved))

        links.setdefault(url_type, url)
        return Resolution(url=url, url_type=url_type, value=links)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _dispatch(self, parsed: ParsedKnimeUrl, node: Optional[NodeContext]) -> ResolvedUrl:
        url_type = parsed.url_type
        if url_type is KnimeUrlType.MOUNTPOINT_ABSOLUTE:
            return self.resolve_mountpoint_absolute(
                parsed.url, parsed.mount_id, parsed.path, parsed.version
            )
        if url_type is KnimeUrlType.MOUNTPOINT_RELATIVE:
            return self.resolve_mountpoint_relative(parsed.url, parsed.path, parsed.version)
        if url_type is KnimeUrlType.HUB_SPACE_RELATIVE:
            return self.resolve_space_relative(parsed.url, parsed.path, parsed.version)
        if url_type is KnimeUrlType.WORKFLOW_RELATIVE:
            return self.resolve_workflow_relative(parsed.url, parsed.path, parsed.version)
        if url_type is KnimeUrlType.NODE_RELATIVE:
            self._reject_version(
                parsed.url, parsed.version, "Node-relative URLs cannot specify an item version"
            )
            return self.resolve_node_relative(parsed.url, parsed.path, node)
        raise AssertionError(f"Unhandled KNIME URL type: {url_type}")

    def _serves_local_copy(self) -> bool:
        """True if the workflow's own directory is a copy of what the repository holds."""
        return False

    def _is_local_copy(self, resolved: ResolvedUrl) -> bool:
        """True if ``resolved`` was served from the current workflow's own directory."""
        inside = resolved.path_inside_workflow
        if inside is None:
            return False
        return bool(inside.parts) or self._serves_local_copy()

    def _absolute_url(
        self, url: str, url_type: Optional[KnimeUrlType], resolved: ResolvedUrl
    ) -> Optional[str]:
        if url_type is KnimeUrlType.MOUNTPOINT_ABSOLUTE:
            return url
        if resolved.mount_id is None or resolved.path is None:
            return None
        if self._is_local_copy(resolved):
            return None
        return build_knime_url(resolved.mount_id, path_string(resolved.path), resolved.version)

    def _relative_links(
        self, paths: ContextPaths, resolved: ResolvedUrl
    ) -> Dict[KnimeUrlType, str]:
        path = resolved.path
        version = resolved.version
        if is_strictly_within(path, paths.workflow_path) or self._is_local_copy(resolved):
            # the workflow's own directory only has a workflow-relative address
            return {
                KnimeUrlType.WORKFLOW_RELATIVE: build_knime_url(
                    KnimeUrlType.WORKFLOW_RELATIVE.authority,
                    path_string(relative_to(path, paths.workflow_path)),
                    version,
                )
            }

        if path == paths.workflow_path and path.parts and resolved.path_inside_workflow is None:
            # the workflow itself, addressed from outside as an item
            from_workflow = f"{PARENT}/{path.name}"
        else:
            from_workflow = relativize(paths.workflow_path, path)
        links = {
            KnimeUrlType.MOUNTPOINT_RELATIVE: build_knime_url(
                KnimeUrlType.MOUNTPOINT_RELATIVE.authority, path_string(path), version
            ),
            KnimeUrlType.WORKFLOW_RELATIVE: build_knime_url(
                KnimeUrlType.WORKFLOW_RELATIVE.authority, from_workflow, version
            ),
        }
        if is_within(path, paths.space_path):
            links[KnimeUrlType.HUB_SPACE_RELATIVE] = build_knime_url(
                KnimeUrlType.HUB_SPACE_RELATIVE.authority,
                path_string(relative_to(path, paths.space_path)),
                version,
            )
        return links

    @staticmethod
    def _contain_workflow_relative(
        paths: ContextPaths, path: str, wider_scope: str
    ) -> PurePosixPath:
        """
        Resolve a workflow-relative path to a path below the mount point root.

        Without a leading ``..`` the workflow is the boundary; with it the
        space (or the mount point root if there is no space) is.
        """
        if leaves_scope(path):
            return append_and_contain(
                paths.workflow_path,
                path,
                boundary=paths.space_path,
                scope=wider_scope,
                url_kind="workflow relative",
            )
        return append_and_contain(
            paths.workflow_path, path, scope=WORKFLOW_SCOPE, url_kind="workflow relative"
        )

    @staticmethod
    def _inside_workflow(
        paths: Optional[ContextPaths], path: PurePosixPath
    ) -> Optional[PurePosixPath]:
        """Path relative to the workflow root if ``path`` lies within the workflow."""
        if paths is None or not is_within(path, paths.workflow_path):
            return None
        return relative_to(path, paths.workflow_path)

    @staticmethod
    def _in_workflow_contents(paths: Optional[ContextPaths], path: PurePosixPath) -> bool:
        return paths is not None and is_strictly_within(path, paths.workflow_path)

    @staticmethod
    def _reject_version(url: str, version: Optional[ItemVersion], reason: str) -> None:
        if is_versioned(version):
            raise VersioningNotSupportedError(f"{reason}: '{url}'")
