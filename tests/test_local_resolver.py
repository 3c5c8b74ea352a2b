"""
Analytics Platform (local) resolver
===================================
Workflow 'group/workflow' in the local mount point 'LOCAL' rooted at /ws.
"""
from pathlib import PurePosixPath

import pytest

from knimeurl.urlresolve.context import NodeContext
from knimeurl.urlresolve.errors import (
    MissingContextError,
    ScopeViolationError,
    UnrecognizedUrlError,
    VersioningNotSupportedError,
    WorkflowNotSavedError,
)
from knimeurl.urlresolve.factory import get_resolver
from knimeurl.urlresolve.local import AnalyticsPlatformLocalResolver
from knimeurl.urlresolve.resolved import ContextPaths
from knimeurl.urlresolve.url_type import KnimeUrlType

NODE = NodeContext(directory=PurePosixPath("/ws/group/workflow/Learner_3"))


def test_factory_selects_local_resolver(local_resolver):
    assert isinstance(local_resolver, AnalyticsPlatformLocalResolver)
    assert local_resolver.context_paths() == ContextPaths(
        PurePosixPath(), PurePosixPath("group/workflow")
    )


@pytest.mark.parametrize(
    "url,expected",
    [
        ("knime://knime.workflow/data/in.csv", "file:///ws/group/workflow/data/in.csv"),
        ("knime://knime.workflow/../other/x.csv", "file:///ws/group/other/x.csv"),
        ("knime://knime.workflow/../../x.csv", "file:///ws/x.csv"),
        ("knime://knime.mountpoint/group/x.csv", "file:///ws/group/x.csv"),
        ("knime://knime.space/group/x.csv", "file:///ws/group/x.csv"),
        ("knime://LOCAL/group/x.csv", "file:///ws/group/x.csv"),
        ("knime://LOCAL/group/x.csv?version=current-state", "file:///ws/group/x.csv"),
        ("knime://knime.mountpoint/a%20b/%C3%B6.csv", "file:///ws/a%20b/%C3%B6.csv"),
    ],
)
def test_resolves_to_local_files(local_resolver, url, expected):
    assert local_resolver.resolve(url).unwrap() == expected


def test_resolved_url_record(local_resolver):
    """
    Given: A workflow-relative URL into the workflow's data folder
    When: Resolving it internally
    Then: Path, path inside the workflow and mount id are reported
    """
    resolved = local_resolver.resolve_internal("knime://knime.workflow/data/in.csv").unwrap()

    assert resolved.mount_id == "LOCAL"
    assert resolved.path == PurePosixPath("group/workflow/data/in.csv")
    assert resolved.path_inside_workflow == PurePosixPath("data/in.csv")
    assert resolved.version is None
    assert resolved.can_be_relativized


def test_foreign_mount_id_is_passed_through(local_resolver):
    url = "knime://Other-Mount/x.csv"

    resolved = local_resolver.resolve_internal(url).unwrap()

    assert resolved.resource_url == url
    assert resolved.mount_id == "Other-Mount"
    assert resolved.cannot_be_relativized


@pytest.mark.parametrize(
    "url,message",
    [
        ("knime://knime.workflow/../../../x.csv", "Leaving the mount point is not allowed"),
        ("knime://knime.workflow/data/../../x.csv", "Leaving the workflow is not allowed"),
        ("knime://knime.mountpoint/../x.csv", "Leaving the mount point is not allowed"),
        ("knime://LOCAL/../x.csv", "Leaving the mount point is not allowed"),
    ],
)
def test_scope_violations(local_resolver, url, message):
    resolution = local_resolver.resolve(url)

    assert resolution.is_broken
    assert isinstance(resolution.error, ScopeViolationError)
    assert message in str(resolution.error)


@pytest.mark.parametrize(
    "url",
    [
        "knime://knime.mountpoint/x.csv?version=2",
        "knime://knime.workflow/data/x.csv?version=most-recent",
        "knime://LOCAL/x.csv?version=1",
    ],
)
def test_local_items_have_no_versions(local_resolver, url):
    with pytest.raises(VersioningNotSupportedError):
        local_resolver.resolve(url).unwrap()


def test_not_a_knime_url(local_resolver):
    resolution = local_resolver.resolve("file:///ws/x.csv")

    assert isinstance(resolution.error, UnrecognizedUrlError)
    assert resolution.url_type is None


def test_node_relative(local_resolver):
    resolution = local_resolver.resolve("knime://knime.node/model.bin", NODE)

    assert resolution.unwrap() == "file:///ws/group/workflow/Learner_3/model.bin"
    assert resolution.url_type is KnimeUrlType.NODE_RELATIVE


def test_node_relative_before_save(local_resolver):
    """
    Given: A workflow that was never saved
    When: Resolving a node-relative URL that also tries to leave the node
    Then: WorkflowNotSavedError is reported, not a scope or file system error
    """
    resolution = local_resolver.resolve("knime://knime.node/../model.bin", NodeContext())

    assert isinstance(resolution.error, WorkflowNotSavedError)
    assert "Workflow must be saved" in str(resolution.error)


def test_node_relative_cannot_leave_node(local_resolver):
    with pytest.raises(ScopeViolationError, match="Leaving the workflow is not allowed"):
        local_resolver.resolve("knime://knime.node/../model.bin", NODE).unwrap()


def test_node_relative_needs_node(local_resolver):
    with pytest.raises(MissingContextError):
        local_resolver.resolve("knime://knime.node/model.bin").unwrap()


def test_node_relative_rejects_versions(local_resolver):
    with pytest.raises(VersioningNotSupportedError):
        local_resolver.resolve("knime://knime.node/model.bin?version=1", NODE).unwrap()


def test_node_relative_accepts_current_state(local_resolver):
    url = "knime://knime.node/model.bin?version=current-state"

    assert local_resolver.resolve(url, NODE).unwrap() == (
        "file:///ws/group/workflow/Learner_3/model.bin"
    )


def test_unc_mount_point(unc_context):
    resolver = get_resolver(unc_context)

    assert resolver.resolve("knime://knime.workflow/data/x.csv").unwrap() == (
        "file:////UncMount/Share/ws/group/workflow/data/x.csv"
    )


class TestKnwfWorkflow:
    """Workflow without a mount point, e.g. extracted from a .knwf archive."""

    @pytest.fixture
    def resolver(self, knwf_context):
        return get_resolver(knwf_context)

    def test_no_context_paths(self, resolver):
        assert resolver.context_paths() is None

    def test_workflow_relative(self, resolver):
        assert resolver.resolve("knime://knime.workflow/data/x.csv").unwrap() == (
            "file:///tmp/knwf/MyFlow/data/x.csv"
        )
        assert resolver.resolve("knime://knime.workflow/../sibling.csv").unwrap() == (
            "file:///tmp/knwf/sibling.csv"
        )

    def test_parent_directory_is_the_limit(self, resolver):
        with pytest.raises(ScopeViolationError, match="parent directory"):
            resolver.resolve("knime://knime.workflow/../../x.csv").unwrap()

    @pytest.mark.parametrize(
        "url", ["knime://knime.mountpoint/x.csv", "knime://knime.space/x.csv"]
    )
    def test_mount_relative_urls_need_a_mount_point(self, resolver, url):
        with pytest.raises(MissingContextError):
            resolver.resolve(url).unwrap()

    def test_only_the_input_link_is_offered(self, resolver):
        links = resolver.change_link_type("knime://knime.workflow/../sibling.csv").unwrap()

        assert links == {KnimeUrlType.WORKFLOW_RELATIVE: "knime://knime.workflow/../sibling.csv"}
