"""
Virtual node context resolver
=============================
Sandbox restrictions around the local workflow 'group/workflow' in /ws.
"""
from pathlib import PurePosixPath

import pytest

from knimeurl.urlresolve.context import NodeContext, Restriction, VirtualNodeContext
from knimeurl.urlresolve.errors import (
    DataAreaAccessDeniedError,
    NodeRelativeNotSupportedError,
    ScopeViolationError,
    VersioningNotSupportedError,
    WorkflowRelativeAccessDeniedError,
)
from knimeurl.urlresolve.factory import get_resolver
from knimeurl.urlresolve.local import AnalyticsPlatformLocalResolver
from knimeurl.urlresolve.virtual import VirtualNodeContextResolver

SANDBOX = PurePosixPath("/tmp/sandbox/data")


def _resolver(delegate, restrictions=(), data_area=None):
    return get_resolver(
        VirtualNodeContext(
            delegate=delegate,
            restrictions=frozenset(restrictions),
            virtual_data_area=data_area,
        )
    )


def test_factory_wraps_delegate(local_context):
    resolver = _resolver(local_context)

    assert isinstance(resolver, VirtualNodeContextResolver)
    assert isinstance(resolver.delegate, AnalyticsPlatformLocalResolver)
    assert resolver.context_paths() == resolver.delegate.context_paths()


def test_virtual_context_cannot_be_nested(local_context):
    with pytest.raises(ValueError):
        VirtualNodeContext(delegate=VirtualNodeContext(delegate=local_context))


def test_data_area_access_denied(local_context):
    """
    Given: A sandbox restricting data-area access without a virtual data area
    When: Resolving a workflow-relative URL into the data folder
    Then: DataAreaAccessDeniedError is reported
    """
    resolver = _resolver(local_context, [Restriction.WORKFLOW_DATA_AREA_ACCESS])

    resolution = resolver.resolve("knime://knime.workflow/data/input.csv")

    assert isinstance(resolution.error, DataAreaAccessDeniedError)


def test_data_area_restriction_leaves_other_urls_alone(local_context):
    resolver = _resolver(local_context, [Restriction.WORKFLOW_DATA_AREA_ACCESS])

    assert resolver.resolve("knime://knime.workflow/../other.csv").unwrap() == (
        "file:///ws/group/other.csv"
    )
    assert resolver.resolve("knime://knime.workflow/database/x.csv").unwrap() == (
        "file:///ws/group/workflow/database/x.csv"
    )


@pytest.mark.parametrize(
    "url,expected",
    [
        ("knime://knime.workflow/data/input.csv", "file:///tmp/sandbox/data/input.csv"),
        ("knime://knime.workflow/./data/sub/x.csv", "file:///tmp/sandbox/data/sub/x.csv"),
        ("knime://knime.workflow/data", "file:///tmp/sandbox/data"),
    ],
)
def test_virtual_data_area(local_context, url, expected):
    """
    Given: A sandbox with a virtual data area
    When: Resolving URLs into the workflow's data folder
    Then: They are redirected into the virtual data area
    """
    resolver = _resolver(
        local_context, [Restriction.WORKFLOW_DATA_AREA_ACCESS], data_area=SANDBOX
    )

    resolved = resolver.resolve_internal(url).unwrap()

    assert resolved.resource_url == expected
    assert resolved.cannot_be_relativized


def test_virtual_data_area_has_no_versions(local_context):
    resolver = _resolver(local_context, data_area=SANDBOX)

    with pytest.raises(VersioningNotSupportedError):
        resolver.resolve("knime://knime.workflow/data/x.csv?version=1").unwrap()


def test_workflow_relative_access_denied(local_context):
    resolver = _resolver(
        local_context, [Restriction.WORKFLOW_RELATIVE_RESOURCE_ACCESS], data_area=SANDBOX
    )

    resolution = resolver.resolve("knime://knime.workflow/../other.csv")

    assert isinstance(resolution.error, WorkflowRelativeAccessDeniedError)
    # the virtual data area stays reachable
    assert resolver.resolve("knime://knime.workflow/data/x.csv").unwrap() == (
        "file:///tmp/sandbox/data/x.csv"
    )


def test_data_area_escape_is_still_a_scope_violation(local_context):
    resolver = _resolver(local_context, data_area=SANDBOX)

    with pytest.raises(ScopeViolationError):
        resolver.resolve("knime://knime.workflow/data/../../x.csv").unwrap()


def test_other_url_kinds_are_delegated(local_context):
    resolver = _resolver(local_context, list(Restriction))

    assert resolver.resolve("knime://knime.mountpoint/group/x.csv").unwrap() == (
        "file:///ws/group/x.csv"
    )
    assert resolver.resolve("knime://LOCAL/group/x.csv").unwrap() == "file:///ws/group/x.csv"


def test_node_relative_is_never_supported(local_context):
    resolver = _resolver(local_context)
    node = NodeContext(directory=PurePosixPath("/ws/group/workflow/Learner_3"))

    resolution = resolver.resolve("knime://knime.node/model.bin", node)

    assert isinstance(resolution.error, NodeRelativeNotSupportedError)


def test_wraps_executors(hub_executor_context):
    resolver = _resolver(hub_executor_context, data_area=SANDBOX)

    assert resolver.resolve("knime://knime.workflow/data/x.csv").unwrap() == (
        "file:///tmp/sandbox/data/x.csv"
    )
    assert resolver.resolve("knime://knime.workflow/model/x.bin").unwrap() == (
        "file:///tmp/job/MyFlow/model/x.bin"
    )
