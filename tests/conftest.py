"""
Shared fixtures for the KNIME URL resolver tests.

One fixture per execution context. Local paths are pure paths so the tests
never touch the file system.
"""
from pathlib import PurePosixPath, PureWindowsPath

import pytest

from knimeurl.urlresolve.context import (
    AnalyticsPlatformLocal,
    AnalyticsPlatformTempCopy,
    ExecutorInfo,
    HubExecutor,
    HubSpaceLocation,
    MountpointInfo,
    MountpointUri,
    RemoteExecutorEditor,
    ServerExecutor,
    ServerLocation,
)
from knimeurl.urlresolve.factory import get_resolver

HUB_REPOSITORY = "https://api.hub.example.com/repository"
SERVER_REPOSITORY = "https://server.example.com/knime/rest/v4/repository"

LOCAL_ROOT = PurePosixPath("/ws")
LOCAL_WORKFLOW = LOCAL_ROOT / "group" / "workflow"

HUB_EXECUTOR_COPY = PurePosixPath("/tmp/job/MyFlow")
SERVER_EXECUTOR_COPY = PurePosixPath("/srv/jobs/123/workflow")
TEMP_COPY = PurePosixPath("/tmp/knime-temp/MyFlow")


@pytest.fixture
def hub_location():
    """Workflow 'MyFlow' in project 'Project' of the Hub space 'Team Space'."""
    return HubSpaceLocation(
        repository_address=HUB_REPOSITORY,
        workflow_path="/Team Space/Project/MyFlow",
        default_mount_id="My-Hub",
        space_path="/Team Space",
        space_item_id="*space01",
        workflow_item_id="*wf0042",
    )


@pytest.fixture
def server_location():
    return ServerLocation(
        repository_address=SERVER_REPOSITORY,
        workflow_path="/group/workflow",
        default_mount_id="My-Server",
    )


@pytest.fixture
def local_context():
    return AnalyticsPlatformLocal(
        local_workflow_path=LOCAL_WORKFLOW,
        mountpoint=MountpointInfo(mount_id="LOCAL", root=LOCAL_ROOT),
    )


@pytest.fixture
def unc_context():
    root = PureWindowsPath("\\\\UncMount\\Share\\ws")
    return AnalyticsPlatformLocal(
        local_workflow_path=root / "group" / "workflow",
        mountpoint=MountpointInfo(mount_id="LOCAL", root=root),
    )


@pytest.fixture
def knwf_context():
    """Workflow extracted from a .knwf archive, no mount point."""
    return AnalyticsPlatformLocal(local_workflow_path=PurePosixPath("/tmp/knwf/MyFlow"))


@pytest.fixture
def hub_executor_context(hub_location):
    return HubExecutor(executor=ExecutorInfo(HUB_EXECUTOR_COPY), location=hub_location)


@pytest.fixture
def server_executor_context(server_location):
    return ServerExecutor(executor=ExecutorInfo(SERVER_EXECUTOR_COPY), location=server_location)


@pytest.fixture
def temp_copy_context(hub_location):
    """Hub workflow opened locally, its Hub is mounted as 'My-Hub-Local'."""
    return AnalyticsPlatformTempCopy(
        local_workflow_path=TEMP_COPY,
        rest_location=hub_location,
        mountpoint_uri=MountpointUri.parse("knime://My-Hub-Local/Team%20Space/Project/MyFlow"),
    )


@pytest.fixture
def remote_editor_context(hub_location):
    return RemoteExecutorEditor(
        mountpoint_uri=MountpointUri.parse("knime://My-Hub/Team%20Space/Project/MyFlow"),
        space_location=hub_location,
    )


@pytest.fixture
def local_resolver(local_context):
    return get_resolver(local_context)


@pytest.fixture
def hub_executor_resolver(hub_executor_context):
    return get_resolver(hub_executor_context)


@pytest.fixture
def server_executor_resolver(server_executor_context):
    return get_resolver(server_executor_context)


@pytest.fixture
def temp_copy_resolver(temp_copy_context):
    return get_resolver(temp_copy_context)


@pytest.fixture
def remote_editor_resolver(remote_editor_context):
    return get_resolver(remote_editor_context)
