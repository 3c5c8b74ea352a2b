"""
Execution context configuration loader.
"""
from pathlib import PurePosixPath, PureWindowsPath
from textwrap import dedent

import pytest

from knimeurl.urlresolve.context import (
    AnalyticsPlatformLocal,
    AnalyticsPlatformTempCopy,
    HubExecutor,
    HubSpaceLocation,
    RemoteExecutorEditor,
    Restriction,
    ServerExecutor,
    VirtualNodeContext,
)
from knimeurl.utils.config import ConfigError, load_config, load_context_config
from knimeurl.utils.repo import find_workflow_root

HUB_EXECUTOR_YAML = """
context:
  type: hub-executor
  local_workflow_path: /tmp/job/workflow
  location:
    kind: hub
    repository_address: https://api.hub.example.com/repository
    workflow_path: /Team Space/Project/MyFlow
    default_mount_id: My-Hub
    space_path: /Team Space
    space_item_id: "*space01"
    workflow_item_id: "*wf0042"
"""


@pytest.fixture
def write_config(tmp_path):
    def _write(text):
        path = tmp_path / "context.yaml"
        path.write_text(dedent(text), encoding="utf-8")
        return path

    return _write


def test_missing_file_means_no_context(tmp_path):
    assert load_config(tmp_path / "missing.yaml") == {}
    assert load_context_config(tmp_path / "missing.yaml") is None


@pytest.mark.parametrize("text", ["", "other: 1\n", "context:\n  type: none\n"])
def test_documents_without_context(write_config, text):
    assert load_context_config(write_config(text)) is None


def test_hub_executor(write_config):
    """
    Given: A YAML file describing a Hub executor
    When: Loading it
    Then: A HubExecutor context with the Hub space location is returned
    """
    context = load_context_config(write_config(HUB_EXECUTOR_YAML))

    assert isinstance(context, HubExecutor)
    assert context.executor.local_workflow_path == PurePosixPath("/tmp/job/workflow")
    assert context.location.space == PurePosixPath("Team Space")
    assert context.location.workflow == PurePosixPath("Team Space/Project/MyFlow")
    assert context.location.item_paths() == {
        "space01": PurePosixPath("Team Space"),
        "wf0042": PurePosixPath("Team Space/Project/MyFlow"),
    }


def test_local_windows_paths(write_config):
    context = load_context_config(write_config("""
        context:
          type: analytics-platform
          local_workflow_path: 'C:\\ws\\group\\workflow'
          mountpoint:
            mount_id: LOCAL
            root: 'C:\\ws'
    """))

    assert isinstance(context, AnalyticsPlatformLocal)
    assert context.local_workflow_path == PureWindowsPath("C:/ws/group/workflow")
    assert context.mountpoint.root == PureWindowsPath("C:/ws")


def test_temp_copy_of_server_workflow(write_config):
    context = load_context_config(write_config("""
        context:
          type: temp-copy
          local_workflow_path: /tmp/knime-temp/workflow
          mountpoint_uri: knime://My-Server/group/workflow
          location:
            kind: server
            repository_address: https://server.example.com/knime/rest/v4/repository
            workflow_path: /group/workflow
            default_mount_id: My-Server
    """))

    assert isinstance(context, AnalyticsPlatformTempCopy)
    assert not isinstance(context.rest_location, HubSpaceLocation)
    assert context.mountpoint_uri.mount_id == "My-Server"
    assert context.mountpoint_uri.path == PurePosixPath("group/workflow")


def test_remote_editor_without_location(write_config):
    context = load_context_config(write_config("""
        context:
          type: remote-editor
          mountpoint_uri: knime://My-Server/group/workflow
    """))

    assert isinstance(context, RemoteExecutorEditor)
    assert context.space_location is None


def test_virtual_decorator(write_config):
    context = load_context_config(write_config(HUB_EXECUTOR_YAML + """
  virtual:
    restrictions: [WORKFLOW_DATA_AREA_ACCESS]
    data_area: /tmp/sandbox/data
"""))

    assert isinstance(context, VirtualNodeContext)
    assert isinstance(context.delegate, HubExecutor)
    assert context.is_restricted(Restriction.WORKFLOW_DATA_AREA_ACCESS)
    assert not context.is_restricted(Restriction.WORKFLOW_RELATIVE_RESOURCE_ACCESS)
    assert context.virtual_data_area == PurePosixPath("/tmp/sandbox/data")


@pytest.mark.parametrize(
    "text,message",
    [
        ("context: [\n", "Invalid YAML"),
        ("- a\n- b\n", "Expected a mapping"),
        ("context: 3\n", "must be a mapping"),
        ("context:\n  type: desktop\n", "Unknown context type"),
        ("context:\n  type: hub-executor\n", "Missing required key 'local_workflow_path'"),
        (
            HUB_EXECUTOR_YAML.replace("kind: hub", "kind: server"),
            "needs a location of kind 'hub'",
        ),
        (
            HUB_EXECUTOR_YAML + "  virtual:\n    restrictions: [EVERYTHING]\n",
            "Unknown restriction",
        ),
    ],
)
def test_malformed_configs(write_config, text, message):
    with pytest.raises(ConfigError, match=message):
        load_context_config(write_config(text))


def test_find_workflow_root(tmp_path):
    workflow = tmp_path / "group" / "workflow"
    node = workflow / "Learner (#3)"
    node.mkdir(parents=True)
    (workflow / "workflow.knime").write_text("", encoding="utf-8")

    assert find_workflow_root(node) == workflow.resolve()
    assert find_workflow_root(tmp_path) is None
