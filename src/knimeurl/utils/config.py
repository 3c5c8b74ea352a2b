"""
Execution Context Configuration Loader.

Loads an execution-context descriptor from a YAML file so that KNIME URLs can
be resolved outside of a running workflow (CLI, tests, tooling).
"""
from __future__ import annotations

import re
from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath
from typing import Any, Dict, Optional

import yaml

from knimeurl.urlresolve.context import (
    AnalyticsPlatformLocal,
    AnalyticsPlatformTempCopy,
    ExecutionContext,
    ExecutorInfo,
    HubExecutor,
    HubSpaceLocation,
    MountpointInfo,
    MountpointUri,
    RemoteExecutorEditor,
    Restriction,
    RestLocation,
    ServerExecutor,
    ServerLocation,
    VirtualNodeContext,
)

CONTEXT_TYPES = (
    "analytics-platform",
    "temp-copy",
    "hub-executor",
    "server-executor",
    "remote-editor",
    "none",
)

_WINDOWS_PATH = re.compile(r"^([A-Za-z]:[\\/]|\\\\)")


class ConfigError(ValueError):
    """Raised when a context configuration file is malformed."""


def load_config(config_path: Path) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        config_path: Path of the YAML file

    Returns:
        Parsed configuration dict, or empty dict if the file doesn't exist
        or is empty

    Raises:
        ConfigError: if the file is not valid YAML or not a mapping
    """
    if not config_path.exists():
        return {}

    try:
        with open(config_path, encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not config:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Expected a mapping at the top of {config_path}")
    return config


def load_context_config(config_path: Path) -> Optional[ExecutionContext]:
    """
    Load an execution context from a YAML file.

    Args:
        config_path: Path of the YAML file

    Returns:
        The described context, or None if the file is missing, empty or
        declares ``type: none``

    Example config:
        context:
          type: hub-executor
          local_workflow_path: /tmp/job/workflow
          location:
            kind: hub
            repository_address: https://api.hub.example.com/repository
            workflow_path: /Team Space/Project/MyFlow
            default_mount_id: My-Hub
            space_path: /Team Space
          virtual:
            restrictions: [WORKFLOW_DATA_AREA_ACCESS]
    """
    config = load_config(config_path)
    section = config.get("context")
    if section is None:
        return None
    return parse_context(section)


def parse_context(section: Any) -> Optional[ExecutionContext]:
    """Build an execution context from the ``context`` section of a config."""
    if not isinstance(section, dict):
        raise ConfigError("'context' must be a mapping")

    context_type = section.get("type")
    if context_type not in CONTEXT_TYPES:
        raise ConfigError(
            f"Unknown context type '{context_type}', expected one of: {', '.join(CONTEXT_TYPES)}"
        )
    if context_type == "none":
        return None

    context = _parse_base_context(context_type, section)

    virtual = section.get("virtual")
    if virtual is not None:
        context = _parse_virtual(context, virtual)
    return context


def local_path(value: Any, key: str = "path") -> PurePath:
    """Interpret a configured local path, Windows drive and UNC paths included."""
    if not isinstance(value, str) or not value:
        raise ConfigError(f"'{key}' must be a non-empty path")
    if _WINDOWS_PATH.match(value):
        return PureWindowsPath(value)
    return PurePosixPath(value)


def _parse_base_context(context_type: str, section: Dict[str, Any]) -> ExecutionContext:
    if context_type == "analytics-platform":
        mountpoint = section.get("mountpoint")
        return AnalyticsPlatformLocal(
            local_workflow_path=local_path(
                _require(section, "local_workflow_path"), "local_workflow_path"
            ),
            mountpoint=_parse_mountpoint(mountpoint) if mountpoint is not None else None,
        )

    if context_type == "temp-copy":
        uri = section.get("mountpoint_uri")
        return AnalyticsPlatformTempCopy(
            local_workflow_path=local_path(
                _require(section, "local_workflow_path"), "local_workflow_path"
            ),
            rest_location=_parse_location(_require(section, "location")),
            mountpoint_uri=_parse_mountpoint_uri(uri) if uri is not None else None,
        )

    if context_type in ("hub-executor", "server-executor"):
        executor = ExecutorInfo(
            local_workflow_path=local_path(
                _require(section, "local_workflow_path"), "local_workflow_path"
            )
        )
        location = _parse_location(_require(section, "location"))
        if context_type == "hub-executor":
            if not isinstance(location, HubSpaceLocation):
                raise ConfigError("A hub-executor context needs a location of kind 'hub'")
            return HubExecutor(executor=executor, location=location)
        if not isinstance(location, ServerLocation):
            raise ConfigError("A server-executor context needs a location of kind 'server'")
        return ServerExecutor(executor=executor, location=location)

    # remote-editor
    location = section.get("location")
    space_location = _parse_location(location) if location is not None else None
    if space_location is not None and not isinstance(space_location, HubSpaceLocation):
        raise ConfigError("A remote-editor context only accepts a location of kind 'hub'")
    return RemoteExecutorEditor(
        mountpoint_uri=_parse_mountpoint_uri(_require(section, "mountpoint_uri")),
        space_location=space_location,
    )


def _parse_mountpoint(value: Any) -> MountpointInfo:
    if not isinstance(value, dict):
        raise ConfigError("'mountpoint' must be a mapping with 'mount_id' and 'root'")
    return MountpointInfo(
        mount_id=str(_require(value, "mount_id")),
        root=local_path(_require(value, "root"), "root"),
    )


def _parse_mountpoint_uri(value: Any) -> MountpointUri:
    try:
        return MountpointUri.parse(str(value))
    except ValueError as e:
        raise ConfigError(str(e)) from e


def _parse_location(value: Any) -> RestLocation:
    if not isinstance(value, dict):
        raise ConfigError("'location' must be a mapping")

    kind = value.get("kind", "hub")
    common = {
        "repository_address": str(_require(value, "repository_address")),
        "workflow_path": str(_require(value, "workflow_path")),
        "default_mount_id": str(_require(value, "default_mount_id")),
    }
    if kind == "server":
        return ServerLocation(**common)
    if kind != "hub":
        raise ConfigError(f"Unknown location kind '{kind}', expected 'hub' or 'server'")

    return HubSpaceLocation(
        space_path=str(_require(value, "space_path")),
        space_item_id=value.get("space_item_id"),
        workflow_item_id=value.get("workflow_item_id"),
        **common,
    )


def _parse_virtual(delegate: ExecutionContext, value: Any) -> VirtualNodeContext:
    if not isinstance(value, dict):
        raise ConfigError("'virtual' must be a mapping")

    restrictions = set()
    for name in value.get("restrictions") or []:
        try:
            restrictions.add(Restriction[str(name)])
        except KeyError:
            raise ConfigError(f"Unknown restriction '{name}'") from None

    data_area = value.get("data_area")
    return VirtualNodeContext(
        delegate=delegate,
        restrictions=frozenset(restrictions),
        virtual_data_area=local_path(data_area, "data_area") if data_area is not None else None,
    )


def _require(section: Dict[str, Any], key: str) -> Any:
    if key not in section or section[key] is None:
        raise ConfigError(f"Missing required key '{key}'")
    return section[key]
