"""
KNIME URL CLI Command
=====================
Provides CLI interface for resolving KNIME URLs against an execution context.

Commands:
- resolve: Resolve a KNIME URL to the concrete URL of the resource
- absolute: Convert a KNIME URL to its mountpoint-absolute form
- link-types: List every KNIME URL form the referenced item supports
- classify: Show the category, path and version of a KNIME URL

Usage:
    knimeurl resolve knime://knime.workflow/data/input.csv --context ctx.yaml
    knimeurl absolute knime://knime.space/shared/model.bin --context ctx.yaml
    knimeurl link-types knime://knime.mountpoint/group/other --format json
    knimeurl classify "knime://My-Hub/Team Space/x.csv?version=3"
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

from knimeurl.urlresolve.base import BaseUrlResolver
from knimeurl.urlresolve.context import NodeContext
from knimeurl.urlresolve.errors import ResolutionError
from knimeurl.urlresolve.factory import get_resolver
from knimeurl.urlresolve.resolved import Resolution
from knimeurl.urlresolve.url_type import classify
from knimeurl.urlresolve.version import format_version
from knimeurl.utils.config import load_context_config
from knimeurl.utils.repo import find_workflow_root

logger = logging.getLogger(__name__)


class UrlCommand:
    """
    CLI command handler for KNIME URL operations.

    The execution context is read once from the YAML file given on the
    command line; without one the contextless resolver is used.
    """

    def __init__(
        self,
        context_path: Optional[Path] = None,
        node_dir: Optional[Path] = None,
        resolver: Optional[BaseUrlResolver] = None,
    ):
        if resolver is None:
            context = load_context_config(context_path) if context_path else None
            resolver = get_resolver(context)
        self.resolver = resolver
        self.node = NodeContext(directory=node_dir or find_workflow_root())

    def resolve(self, url: str, format: str = "text") -> int:
        """
        Resolve a KNIME URL to the concrete URL of the resource.

        Args:
            url: The KNIME URL to resolve
            format: Output format - "text" or "json"

        Returns:
            Exit code (0 if resolved, 1 if not)
        """
        resolution = self.resolver.resolve_internal(url, self.node)
        if resolution.is_broken:
            return self._report_error(resolution, format)

        resolved = resolution.value
        if format == "json":
            output = {"url": url, "type": resolution.url_type.label, **resolved.to_dict()}
            print(json.dumps(output, indent=2))
        else:
            print(resolved.resource_url)
        return 0

    def absolute(self, url: str, format: str = "text") -> int:
        """
        Convert a KNIME URL to its mountpoint-absolute form.

        Items without a stable absolute address print nothing in text mode.

        Returns:
            Exit code (0 on success, 1 on a resolution error)
        """
        resolution = self.resolver.resolve_to_absolute(url, self.node)
        if resolution.is_broken:
            return self._report_error(resolution, format)

        if format == "json":
            print(json.dumps({"url": url, "absolute": resolution.value}, indent=2))
        elif resolution.value is not None:
            print(resolution.value)
        else:
            logger.info("'%s' has no mountpoint-absolute form", url)
        return 0

    def link_types(self, url: str, format: str = "text") -> int:
        """
        List the KNIME URL forms the referenced item can be addressed with.

        Returns:
            Exit code (0 on success, 1 on a resolution error)
        """
        resolution = self.resolver.change_link_type(url, self.node)
        if resolution.is_broken:
            return self._report_error(resolution, format)

        links = sorted(resolution.value.items(), key=lambda item: item[0].label)
        if format == "json":
            print(json.dumps({t.label: link for t, link in links}, indent=2))
        else:
            width = max(len(t.label) for t, _ in links)
            for url_type, link in links:
                print(f"{url_type.label:<{width}}  {link}")
        return 0

    def classify(self, url: str, format: str = "text") -> int:
        """
        Show how a KNIME URL is classified.

        Returns:
            Exit code (0 if the URL is a KNIME URL, 1 if not)
        """
        try:
            parsed = classify(url)
        except ResolutionError as e:
            return self._report_error(Resolution(url=url, error=e), format)

        output = {
            "url": url,
            "type": parsed.url_type.label,
            "authority": parsed.authority,
            "mount_id": parsed.mount_id,
            "path": parsed.path,
            "version": format_version(parsed.version),
        }
        if format == "json":
            print(json.dumps(output, indent=2))
        else:
            for key, value in output.items():
                if value is not None:
                    print(f"{key.replace('_', ' ').capitalize()}: {value}")
        return 0

    @staticmethod
    def _report_error(resolution: Resolution, format: str) -> int:
        if format == "json":
            output = {
                "url": resolution.url,
                "type": resolution.url_type.label if resolution.url_type else None,
                "error": type(resolution.error).__name__,
                "message": str(resolution.error),
            }
            print(json.dumps(output, indent=2))
        print(f"Error: {resolution.error}", file=sys.stderr)
        return 1
