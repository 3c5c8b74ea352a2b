"""
Workflow root detection utility.

Finds the KNIME workflow directory by searching upward for ``workflow.knime``.
The CLI uses it as the default node directory for node-relative URLs.
"""

from pathlib import Path
from typing import Optional

WORKFLOW_FILE = "workflow.knime"


def find_workflow_root(start: Path = None) -> Optional[Path]:
    """
    Find the workflow root by searching upward for ``workflow.knime``.

    Args:
        start: Starting directory (default: cwd)

    Returns:
        Path to the directory containing ``workflow.knime``, or None if no
        enclosing directory is a workflow (e.g. it was never saved)
    """
    current = (start or Path.cwd()).resolve()

    while True:
        if (current / WORKFLOW_FILE).is_file():
            return current
        if current == current.parent:
            return None
        current = current.parent
