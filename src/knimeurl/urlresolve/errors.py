"""
Resolution Errors
=================
Closed error taxonomy for KNIME URL resolution.

Resolver internals raise these exceptions. The public resolver operations
catch them at the boundary and hand them back inside a ``Resolution`` record,
so callers see either a value or exactly one of these errors.
"""


class ResolutionError(Exception):
    """Base class of all errors a KNIME URL resolver can report."""


class UnrecognizedUrlError(ResolutionError):
    """Raised when a URL is not a valid KNIME URL (scheme or authority)."""


class ScopeViolationError(ResolutionError):
    """Raised when a resolved path would leave its mount point, space or workflow."""

    def __init__(self, message: str, resolved: str = "", root: str = ""):
        super().__init__(message)
        self.resolved = resolved
        self.root = root


class VersioningNotSupportedError(ResolutionError):
    """Raised when an item version is given where the location has no versions."""


class WorkflowNotSavedError(ResolutionError):
    """Raised for node-relative URLs before the workflow has a directory on disk."""


class NodeRelativeNotSupportedError(ResolutionError):
    """Raised when node-relative URLs cannot be used in the current context."""


class WorkflowRelativeAccessDeniedError(ResolutionError):
    """Raised when a sandbox forbids workflow-relative resource access."""


class DataAreaAccessDeniedError(ResolutionError):
    """Raised when a sandbox forbids access to the workflow data area."""


class UnknownMountIdError(ResolutionError):
    """Raised when a mount id cannot be correlated with the resolver's mount point."""


class MissingContextError(ResolutionError):
    """Raised when a workflow or node context is required but not available."""
