"""Custom exceptions for the workspace watcher package."""

from typing import Any, Dict, Optional


class AlgoTrainerError(Exception):
    """
    Base exception for all algo-trainer errors.

    Attributes:
        code: Stable machine-readable error code
        context: Extra details about the failed operation
    """

    def __init__(
        self,
        message: str,
        code: str = "ALGO_TRAINER_ERROR",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        return self.message


class WorkspaceError(AlgoTrainerError):
    """Error related to the user's workspace."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message, "WORKSPACE_ERROR", context)


class WatcherError(WorkspaceError):
    """Base exception for all watcher errors."""
    pass


class WatcherAlreadyRunningError(WatcherError):
    """Watcher is already running."""
    pass


class WatcherStartError(WatcherError):
    """The OS refused to watch one of the roots."""
    pass


class RootError(WatcherError):
    """Error related to watched root folders."""
    pass


class RootAlreadyExistsError(RootError):
    """Root folder is already being watched."""
    pass


def error_context(operation: str, **details: Any) -> Dict[str, Any]:
    """Build the context dict attached to an AlgoTrainerError."""
    context: Dict[str, Any] = {"operation": operation}
    context.update(details)
    return context
