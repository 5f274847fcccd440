from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional


class TaskLedgerError(Exception):
    """Base exception for taskledger."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class TaskIOError(TaskLedgerError, OSError):
    """Raised when a task document cannot be read or written."""

    def __init__(
        self,
        message: str = "",
        *,
        path: Any = None,
        cause: Optional[BaseException] = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if path is not None:
            ctx["path"] = str(path)
        if cause is not None:
            ctx["cause"] = str(cause)
        TaskLedgerError.__init__(self, message, context=ctx)
        OSError.__init__(self, message)
        self.path = str(path) if path is not None else None


class ValidationError(TaskLedgerError):
    """Raised when a task set fails structural validation.

    The message joins every error; the individual errors and warnings are
    kept on the instance.
    """

    def __init__(
        self,
        message: str = "",
        *,
        errors: Iterable[str] = (),
        warnings: Iterable[str] = (),
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.errors: List[str] = list(errors)
        self.warnings: List[str] = list(warnings)
        ctx = dict(context or {})
        ctx.setdefault("errors", list(self.errors))
        super().__init__(message, context=ctx)


class TransitionError(TaskLedgerError, ValueError):
    """Raised when a status change is not an edge of the transition table."""

    def __init__(
        self,
        message: str = "",
        *,
        task_id: str | None = None,
        from_status: str | None = None,
        to_status: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if task_id:
            ctx["taskId"] = task_id
        if from_status:
            ctx["from"] = from_status
        if to_status:
            ctx["to"] = to_status
        TaskLedgerError.__init__(self, message, context=ctx)
        ValueError.__init__(self, message)
        self.task_id = task_id
        self.from_status = from_status
        self.to_status = to_status


class DependencyError(TaskLedgerError, ValueError):
    """Raised when incomplete dependencies block an otherwise legal transition."""

    def __init__(
        self,
        message: str = "",
        *,
        task_id: str | None = None,
        dependency_ids: Iterable[str] = (),
        context: Mapping[str, Any] | None = None,
    ) -> None:
        self.task_id = task_id
        self.dependency_ids: List[str] = list(dependency_ids)
        ctx = dict(context or {})
        if task_id:
            ctx["taskId"] = task_id
        ctx["dependencyIds"] = list(self.dependency_ids)
        TaskLedgerError.__init__(self, message, context=ctx)
        ValueError.__init__(self, message)


class TaskNotFoundError(TaskLedgerError, LookupError):
    """Raised when a task id is not present in the current snapshot."""

    def __init__(
        self,
        message: str = "",
        *,
        task_id: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if task_id:
            ctx["taskId"] = task_id
        TaskLedgerError.__init__(self, message, context=ctx)
        LookupError.__init__(self, message)
        self.task_id = task_id


class ConfigError(TaskLedgerError, RuntimeError):
    """Raised when configuration cannot be loaded or fails schema validation."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        TaskLedgerError.__init__(self, message, context=context)
        RuntimeError.__init__(self, message)


__all__ = [
    "TaskLedgerError",
    "TaskIOError",
    "ValidationError",
    "TransitionError",
    "DependencyError",
    "TaskNotFoundError",
    "ConfigError",
]
