"""Custom error hierarchy for blockly-workflow."""

from __future__ import annotations


class WorkflowError(RuntimeError):
    """Base error for the CLI."""


class MissingEnvError(WorkflowError):
    """Raised when the bootstrap environment is absent or incomplete."""


class UsageError(WorkflowError):
    """Raised when a required argument is missing or invalid."""


class PreconditionError(WorkflowError):
    """Raised when repository state does not allow the requested command."""


class GitCommandError(WorkflowError):
    """Raised when an underlying git command fails."""

    def __init__(
        self,
        command: list[str],
        returncode: int,
        *,
        stdout: str | None = None,
        stderr: str | None = None,
    ):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout or ""
        self.stderr = stderr or ""
        message = f"git command failed (exit {returncode}): {' '.join(command)}"
        details = "\n".join(
            section
            for section in (self.stdout.strip(), self.stderr.strip())
            if section
        )
        if details:
            message = f"{message}\n{details}"
        super().__init__(message)


class ToolCommandError(WorkflowError):
    """Raised when the multi-repo `repo` tool fails."""

    def __init__(self, command: list[str], returncode: int):
        self.command = command
        self.returncode = returncode
        super().__init__(f"command failed (exit {returncode}): {' '.join(command)}")


class CloneError(WorkflowError):
    """Raised when a clone did not produce a working copy."""


class UserAbort(WorkflowError):
    """Raised when the user cancels an interactive flow."""


class GateFailedError(WorkflowError):
    """Raised when tests or lint fail. The only error that ends the process non-zero."""


__all__ = [
    "WorkflowError",
    "MissingEnvError",
    "UsageError",
    "PreconditionError",
    "GitCommandError",
    "ToolCommandError",
    "CloneError",
    "UserAbort",
    "GateFailedError",
]
