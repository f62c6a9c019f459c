# Devflow CLI — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines all custom exception classes used in devflow.

These exceptions provide structured error handling for common failure cases,
including malformed step lists, misuse of the cancellation broker, broken
configuration files and failing shell commands.

All exceptions inherit from `DevflowError`, the base exception for the package.

Exception Hierarchy:
- DevflowError
    ├── InvalidStepError
    ├── BrokerBusyError
    ├── ConfigError
    └── GitError

These are raised throughout devflow to signal user-facing or developer-facing
problems that should be caught and reported by the CLI entry point.
"""


class DevflowError(Exception):
    """Base exception for devflow."""


class InvalidStepError(DevflowError):
    """Exception raised when a step list or a step outcome is malformed."""


class BrokerBusyError(DevflowError):
    """Exception raised when a second prompt claims the cancellation slot.

    Only one prompt may be pending per process. Running two flows at the same
    time is not supported.
    """


class ConfigError(DevflowError):
    """Exception raised when a configuration file cannot be used."""


class GitError(DevflowError):
    """Exception raised when a git or gh invocation fails."""

    def __init__(self, command: list[str], returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr.strip()
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(
            f"'{' '.join(command)}' exited with status {returncode}{detail}"
        )
