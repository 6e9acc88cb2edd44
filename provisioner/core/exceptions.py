# provisioner/core/exceptions.py
"""
Custom, application-specific exceptions for the service provisioner.

Every fatal condition raised during provisioning derives from
ProvisionerException so the command line entry point can map it to a
user-facing message and a non-zero exit status. Recoverable conditions
(missing manifest, missing entry point) are never raised; they are
reported as warnings on the ProvisionResult instead.
"""

from typing import Optional
from typing import Sequence


class ProvisionerException(Exception):
    """Base class for all custom exceptions in this application."""

    pass


class InsufficientPrivilegesError(ProvisionerException, PermissionError):
    """Raised when the caller is not running with administrator rights."""

    def __init__(self, message: str = "Administrator privileges are required."):
        super().__init__(message)


class DependencyMissing(ProvisionerException):
    """Raised when a required external tool cannot be found on PATH."""

    def __init__(self, tool: str):
        self.tool = tool
        super().__init__(f"Required tool '{tool}' was not found on PATH.")


class InvalidProjectName(ProvisionerException, ValueError):
    """Raised when a project identifier is not a single safe path component."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid project name {name!r}: {reason}")


class CommandFailedError(ProvisionerException):
    """Base class for failures of an external command."""

    def __init__(
        self,
        message: str,
        command: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        output: Optional[str] = None,
    ):
        self.command = list(command) if command else []
        self.returncode = returncode
        self.output = output
        super().__init__(message)


class EnvironmentCreationFailed(CommandFailedError):
    """Raised when the virtual environment cannot be removed or created."""

    pass


class DependencyInstallFailed(CommandFailedError):
    """Raised when pip fails to upgrade itself or install the manifest."""

    pass


class ServiceInstallFailed(CommandFailedError):
    """Raised when the service cannot be installed or configured."""

    pass


class ServiceRemovalFailed(CommandFailedError):
    """Raised when an existing service cannot be removed."""

    pass
