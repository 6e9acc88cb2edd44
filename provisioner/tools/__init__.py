from .nssm import NssmServiceManager
from .registry import ServiceRegistry
from .registry import WindowsServiceRegistry
from .runner import CommandResult
from .runner import CommandRunner
from .venv_tool import PythonEnvironmentTool

__all__ = [
    "CommandResult",
    "CommandRunner",
    "NssmServiceManager",
    "PythonEnvironmentTool",
    "ServiceRegistry",
    "WindowsServiceRegistry",
]
