# provisioner/provisioner.py
"""
The provisioning sequence.

Provisioner.provision() brings a project to a fixed end state: project
directories present, a freshly built virtual environment, and an NSSM
service pointing at that environment's windowed interpreter with its
output redirected into rotated log files. Running it twice leaves the
machine in the same state as running it once.

Every external effect goes through collaborators handed to the
constructor, so the whole sequence can be exercised against fakes.
"""

from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Callable
from typing import List
from typing import Optional
from typing import Tuple

import structlog

from . import platform
from .config import Settings
from .core.exceptions import DependencyMissing
from .core.exceptions import InsufficientPrivilegesError
from .core.exceptions import ServiceInstallFailed
from .core.exceptions import ServiceRemovalFailed
from .identity import ProjectIdentity
from .tools.nssm import NOT_INSTALLED
from .tools.nssm import SERVICE_AUTO_START
from .tools.nssm import NssmServiceManager
from .tools.registry import ServiceRegistry
from .tools.registry import WindowsServiceRegistry
from .tools.runner import CommandRunner
from .tools.venv_tool import PythonEnvironmentTool

log = structlog.get_logger(__name__)


def quote_argument(value: str) -> str:
    """Quotes a single command-line argument for NSSM if it contains spaces."""
    if " " in value and not (value.startswith('"') and value.endswith('"')):
        return f'"{value}"'
    return value


@dataclass
class ProvisionResult:
    identity: ProjectIdentity
    packages_installed: bool = False
    service_replaced: bool = False
    warnings: List[str] = field(default_factory=list)
    service_parameters: List[Tuple[str, Tuple[str, ...]]] = field(default_factory=list)

    def warn(self, message: str, **context) -> None:
        self.warnings.append(message)
        log.warning(message, project=self.identity.name, **context)


class Provisioner:
    def __init__(
        self,
        settings: Settings,
        runner: Optional[CommandRunner] = None,
        registry: Optional[ServiceRegistry] = None,
        is_admin: Callable[[], bool] = platform.is_admin,
        which: Callable[[str], Optional[str]] = platform.which,
    ):
        self.settings = settings
        self.runner = runner or CommandRunner()
        self.registry = registry or WindowsServiceRegistry()
        self.is_admin = is_admin
        self.which = which

    # ------------------------------------------------------------------
    # Preconditions
    # ------------------------------------------------------------------
    def identity_for(self, project_identifier: Optional[str]) -> ProjectIdentity:
        name = project_identifier if project_identifier is not None else self.settings.PROJECT_NAME
        return ProjectIdentity.from_name(name, self.settings.BASE_DIR)

    def _require_admin(self) -> None:
        if not self.is_admin():
            raise InsufficientPrivilegesError()

    def _require_tool(self, tool: str) -> str:
        resolved = self.which(tool)
        if not resolved:
            raise DependencyMissing(tool)
        return resolved

    def _service_manager(self) -> NssmServiceManager:
        return NssmServiceManager(self.runner, self._require_tool(self.settings.NSSM_EXECUTABLE))

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def provision(self, project_identifier: Optional[str] = None) -> ProvisionResult:
        identity = self.identity_for(project_identifier)
        self._require_admin()
        python_exe = self._require_tool(self.settings.PYTHON_EXECUTABLE)
        nssm = self._service_manager()
        env_tool = PythonEnvironmentTool(self.runner, python_exe)

        result = ProvisionResult(identity=identity)
        bound = log.bind(project=identity.name, root=str(identity.root))
        bound.info("provision_started")

        root = Path(identity.root)
        Path(identity.base_dir).mkdir(parents=True, exist_ok=True)
        root.mkdir(parents=True, exist_ok=True)

        # A running service holds venv\Scripts\pythonw.exe open, so it must be
        # stopped before the environment can be deleted.
        existing = self.registry.exists(identity.service_name)
        if existing:
            self._stop_service(nssm, identity, bound)

        env_tool.recreate(Path(identity.venv_dir))

        requirements = Path(identity.requirements)
        if requirements.is_file():
            env_tool.install_requirements(Path(identity.venv_python), requirements)
            result.packages_installed = True
        else:
            result.warn("requirements_missing", path=str(requirements))

        if not Path(identity.main_script).is_file():
            result.warn("entry_point_missing", path=str(identity.main_script))

        if existing:
            try:
                self._remove_service(nssm, identity, bound)
            except ServiceRemovalFailed as e:
                raise ServiceInstallFailed(
                    str(e), command=e.command, returncode=e.returncode, output=e.output
                ) from e
        result.service_replaced = existing
        nssm.install(identity.service_name, str(identity.service_python), quote_argument(str(identity.main_script)))

        Path(identity.logs_dir).mkdir(parents=True, exist_ok=True)
        parameters = self.service_parameters(identity)
        nssm.configure(identity.service_name, parameters)
        result.service_parameters = [(name, tuple(values)) for name, values in parameters]

        bound.info(
            "provision_finished",
            service=identity.service_name,
            packages_installed=result.packages_installed,
            warnings=len(result.warnings),
        )
        return result

    def deprovision(self, project_identifier: Optional[str] = None) -> bool:
        """Stops and removes the service. Project files are left in place."""
        identity = self.identity_for(project_identifier)
        self._require_admin()
        nssm = self._service_manager()
        bound = log.bind(project=identity.name)

        if not self.registry.exists(identity.service_name):
            bound.warning("service_not_installed", service=identity.service_name)
            return False

        self._stop_service(nssm, identity, bound)
        self._remove_service(nssm, identity, bound)
        return True

    def status(self, project_identifier: Optional[str] = None) -> str:
        identity = self.identity_for(project_identifier)
        nssm = self._service_manager()
        if not self.registry.exists(identity.service_name):
            return NOT_INSTALLED
        return nssm.status(identity.service_name)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def service_parameters(self, identity: ProjectIdentity) -> List[Tuple[str, List[str]]]:
        """NSSM parameters applied after install, in application order."""
        return [
            ("AppDirectory", [str(identity.root)]),
            ("AppParameters", [quote_argument(str(identity.main_script))]),
            ("DisplayName", [identity.display_name]),
            ("Description", [self.settings.SERVICE_DESCRIPTION]),
            ("Start", [SERVICE_AUTO_START]),
            ("AppStdout", [str(identity.stdout_log)]),
            ("AppStderr", [str(identity.stderr_log)]),
            ("AppRotateFiles", ["1"]),
            ("AppRotateOnline", ["1"]),
            ("AppRotateSeconds", [str(self.settings.LOG_ROTATE_SECONDS)]),
            ("AppRotateBytes", [str(self.settings.LOG_ROTATE_BYTES)]),
        ]

    def _stop_service(self, nssm: NssmServiceManager, identity: ProjectIdentity, bound) -> None:
        bound.info("service_stopping", service=identity.service_name)
        stopped = nssm.stop(identity.service_name)
        if not stopped.ok:
            # A service that is already stopped makes NSSM exit non-zero.
            bound.warning("service_stop_failed", service=identity.service_name, output=stopped.output)

    def _remove_service(self, nssm: NssmServiceManager, identity: ProjectIdentity, bound) -> None:
        bound.info("service_removing", service=identity.service_name)
        nssm.remove(identity.service_name)
