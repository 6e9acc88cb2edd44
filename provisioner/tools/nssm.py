# provisioner/tools/nssm.py
"""
Thin wrapper around the NSSM command line.

Only the sub-commands the provisioner needs are exposed: install, remove,
set, stop and status. Each call shells out exactly once.
"""

from typing import List
from typing import Sequence
from typing import Tuple

import structlog

from ..core.exceptions import ServiceInstallFailed
from ..core.exceptions import ServiceRemovalFailed
from .runner import CommandResult
from .runner import CommandRunner

log = structlog.get_logger(__name__)

SERVICE_AUTO_START = "SERVICE_AUTO_START"
NOT_INSTALLED = "NOT_INSTALLED"

ServiceParameter = Tuple[str, Sequence[str]]


class NssmServiceManager:
    def __init__(self, runner: CommandRunner, nssm_executable: str = "nssm"):
        self.runner = runner
        self.nssm_executable = nssm_executable

    def _run(self, *args: str) -> CommandResult:
        return self.runner.run([self.nssm_executable, *args])

    def install(self, service_name: str, executable: str, *arguments: str) -> None:
        result = self._run("install", service_name, executable, *arguments)
        if not result.ok:
            raise ServiceInstallFailed(
                f"Installing service '{service_name}' failed.",
                command=result.args,
                returncode=result.returncode,
                output=result.output,
            )
        log.info("service_installed", service=service_name, executable=executable)

    def remove(self, service_name: str) -> None:
        result = self._run("remove", service_name, "confirm")
        if not result.ok:
            raise ServiceRemovalFailed(
                f"Removing service '{service_name}' failed.",
                command=result.args,
                returncode=result.returncode,
                output=result.output,
            )
        log.info("service_removed", service=service_name)

    def stop(self, service_name: str) -> CommandResult:
        """Stops the service. The caller decides whether a failure matters."""
        return self._run("stop", service_name)

    def status(self, service_name: str) -> str:
        result = self._run("status", service_name)
        if not result.ok:
            return NOT_INSTALLED
        return result.stdout.strip() or NOT_INSTALLED

    def set(self, service_name: str, parameter: str, *values: str) -> None:
        result = self._run("set", service_name, parameter, *values)
        if not result.ok:
            raise ServiceInstallFailed(
                f"Setting {parameter} on service '{service_name}' failed.",
                command=result.args,
                returncode=result.returncode,
                output=result.output,
            )
        log.debug("service_parameter_set", service=service_name, parameter=parameter, values=list(values))

    def configure(self, service_name: str, parameters: List[ServiceParameter]) -> None:
        """Applies each parameter in order, stopping at the first failure."""
        for parameter, values in parameters:
            self.set(service_name, parameter, *values)
