# provisioner/tools/venv_tool.py
import shutil
from pathlib import Path

import structlog

from ..core.exceptions import DependencyInstallFailed
from ..core.exceptions import EnvironmentCreationFailed
from .runner import CommandRunner

log = structlog.get_logger(__name__)


class PythonEnvironmentTool:
    """Creates virtual environments and installs packages into them."""

    def __init__(self, runner: CommandRunner, python_executable: str):
        self.runner = runner
        self.python_executable = python_executable

    def recreate(self, venv_dir: Path) -> None:
        """Removes any existing environment at venv_dir, then builds a fresh one."""
        venv_dir = Path(venv_dir)
        if venv_dir.exists():
            log.info("venv_removing_existing", path=str(venv_dir))
            try:
                shutil.rmtree(venv_dir)
            except OSError as e:
                raise EnvironmentCreationFailed(
                    f"Could not remove existing environment at {venv_dir}: {e}"
                ) from e

        cmd = [self.python_executable, "-m", "venv", str(venv_dir)]
        result = self.runner.run(cmd)
        if not result.ok:
            raise EnvironmentCreationFailed(
                f"Creating the virtual environment at {venv_dir} failed.",
                command=cmd,
                returncode=result.returncode,
                output=result.output,
            )
        log.info("venv_created", path=str(venv_dir))

    def install_requirements(self, venv_python: Path, requirements: Path) -> None:
        """Upgrades pip inside the environment, then installs the manifest."""
        steps = [
            ("pip_upgrade", [str(venv_python), "-m", "pip", "install", "--upgrade", "pip"]),
            ("requirements_install", [str(venv_python), "-m", "pip", "install", "-r", str(requirements)]),
        ]
        for step, cmd in steps:
            log.info(step, requirements=str(requirements))
            result = self.runner.run(cmd, cwd=str(Path(requirements).parent))
            if not result.ok:
                raise DependencyInstallFailed(
                    f"{step} failed with exit code {result.returncode}.",
                    command=cmd,
                    returncode=result.returncode,
                    output=result.output,
                )
