# provisioner/identity.py
"""
Derives every path and name a provisioned project needs from its identifier.

Nothing here touches the filesystem, so the Windows layout can be computed
(and tested) on any platform by passing a PureWindowsPath as the base.
"""

import re
from dataclasses import dataclass
from pathlib import PurePath

from .core.exceptions import InvalidProjectName

VENV_DIRNAME = "venv"
LOGS_DIRNAME = "logs"
MAIN_SCRIPT = "main.py"
REQUIREMENTS_FILE = "requirements.txt"

_FORBIDDEN_CHARS = re.compile(r'[\\/:*?"<>|]')
_WORD_SEPARATORS = re.compile(r"[\s_-]+")
_RESERVED_NAMES = re.compile(r"^(CON|PRN|AUX|NUL|COM[1-9]|LPT[1-9])(\..*)?$", re.IGNORECASE)


def validate_project_name(name: str) -> str:
    if name is None or not name.strip():
        raise InvalidProjectName(str(name), "name must not be empty")
    if name != name.strip():
        raise InvalidProjectName(name, "name must not start or end with whitespace")
    if name in (".", ".."):
        raise InvalidProjectName(name, "name must not be a relative path marker")
    if _FORBIDDEN_CHARS.search(name):
        raise InvalidProjectName(name, "name must be a single path component")
    if name.endswith("."):
        raise InvalidProjectName(name, "Windows drops a trailing dot from folder names")
    if _RESERVED_NAMES.match(name):
        raise InvalidProjectName(name, "name is a reserved Windows device name")
    return name


def display_name_for(name: str) -> str:
    """'billing-sync' -> 'BillingSync'."""
    return "".join(_WORD_SEPARATORS.split(name.title()))


@dataclass(frozen=True)
class ProjectIdentity:
    name: str
    base_dir: PurePath

    @classmethod
    def from_name(cls, name: str, base_dir: PurePath) -> "ProjectIdentity":
        return cls(name=validate_project_name(name), base_dir=base_dir)

    @property
    def root(self) -> PurePath:
        return self.base_dir / self.name

    @property
    def service_name(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return display_name_for(self.name)

    @property
    def venv_dir(self) -> PurePath:
        return self.root / VENV_DIRNAME

    @property
    def venv_python(self) -> PurePath:
        """Console interpreter inside the environment, used to drive pip."""
        return self.venv_dir / "Scripts" / "python.exe"

    @property
    def service_python(self) -> PurePath:
        """Windowed interpreter the service runs, so no console is attached."""
        return self.venv_dir / "Scripts" / "pythonw.exe"

    @property
    def main_script(self) -> PurePath:
        return self.root / MAIN_SCRIPT

    @property
    def requirements(self) -> PurePath:
        return self.root / REQUIREMENTS_FILE

    @property
    def logs_dir(self) -> PurePath:
        return self.root / LOGS_DIRNAME

    @property
    def stdout_log(self) -> PurePath:
        return self.logs_dir / "stdout.log"

    @property
    def stderr_log(self) -> PurePath:
        return self.logs_dir / "stderr.log"
