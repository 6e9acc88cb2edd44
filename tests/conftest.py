import sys
from pathlib import Path
from typing import Dict
from typing import List
from typing import Optional

import pytest
import structlog

# =============================================================================
# 1. SYSTEM PATH INJECTION
# =============================================================================
# Makes 'provisioner' importable regardless of where pytest is run from.
repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from provisioner.config import Settings  # noqa: E402
from provisioner.provisioner import Provisioner  # noqa: E402
from provisioner.tools.registry import ServiceRegistry  # noqa: E402
from provisioner.tools.runner import CommandResult  # noqa: E402

PYTHON = "/usr/bin/python"
NSSM = "/usr/bin/nssm"


# =============================================================================
# 2. FAKE MACHINE (no real venv, no real services)
# =============================================================================
class FakeRegistry(ServiceRegistry):
    def __init__(self, installed=()):
        self.installed = set(installed)

    def exists(self, service_name: str) -> bool:
        return service_name in self.installed


class FakeRunner:
    """
    Records every command and simulates its effect.

    `failures` maps a command prefix (tuple) to the exit code to return.
    """

    def __init__(self, registry: FakeRegistry):
        self.registry = registry
        self.calls: List[List[str]] = []
        self.failures: Dict[tuple, int] = {}
        self.statuses: Dict[str, str] = {}

    def fail(self, *prefix: str, code: int = 1) -> None:
        self.failures[tuple(prefix)] = code

    def _failure_for(self, argv: List[str]) -> Optional[int]:
        for prefix, code in self.failures.items():
            if tuple(argv[: len(prefix)]) == prefix:
                return code
        return None

    def run(self, args, cwd=None) -> CommandResult:
        argv = [str(a) for a in args]
        self.calls.append(argv)

        code = self._failure_for(argv)
        if code is not None:
            return CommandResult(argv, code, "", "simulated failure")

        if argv[1:3] == ["-m", "venv"]:
            Path(argv[3], "Scripts").mkdir(parents=True)
        elif argv[0] == NSSM and argv[1] == "install":
            self.registry.installed.add(argv[2])
        elif argv[0] == NSSM and argv[1] == "remove":
            self.registry.installed.discard(argv[2])
        elif argv[0] == NSSM and argv[1] == "status":
            return CommandResult(argv, 0, self.statuses.get(argv[2], "SERVICE_STOPPED"), "")
        return CommandResult(argv, 0, "", "")

    def nssm_calls(self, subcommand: Optional[str] = None) -> List[List[str]]:
        return [
            c for c in self.calls
            if c[0] == NSSM and (subcommand is None or c[1] == subcommand)
        ]


def resolve_all(tool: str) -> Optional[str]:
    return {"python": PYTHON, "nssm": NSSM}.get(tool)


# =============================================================================
# 3. FIXTURES
# =============================================================================
@pytest.fixture
def base_dir(tmp_path) -> Path:
    return tmp_path / "automation"


@pytest.fixture
def settings(base_dir) -> Settings:
    return Settings(_env_file=None, BASE_DIR=base_dir, SERVICE_DESCRIPTION="Test service")


@pytest.fixture
def registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture
def runner(registry) -> FakeRunner:
    return FakeRunner(registry)


@pytest.fixture
def provisioner(settings, runner, registry) -> Provisioner:
    return Provisioner(settings, runner=runner, registry=registry, is_admin=lambda: True, which=resolve_all)


@pytest.fixture
def project(base_dir) -> Path:
    """A project folder with an entry point and a manifest already in place."""
    root = base_dir / "billing-sync"
    root.mkdir(parents=True)
    (root / "main.py").write_text("print('hello')\n")
    (root / "requirements.txt").write_text("requests\n")
    return root


@pytest.fixture(autouse=True)
def reset_structlog():
    """Keeps logging configuration from leaking between tests."""
    yield
    structlog.reset_defaults()
