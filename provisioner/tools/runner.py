# provisioner/tools/runner.py
import subprocess
from dataclasses import dataclass
from typing import List
from typing import Optional
from typing import Sequence

import structlog

log = structlog.get_logger(__name__)

# Exit status reported when the executable could not be launched at all.
LAUNCH_FAILED = 127


def decode_output(raw: Optional[bytes]) -> str:
    """
    Decodes captured process output.

    NSSM writes UTF-16LE to redirected handles, everything else here writes
    the console code page or UTF-8; NUL bytes are the tell.
    """
    if not raw:
        return ""
    if b"\x00" in raw:
        text = raw.decode("utf-16-le", errors="replace")
    else:
        text = raw.decode("utf-8", errors="replace")
    return text.replace("\ufeff", "").replace("\r\n", "\n").strip()


@dataclass
class CommandResult:
    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Whichever stream has something to say, stderr first."""
        return self.stderr or self.stdout


class CommandRunner:
    """Runs one external command to completion. No timeout, no retry."""

    def run(self, args: Sequence[str], cwd: Optional[str] = None) -> CommandResult:
        argv = [str(a) for a in args]
        log.debug("command_started", command=argv, cwd=cwd)
        try:
            completed = subprocess.run(argv, cwd=cwd, capture_output=True, check=False)
        except OSError as e:
            log.error("command_launch_failed", command=argv, error=str(e))
            return CommandResult(argv, LAUNCH_FAILED, "", str(e))

        result = CommandResult(
            argv,
            completed.returncode,
            decode_output(completed.stdout),
            decode_output(completed.stderr),
        )
        log.debug("command_finished", command=argv, returncode=result.returncode)
        return result
