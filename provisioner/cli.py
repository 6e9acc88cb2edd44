#!/usr/bin/env python3
"""
Service Provisioner - command line entry point

Usage:
    provision-service                       # Provision the default project
    provision-service billing-sync          # Provision C:\\automation\\billing-sync
    provision-service billing-sync --status
    provision-service billing-sync --uninstall
"""

import argparse
import sys
from pathlib import Path
from typing import List
from typing import Optional

import structlog
from pydantic import ValidationError

from . import __version__
from .config import Settings
from .config import get_settings
from .core.exceptions import ProvisionerException
from .observability import configure_logging
from .platform import is_windows
from .provisioner import ProvisionResult
from .provisioner import Provisioner
from .user_friendly_errors import describe_error

APP_NAME = "Service Provisioner"

log = structlog.get_logger(__name__)


class Colors:
    """Terminal color codes for friendly output"""
    OKBLUE = '\033[94m'
    OKGREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'


_COLOR_CODES = {attr: value for attr, value in vars(Colors).items() if not attr.startswith('_')}


def _enable_vt_mode() -> bool:
    """Turn on ANSI escape processing for the Windows console."""
    import ctypes

    kernel32 = ctypes.windll.kernel32
    return bool(kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7))


def init_colors(stream=None) -> bool:
    """Enable colors when stream is a terminal that can render them."""
    stream = stream or sys.stdout
    enabled = bool(stream) and stream.isatty()
    if enabled and is_windows():
        try:
            enabled = _enable_vt_mode()
        except (AttributeError, OSError):
            enabled = False

    for attr, code in _COLOR_CODES.items():
        setattr(Colors, attr, code if enabled else '')
    return enabled


init_colors()


def print_success(msg: str, icon: str = "✓"):
    print(f"{Colors.OKGREEN}{icon}{Colors.ENDC} {msg}")


def print_warning(msg: str, icon: str = "⚠"):
    print(f"{Colors.WARNING}{icon}{Colors.ENDC} {msg}")


def print_error(msg: str, icon: str = "✗"):
    print(f"{Colors.FAIL}{icon}{Colors.ENDC} {msg}")


def print_info(msg: str, icon: str = "ℹ"):
    print(f"{Colors.OKBLUE}{icon}{Colors.ENDC} {msg}")


WARNING_TEXT = {
    "requirements_missing": "No requirements.txt found; the environment has no extra packages.",
    "entry_point_missing": "main.py is missing; the service will not run until it is added.",
}


def print_summary(result: ProvisionResult) -> None:
    """Print the final service configuration"""
    identity = result.identity
    print()
    print(f"{Colors.BOLD}Service '{identity.service_name}' provisioned{Colors.ENDC}")
    print(f"  Project directory : {identity.root}")
    print(f"  Environment       : {identity.venv_dir}")
    print(f"  Executable        : {identity.service_python}")
    print(f"  Packages installed: {'yes' if result.packages_installed else 'no'}")
    print(f"  Replaced existing : {'yes' if result.service_replaced else 'no'}")
    for name, values in result.service_parameters:
        print(f"  {name:<18}: {' '.join(values)}")
    print()
    for warning in result.warnings:
        print_warning(WARNING_TEXT.get(warning, warning))
    print_success(f"Done. Start it with: nssm start {identity.service_name}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="provision-service",
        description=f"{APP_NAME} - create a venv and register it as a Windows service via NSSM",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "project",
        nargs="?",
        default=None,
        help="Project identifier (default: PROJECT_NAME from settings)",
    )
    parser.add_argument("--base-dir", type=Path, help="Base directory holding all projects")
    parser.add_argument("--python", dest="python_executable", help="Interpreter used to create the venv")
    parser.add_argument("--nssm", dest="nssm_executable", help="Name or path of the NSSM executable")
    parser.add_argument("--description", help="Service description text")
    action = parser.add_mutually_exclusive_group()
    action.add_argument("--status", action="store_true", help="Show the service status and exit")
    action.add_argument("--uninstall", action="store_true", help="Stop and remove the service, keeping files")
    parser.add_argument("--log-level", help="Log level (default: LOG_LEVEL from settings)")
    parser.add_argument("--json-logs", action="store_true", default=None, help="Emit logs as JSON")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Layers command line overrides on top of environment/.env settings."""
    overrides = {
        "BASE_DIR": args.base_dir,
        "PYTHON_EXECUTABLE": args.python_executable,
        "NSSM_EXECUTABLE": args.nssm_executable,
        "SERVICE_DESCRIPTION": args.description,
        "LOG_LEVEL": args.log_level,
        "JSON_LOGS": args.json_logs,
    }
    base = get_settings().model_dump()
    base.update({key: value for key, value in overrides.items() if value is not None})
    return Settings.model_validate(base)


def build_provisioner(settings: Settings) -> Provisioner:
    return Provisioner(settings)


def report_failure(exc: BaseException) -> None:
    info = describe_error(exc)
    print_error(info["message"])
    print_info(info["suggestion"])
    print_error(str(exc), icon="  ")


def tolerate_unencodable_output() -> None:
    """
    Redirected output on Windows uses the ANSI code page, which has no glyph
    for the status icons; print a replacement character instead of failing.
    """
    for stream in (sys.stdout, sys.stderr):
        if stream is not None and hasattr(stream, "reconfigure"):
            stream.reconfigure(errors="replace")


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    tolerate_unencodable_output()

    # Settings loading may log; route it to stderr before anything prints.
    configure_logging()
    try:
        settings = load_settings(args)
    except ValidationError as e:
        log.error("settings_invalid", errors=e.errors(include_url=False))
        report_failure(e)
        return 1

    configure_logging(settings.LOG_LEVEL, settings.JSON_LOGS)
    provisioner = build_provisioner(settings)

    try:
        if args.status:
            print(provisioner.status(args.project))
            return 0
        if args.uninstall:
            if provisioner.deprovision(args.project):
                print_success("Service removed")
            else:
                print_warning("Service was not installed")
            return 0
        result = provisioner.provision(args.project)
    except ProvisionerException as e:
        log.error(
            "provision_failed",
            error_type=type(e).__name__,
            error=str(e),
            command=getattr(e, "command", None),
            output=getattr(e, "output", None),
        )
        report_failure(e)
        return 1
    except Exception as e:
        log.exception("provision_crashed")
        report_failure(e)
        return 1

    print_summary(result)
    return 0


def main():
    """Main entry point"""
    sys.exit(run())


if __name__ == "__main__":
    main()
