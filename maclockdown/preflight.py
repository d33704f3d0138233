"""
Precondition checks — run once, before any setting is touched.

  check_platform()    — must be macOS
  check_os_version()  — macOS major version must be one we support
  verify_signature()  — minisign check of the running executable

Any failure raises PreflightError, which aborts the invocation.
"""

from __future__ import annotations

import logging
import platform
import sys
from pathlib import Path

from rich.console import Console

from maclockdown.errors import PreflightError
from maclockdown.fixer.executor import capture, command_available
from maclockdown.system_info import IS_MACOS, MACOS_VERSION, MACOS_VERSION_STRING
from maclockdown.ui.report import print_warning

logger = logging.getLogger("maclockdown.preflight")

MINISIGN = "minisign"


def check_platform(is_macos: bool | None = None) -> None:
    if is_macos is None:
        is_macos = IS_MACOS
    if not is_macos:
        raise PreflightError(f"maclockdown only runs on macOS (this is {platform.system()})")


def check_os_version(
    supported: set[int],
    version: tuple[int, int] | None = None,
    version_string: str | None = None,
) -> None:
    """The setting commands are only known-good on these macOS majors."""
    if version is None:
        version, version_string = MACOS_VERSION, MACOS_VERSION_STRING
    if version[0] not in supported:
        majors = ", ".join(str(v) for v in sorted(supported))
        raise PreflightError(
            f"macOS {version_string or version[0]} is not supported (supported: {majors})"
        )


def executable_path() -> Path:
    """The file that was launched — the console script or __main__."""
    return Path(sys.argv[0]).resolve()


def verify_signature(path: Path, public_key: str, console: Console) -> bool:
    """
    Verify path against path.minisig with minisign.

    Returns False (after a warning) if minisign isn't installed.
    Raises PreflightError if minisign is installed and verification fails.
    """
    if not command_available(MINISIGN):
        print_warning(
            console,
            "minisign not found — skipping signature verification "
            "(brew install minisign to enable it).",
        )
        return False

    rc, stdout, stderr = capture(
        [MINISIGN, "-V", "-P", public_key, "-m", str(path)],
        timeout=30,
    )
    if rc != 0:
        detail = (stderr or stdout).strip().splitlines()
        raise PreflightError(
            f"Signature verification failed for {path}"
            + (f": {detail[-1]}" if detail else "")
        )

    logger.debug("signature OK for %s", path)
    return True


def run_preflight(config: dict, console: Console, verify: bool = True) -> None:
    """Run every precondition in order; the first failure raises."""
    check_platform()
    check_os_version(config["supported_macos"])
    if verify and config["verify_signature"]:
        verify_signature(executable_path(), config["minisign_public_key"], console)
    else:
        logger.debug("signature verification disabled")
