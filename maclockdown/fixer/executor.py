"""
Execution shim — every external process maclockdown starts goes through here.

run_command()           — exit status only: True iff the command exits 0
capture()               — (returncode, stdout, stderr) for value reads
cache_sudo_credentials() — `sudo -v` once, so privileged entries don't
                           each prompt for a password

Commands are argv lists built from constants in the setting definitions,
never from user input. One attempt each, no retries.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess

logger = logging.getLogger("maclockdown.executor")

DEFAULT_TIMEOUT = 120

# Force C locale so command output is always English, regardless of the
# user's system language (e.g. "Enabled" vs "Activé" in French).
_C_LOCALE = {"LANG": "C", "LC_ALL": "C"}


def _is_root() -> bool:
    return os.geteuid() == 0


def _with_sudo(cmd: list[str], sudo: bool) -> list[str]:
    """Prefix argv with sudo when elevation is wanted and we aren't root."""
    if sudo and not _is_root():
        return ["sudo", *cmd]
    return list(cmd)


def command_available(tool: str) -> bool:
    """Return True if tool is available in PATH (or is an existing absolute path)."""
    if os.path.isabs(tool):
        return os.path.exists(tool)
    return shutil.which(tool) is not None


def run_command(
    cmd: list[str],
    sudo: bool = False,
    timeout: int = DEFAULT_TIMEOUT,
    input: str | None = None,
) -> bool:
    """
    Run cmd and report success as a bool.

    Output is discarded; only the exit status matters. A missing binary,
    a timeout or any OS error is logged and reported as False.
    """
    argv = _with_sudo(cmd, sudo)
    logger.debug("run: %s", " ".join(argv))
    try:
        proc = subprocess.run(
            argv,
            input=input,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            timeout=timeout,
            check=False,
            env={**os.environ, **_C_LOCALE},
        )
    except subprocess.TimeoutExpired:
        logger.warning("Command timed out after %ss: %s", timeout, " ".join(argv))
        return False
    except FileNotFoundError:
        logger.warning("Command not found: %s", argv[0])
        return False
    except OSError as e:
        logger.warning("Could not run %s: %s", argv[0], e)
        return False

    if proc.returncode != 0:
        logger.debug(
            "exit %d from %s: %s", proc.returncode, argv[0], (proc.stderr or "").strip()[:200]
        )
    return proc.returncode == 0


def capture(
    cmd: list[str],
    sudo: bool = False,
    timeout: int = 10,
) -> tuple[int, str, str]:
    """
    Run cmd and return (returncode, stdout, stderr) — all strings, never None.

    On timeout or missing binary, returncode is -1 and stderr contains a
    human-readable error description.
    """
    argv = _with_sudo(cmd, sudo)
    logger.debug("capture: %s", " ".join(argv))
    try:
        result = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
            env={**os.environ, **_C_LOCALE},
        )
        return result.returncode, result.stdout, result.stderr
    except subprocess.TimeoutExpired:
        return -1, "", f"Command timed out after {timeout}s: {' '.join(argv)}"
    except FileNotFoundError:
        return -1, "", f"Command not found: {argv[0]}"
    except OSError as e:
        return -1, "", str(e)


def cache_sudo_credentials() -> bool:
    """
    Prompt for the administrator password once and cache it.

    Returns True when already root or `sudo -v` succeeds. The prompt needs
    the terminal, so stdin/stdout are not redirected.
    """
    if _is_root():
        return True
    logger.debug("caching sudo credentials")
    try:
        return subprocess.run(["sudo", "-v"], check=False).returncode == 0
    except (FileNotFoundError, OSError) as e:
        logger.warning("Could not cache sudo credentials: %s", e)
        return False
