"""
Host detection — platform, macOS version, architecture, T2 chip.

The registry and the preflight checks both read from here.
Off macOS every value degrades to a harmless default instead of raising.
"""

import platform
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from maclockdown.fixer.executor import capture


def _parse_version(raw: str) -> tuple[int, int]:
    """Turn '15.3.1' into (15, 3). Empty or malformed input gives (0, 0)."""
    parts = raw.strip().split(".")
    try:
        major = int(parts[0])
        minor = int(parts[1]) if len(parts) > 1 else 0
    except (ValueError, IndexError):
        return (0, 0)
    return (major, minor)


# Module-level constants
IS_MACOS: bool = platform.system() == "Darwin"

MACOS_VERSION_STRING: str = platform.mac_ver()[0]  # e.g. "15.3.1", "" off macOS

MACOS_VERSION: tuple[int, int] = _parse_version(MACOS_VERSION_STRING)  # e.g. (15, 3)

IS_APPLE_SILICON: bool = IS_MACOS and platform.machine() == "arm64"


@dataclass(frozen=True)
class HostInfo:
    """Capabilities the registry filters settings against."""

    macos_version: tuple[int, int]
    is_macos: bool
    is_apple_silicon: bool
    has_t2: bool


def _read(cmd: list[str], timeout: int = 5) -> str:
    """Stripped stdout of cmd, or '' if it fails for any reason."""
    rc, stdout, _ = capture(cmd, timeout=timeout)
    return stdout.strip() if rc == 0 else ""


@lru_cache(maxsize=1)
def has_t2_chip() -> bool:
    """
    Return True if this Intel Mac has an Apple T2 security chip.

    Apple Silicon Macs report False — the T2 only exists on Intel models.
    """
    if not IS_MACOS or IS_APPLE_SILICON:
        return False
    out = _read(["system_profiler", "SPiBridgeDataType"], timeout=8)
    return "T2" in out


def current_host() -> HostInfo:
    """Snapshot of the running host for registry filtering."""
    return HostInfo(
        macos_version=MACOS_VERSION,
        is_macos=IS_MACOS,
        is_apple_silicon=IS_APPLE_SILICON,
        has_t2=has_t2_chip(),
    )


@lru_cache(maxsize=1)
def get_system_info() -> dict[str, Any]:
    """
    Return a dict describing this host, for the header and debug log.

    Keys:
        system              "Darwin" | "Linux" | ...
        macos_version       "15.3.1" ("" off macOS)
        macos_version_tuple (15, 3)
        macos_name          "Sequoia"  (or "Unknown")
        architecture        "Apple Silicon" | "Intel"
        machine             "arm64" | "x86_64"
        model               "MacBookPro18,3" | "Mac"
    """
    return {
        "system": platform.system(),
        "macos_version": MACOS_VERSION_STRING,
        "macos_version_tuple": MACOS_VERSION,
        "macos_name": _macos_name(MACOS_VERSION[0]),
        "architecture": "Apple Silicon" if IS_APPLE_SILICON else "Intel",
        "machine": platform.machine(),
        "model": (_read(["sysctl", "-n", "hw.model"]) if IS_MACOS else "") or "Mac",
    }


# ── Internal helpers ──────────────────────────────────────────────────────────

_MACOS_NAMES: dict[int, str] = {
    13: "Ventura",
    14: "Sonoma",
    15: "Sequoia",
    26: "Tahoe",
}


def _macos_name(major: int) -> str:
    """Map a macOS major version number to its marketing name (e.g. 15 → 'Sequoia')."""
    return _MACOS_NAMES.get(major, "Unknown")
