"""
maclockdown look and feel.

Colors, icons and the rich Theme in one place; other modules refer to
style names ("pass", "fail", …) rather than raw colors.

Dark or light palette is picked once, at import, from the macOS
appearance setting.
"""

from rich.theme import Theme

from maclockdown import __version__
from maclockdown.fixer.executor import capture


# ── Brand ─────────────────────────────────────────────────────────────────────

APP_NAME = "maclockdown"
APP_TAGLINE = "macOS security settings auditor"
APP_VERSION = __version__


# ── Appearance ────────────────────────────────────────────────────────────────

def _is_dark_mode() -> bool:
    """
    Read the global AppleInterfaceStyle preference.

    It holds "Dark" in dark mode and is absent (exit 1) in light mode.
    Any other failure, including running off macOS, keeps the dark palette.
    """
    rc, stdout, _ = capture(["defaults", "read", "-g", "AppleInterfaceStyle"], timeout=2)
    if rc == 0:
        return "Dark" in stdout
    return rc != 1


DARK_MODE: bool = _is_dark_mode()


# ── Color palette ─────────────────────────────────────────────────────────────

if DARK_MODE:
    COLOR_FAIL  = "#E05252"      # Warm severity red
    COLOR_WARN  = "#D4870A"      # Amber
    COLOR_PASS  = "#4DBD74"      # Calm sage-green
    COLOR_INFO  = "#5BA3C9"      # Slate blue
    COLOR_BRAND = "#7B9FD4"      # Periwinkle blue
    COLOR_DIM   = "#787878"      # Medium gray
    COLOR_TEXT  = "#F0F0F0"      # Near-white
else:
    # WCAG AA contrast (≥ 4.5:1) on white backgrounds
    COLOR_FAIL  = "#B91C1C"
    COLOR_WARN  = "#92400E"
    COLOR_PASS  = "#166534"
    COLOR_INFO  = "#0369A1"
    COLOR_BRAND = "#1D4ED8"
    COLOR_DIM   = "#4B5563"
    COLOR_TEXT  = "#0F172A"


# ── Markers ───────────────────────────────────────────────────────────────────
# Every outcome gets its own marker so failures are distinguishable at a glance.

ICON_PASS = "✅"
ICON_FAIL = "❌"
ICON_FIXED = "🔧"
ICON_FIX_FAILED = "⚠️ "
ICON_UNFIXABLE = "🚫"
ICON_LOCK = "🔐"

OUTCOME_STYLES: dict[str, str] = {
    "pass": "pass",
    "fail": "fail",
    "fixed": "pass",
    "fix_failed": "warn",
    "unfixable": "fail",
}


# ── Rich Theme ────────────────────────────────────────────────────────────────

LOCKDOWN_THEME = Theme(
    {
        "fail":  f"{COLOR_FAIL} bold",
        "warn":  f"{COLOR_WARN} bold",
        "pass":  f"{COLOR_PASS} bold",
        "info":  COLOR_INFO,
        "brand": f"{COLOR_BRAND} bold",
        "dim":   COLOR_DIM,
        "text":  COLOR_TEXT,
    }
)
