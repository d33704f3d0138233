"""
Terminal output for every mode.

  print_list            — one line per registry entry: index + name
  print_outcome         — one line per audited/fixed entry, with marker
  print_audit_summary   — totals panel after `audit`
  print_fix_summary     — totals panel after `fix` / `fix-force`
  print_usage           — help text

Nothing here decides pass/fail — it only renders RunResult / RunSummary.
"""

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from maclockdown.registry import Registry
from maclockdown.settings.base import RunResult, RunSummary
from maclockdown.ui.theme import (
    APP_NAME,
    APP_TAGLINE,
    APP_VERSION,
    COLOR_DIM,
    ICON_FAIL,
    ICON_FIX_FAILED,
    ICON_FIXED,
    ICON_LOCK,
    ICON_PASS,
    ICON_UNFIXABLE,
    OUTCOME_STYLES,
)

_OUTCOME_ICONS = {
    "pass": ICON_PASS,
    "fail": ICON_FAIL,
    "fixed": ICON_FIXED,
    "fix_failed": ICON_FIX_FAILED,
    "unfixable": ICON_UNFIXABLE,
}

_OUTCOME_MESSAGES = {
    "pass": "",
    "fail": "fails policy",
    "fixed": "fixed",
    "fix_failed": "fix failed",
    "unfixable": "no automatic fix — change manually",
}


# ── Public API ────────────────────────────────────────────────────────────────

def print_list(registry: Registry, console: Console, verbose: bool = False) -> None:
    """
    Print exactly one line per setting: its index and name.

    With verbose, each line is followed by the setting's description.
    """
    width = len(str(max(len(registry) - 1, 0)))
    for index, setting in enumerate(registry.list()):
        line = Text()
        line.append(f"  {index:>{width}}  ", style=COLOR_DIM)
        line.append(setting.name, style="text")
        if setting.fix_requires_sudo or setting.audit_requires_sudo:
            line.append(f"  {ICON_LOCK}", style=COLOR_DIM)
        console.print(line)
        if verbose and setting.description:
            console.print(f"  {'':>{width}}    {setting.description}", style="info", markup=False)


def outcome_of(result: RunResult, fixing: bool = False) -> str:
    """Classify a result: pass, fail, fixed, fix_failed or unfixable."""
    if result.passed:
        return "pass"
    if result.fixed:
        return "fixed"
    if result.fix_attempted:
        return "fix_failed"
    if fixing and not result.setting.has_fix:
        return "unfixable"
    return "fail"


def print_outcome(result: RunResult, console: Console, fixing: bool = False) -> None:
    """
    One-line result:
      ✅  Gatekeeper
      ❌  FileVault disk encryption  ·  fails policy
      🔧  Application firewall  ·  fixed
    """
    outcome = outcome_of(result, fixing=fixing)

    style = OUTCOME_STYLES[outcome]
    line = Text()
    line.append(f"  {_OUTCOME_ICONS[outcome]}  ", style=style)
    line.append(result.setting.name, style=style)
    message = _OUTCOME_MESSAGES[outcome]
    if message:
        line.append(f"  ·  {message}", style=COLOR_DIM)
    console.print(line)


def print_audit_summary(summary: RunSummary, console: Console) -> None:
    """Totals after an audit run."""
    body = Text()
    if summary.all_passed:
        body.append(f"\n  {ICON_PASS}  All settings passed!\n", style="pass")
        border = "pass"
    else:
        body.append(
            f"\n  {ICON_FAIL}  {summary.failed}/{summary.total} settings failed\n",
            style="fail",
        )
        body.append(f"\n  Run  {APP_NAME} fix  to remediate.\n", style=COLOR_DIM)
        border = "fail"

    console.print()
    console.print(
        Panel(body, title="[bold]Audit complete[/bold]", title_align="left", border_style=border)
    )


def print_fix_summary(summary: RunSummary, console: Console) -> None:
    """Totals after a fix run: needed fixing, fixed, fix failed, unfixable."""
    body = Text()
    if summary.all_passed:
        body.append(f"\n  {ICON_PASS}  All settings passed — nothing to fix!\n", style="pass")
        border = "pass"
    else:
        body.append(
            f"\n  {summary.failed}/{summary.total} settings needed fixing\n\n",
            style="text",
        )
        body.append(f"  {ICON_FIXED}  {summary.fixed} fixed\n", style="pass")
        if summary.fix_failed:
            body.append(f"  {ICON_FIX_FAILED} {summary.fix_failed} fix failed\n", style="warn")
        body.append(f"  {ICON_UNFIXABLE}  {summary.unfixable} unfixable\n", style=COLOR_DIM)
        border = "pass" if summary.all_fixed else "warn"

    console.print()
    console.print(
        Panel(body, title="[bold]Fix session complete[/bold]", title_align="left", border_style=border)
    )


def print_usage(console: Console) -> None:
    """Help text for `help`, `usage` and no arguments."""
    t = Text()
    t.append(f"\n  {APP_NAME} {APP_VERSION}", style="brand")
    t.append(f"  —  {APP_TAGLINE}\n\n", style=COLOR_DIM)
    t.append("  Usage:\n", style="text")
    t.append(f"    {APP_NAME} list                  List settings with their index\n")
    t.append(f"    {APP_NAME} audit [index]         Audit all settings, or one by index\n")
    t.append(f"    {APP_NAME} fix [index]           Audit, then fix failing settings (asks first)\n")
    t.append(f"    {APP_NAME} fix-force [index]     Same as fix, without asking\n")
    t.append(f"    {APP_NAME} help                  Show this message\n\n")
    t.append("  Options:\n", style="text")
    t.append("    -v, --verbose     Log every command that runs\n")
    t.append("    --config PATH     Use another config file\n")
    t.append("    --no-verify       Skip executable signature verification\n")
    t.append("    -V, --version     Show the version and exit\n")
    console.print(t)


def print_error(console: Console, message: str) -> None:
    line = Text()
    line.append("Error: ", style="fail")
    line.append(message)
    console.print(line)


def print_warning(console: Console, message: str) -> None:
    line = Text()
    line.append("Warning: ", style="warn")
    line.append(message)
    console.print(line)
