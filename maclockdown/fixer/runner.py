"""
Fix session orchestrator.

  1. Confirmation gate — one yes/no before anything changes
     (skipped by fix-force).
  2. For each selected setting: audit; if it fails and has a fix, run
     the fix; if it has no fix, count it as unfixable.
  3. Summary panel: needed fixing / fixed / fix failed / unfixable.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence

import click
from rich.console import Console
from rich.panel import Panel
from rich.text import Text
from simple_term_menu import TerminalMenu

from maclockdown.dispatch import (
    CancelToken,
    Invocation,
    cancel_on_interrupt,
    ensure_sudo,
    safe_audit,
    select,
)
from maclockdown.errors import Cancelled
from maclockdown.registry import Registry
from maclockdown.settings.base import RunResult, RunSummary, Setting
from maclockdown.ui.report import print_fix_summary, print_outcome
from maclockdown.ui.theme import COLOR_BRAND, COLOR_DIM, ICON_LOCK

logger = logging.getLogger("maclockdown.fixer")


# ── Public API ────────────────────────────────────────────────────────────────

def confirm_fix(settings: Sequence[Setting], console: Console) -> bool:
    """
    Ask once whether to change system settings.

    Arrow-key menu on a terminal; plain y/N prompt when stdin is piped.
    Esc and EOF count as "no". Ctrl-C aborts the whole run (Cancelled).
    """
    _print_fix_mode_panel(settings, console)

    if sys.stdin.isatty():
        menu = TerminalMenu(
            ["No, cancel", "Yes, apply fixes"],
            menu_cursor="› ",
            menu_cursor_style=("fg_cyan", "bold"),
            menu_highlight_style=("fg_cyan", "bold"),
            cursor_index=0,
            raise_error_on_interrupt=True,
        )
        try:
            return menu.show() == 1
        except KeyboardInterrupt:
            raise Cancelled("Aborted by user.") from None

    try:
        return click.confirm("  Apply fixes?", default=False)
    except click.Abort as e:
        # click raises Abort for both Ctrl-C and EOF; only Ctrl-C aborts
        if isinstance(e.__context__, KeyboardInterrupt):
            raise Cancelled("Aborted by user.") from None
        return False


def fix_settings(
    settings: Sequence[Setting],
    console: Console,
    token: CancelToken | None = None,
) -> RunSummary:
    """Audit each setting; fix the failing ones that have a fix action."""
    token = token or CancelToken()
    summary = RunSummary()

    with cancel_on_interrupt(token):
        for setting in settings:
            token.raise_if_cancelled()
            result = _fix_one(setting)
            print_outcome(result, console, fixing=True)
            summary.add(result)
        token.raise_if_cancelled()

    return summary


def run_fix(
    registry: Registry,
    invocation: Invocation,
    console: Console,
    token: CancelToken | None = None,
) -> RunSummary | None:
    """
    FIX_ALL / FIX_ONE.

    Returns None if the user declined the confirmation; in that case no
    audit or fix action has run. Raises InputError before anything runs
    if the index is bad, and Cancelled on Ctrl-C at the prompt or during
    the loop.
    """
    settings = select(registry, invocation)

    if not invocation.force and not confirm_fix(settings, console):
        console.print("\n  [dim]Cancelled — no changes made.[/dim]\n")
        return None

    ensure_sudo(settings, console, for_fix=True)
    summary = fix_settings(settings, console, token)
    print_fix_summary(summary, console)
    return summary


# ── Execution helpers ─────────────────────────────────────────────────────────

def _fix_one(setting: Setting) -> RunResult:
    """Audit, then fix if needed. Exceptions count as a failed fix."""
    logger.debug("auditing %s", setting.id)
    if safe_audit(setting):
        return RunResult(setting=setting, passed=True)

    if not setting.has_fix:
        logger.debug("%s has no fix action", setting.id)
        return RunResult(setting=setting, passed=False)

    logger.debug("fixing %s", setting.id)
    try:
        fixed = bool(setting.fix())
    except Exception as e:
        logger.warning("Fix of %s raised %s: %s", setting.id, type(e).__name__, e)
        logger.debug("traceback", exc_info=True)
        fixed = False

    if not fixed:
        logger.warning("Fix for %s did not succeed", setting.id)
    return RunResult(setting=setting, passed=False, fix_attempted=True, fixed=fixed)


# ── UI helpers ────────────────────────────────────────────────────────────────

def _print_fix_mode_panel(settings: Sequence[Setting], console: Console) -> None:
    """Header panel: what may change, and that nothing runs until confirmed."""
    n = len(settings)
    privileged = sum(1 for s in settings if s.fix_requires_sudo)

    body = Text()
    body.append(f"\n  {n} setting{'s' if n != 1 else ''} will be audited; ")
    body.append("failing ones with an automatic fix will be changed.\n")
    for setting in settings:
        if setting.has_fix:
            body.append(f"    · {setting.fix_description}\n", style="info")
    if privileged:
        body.append(
            f"  {ICON_LOCK}  {privileged} of them need an administrator password.\n",
            style=COLOR_DIM,
        )
    body.append("\n  Nothing runs until you confirm.\n", style=COLOR_DIM)

    console.print()
    console.print(
        Panel(body, title="[bold magenta]Fix Mode[/bold magenta]", title_align="left",
              border_style=COLOR_BRAND)
    )
    console.print()
