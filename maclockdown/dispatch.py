"""
Mode dispatcher.

resolve_mode() turns the positional arguments into an Invocation once;
nothing later changes the mode. run_audit() is the audit loop; the fix
loop lives in fixer/runner.py and shares select() and the CancelToken.
"""

from __future__ import annotations

import logging
import signal
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

from rich.console import Console

from maclockdown.errors import Cancelled, InputError
from maclockdown.fixer.executor import cache_sudo_credentials
from maclockdown.registry import Registry
from maclockdown.settings.base import RunResult, RunSummary, Setting
from maclockdown.ui.report import print_audit_summary, print_outcome, print_warning

logger = logging.getLogger("maclockdown.dispatch")


# ── Modes ─────────────────────────────────────────────────────────────────────

class Mode(Enum):
    LIST = "list"
    AUDIT_ALL = "audit_all"
    AUDIT_ONE = "audit_one"
    FIX_ALL = "fix_all"
    FIX_ONE = "fix_one"
    HELP = "help"
    INVALID = "invalid"


@dataclass(frozen=True)
class Invocation:
    mode: Mode
    index_token: str | None = None
    force: bool = False
    command: str | None = None

    @property
    def is_fix(self) -> bool:
        return self.mode in (Mode.FIX_ALL, Mode.FIX_ONE)

    @property
    def is_audit(self) -> bool:
        return self.mode in (Mode.AUDIT_ALL, Mode.AUDIT_ONE)


_HELP_TOKENS = frozenset(("help", "usage"))
_INDEXED = {
    "audit": (Mode.AUDIT_ALL, Mode.AUDIT_ONE, False),
    "fix": (Mode.FIX_ALL, Mode.FIX_ONE, False),
    "fix-force": (Mode.FIX_ALL, Mode.FIX_ONE, True),
}


def resolve_mode(args: Sequence[str]) -> Invocation:
    """
    Map positional arguments to an Invocation. Pure — no I/O.

      ()                    → HELP
      help | usage          → HELP
      list                  → LIST
      audit [N]             → AUDIT_ALL / AUDIT_ONE
      fix [N]               → FIX_ALL / FIX_ONE
      fix-force [N]         → FIX_ALL / FIX_ONE, force=True
      anything else         → INVALID
    """
    if not args:
        return Invocation(Mode.HELP)

    command, rest = args[0], list(args[1:])

    if command in _HELP_TOKENS and not rest:
        return Invocation(Mode.HELP, command=command)

    if command == "list" and not rest:
        return Invocation(Mode.LIST, command=command)

    if command in _INDEXED and len(rest) <= 1:
        all_mode, one_mode, force = _INDEXED[command]
        if rest:
            return Invocation(one_mode, index_token=rest[0], force=force, command=command)
        return Invocation(all_mode, force=force, command=command)

    return Invocation(Mode.INVALID, command=command)


def parse_index(token: str, size: int) -> int:
    """
    Validate a setting index against a registry of `size` entries.

    Raises InputError for non-integers and anything outside [0, size-1].
    There is no "run all" sentinel: leave the index off instead.
    """
    try:
        index = int(token.strip())
    except ValueError:
        raise InputError(f"Setting index must be an integer, got '{token}'") from None

    if not 0 <= index < size:
        if size == 0:
            raise InputError("No settings are available on this Mac")
        raise InputError(f"Setting index {index} is out of range (0-{size - 1})")
    return index


def select(registry: Registry, invocation: Invocation) -> list[Setting]:
    """Settings an audit/fix invocation applies to, in registry order."""
    if invocation.index_token is None:
        return list(registry.list())
    index = parse_index(invocation.index_token, len(registry))
    return [registry.get(index)]


# ── Cancellation ──────────────────────────────────────────────────────────────

class CancelToken:
    """Set by the interrupt handler; checked by the loops between entries."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise Cancelled("Aborted by user.")


@contextmanager
def cancel_on_interrupt(token: CancelToken) -> Iterator[CancelToken]:
    """
    Route SIGINT to token.cancel() for the duration of the block.

    The running child process gets the same SIGINT from the terminal and
    exits, so the loop reaches its next cancellation check promptly.
    """
    def _handler(signum, frame):
        token.cancel()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield token
    finally:
        signal.signal(signal.SIGINT, previous)


# ── Per-entry execution ───────────────────────────────────────────────────────

def safe_audit(setting: Setting) -> bool:
    """
    Run setting.audit(); an unexpected exception counts as a failure.

    One bad setting must never crash the whole run.
    """
    try:
        return bool(setting.audit())
    except Exception as e:
        logger.warning("Audit of %s raised %s: %s", setting.id, type(e).__name__, e)
        logger.debug("traceback", exc_info=True)
        return False


def ensure_sudo(settings: Sequence[Setting], console: Console, for_fix: bool) -> None:
    """
    Cache sudo credentials once if any selected setting needs them.

    Failing to cache is only a warning — the privileged commands will
    fail individually and be reported as such.
    """
    if for_fix:
        needs = any(s.fix_requires_sudo or s.audit_requires_sudo for s in settings)
    else:
        needs = any(s.audit_requires_sudo for s in settings)
    if not needs:
        return
    if not cache_sudo_credentials():
        print_warning(
            console,
            "Could not obtain administrator privileges — privileged settings will fail.",
        )


# ── Audit loop ────────────────────────────────────────────────────────────────

def audit_settings(
    settings: Sequence[Setting],
    console: Console,
    token: CancelToken | None = None,
) -> RunSummary:
    """
    Audit each setting in order, print its outcome, and fold a RunSummary.

    SIGINT during the loop sets the token; the run stops at the next
    entry boundary, including after the last entry, and raises Cancelled.
    """
    token = token or CancelToken()
    summary = RunSummary()

    with cancel_on_interrupt(token):
        for setting in settings:
            token.raise_if_cancelled()
            logger.debug("auditing %s", setting.id)
            result = RunResult(setting=setting, passed=safe_audit(setting))
            print_outcome(result, console)
            summary.add(result)
        token.raise_if_cancelled()

    return summary


def run_audit(
    registry: Registry,
    invocation: Invocation,
    console: Console,
    token: CancelToken | None = None,
) -> RunSummary:
    """
    AUDIT_ALL / AUDIT_ONE: validate the index, audit, print the summary.

    Raises InputError before anything runs if the index is bad.
    """
    settings = select(registry, invocation)
    ensure_sudo(settings, console, for_fix=False)
    summary = audit_settings(settings, console, token)
    print_audit_summary(summary, console)
    return summary
