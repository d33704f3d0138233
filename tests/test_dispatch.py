"""
Tests for dispatch.py.

Covers:
  - resolve_mode:  argument → mode table
  - parse_index:   integer/range validation
  - run_audit:     audit-all, audit-one, summaries, bad indices
  - CancelToken and the SIGINT hook
"""

import signal
from unittest.mock import patch

import pytest

from maclockdown.dispatch import (
    CancelToken,
    Invocation,
    Mode,
    audit_settings,
    cancel_on_interrupt,
    ensure_sudo,
    parse_index,
    resolve_mode,
    run_audit,
    safe_audit,
)
from maclockdown.errors import Cancelled, InputError
from maclockdown.registry import Registry


# ── resolve_mode ──────────────────────────────────────────────────────────────

class TestResolveMode:
    @pytest.mark.parametrize("args", [(), ("help",), ("usage",)])
    def test_help(self, args):
        assert resolve_mode(args).mode is Mode.HELP

    def test_list(self):
        assert resolve_mode(("list",)).mode is Mode.LIST

    def test_list_with_extra_argument_is_invalid(self):
        assert resolve_mode(("list", "3")).mode is Mode.INVALID

    def test_audit_all(self):
        inv = resolve_mode(("audit",))
        assert inv.mode is Mode.AUDIT_ALL
        assert inv.index_token is None

    def test_audit_one(self):
        inv = resolve_mode(("audit", "4"))
        assert inv.mode is Mode.AUDIT_ONE
        assert inv.index_token == "4"

    def test_fix_is_not_forced(self):
        inv = resolve_mode(("fix",))
        assert inv.mode is Mode.FIX_ALL
        assert inv.force is False

    def test_fix_force_one(self):
        inv = resolve_mode(("fix-force", "0"))
        assert inv.mode is Mode.FIX_ONE
        assert inv.force is True
        assert inv.is_fix and not inv.is_audit

    @pytest.mark.parametrize("args", [
        ("bogus",),
        ("audit", "1", "2"),
        ("AUDIT",),
        ("fix", "1", "extra"),
    ])
    def test_invalid(self, args):
        assert resolve_mode(args).mode is Mode.INVALID

    def test_index_token_is_not_validated_here(self):
        # validation happens against the registry, later
        assert resolve_mode(("audit", "abc")).index_token == "abc"


# ── parse_index ───────────────────────────────────────────────────────────────

class TestParseIndex:
    def test_valid_bounds(self):
        assert parse_index("0", 18) == 0
        assert parse_index("17", 18) == 17

    @pytest.mark.parametrize("token", ["-1", "18", "100"])
    def test_out_of_range(self, token):
        with pytest.raises(InputError, match="out of range"):
            parse_index(token, 18)

    @pytest.mark.parametrize("token", ["abc", "1.5", "", "0x1"])
    def test_not_an_integer(self, token):
        with pytest.raises(InputError, match="must be an integer"):
            parse_index(token, 18)

    def test_empty_registry(self):
        with pytest.raises(InputError, match="No settings"):
            parse_index("0", 0)


# ── run_audit ─────────────────────────────────────────────────────────────────

class TestRunAudit:
    def test_all_pass(self, make_setting, console, calls):
        registry = Registry([make_setting("a"), make_setting("b"), make_setting("c")])
        summary = run_audit(registry, Invocation(Mode.AUDIT_ALL), console)
        assert summary.all_passed
        assert summary.total == 3
        assert "All settings passed!" in console.file.getvalue()
        assert calls == [("audit", "a"), ("audit", "b"), ("audit", "c")]

    def test_one_failure(self, make_setting, console):
        registry = Registry([
            make_setting("a"),
            make_setting("b", passes=False),
            make_setting("c"),
        ])
        summary = run_audit(registry, Invocation(Mode.AUDIT_ALL), console)
        assert (summary.failed, summary.total) == (1, 3)
        assert "1/3 settings failed" in console.file.getvalue()

    def test_audit_one_runs_only_that_entry(self, make_setting, console, calls):
        registry = Registry([make_setting("a"), make_setting("b"), make_setting("c")])
        summary = run_audit(registry, Invocation(Mode.AUDIT_ONE, index_token="1"), console)
        assert calls == [("audit", "b")]
        assert summary.total == 1

    @pytest.mark.parametrize("token", ["-1", "3", "x"])
    def test_bad_index_runs_nothing(self, make_setting, console, calls, token):
        registry = Registry([make_setting("a"), make_setting("b"), make_setting("c")])
        with pytest.raises(InputError):
            run_audit(registry, Invocation(Mode.AUDIT_ONE, index_token=token), console)
        assert calls == []

    def test_audit_never_fixes(self, make_setting, console, calls):
        registry = Registry([make_setting("a", passes=False, fixable=True)])
        run_audit(registry, Invocation(Mode.AUDIT_ALL), console)
        assert ("fix", "a") not in calls

    def test_repeated_audits_agree(self, make_setting, console):
        registry = Registry([make_setting("a"), make_setting("b", passes=False)])
        first = run_audit(registry, Invocation(Mode.AUDIT_ALL), console)
        second = run_audit(registry, Invocation(Mode.AUDIT_ALL), console)
        assert first == second

    def test_failing_entry_has_fail_marker(self, make_setting, console):
        registry = Registry([make_setting("broken_thing", passes=False)])
        run_audit(registry, Invocation(Mode.AUDIT_ALL), console)
        out = console.file.getvalue()
        assert "❌" in out
        assert "Broken Thing" in out


class TestSafeAudit:
    def test_exception_counts_as_failure(self, make_setting):
        s = make_setting("a")
        with patch.object(type(s), "audit", side_effect=RuntimeError("boom")):
            assert safe_audit(s) is False


class TestEnsureSudo:
    def test_not_called_when_nothing_needs_it(self, make_setting, console):
        with patch("maclockdown.dispatch.cache_sudo_credentials") as mock:
            ensure_sudo([make_setting("a")], console, for_fix=True)
        mock.assert_not_called()

    def test_fix_needs_sudo(self, make_setting, console):
        s = make_setting("a")
        s.fix_requires_sudo = True
        with patch("maclockdown.dispatch.cache_sudo_credentials", return_value=True) as mock:
            ensure_sudo([s], console, for_fix=False)
            mock.assert_not_called()
            ensure_sudo([s], console, for_fix=True)
            mock.assert_called_once()

    def test_failure_is_a_warning(self, make_setting, console):
        s = make_setting("a")
        s.audit_requires_sudo = True
        with patch("maclockdown.dispatch.cache_sudo_credentials", return_value=False):
            ensure_sudo([s], console, for_fix=False)
        assert "Warning:" in console.file.getvalue()


# ── Cancellation ──────────────────────────────────────────────────────────────

class TestCancellation:
    def test_token_starts_clear(self):
        token = CancelToken()
        assert not token.cancelled
        token.raise_if_cancelled()

    def test_cancelled_token_raises(self):
        token = CancelToken()
        token.cancel()
        with pytest.raises(Cancelled) as exc:
            token.raise_if_cancelled()
        assert exc.value.exit_code == 130

    def test_loop_stops_before_next_entry(self, make_setting, console, calls):
        token = CancelToken()
        first = make_setting("a")

        def audit_then_cancel(self):
            calls.append(("audit", self.id))
            token.cancel()
            return True

        with patch.object(type(first), "audit", audit_then_cancel):
            with pytest.raises(Cancelled):
                audit_settings([first, make_setting("b")], console, token)
        assert calls == [("audit", "a")]

    def test_sigint_sets_token_and_restores_handler(self):
        before = signal.getsignal(signal.SIGINT)
        token = CancelToken()
        with cancel_on_interrupt(token):
            signal.raise_signal(signal.SIGINT)
            assert token.cancelled
        assert signal.getsignal(signal.SIGINT) is before

    def test_cancel_during_only_entry_aborts(self, make_setting, console, calls):
        token = CancelToken()
        only = make_setting("a")

        def audit_then_cancel(self):
            calls.append(("audit", self.id))
            token.cancel()
            return True

        registry = Registry([only])
        with patch.object(type(only), "audit", audit_then_cancel):
            with pytest.raises(Cancelled):
                run_audit(registry, Invocation(Mode.AUDIT_ONE, index_token="0"), console, token)
        assert calls == [("audit", "a")]
        assert "Audit complete" not in console.file.getvalue()

    def test_sigint_during_audit_aborts(self, make_setting, console):
        before = signal.getsignal(signal.SIGINT)
        last = make_setting("a")

        def audit_interrupted(self):
            signal.raise_signal(signal.SIGINT)
            return True

        with patch.object(type(last), "audit", audit_interrupted):
            with pytest.raises(Cancelled):
                audit_settings([last], console)
        assert signal.getsignal(signal.SIGINT) is before
