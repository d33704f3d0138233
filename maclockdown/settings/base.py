"""
Core data model for maclockdown settings.

Setting    — abstract base class every checklist entry inherits from.
RunResult  — outcome of running one setting in one invocation.
RunSummary — counters accumulated from RunResults.

This file is the single source of truth for the data shape.
"""

import plistlib
from abc import ABC, abstractmethod
from dataclasses import dataclass

from maclockdown.fixer.executor import capture, run_command
from maclockdown.system_info import HostInfo


# ── Base class ────────────────────────────────────────────────────────────────

class Setting(ABC):
    """
    Abstract base class for all maclockdown settings.

    Subclasses must:
      1. Set class attributes (id, name, category, …)
      2. Override audit() to return True when the Mac is compliant
      3. Optionally override fix() — without it the setting is unfixable

    audit() is a read-only predicate; fix() mutates system state and
    must be idempotent. Both return False on failure rather than raising.
    """

    # Subclasses override these as class attributes
    id: str = "base_setting"
    name: str = "Base Setting"
    category: str = "system"

    description: str = ""
    fix_description: str = "No automatic fix available"

    audit_requires_sudo: bool = False
    fix_requires_sudo: bool = False

    # Capability gates, checked by supported_on()
    min_macos: tuple[int, int] = (13, 0)
    apple_silicon_compatible: bool = True
    intel_compatible: bool = True
    requires_t2: bool | None = None     # None = either; False = must not have a T2

    # ── Public API ────────────────────────────────────────────────────────────

    @abstractmethod
    def audit(self) -> bool:
        """Return True when the setting currently satisfies policy."""

    def fix(self) -> bool:
        """Bring the setting into compliance. Return True on success."""
        raise NotImplementedError(f"{self.id} has no automatic fix")

    @property
    def has_fix(self) -> bool:
        """True when the subclass provides its own fix()."""
        return type(self).fix is not Setting.fix

    def supported_on(self, host: HostInfo) -> bool:
        """Return True if this setting can be audited on host."""
        if host.macos_version < self.min_macos:
            return False
        if host.is_apple_silicon and not self.apple_silicon_compatible:
            return False
        if not host.is_apple_silicon and not self.intel_compatible:
            return False
        if self.requires_t2 is not None and host.has_t2 != self.requires_t2:
            return False
        return True

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"

    # ── Helper methods ────────────────────────────────────────────────────────

    def shell(
        self,
        cmd: list[str],
        timeout: int = 10,
        sudo: bool = False,
    ) -> tuple[int, str, str]:
        """(returncode, stdout, stderr) for cmd; -1 on timeout or missing binary."""
        return capture(cmd, sudo=sudo, timeout=timeout)

    def succeeds(self, cmd: list[str], sudo: bool = False, input: str | None = None) -> bool:
        """True iff cmd exits 0."""
        return run_command(cmd, sudo=sudo, input=input)

    def read_default(self, domain: str, key: str, sudo: bool = False) -> str | None:
        """
        Read one preference value with `defaults read`.

        Returns the stripped value, or None when the key (or domain) is absent.
        `domain` may be a domain name, a plist path, or "-app Name".
        """
        rc, stdout, _ = self.shell(["defaults", "read", *_domain_args(domain), key], sudo=sudo)
        if rc != 0:
            return None
        return stdout.strip()

    def default_is(self, domain: str, key: str, expected: str, sudo: bool = False) -> bool:
        """True iff the preference is present and equals expected ("1", "0", …)."""
        return self.read_default(domain, key, sudo=sudo) == expected

    def write_bool_default(
        self,
        domain: str,
        key: str,
        value: bool,
        sudo: bool = False,
    ) -> bool:
        """Write a boolean preference with `defaults write … -bool`."""
        flag = "true" if value else "false"
        return self.succeeds(
            ["defaults", "write", *_domain_args(domain), key, "-bool", flag],
            sudo=sudo,
        )

    def read_plist_output(self, cmd: list[str], sudo: bool = False) -> dict | None:
        """Run cmd and parse its stdout as a property list; None if that fails."""
        rc, stdout, _ = self.shell(cmd, sudo=sudo)
        if rc != 0 or not stdout.strip():
            return None
        try:
            data = plistlib.loads(stdout.encode("utf-8"))
        except (plistlib.InvalidFileException, ValueError):
            return None
        return data if isinstance(data, dict) else None


def _domain_args(domain: str) -> list[str]:
    """'-app Terminal' → ['-app', 'Terminal']; anything else is one argument."""
    if domain.startswith("-app "):
        return ["-app", domain[len("-app "):]]
    return [domain]


# ── Run results ───────────────────────────────────────────────────────────────

@dataclass
class RunResult:
    setting: Setting
    passed: bool
    fix_attempted: bool = False
    fixed: bool = False


@dataclass
class RunSummary:
    """Aggregate counters for one audit or fix run."""

    total: int = 0
    failed: int = 0
    fixed: int = 0
    unfixable: int = 0

    def add(self, result: RunResult) -> "RunSummary":
        """Fold one result into the counters and return self."""
        self.total += 1
        if not result.passed:
            self.failed += 1
            if result.fixed:
                self.fixed += 1
            elif not result.setting.has_fix:
                self.unfixable += 1
        return self

    @property
    def fix_failed(self) -> int:
        """Entries with a fix action whose fix did not succeed."""
        return self.failed - self.fixed - self.unfixable

    @property
    def all_passed(self) -> bool:
        return self.failed == 0

    @property
    def all_fixed(self) -> bool:
        return self.failed == self.fixed
