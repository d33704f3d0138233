"""
Shared pytest fixtures.
"""
from io import StringIO

import pytest
from rich.console import Console

from maclockdown import system_info
from maclockdown.settings.base import Setting
from maclockdown.system_info import HostInfo
from maclockdown.ui.theme import LOCKDOWN_THEME


@pytest.fixture(autouse=True)
def clear_lru_caches():
    """Prevent lru_cache state from leaking between tests."""
    yield
    system_info.get_system_info.cache_clear()
    system_info.has_t2_chip.cache_clear()


@pytest.fixture
def calls() -> list:
    """Records ("audit" | "fix", setting_id) in the order they happen."""
    return []


@pytest.fixture
def make_setting(calls):
    """
    Factory for in-memory settings.

        make_setting("alpha", passes=False, fixable=True, fix_ok=True)

    audit() returns `passes`; fix() (only defined when fixable) returns
    `fix_ok`. Every call is appended to the `calls` fixture.
    """
    def _make(
        setting_id: str,
        passes: bool = True,
        fixable: bool = True,
        fix_ok: bool = True,
        name: str | None = None,
    ) -> Setting:
        def audit(self):
            calls.append(("audit", self.id))
            return passes

        attrs = {
            "id": setting_id,
            "name": name or setting_id.replace("_", " ").title(),
            "category": "test",
            "description": f"{setting_id} is locked down",
            "fix_description": f"Locks down {setting_id}",
            "audit": audit,
        }

        if fixable:
            def fix(self):
                calls.append(("fix", self.id))
                return fix_ok
            attrs["fix"] = fix

        cls = type(f"Fake_{setting_id}", (Setting,), attrs)
        return cls()

    return _make


@pytest.fixture
def intel_host() -> HostInfo:
    return HostInfo(macos_version=(15, 3), is_macos=True, is_apple_silicon=False, has_t2=False)


@pytest.fixture
def silicon_host() -> HostInfo:
    return HostInfo(macos_version=(15, 3), is_macos=True, is_apple_silicon=True, has_t2=False)


@pytest.fixture
def console() -> Console:
    """Themed console writing to a buffer; read it back with console.file.getvalue()."""
    return Console(file=StringIO(), theme=LOCKDOWN_THEME, highlight=False, no_color=True, width=100)
