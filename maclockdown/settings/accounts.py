"""
Account and authorization settings.

Admin password for system-wide preference panes, and the guest account.
"""

import plistlib

from maclockdown.settings.base import Setting

_LOGINWINDOW = "/Library/Preferences/com.apple.loginwindow"
_PREFERENCES_RIGHT = "system.preferences"


def _lock_rule(rule: dict) -> dict:
    """
    Return a copy of an authorization rule that no longer lets any
    user in the admin group through without authenticating.
    """
    locked = dict(rule)
    locked["shared"] = False
    return locked


class AdminPasswordPreferences(Setting):
    id = "admin_password_preferences"
    name = "Admin password for system-wide preferences"
    category = "accounts"

    description = (
        "Unlocking system-wide settings panes asks for an administrator "
        "password every time instead of reusing the login session."
    )
    fix_description = "Sets shared=false on the system.preferences authorization right"
    fix_requires_sudo = True

    def _read_rule(self) -> dict | None:
        return self.read_plist_output(
            ["security", "authorizationdb", "read", _PREFERENCES_RIGHT]
        )

    def audit(self) -> bool:
        rule = self._read_rule()
        return rule is not None and rule.get("shared") is False

    def fix(self) -> bool:
        rule = self._read_rule()
        if rule is None:
            return False
        payload = plistlib.dumps(_lock_rule(rule)).decode("utf-8")
        return self.succeeds(
            ["security", "authorizationdb", "write", _PREFERENCES_RIGHT],
            sudo=True,
            input=payload,
        )


class GuestAccount(Setting):
    id = "guest_account"
    name = "Guest account disabled"
    category = "accounts"

    description = "No one can log in to this Mac without an account."
    fix_description = "Sets com.apple.loginwindow GuestEnabled to false"
    fix_requires_sudo = True

    def audit(self) -> bool:
        return self.default_is(_LOGINWINDOW, "GuestEnabled", "0")

    def fix(self) -> bool:
        return self.write_bool_default(_LOGINWINDOW, "GuestEnabled", False, sudo=True)
