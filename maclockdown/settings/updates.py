"""
Software update settings.

Automatic macOS updates (including Rapid Security Responses and
XProtect data) and automatic App Store app updates.
"""

from maclockdown.settings.base import Setting

_SOFTWARE_UPDATE = "/Library/Preferences/com.apple.SoftwareUpdate"
_COMMERCE = "/Library/Preferences/com.apple.commerce"

# Every key must be explicitly on; a missing key fails
_UPDATE_KEYS = (
    "AutomaticCheckEnabled",
    "AutomaticDownload",
    "AutomaticallyInstallMacOSUpdates",
    "CriticalUpdateInstall",
    "ConfigDataInstall",
)


class AutomaticSystemUpdates(Setting):
    id = "automatic_system_updates"
    name = "Automatic macOS updates"
    category = "updates"

    description = (
        "Checks for, downloads and installs macOS updates, security responses "
        "and system data files automatically."
    )
    fix_description = "Turns on every automatic update option in com.apple.SoftwareUpdate"
    fix_requires_sudo = True

    def audit(self) -> bool:
        return all(self.default_is(_SOFTWARE_UPDATE, key, "1") for key in _UPDATE_KEYS)

    def fix(self) -> bool:
        ok = True
        for key in _UPDATE_KEYS:
            # Keep going so one stubborn key doesn't leave the rest unset
            ok = self.write_bool_default(_SOFTWARE_UPDATE, key, True, sudo=True) and ok
        return ok


class AutomaticAppStoreUpdates(Setting):
    id = "automatic_app_store_updates"
    name = "Automatic App Store updates"
    category = "updates"

    description = "Installs App Store app updates automatically."
    fix_description = "Sets com.apple.commerce AutoUpdate to true"
    fix_requires_sudo = True

    def audit(self) -> bool:
        return self.default_is(_COMMERCE, "AutoUpdate", "1")

    def fix(self) -> bool:
        return self.write_bool_default(_COMMERCE, "AutoUpdate", True, sudo=True)
