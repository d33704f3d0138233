"""
Application firewall settings.

All four read and write through socketfilterfw, the firewall's own
command-line front end. The firewall is inbound-only; these settings
control whether it runs and whether it answers pings and port scans.
They also decide whether signed software is let through without asking.
"""

from maclockdown.settings.base import Setting

_FIREWALL = "/usr/libexec/ApplicationFirewall/socketfilterfw"

_BUILTIN = "built-in signed software"
_DOWNLOADED = "downloaded signed software"


def _state_is_on(output: str) -> bool | None:
    """
    Interpret a socketfilterfw state line.

    Handles both formats seen across macOS releases:
      "Firewall is enabled. (State = 1)" / "Firewall stealth mode is on"
    Returns None when the output matches neither.
    """
    out = output.lower()
    if "disabled" in out or "state = 0" in out or " is off" in out:
        return False
    if "enabled" in out or "state = 1" in out or "state = 2" in out or " is on" in out:
        return True
    return None


def _parse_allow_signed(output: str) -> dict[str, bool]:
    """
    Parse `socketfilterfw --getallowsigned`.

    Output looks like:
      Automatically allow built-in signed software ENABLED.
      Automatically allow downloaded signed software DISABLED.
    Returns {"built-in signed software": True, ...} for the lines found.
    """
    found: dict[str, bool] = {}
    for line in output.splitlines():
        lowered = line.lower()
        for label in (_BUILTIN, _DOWNLOADED):
            if label in lowered:
                found[label] = "enabled" in lowered and "disabled" not in lowered
    return found


class _FirewallSetting(Setting):
    category = "firewall"
    fix_requires_sudo = True

    def _query(self, flag: str) -> str:
        rc, stdout, _ = self.shell([_FIREWALL, flag])
        return stdout if rc == 0 else ""


class Firewall(_FirewallSetting):
    id = "firewall"
    name = "Application firewall"

    description = "Blocks unsolicited incoming connections to apps that haven't been allowed."
    fix_description = "Turns the application firewall on"

    def audit(self) -> bool:
        return _state_is_on(self._query("--getglobalstate")) is True

    def fix(self) -> bool:
        return self.succeeds([_FIREWALL, "--setglobalstate", "on"], sudo=True)


class FirewallStealthMode(_FirewallSetting):
    id = "firewall_stealth"
    name = "Firewall stealth mode"

    description = "Mac ignores pings and connection attempts to closed ports."
    fix_description = "Turns firewall stealth mode on"

    def audit(self) -> bool:
        return _state_is_on(self._query("--getstealthmode")) is True

    def fix(self) -> bool:
        return self.succeeds([_FIREWALL, "--setstealthmode", "on"], sudo=True)


class FirewallBuiltinSoftware(_FirewallSetting):
    id = "firewall_builtin_software"
    name = "Firewall does not auto-allow built-in software"

    description = "Apple's own signed software must be allowed explicitly."
    fix_description = "Stops the firewall automatically allowing built-in signed software"

    def audit(self) -> bool:
        return _parse_allow_signed(self._query("--getallowsigned")).get(_BUILTIN) is False

    def fix(self) -> bool:
        return self.succeeds([_FIREWALL, "--setallowsigned", "off"], sudo=True)


class FirewallDownloadedSigned(_FirewallSetting):
    id = "firewall_downloaded_signed"
    name = "Firewall does not auto-allow downloaded signed software"

    description = "Downloaded apps need approval even when they carry a valid signature."
    fix_description = "Stops the firewall automatically allowing downloaded signed software"

    def audit(self) -> bool:
        return _parse_allow_signed(self._query("--getallowsigned")).get(_DOWNLOADED) is False

    def fix(self) -> bool:
        return self.succeeds([_FIREWALL, "--setallowsignedapp", "off"], sudo=True)
