"""
Remote access services.

systemsetup only answers these queries for administrators, so auditing
needs sudo as well as fixing.
"""

from maclockdown.settings.base import Setting


def _reports_off(output: str) -> bool:
    """True for systemsetup answers such as 'Remote Login: Off'."""
    value = output.rsplit(":", 1)[-1].strip().lower()
    return value == "off"


class _SystemSetupService(Setting):
    category = "sharing"
    audit_requires_sudo = True
    fix_requires_sudo = True

    # Subclasses set the systemsetup verb, e.g. "remotelogin"
    _verb: str = ""
    _force: bool = False

    def audit(self) -> bool:
        rc, stdout, _ = self.shell(["systemsetup", f"-get{self._verb}"], sudo=True)
        return rc == 0 and _reports_off(stdout)

    def fix(self) -> bool:
        # -f skips the interactive "Do you really want to turn…" question
        cmd = ["systemsetup"] + (["-f"] if self._force else []) + [f"-set{self._verb}", "off"]
        return self.succeeds(cmd, sudo=True)


class RemoteAppleEvents(_SystemSetupService):
    id = "remote_apple_events"
    name = "Remote Apple Events disabled"

    description = "Apps on other Macs cannot send Apple Events to this one."
    fix_description = "Turns Remote Apple Events off"

    _verb = "remoteappleevents"


class RemoteLogin(_SystemSetupService):
    id = "remote_login"
    name = "Remote Login (SSH) disabled"

    description = "The SSH server is not accepting connections."
    fix_description = "Turns Remote Login off"

    _verb = "remotelogin"
    _force = True
