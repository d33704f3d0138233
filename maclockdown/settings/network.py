"""
Network settings.

IPv6 turned off on every network service.
"""

from maclockdown.settings.base import Setting


def _parse_services(output: str) -> list[str]:
    """
    Parse `networksetup -listallnetworkservices`.

    The first line is an explanatory header; disabled services are
    prefixed with '*' and are still returned (without the asterisk) so a
    service can't escape policy by being switched off temporarily.
    """
    services = []
    for line in output.splitlines():
        line = line.strip()
        if not line or line.startswith("An asterisk"):
            continue
        services.append(line.lstrip("*").strip())
    return services


def _ipv6_is_off(info: str) -> bool:
    """
    Interpret `networksetup -getinfo <service>`.

    "IPv6: Off" passes, "IPv6: Automatic" / "IPv6: Manual" don't.
    A service with no IPv6 line has nothing configured and passes.
    """
    for line in info.splitlines():
        key, _, value = line.partition(":")
        if key.strip() == "IPv6":
            return value.strip().lower() == "off"
    return True


class IPv6Disabled(Setting):
    id = "ipv6"
    name = "IPv6 disabled on all network services"
    category = "network"

    description = "No network service configures IPv6."
    fix_description = "Runs networksetup -setv6off for every network service"
    fix_requires_sudo = True

    def _services(self) -> list[str] | None:
        rc, stdout, _ = self.shell(["networksetup", "-listallnetworkservices"])
        if rc != 0:
            return None
        return _parse_services(stdout)

    def audit(self) -> bool:
        services = self._services()
        if services is None:
            return False
        for service in services:
            rc, stdout, _ = self.shell(["networksetup", "-getinfo", service])
            if rc != 0 or not _ipv6_is_off(stdout):
                return False
        return True

    def fix(self) -> bool:
        services = self._services()
        if services is None:
            return False
        ok = True
        for service in services:
            ok = self.succeeds(["networksetup", "-setv6off", service], sudo=True) and ok
        return ok
