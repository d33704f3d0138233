"""
Setting registry — the fixed, ordered checklist.

The order of ALL_SETTINGS is the display order, and a setting's index is
its position in the built registry. Settings the host can't audit
(hardware capability) or that config asks to skip are dropped before
indices are assigned, so indices stay stable for the whole run.
"""

import logging
from collections.abc import Iterable, Iterator, Sequence

from maclockdown.settings.accounts import AdminPasswordPreferences, GuestAccount
from maclockdown.settings.apps import (
    MailRemoteContent,
    SafariAutoOpenDownloads,
    TerminalSecureEntry,
)
from maclockdown.settings.base import Setting
from maclockdown.settings.firewall import (
    Firewall,
    FirewallBuiltinSoftware,
    FirewallDownloadedSigned,
    FirewallStealthMode,
)
from maclockdown.settings.integrity import (
    EFIIntegrity,
    FileVault,
    Gatekeeper,
    SystemIntegrityProtection,
)
from maclockdown.settings.network import IPv6Disabled
from maclockdown.settings.sharing import RemoteAppleEvents, RemoteLogin
from maclockdown.settings.updates import AutomaticAppStoreUpdates, AutomaticSystemUpdates
from maclockdown.system_info import HostInfo

logger = logging.getLogger("maclockdown.registry")


ALL_SETTINGS: list[type[Setting]] = [
    AutomaticSystemUpdates,
    AutomaticAppStoreUpdates,
    Gatekeeper,
    Firewall,
    FirewallStealthMode,
    FirewallBuiltinSoftware,
    FirewallDownloadedSigned,
    SystemIntegrityProtection,
    FileVault,
    EFIIntegrity,
    AdminPasswordPreferences,
    TerminalSecureEntry,
    IPv6Disabled,
    MailRemoteContent,
    RemoteAppleEvents,
    RemoteLogin,
    SafariAutoOpenDownloads,
    GuestAccount,
]


class Registry:
    """Immutable ordered collection of settings."""

    def __init__(self, settings: Iterable[Setting]) -> None:
        self._settings: tuple[Setting, ...] = tuple(settings)

        seen: set[str] = set()
        for setting in self._settings:
            if setting.id in seen:
                raise ValueError(f"Duplicate setting id: {setting.id}")
            seen.add(setting.id)

    def list(self) -> tuple[Setting, ...]:
        """All settings in registry order."""
        return self._settings

    def get(self, index: int) -> Setting:
        """
        Return the setting at index.

        Raises IndexError for anything outside [0, len-1] — negative
        indices do not wrap around.
        """
        if not 0 <= index < len(self._settings):
            raise IndexError(
                f"Setting index {index} out of range (0-{len(self._settings) - 1})"
            )
        return self._settings[index]

    def __len__(self) -> int:
        return len(self._settings)

    def __iter__(self) -> Iterator[Setting]:
        return iter(self._settings)


def build_registry(
    host: HostInfo,
    skip: Iterable[str] = (),
    classes: Sequence[type[Setting]] | None = None,
) -> Registry:
    """
    Instantiate the checklist for this host.

    Args:
        host:    Capabilities of the running Mac.
        skip:    Setting ids to leave out (from config).
        classes: Override ALL_SETTINGS (tests).
    """
    candidates = ALL_SETTINGS if classes is None else classes
    skip_ids = set(skip)
    settings: list[Setting] = []

    for cls in candidates:
        setting = cls()
        if setting.id in skip_ids:
            logger.debug("skipping %s (config)", setting.id)
            continue
        if not setting.supported_on(host):
            logger.debug("skipping %s (not supported on this hardware)", setting.id)
            continue
        settings.append(setting)

    unknown = skip_ids - {cls.id for cls in candidates}
    if unknown:
        logger.warning("Unknown setting ids in config skip list: %s", ", ".join(sorted(unknown)))

    return Registry(settings)
