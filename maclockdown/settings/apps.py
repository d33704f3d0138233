"""
Per-user application settings: Terminal, Mail and Safari.

These live in the user's own preference domains, so neither audit nor
fix needs sudo. Safari and Mail are sandboxed; the terminal running
maclockdown needs Full Disk Access to read their containers.
"""

from maclockdown.settings.base import Setting


class TerminalSecureEntry(Setting):
    id = "terminal_secure_entry"
    name = "Terminal secure keyboard entry"
    category = "apps"

    description = "Other processes cannot read keystrokes typed into Terminal."
    fix_description = "Sets Terminal SecureKeyboardEntry to true"

    def audit(self) -> bool:
        return self.default_is("-app Terminal", "SecureKeyboardEntry", "1")

    def fix(self) -> bool:
        return self.write_bool_default("-app Terminal", "SecureKeyboardEntry", True)


class MailRemoteContent(Setting):
    id = "mail_remote_content"
    name = "Mail does not load remote content"
    category = "apps"

    description = "Tracking pixels and remote images in mail are not fetched."
    fix_description = "Sets com.apple.mail-shared DisableURLLoading to true"

    def audit(self) -> bool:
        return self.default_is("com.apple.mail-shared", "DisableURLLoading", "1")

    def fix(self) -> bool:
        return self.write_bool_default("com.apple.mail-shared", "DisableURLLoading", True)


class SafariAutoOpenDownloads(Setting):
    id = "safari_auto_open_downloads"
    name = "Safari does not auto-open \"safe\" downloads"
    category = "apps"

    description = "Downloaded files are never opened automatically."
    fix_description = "Sets com.apple.Safari AutoOpenSafeDownloads to false"

    def audit(self) -> bool:
        return self.default_is("com.apple.Safari", "AutoOpenSafeDownloads", "0")

    def fix(self) -> bool:
        return self.write_bool_default("com.apple.Safari", "AutoOpenSafeDownloads", False)
