"""
OS integrity settings.

Gatekeeper, System Integrity Protection, FileVault and EFI firmware
integrity. Only Gatekeeper can be fixed from a running system: SIP needs
Recovery, FileVault needs the user to hold the recovery key, and a
firmware mismatch needs Apple.
"""

from maclockdown.settings.base import Setting

_EFICHECK = "/usr/libexec/firmwarecheckers/eficheck/eficheck"


class Gatekeeper(Setting):
    id = "gatekeeper"
    name = "Gatekeeper"
    category = "integrity"

    description = "Apps must be signed and notarized before they are allowed to run."
    fix_description = "Re-enables Gatekeeper assessments (spctl --master-enable)"
    fix_requires_sudo = True

    def audit(self) -> bool:
        _, stdout, _ = self.shell(["spctl", "--status"])
        return "assessments enabled" in stdout.lower()

    def fix(self) -> bool:
        return self.succeeds(["spctl", "--master-enable"], sudo=True)


class SystemIntegrityProtection(Setting):
    id = "sip"
    name = "System Integrity Protection"
    category = "integrity"

    description = (
        "Protects system files and processes, even from root. A custom "
        "configuration with protections removed does not pass."
    )

    def audit(self) -> bool:
        rc, stdout, _ = self.shell(["csrutil", "status"])
        out = stdout.strip().lower()
        # "enabled (custom configuration)" is partial and does not pass
        return rc == 0 and "status: enabled." in out and "custom" not in out


class FileVault(Setting):
    id = "filevault"
    name = "FileVault disk encryption"
    category = "integrity"

    description = "The startup disk is encrypted at rest."

    def audit(self) -> bool:
        # fdesetup isactive exits 0 only when FileVault is on
        return self.succeeds(["fdesetup", "isactive"])


class EFIIntegrity(Setting):
    id = "efi_integrity"
    name = "EFI firmware integrity"
    category = "integrity"

    description = "The EFI firmware matches Apple's known-good measurements."

    # eficheck only understands pre-T2 Intel firmware
    apple_silicon_compatible = False
    requires_t2 = False

    def audit(self) -> bool:
        return self.succeeds([_EFICHECK, "--integrity-check"])
