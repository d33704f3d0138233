"""
Tests for config.py — load_config().
"""

from pathlib import Path

from maclockdown.config import (
    DEFAULT_PUBLIC_KEY,
    DEFAULT_SUPPORTED_MACOS,
    default_config,
    load_config,
)


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_missing_file_returns_defaults(self, tmp_path):
        config = load_config(tmp_path / "absent.toml")
        assert config == default_config()

    def test_defaults(self):
        config = default_config()
        assert config["skip"] == set()
        assert config["supported_macos"] == set(DEFAULT_SUPPORTED_MACOS)
        assert config["verify_signature"] is True
        assert config["minisign_public_key"] == DEFAULT_PUBLIC_KEY

    def test_defaults_are_fresh(self):
        first = default_config()
        first["skip"].add("ipv6")
        assert default_config()["skip"] == set()

    def test_full_config(self, tmp_path):
        path = _write(tmp_path, (
            'skip = ["ipv6", "mail_remote_content"]\n'
            "supported_macos = [15, 26]\n"
            "verify_signature = false\n"
            'minisign_public_key = "RWabc"\n'
        ))
        config = load_config(path)
        assert config["skip"] == {"ipv6", "mail_remote_content"}
        assert config["supported_macos"] == {15, 26}
        assert config["verify_signature"] is False
        assert config["minisign_public_key"] == "RWabc"

    def test_malformed_toml_returns_defaults(self, tmp_path):
        path = _write(tmp_path, "skip = [unterminated\n")
        assert load_config(path) == default_config()

    def test_wrong_type_falls_back_per_key(self, tmp_path):
        path = _write(tmp_path, (
            'skip = "ipv6"\n'
            'supported_macos = ["fifteen"]\n'
            'verify_signature = "no"\n'
        ))
        config = load_config(path)
        assert config["skip"] == set()
        assert config["supported_macos"] == set(DEFAULT_SUPPORTED_MACOS)
        assert config["verify_signature"] is True

    def test_booleans_are_not_versions(self, tmp_path):
        path = _write(tmp_path, "supported_macos = [true]\n")
        assert load_config(path)["supported_macos"] == set(DEFAULT_SUPPORTED_MACOS)

    def test_unknown_keys_ignored(self, tmp_path):
        path = _write(tmp_path, 'theme = "dark"\nskip = ["guest_account"]\n')
        assert load_config(path)["skip"] == {"guest_account"}

    def test_empty_key_rejected(self, tmp_path):
        path = _write(tmp_path, 'minisign_public_key = "  "\n')
        assert load_config(path)["minisign_public_key"] == DEFAULT_PUBLIC_KEY
