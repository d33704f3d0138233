"""
Config file loading for maclockdown.

Reads ~/.config/maclockdown/config.toml and returns structured config.
Never raises — always returns a valid dict with sensible defaults.

Example:

    skip = ["ipv6", "mail_remote_content"]
    supported_macos = [14, 15, 26]
    verify_signature = false
"""

import logging
from pathlib import Path

logger = logging.getLogger("maclockdown.config")

CONFIG_PATH = Path.home() / ".config" / "maclockdown" / "config.toml"

# macOS majors the bundled setting commands are known to work on
DEFAULT_SUPPORTED_MACOS = frozenset({13, 14, 15, 26})

# Public key the release executables are signed with (minisign)
DEFAULT_PUBLIC_KEY = "RWTiYbJbLl7q6uQ70l1XCvGExizUgEBNDPH0m/1yMimcsfgh542+RDPU"


def default_config() -> dict:
    """Fresh defaults — a new dict (and new sets) on every call."""
    return {
        "skip": set(),
        "supported_macos": set(DEFAULT_SUPPORTED_MACOS),
        "verify_signature": True,
        "minisign_public_key": DEFAULT_PUBLIC_KEY,
    }


def load_config(path: Path | None = None) -> dict:
    """
    Load and return maclockdown config from a TOML file.

    Returns {"skip", "supported_macos", "verify_signature",
    "minisign_public_key"} — always valid, never raises.
    A missing file or parse error returns the defaults; a key with the
    wrong shape falls back to its own default and leaves the rest intact.
    """
    config_path = path or CONFIG_PATH
    config = default_config()

    if not config_path.is_file():
        return config

    try:
        raw = config_path.read_bytes()
    except OSError as e:
        logger.warning("Could not read %s: %s", config_path, e)
        return config

    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except Exception as e:
        logger.warning("Ignoring malformed config %s: %s", config_path, e)
        return config

    skip = data.get("skip")
    if isinstance(skip, list):
        config["skip"] = {str(item) for item in skip}
    elif skip is not None:
        logger.warning("Config 'skip' must be a list of setting ids")

    supported = data.get("supported_macos")
    if isinstance(supported, list) and all(
        isinstance(v, int) and not isinstance(v, bool) for v in supported
    ):
        config["supported_macos"] = set(supported)
    elif supported is not None:
        logger.warning("Config 'supported_macos' must be a list of integers")

    verify = data.get("verify_signature")
    if isinstance(verify, bool):
        config["verify_signature"] = verify
    elif verify is not None:
        logger.warning("Config 'verify_signature' must be true or false")

    key = data.get("minisign_public_key")
    if isinstance(key, str) and key.strip():
        config["minisign_public_key"] = key.strip()
    elif key is not None:
        logger.warning("Config 'minisign_public_key' must be a non-empty string")

    return config
