"""Mac Lockdown — audit and harden macOS security settings"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("maclockdown")
except PackageNotFoundError:
    __version__ = "dev"

__author__ = "Mac Lockdown"
