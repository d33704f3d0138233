"""Allow `python -m maclockdown`."""

from maclockdown.main import cli

cli()
