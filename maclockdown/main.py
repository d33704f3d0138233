"""
maclockdown — entry point.

CLI parsing, preconditions, registry build, mode dispatch, exit codes.

Exit codes:
  0    help, list, audit with every setting passing, fix that fixed everything
  1    a setting failed / stayed broken, bad input, failed precondition,
       fix declined at the confirmation prompt
  130  interrupted
"""

import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from maclockdown import __version__
from maclockdown.config import load_config
from maclockdown.dispatch import Mode, resolve_mode, run_audit
from maclockdown.errors import Cancelled, LockdownError
from maclockdown.fixer.runner import run_fix
from maclockdown.log import setup_logging
from maclockdown.preflight import run_preflight
from maclockdown.registry import build_registry
from maclockdown.system_info import current_host, get_system_info
from maclockdown.ui.report import print_error, print_list, print_usage
from maclockdown.ui.theme import LOCKDOWN_THEME


# ── Consoles (shared across the tool) ────────────────────────────────────────

console = Console(theme=LOCKDOWN_THEME)
err_console = Console(theme=LOCKDOWN_THEME, stderr=True)


# ── CLI ───────────────────────────────────────────────────────────────────────

@click.command(
    name="maclockdown",
    context_settings={
        "help_option_names": ["-h", "--help"],
        # lets "-1" reach the index argument instead of failing as an option
        "ignore_unknown_options": True,
    },
)
@click.version_option(__version__, "-V", "--version", prog_name="maclockdown")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log every command that runs.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default ~/.config/maclockdown/config.toml).",
)
@click.option(
    "--no-verify",
    is_flag=True,
    default=False,
    help="Skip minisign verification of the executable.",
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def cli(
    verbose: bool,
    config_path: Optional[Path],
    no_verify: bool,
    args: tuple[str, ...],
) -> None:
    """Audit and harden macOS security settings.

    \b
    Commands:
      list                List settings with their index
      audit [INDEX]       Audit all settings, or one
      fix [INDEX]         Fix failing settings after confirmation
      fix-force [INDEX]   Fix failing settings without asking
      help                Show usage
    """
    invocation = resolve_mode(args)

    if invocation.mode is Mode.HELP:
        print_usage(console)
        return

    if invocation.mode is Mode.INVALID:
        print_error(err_console, f"Unknown command: {' '.join(args)}")
        err_console.print("  Run  [bold]maclockdown help[/bold]  for usage.")
        raise SystemExit(1)

    logger = setup_logging(verbose)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("host: %s", get_system_info())

    config = load_config(config_path)

    try:
        run_preflight(config, err_console, verify=not no_verify)
        registry = build_registry(current_host(), skip=config["skip"])

        if invocation.mode is Mode.LIST:
            print_list(registry, console, verbose=verbose)
            return

        if invocation.is_audit:
            summary = run_audit(registry, invocation, console)
            ok = summary.all_passed
        else:
            summary = run_fix(registry, invocation, console)
            ok = summary is not None and summary.all_fixed

    except KeyboardInterrupt:
        err = Cancelled("Aborted by user.")
        print_error(err_console, str(err))
        raise SystemExit(err.exit_code) from None
    except LockdownError as e:
        print_error(err_console, str(e))
        raise SystemExit(e.exit_code) from None

    if not ok:
        raise SystemExit(1)


# ── Entry ─────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    cli()
