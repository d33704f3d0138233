"""
Fatal error taxonomy.

Only conditions that abort the whole invocation are exceptions.
A failing audit or fix is a recorded result, never raised.
"""


class LockdownError(Exception):
    """Base class for errors that stop a run before or during dispatch."""

    exit_code = 1


class PreflightError(LockdownError):
    """Host platform, OS version or executable signature is not acceptable."""


class InputError(LockdownError):
    """Unrecognized command or invalid setting index."""


class Cancelled(LockdownError):
    """The user interrupted the run."""

    exit_code = 130
