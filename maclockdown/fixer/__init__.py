"""
Execution and fix subsystem for maclockdown.

Modules:
  executor.py — the execution shim: every external command runs through
                run_command() / capture(); sudo credential caching.
  runner.py   — fix session: confirmation gate, audit-then-fix loop,
                fix summary.
"""
