"""Platform helpers: subprocess execution and tool discovery."""

from .process import ProcessError, find_missing, run, run_silent

__all__ = ["ProcessError", "find_missing", "run", "run_silent"]
