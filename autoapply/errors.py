"""Exceptions raised by the auto-apply agent."""
from __future__ import annotations


class AutoApplyError(Exception):
    """Base class for errors the agent raises on purpose."""


class ConfigError(AutoApplyError):
    """Profile or credentials are missing or invalid."""


class RunBudgetExceeded(AutoApplyError):
    """The wall-clock budget for the whole run ran out.

    ``links`` carries whatever a harvest had collected before the cutoff.
    """

    def __init__(self, message: str = "", links: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.links = links
