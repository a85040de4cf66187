"""Error kinds raised by the scheduling core.

All of them derive from :class:`ValueError` so callers that only care about
"bad input" can catch the builtin, while the season orchestrator can tell the
recoverable per-host failures apart from the season-level one.
"""

from __future__ import annotations


class SchedulingError(ValueError):
    """Base class for all scheduling failures."""


class InsufficientTeamsError(SchedulingError):
    """Fewer than three distinct teams were supplied for a season."""


class InsufficientVisitorsError(SchedulingError):
    """A host has fewer than two eligible, distinct visitors."""


class InvalidSeriesError(SchedulingError):
    """A series was requested with a non-positive length or identical participants."""


class QuotaPlanningError(SchedulingError):
    """The hosting/visiting quota model could not be solved to optimality."""
