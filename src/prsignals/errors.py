"""Exceptions raised by prsignals."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """A caller-supplied pattern or option cannot be used.

    Raised before any analysis runs, so a broken pattern never silently
    produces an empty result.
    """
