"""Clock helper – a single place to ask for "today".

Entity validation compares order dates against the local wall-clock date.
Going through :pyfunc:`today` lets tests freeze the clock with a plain
``monkeypatch`` instead of patching :class:`datetime.date`.
"""

from datetime import date


def today() -> date:  # noqa: D401 – simple utility
    """Return the current local calendar date."""

    return date.today()


__all__ = ["today"]
