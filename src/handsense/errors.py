"""Exceptions raised by handsense.

Per-frame conditions (malformed hands, short frame buffer, no hands) are
not errors and never raise; they produce ``None`` results instead.
"""


class HandsenseError(Exception):
    """Base class for handsense errors."""


class DetectorUnavailableError(HandsenseError, RuntimeError):
    """The hand landmark detector could not be loaded.

    Raised by backends from ``initialize()``. GestureRecognizer turns this
    into degraded mode instead of propagating it.
    """


class SettingsError(HandsenseError, ValueError):
    """Invalid gesture settings (unknown method, bad threshold, bad file)."""


__all__ = ["HandsenseError", "DetectorUnavailableError", "SettingsError"]
