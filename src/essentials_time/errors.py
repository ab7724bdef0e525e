"""Exception types raised by the essentials_time value types.

Every error derives from :class:`EssentialsTimeError` and from the builtin
exception a caller would naturally catch for the same failure, so code that
already handles ``ValueError`` keeps working.
"""

__all__ = [
    "EssentialsTimeError",
    "FormatError",
    "ArgumentError",
    "RangeError",
    "ConfigurationError",
]


class EssentialsTimeError(Exception):
    """Base class for all essentials_time failures."""


class FormatError(EssentialsTimeError, ValueError):
    """Text could not be parsed as a date, time or week."""

    def __init__(self, message: str, text: str | None = None) -> None:
        super().__init__(message)
        self.text = text


class ArgumentError(EssentialsTimeError, ValueError):
    """A required argument was missing (``None``) or of an unsupported type."""

    def __init__(self, message: str, name: str | None = None) -> None:
        super().__init__(message)
        self.name = name


class RangeError(EssentialsTimeError, OverflowError):
    """A value or the result of arithmetic fell outside the representable range."""


class ConfigurationError(EssentialsTimeError, LookupError):
    """Unknown time zone identifier, culture or invalid settings value."""
