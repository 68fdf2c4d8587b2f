"""
Reflection exception hierarchy.

All reflection exceptions inherit from ReflectionError, so a host can catch
library-level errors while still telling the recoverable readiness failures
apart from programming defects.
"""


class ReflectionError(Exception):
    """Base exception class for all reflection errors."""


class ConfigurationError(ReflectionError):
    """Raised for configuration errors (missing keys, invalid values)."""


class ConfigUnavailableError(ConfigurationError):
    """Raised when periodic-note settings cannot be loaded yet."""


class IndexUnavailableError(ReflectionError):
    """Raised when the periodic notes of the vault cannot be enumerated."""


class InvalidPeriodTypeError(ReflectionError, ValueError):
    """Raised when resolution is asked for a period type it does not know."""
