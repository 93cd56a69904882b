# errors.py
"""
Exception types raised by the engine.

Both derive from ValueError so callers that already guard configuration
loading with ``except ValueError`` keep working.
"""


class ConfigurationError(ValueError):
    """Raised when a drift scale, canvas size, capacity or tick count is invalid."""


class CapacityExceededError(ValueError):
    """Raised when a capped collection would grow past its limit."""
