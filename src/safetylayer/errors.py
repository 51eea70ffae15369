"""Exception types for safetylayer."""


class ScrubberError(Exception):
    """Base class for all safetylayer errors."""


class NoCategoriesEnabledError(ScrubberError):
    """Raised by a strict scrub when every category is disabled."""

    def __init__(self) -> None:
        super().__init__("No PII categories are enabled")


class SecretMapError(ScrubberError, ValueError):
    """Secret map contains malformed or contradictory entries."""


class ConfigError(ScrubberError, ValueError):
    """Configuration file could not be loaded or failed validation."""
