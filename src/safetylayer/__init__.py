"""
safetylayer: Reversible PII scrubbing for pasted text.

This package detects emails, payment card numbers, phone numbers and US SSNs,
replaces each with a typed token such as ``[EMAIL_1]``, and restores the
original values later from the returned secret map.
"""

__version__ = "0.1.0"

from safetylayer.engine import Scanner, scrub
from safetylayer.restorer import restore, count_by_type
from safetylayer.session import ScrubberSession
from safetylayer.models import (
    Category,
    Intensity,
    ScrubberOptions,
    ScrubResult,
    SecretEntry,
)
from safetylayer.errors import (
    ScrubberError,
    NoCategoriesEnabledError,
    SecretMapError,
    ConfigError,
)

__all__ = [
    "Scanner",
    "scrub",
    "restore",
    "count_by_type",
    "ScrubberSession",
    "Category",
    "Intensity",
    "ScrubberOptions",
    "ScrubResult",
    "SecretEntry",
    "ScrubberError",
    "NoCategoriesEnabledError",
    "SecretMapError",
    "ConfigError",
]
