"""Data models for safetylayer."""

from dataclasses import dataclass, field
from typing import Any, Optional
from enum import Enum

from safetylayer.errors import SecretMapError


class Category(str, Enum):
    """PII category types. The value is the tag used inside tokens."""

    EMAIL = "EMAIL"
    CREDIT_CARD = "CC"
    PHONE = "PHONE"
    NATIONAL_ID = "ID"

    @property
    def priority(self) -> int:
        """Return overlap priority (lower wins)."""
        return CATEGORY_PRIORITY.index(self)


# Overlap tie-break order: an email beats a card, a card beats a phone number,
# a phone number beats a national ID.
CATEGORY_PRIORITY: list[Category] = [
    Category.EMAIL,
    Category.CREDIT_CARD,
    Category.PHONE,
    Category.NATIONAL_ID,
]


class Intensity(str, Enum):
    """Strictness of a scrub call."""

    STANDARD = "standard"
    AGGRESSIVE = "aggressive"


# ScrubberOptions field for each category
_OPTION_FIELDS: dict[Category, str] = {
    Category.EMAIL: "email",
    Category.CREDIT_CARD: "credit_card",
    Category.PHONE: "phone",
    Category.NATIONAL_ID: "ssn",
}

_OPTION_ALIASES = {"creditCard": "credit_card"}


@dataclass
class ScrubberOptions:
    """Per-category enable switches."""

    email: bool = True
    credit_card: bool = True
    phone: bool = True
    ssn: bool = True

    def is_enabled(self, category: Category) -> bool:
        """Return True if the category should be scanned."""
        return bool(getattr(self, _OPTION_FIELDS[category]))

    def enabled_categories(self) -> list[Category]:
        """Return enabled categories in priority order."""
        return [c for c in CATEGORY_PRIORITY if self.is_enabled(c)]

    def merged(self, **changes: bool) -> "ScrubberOptions":
        """Return a copy with the given fields replaced."""
        data = self.to_dict()
        for key, value in changes.items():
            key = _OPTION_ALIASES.get(key, key)
            if key not in data:
                raise ValueError(f"Unknown scrubber option: {key}")
            data[key] = bool(value)
        return ScrubberOptions(**data)

    def to_dict(self) -> dict[str, bool]:
        return {
            "email": self.email,
            "credit_card": self.credit_card,
            "phone": self.phone,
            "ssn": self.ssn,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScrubberOptions":
        """Build options from a mapping; missing keys keep their defaults."""
        return cls().merged(**data)


@dataclass
class Candidate:
    """Single matcher hit, before tokenization."""

    category: Category
    start: int
    end: int
    raw_text: str
    is_valid: bool

    @property
    def span(self) -> tuple[int, int]:
        """Return (start, end) tuple."""
        return (self.start, self.end)


@dataclass(frozen=True)
class SecretEntry:
    """One tokenized PII instance."""

    token: str
    type: Category
    value: str
    validated: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "token": self.token,
            "type": self.type.value,
            "value": self.value,
            "validated": self.validated,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SecretEntry":
        """
        Build an entry from its dictionary form.

        Raises:
            SecretMapError: If a field is missing or has the wrong type
        """
        try:
            token = data["token"]
            value = data["value"]
            category = Category(data["type"])
        except KeyError as e:
            raise SecretMapError(f"Secret entry missing field: {e.args[0]}") from e
        except (ValueError, TypeError) as e:
            raise SecretMapError(f"Secret entry has unknown type: {data.get('type')!r}") from e

        if not isinstance(token, str) or not isinstance(value, str):
            raise SecretMapError(f"Secret entry token and value must be strings: {token!r}")

        return cls(
            token=token,
            type=category,
            value=value,
            validated=bool(data.get("validated", True)),
        )


SecretMap = list[SecretEntry]


@dataclass
class ScrubResult:
    """Result from scrub operation."""

    original_text: str
    sanitized_text: str
    secret_map: SecretMap = field(default_factory=list)
    intensity: Intensity = Intensity.STANDARD
    categories_scanned: list[Category] = field(default_factory=list)

    @property
    def has_matches(self) -> bool:
        """Return True if anything was tokenized."""
        return len(self.secret_map) > 0

    @property
    def match_count(self) -> int:
        """Return number of tokenized spans."""
        return len(self.secret_map)


@dataclass(frozen=True)
class Segment:
    """Piece of text that is either plain or a single token."""

    text: str
    category: Optional[Category] = None

    @property
    def is_token(self) -> bool:
        return self.category is not None
