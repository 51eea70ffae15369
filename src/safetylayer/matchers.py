"""Pattern matchers, one per PII category."""

import re
from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

from safetylayer import validators
from safetylayer.models import Candidate, Category, Intensity, CATEGORY_PRIORITY


EMAIL_RE = re.compile(
    r"""
    (?<![A-Za-z0-9_%+-])
    [A-Za-z0-9_%+-][A-Za-z0-9._%+-]*    # local part, no leading dot
    @
    (?:[A-Za-z0-9-]*\.)*        # domain labels
    [A-Za-z]{2,}                # top-level label
    (?![A-Za-z0-9-])
    """,
    re.VERBOSE,
)

CREDIT_CARD_RE = re.compile(
    r"""
    (?<![\d-])
    (?:
        \d{4}[ -]\d{6}[ -]\d{4,5}                   # 4-6-4 / 4-6-5
      | \d{4}(?:[ -]\d{4}){3}(?:[ -]\d{1,3})?       # 4-4-4-4, 4-4-4-4-1..3
      | \d{4}(?:[ -]\d{4}){2}[ -]\d{1,3}            # 4-4-4-1..3
      | \d{13,19}
    )
    (?![\d-])
    """,
    re.VERBOSE,
)

PHONE_RE = re.compile(
    r"""
    (?<![\w+-])
    (?P<country>\+\d{1,3}?[ .-]?|1[ .-])?      # +44, +1-, or trunk 1-
    (?:
        \(\d{2,4}\)[ .-]?\d{3,4}[ .-]?\d{4}         # (555) 123-4567
      | \d{2,4}[ .-]\d{3,4}[ .-]\d{4}               # 555-123-4567
      | \d{3,4}[ .-]\d{4}                           # 123-4567
      | \d{7,15}                                    # 5551234567
    )
    (?![\w-])
    """,
    re.VERBOSE,
)

NATIONAL_ID_RE = re.compile(r"(?<![\w-])\d{3}-\d{2}-\d{4}(?![\w-])")


@dataclass
class Examples:
    """Shape examples for a matcher's regex."""

    match: list[str] = field(default_factory=list)
    nomatch: list[str] = field(default_factory=list)


@dataclass
class PatternMatcher:
    """Regex shape plus validator for one category."""

    category: Category
    compiled: re.Pattern
    validator: Callable[[re.Match], bool]
    description: str = ""
    examples: Optional[Examples] = None

    @property
    def token_tag(self) -> str:
        return self.category.value

    def find(
        self, text: str, intensity: Intensity = Intensity.STANDARD
    ) -> Iterator[Candidate]:
        """
        Yield candidates in text order.

        Under standard intensity, candidates failing validation are dropped
        here and never reach the scanner.

        Args:
            text: Text to search
            intensity: Standard keeps only validated matches

        Yields:
            Candidate for each structural match passing the intensity filter
        """
        for regex_match in self.compiled.finditer(text):
            is_valid = self.validator(regex_match)
            if not is_valid and intensity == Intensity.STANDARD:
                continue

            start, end = regex_match.span()
            yield Candidate(
                category=self.category,
                start=start,
                end=end,
                raw_text=regex_match.group(0),
                is_valid=is_valid,
            )

    def validate(self, text: str) -> bool:
        """Return True if the whole text matches the shape and validates."""
        regex_match = self.compiled.fullmatch(text)
        return regex_match is not None and self.validator(regex_match)


def _validate_phone(m: re.Match) -> bool:
    text = m.group(0)
    country = m.group("country") or ""

    # Without a separator the country code length is unknown; accept any
    # 1-3 digit split that leaves a full national number.
    if country.startswith("+") and country[-1].isdigit():
        return any(
            validators.phone_valid(text, text[: 1 + n])
            for n in range(1, 4)
            if text[1 : 1 + n].isdigit()
        )

    return validators.phone_valid(text, country)


MATCHERS: dict[Category, PatternMatcher] = {
    Category.EMAIL: PatternMatcher(
        category=Category.EMAIL,
        compiled=EMAIL_RE,
        validator=lambda m: validators.email_valid(m.group(0)),
        description="Email address (local@domain.tld)",
        examples=Examples(
            match=[
                "user@example.com",
                "john.doe+tag@company.co.uk",
                "test_user123@mail-server.org",
                "user@localhost",
            ],
            nomatch=[
                "@example.com",
                "invalid.email@",
                "user@example.c",
                ".user@example.com",
            ],
        ),
    ),
    Category.CREDIT_CARD: PatternMatcher(
        category=Category.CREDIT_CARD,
        compiled=CREDIT_CARD_RE,
        validator=lambda m: validators.credit_card_valid(m.group(0)),
        description="Payment card number, Luhn-checked",
        examples=Examples(
            match=[
                "4111111111111111",
                "4111-1111-1111-1111",
                "4111 1111 1111 1111",
                "3782-822463-10005",
                "4222222222222",
            ],
            nomatch=["4111-1111-1111", "123456789012", "41111111111111111111"],
        ),
    ),
    Category.PHONE: PatternMatcher(
        category=Category.PHONE,
        compiled=PHONE_RE,
        validator=_validate_phone,
        description="Phone number with optional country and area code",
        examples=Examples(
            match=[
                "555-123-4567",
                "(555) 123-4567",
                "+1 (555) 123-4567",
                "5551234567",
                "555.123.4567",
                "123-4567",
                "+44 20 7946 0958",
                "1-555-123-4567",
                "1 (555) 123-4567",
                "+4915123456789",
            ],
            nomatch=["123-45-6789", "12345", "1234567890123456"],
        ),
    ),
    Category.NATIONAL_ID: PatternMatcher(
        category=Category.NATIONAL_ID,
        compiled=NATIONAL_ID_RE,
        validator=lambda m: validators.ssn_valid(m.group(0)),
        description="US Social Security Number (DDD-DD-DDDD)",
        examples=Examples(
            match=["123-45-6789", "000-12-3456"],
            nomatch=["123456789", "12-345-6789", "1234-56-789"],
        ),
    ),
}


def get_matcher(category: Category) -> PatternMatcher:
    """Get the matcher for a category."""
    return MATCHERS[category]


def get_all_matchers() -> list[PatternMatcher]:
    """Get all matchers in priority order."""
    return [MATCHERS[c] for c in CATEGORY_PRIORITY]
