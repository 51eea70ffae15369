"""Core detection and tokenization engine."""

import logging
from typing import Optional

from safetylayer.errors import NoCategoriesEnabledError
from safetylayer.matchers import get_matcher
from safetylayer.models import (
    Candidate,
    Category,
    Intensity,
    ScrubberOptions,
    ScrubResult,
    SecretEntry,
)
from safetylayer.tokens import format_token, has_tokens

logger = logging.getLogger(__name__)


class Scanner:
    """
    Core engine for PII detection and reversible tokenization.

    Enabled matchers run over the original text in category priority order
    (email, credit card, phone, national ID). When spans from two categories
    intersect, the higher-priority category keeps its span and the other
    candidate is dropped whole.

    Input that already contains literal tokens such as ``[EMAIL_1]`` is not
    escaped. Numbering can collide with such a literal, and restoring will
    then rewrite it as well; a warning is logged when this is possible.
    """

    def __init__(
        self,
        options: Optional[ScrubberOptions] = None,
        intensity: Intensity = Intensity.STANDARD,
        strict: bool = False,
        reuse_tokens: bool = False,
    ) -> None:
        """
        Initialize scanner with default settings.

        Args:
            options: Default category switches (all enabled if None)
            intensity: Default intensity
            strict: Raise NoCategoriesEnabledError instead of returning the
                    input unchanged when every category is disabled
            reuse_tokens: Give repeated values of one category the same token
        """
        self.options = options or ScrubberOptions()
        self.intensity = Intensity(intensity)
        self.strict = strict
        self.reuse_tokens = reuse_tokens

    def find(
        self,
        text: str,
        options: Optional[ScrubberOptions] = None,
        intensity: Optional[Intensity] = None,
    ) -> list[Candidate]:
        """
        Find all PII candidates that survive overlap resolution.

        Args:
            text: Text to search
            options: Category switches. If None, uses the scanner default.
            intensity: Intensity. If None, uses the scanner default.

        Returns:
            Non-overlapping candidates sorted by start offset
        """
        options = options or self.options
        intensity = Intensity(intensity or self.intensity)

        accepted: list[Candidate] = []

        # Higher-priority categories claim their spans first
        for category in options.enabled_categories():
            for candidate in get_matcher(category).find(text, intensity):
                if any(self._spans_overlap(candidate.span, a.span) for a in accepted):
                    continue
                accepted.append(candidate)

        accepted.sort(key=lambda c: (c.start, c.end))
        return accepted

    def scrub(
        self,
        text: str,
        options: Optional[ScrubberOptions] = None,
        intensity: Optional[Intensity] = None,
    ) -> ScrubResult:
        """
        Replace detected PII with typed tokens.

        Args:
            text: Text to scrub
            options: Category switches. If None, uses the scanner default.
            intensity: Intensity. If None, uses the scanner default.

        Returns:
            ScrubResult with sanitized text and a fresh secret map

        Raises:
            NoCategoriesEnabledError: If strict and every category is disabled
        """
        options = options or self.options
        intensity = Intensity(intensity or self.intensity)
        categories = options.enabled_categories()

        if not categories:
            if self.strict:
                raise NoCategoriesEnabledError()
            logger.debug("All categories disabled, returning input unchanged")
            return ScrubResult(
                original_text=text,
                sanitized_text=text,
                intensity=intensity,
                categories_scanned=[],
            )

        if has_tokens(text):
            logger.warning(
                "Input already contains token-shaped text; restore will also replace it"
            )

        candidates = self.find(text, options=options, intensity=intensity)

        counters: dict[Category, int] = {}
        assigned: dict[tuple[Category, str], str] = {}
        secret_map: list[SecretEntry] = []
        pieces: list[str] = []
        cursor = 0

        for candidate in candidates:
            pieces.append(text[cursor : candidate.start])

            key = (candidate.category, candidate.raw_text)
            if self.reuse_tokens and key in assigned:
                token = assigned[key]
            else:
                counters[candidate.category] = counters.get(candidate.category, 0) + 1
                token = format_token(candidate.category, counters[candidate.category])
                assigned[key] = token
                secret_map.append(
                    SecretEntry(
                        token=token,
                        type=candidate.category,
                        value=candidate.raw_text,
                        validated=candidate.is_valid,
                    )
                )

            pieces.append(token)
            cursor = candidate.end

        pieces.append(text[cursor:])

        logger.debug(
            f"Scrubbed {len(candidates)} spans into {len(secret_map)} tokens "
            f"({intensity.value}, categories={[c.value for c in categories]})"
        )

        return ScrubResult(
            original_text=text,
            sanitized_text="".join(pieces),
            secret_map=secret_map,
            intensity=intensity,
            categories_scanned=categories,
        )

    @staticmethod
    def _spans_overlap(span1: tuple[int, int], span2: tuple[int, int]) -> bool:
        """Check if two spans overlap."""
        start1, end1 = span1
        start2, end2 = span2
        return not (end1 <= start2 or end2 <= start1)


def scrub(
    text: str,
    options: Optional[ScrubberOptions] = None,
    intensity: Intensity = Intensity.STANDARD,
    strict: bool = False,
    reuse_tokens: bool = False,
) -> ScrubResult:
    """Scrub text with a one-off Scanner."""
    scanner = Scanner(options, intensity, strict=strict, reuse_tokens=reuse_tokens)
    return scanner.scrub(text)
