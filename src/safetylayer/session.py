"""Caller-owned scrubber state.

The core functions are pure. A UI or CLI that needs to remember the last
scrub (to restore a reply later) keeps that state in a ScrubberSession and
decides for itself what to persist, via ``snapshot()``.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from safetylayer.engine import Scanner
from safetylayer.errors import ConfigError
from safetylayer.models import Intensity, ScrubberOptions, ScrubResult, SecretEntry
from safetylayer.restorer import count_by_type, restore
from safetylayer.tokens import has_tokens

logger = logging.getLogger(__name__)


@dataclass
class ScrubberSession:
    """Text fields, secret map and settings for one scrub/restore workflow."""

    raw_input: str = ""
    sanitized_output: str = ""
    restore_input: str = ""
    restored_output: str = ""
    secrets: list[SecretEntry] = field(default_factory=list)
    options: ScrubberOptions = field(default_factory=ScrubberOptions)
    intensity: Intensity = Intensity.STANDARD
    reuse_tokens: bool = False

    def set_options(self, **changes: bool) -> None:
        """Merge partial option changes, e.g. ``set_options(phone=False)``."""
        self.options = self.options.merged(**changes)

    def set_intensity(self, intensity: Intensity) -> None:
        self.intensity = Intensity(intensity)

    def scrub(self, text: Optional[str] = None) -> ScrubResult:
        """
        Scrub raw input and replace the stored secret map.

        Args:
            text: New raw input. If None, scrubs the current raw_input.

        Returns:
            ScrubResult from the scanner
        """
        if text is not None:
            self.raw_input = text

        scanner = Scanner(self.options, self.intensity, reuse_tokens=self.reuse_tokens)
        result = scanner.scrub(self.raw_input)

        self.sanitized_output = result.sanitized_text
        self.secrets = list(result.secret_map)
        self.restore_input = result.sanitized_text
        self.restored_output = ""
        return result

    def restore_source(self) -> str:
        """
        Pick the text a restore without an explicit argument works on.

        Raw input wins when it already contains tokens (a reply pasted back
        for a round trip); otherwise the last sanitized output, then the
        restore input.
        """
        if has_tokens(self.raw_input):
            return self.raw_input
        return self.sanitized_output or self.restore_input

    def restore(self, text: Optional[str] = None) -> str:
        """Restore text (or the default source) with the stored secret map."""
        source = text if text is not None else self.restore_source()
        self.restored_output = restore(source, self.secrets)
        return self.restored_output

    def clear(self) -> None:
        """Drop all text and the secret map. Settings are kept."""
        self.raw_input = ""
        self.sanitized_output = ""
        self.restore_input = ""
        self.restored_output = ""
        self.secrets = []
        logger.debug("Session cleared")

    def counts(self) -> dict[str, int]:
        return {c.value: n for c, n in count_by_type(self.secrets).items()}

    def snapshot(self) -> dict[str, Any]:
        """Return the persistable subset: secrets, options and intensity."""
        return {
            "secrets": [entry.to_dict() for entry in self.secrets],
            "options": self.options.to_dict(),
            "intensity": self.intensity.value,
        }

    @classmethod
    def from_snapshot(cls, data: dict[str, Any]) -> "ScrubberSession":
        """
        Rebuild a session from ``snapshot()`` output.

        Raises:
            SecretMapError: If a stored secret entry is malformed
            ConfigError: If the stored options or intensity are unknown
        """
        secrets = [SecretEntry.from_dict(e) for e in data.get("secrets", [])]
        try:
            options = ScrubberOptions.from_dict(data.get("options", {}))
            intensity = Intensity(data.get("intensity", Intensity.STANDARD.value))
        except ValueError as e:
            raise ConfigError(f"Invalid session snapshot: {e}") from e

        return cls(secrets=secrets, options=options, intensity=intensity)
