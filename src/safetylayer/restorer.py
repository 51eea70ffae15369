"""Token restoration."""

import logging
import re
from typing import Iterable

from safetylayer.errors import SecretMapError
from safetylayer.models import CATEGORY_PRIORITY, Category, SecretEntry
from safetylayer.tokens import TOKEN_RE, parse_token

logger = logging.getLogger(__name__)


def build_lookup(secret_map: Iterable[SecretEntry]) -> dict[str, str]:
    """
    Index a secret map by token.

    Args:
        secret_map: Entries produced by a scrub call

    Returns:
        Mapping of token to original value

    Raises:
        SecretMapError: If an entry's token is malformed, its tag disagrees
                        with its type, or one token maps to two values
    """
    lookup: dict[str, str] = {}

    for entry in secret_map:
        try:
            category, _ = parse_token(entry.token)
        except ValueError as e:
            raise SecretMapError(f"Malformed token in secret map: {entry.token!r}") from e

        if category != entry.type:
            raise SecretMapError(
                f"Token {entry.token} is tagged {category.value} but typed {Category(entry.type).value}"
            )

        existing = lookup.get(entry.token)
        if existing is not None and existing != entry.value:
            raise SecretMapError(f"Token {entry.token} maps to more than one value")

        lookup[entry.token] = entry.value

    return lookup


def restore(text: str, secret_map: Iterable[SecretEntry]) -> str:
    """
    Replace tokens in text with their original values.

    Tokens missing from the map are left untouched. Restored values are not
    rescanned, so a value can never be mistaken for another token.

    Args:
        text: Text containing tokens
        secret_map: Entries produced by a scrub call

    Returns:
        Text with every known token replaced

    Raises:
        SecretMapError: If the secret map is malformed
    """
    lookup = build_lookup(secret_map)
    if not lookup or not text:
        return text

    restored = 0

    def _replace(m: re.Match) -> str:
        nonlocal restored
        token = m.group(0)
        if token in lookup:
            restored += 1
            return lookup[token]
        return token

    result = TOKEN_RE.sub(_replace, text)
    logger.debug(f"Restored {restored} token occurrences from a map of {len(lookup)}")
    return result


def count_by_type(secret_map: Iterable[SecretEntry]) -> dict[Category, int]:
    """Count entries per category, in priority order, omitting absent ones."""
    counts = {category: 0 for category in CATEGORY_PRIORITY}
    for entry in secret_map:
        counts[Category(entry.type)] += 1
    return {category: n for category, n in counts.items() if n}
