"""Token format helpers.

Tokens look like ``[EMAIL_1]``, ``[CC_2]``, ``[PHONE_3]`` or ``[ID_4]``. The
numeric part is a decimal without leading zeros, starting at 1. Text pasted
back from elsewhere must parse with the same regex no matter which scrub
call produced it.
"""

import re

from safetylayer.models import Category, Segment

TOKEN_RE = re.compile(r"\[(EMAIL|CC|PHONE|ID)_([1-9]\d*)\]")

SYSTEM_INSTRUCTION = """[System Instruction: The text includes security placeholders such as [EMAIL_1], [PHONE_1], [CC_1], [ID_1].
Your response must include these placeholders exactly as shown.
Do not remove, alter, replace, summarize, or generalize them.
If any placeholder is missing, the response is invalid.]

---

"""


def format_token(category: Category, number: int) -> str:
    """Build the token string for the n-th value of a category."""
    if number < 1:
        raise ValueError(f"Token number must be positive, got {number}")
    return f"[{Category(category).value}_{number}]"


def parse_token(token: str) -> tuple[Category, int]:
    """
    Split a token into its category and number.

    Raises:
        ValueError: If the string is not exactly one token
    """
    m = TOKEN_RE.fullmatch(token)
    if m is None:
        raise ValueError(f"Not a token: {token!r}")
    return Category(m.group(1)), int(m.group(2))


def is_token(text: str) -> bool:
    return TOKEN_RE.fullmatch(text) is not None


def has_tokens(text: str) -> bool:
    """Return True if text contains at least one token."""
    return TOKEN_RE.search(text) is not None


def split_tokens(text: str) -> list[Segment]:
    """
    Split text into alternating plain and token segments.

    Joining the segment texts gives back the input. Used to highlight tokens
    when displaying sanitized output.
    """
    segments: list[Segment] = []
    last = 0

    for m in TOKEN_RE.finditer(text):
        if m.start() > last:
            segments.append(Segment(text[last : m.start()]))
        segments.append(Segment(m.group(0), Category(m.group(1))))
        last = m.end()

    if last < len(text):
        segments.append(Segment(text[last:]))

    return segments


def build_smart_copy_text(text: str, include_instruction: bool = True) -> str:
    """Prefix sanitized text with an instruction to keep placeholders intact."""
    if not text:
        return ""
    return SYSTEM_INSTRUCTION + text if include_instruction else text
