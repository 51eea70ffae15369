"""Category-specific validation for matched PII shapes.

A matcher decides whether text *looks like* a category; the functions here
decide whether the match is *confirmed*. None of them raise: anything that
cannot be validated is simply reported as invalid.
"""

import re

_DOMAIN_LABEL_RE = re.compile(r"^[A-Za-z0-9-]+$")
_TLD_RE = re.compile(r"^[A-Za-z]{2,}$")

# National numbers (area code plus subscriber number) in the supported formats
PHONE_NATIONAL_DIGITS = (10, 11)
CARD_DIGITS = (13, 19)


def digits_only(text: str) -> str:
    """Strip everything but ASCII digits."""
    return "".join(c for c in text if "0" <= c <= "9")


def luhn_checksum_valid(number: str) -> bool:
    """
    Check a card number with the Luhn algorithm.

    Separators are ignored. Walking the digits from the right, every second
    digit (index 1, 3, ...) is doubled and reduced by 9 when it exceeds 9;
    the number is valid when the digit sum is a multiple of 10.

    Args:
        number: Card number, optionally with spaces or hyphens

    Returns:
        True if the checksum passes
    """
    digits = digits_only(number)
    if not digits:
        return False

    total = 0
    for index, char in enumerate(reversed(digits)):
        value = int(char)
        if index % 2 == 1:
            value *= 2
            if value > 9:
                value -= 9
        total += value

    return total % 10 == 0


def credit_card_valid(text: str) -> bool:
    """Return True for a 13-19 digit number passing the Luhn check."""
    digits = digits_only(text)
    low, high = CARD_DIGITS
    if not low <= len(digits) <= high:
        return False
    return luhn_checksum_valid(digits)


def email_valid(text: str) -> bool:
    """Check local part and domain of an email-shaped string."""
    local, sep, domain = text.rpartition("@")
    if not sep or not local or not domain:
        return False

    if local.startswith(".") or local.endswith(".") or ".." in local:
        return False

    labels = domain.split(".")
    if len(labels) < 2:
        return False
    if not all(label and _DOMAIN_LABEL_RE.match(label) for label in labels):
        return False

    return bool(_TLD_RE.match(labels[-1]))


def phone_valid(text: str, country_code: str = "") -> bool:
    """
    Check that a phone-shaped string carries a full national number.

    Args:
        text: Matched phone text
        country_code: Leading ``+NN`` or trunk ``1-`` prefix as matched,
            excluded from the count

    Returns:
        True if the national part has 10 or 11 digits
    """
    national = text[len(country_code):] if country_code else text
    count = len(digits_only(national))
    low, high = PHONE_NATIONAL_DIGITS
    return low <= count <= high


def ssn_valid(text: str) -> bool:
    """Apply US SSN issuance rules to a ``DDD-DD-DDDD`` string."""
    parts = text.split("-")
    if len(parts) != 3 or [len(p) for p in parts] != [3, 2, 4]:
        return False
    if not all(p.isdigit() for p in parts):
        return False

    area, group, serial = parts
    if area in ("000", "666"):
        return False
    if group == "00" or serial == "0000":
        return False

    return True
