"""Phone number normalization and dial pad entry helpers."""
import re
from typing import Optional

_NON_DIGITS = re.compile(r"\D")
_NON_DIAL_CHARS = re.compile(r"[^0-9+]")

MIN_DIGITS = 7
MAX_DIGITS = 15
# Longest value the dial pad accepts, including a leading "+"
MAX_ENTRY_LENGTH = 16

BACKSPACE_KEY = "<"
PLUS_KEY = "+"


def normalize_phone_number(
    raw: Optional[str], default_country_code: str = "1"
) -> Optional[str]:
    """
    Normalize a user-entered phone number into "+<digits>" form.

    Args:
        raw: Number as typed or pasted by the user
        default_country_code: Prefix applied to bare 10 digit numbers

    Returns:
        Canonical number, or None if the input cannot be dialed
    """
    value = (raw or "").strip()
    if not value:
        return None

    if value.startswith("+"):
        digits = _NON_DIGITS.sub("", value)
        return f"+{digits}" if digits else None

    digits = _NON_DIGITS.sub("", value)
    if len(digits) == 11 and digits.startswith("1"):
        return f"+{digits}"
    if len(digits) == 10:
        return f"+{default_country_code}{digits}"
    if MIN_DIGITS <= len(digits) <= MAX_DIGITS:
        return f"+{digits}"
    return None


def sanitize_phone_input(text: Optional[str]) -> str:
    """Keep only digits and "+" from typed or pasted text."""
    return _NON_DIAL_CHARS.sub("", text or "")


def apply_keypad_key(current: str, key: str) -> str:
    """
    Apply one dial pad key press to the current entry.

    "<" deletes the last character, "+" is only accepted as the first
    character of an empty entry, and digits are appended as long as the
    entry stays within MAX_ENTRY_LENGTH.
    """
    if key == BACKSPACE_KEY:
        return current[:-1]

    if key == PLUS_KEY:
        return current if current else PLUS_KEY

    if len(key) != 1 or key not in "0123456789":
        return current

    candidate = sanitize_phone_input(current + key)
    if len(candidate) > MAX_ENTRY_LENGTH:
        return current
    return candidate
