"""
Base-36 codec for Reddit identifiers.

Reddit ids ("abc123", the part after ``t3_`` in a fullname) are base-36
renderings of a monotonically increasing integer. Python ints are unbounded,
so decoding never overflows however long the identifier is.
"""

from reddit_agent.exceptions import InvalidCharacterError

ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
BASE = len(ALPHABET)

_DIGIT_VALUES = {char: value for value, char in enumerate(ALPHABET)}


def decode(text: str) -> int:
    """
    Convert a base-36 identifier to its ordinal.

    Args:
        text: Identifier text, case-insensitive

    Returns:
        int: The decoded ordinal

    Raises:
        InvalidCharacterError: If any character is outside [0-9a-zA-Z]
    """
    ordinal = 0
    for char in text.lower():
        value = _DIGIT_VALUES.get(char)
        if value is None:
            raise InvalidCharacterError(char, text)
        ordinal = ordinal * BASE + value
    return ordinal


def encode(ordinal: int) -> str:
    """
    Convert an ordinal back to its lowercase base-36 identifier.

    Args:
        ordinal: Non-negative integer

    Returns:
        str: Identifier without sign or leading zeros ("0" for zero)
    """
    if ordinal < 0:
        raise ValueError(f"Ordinal must be non-negative, got {ordinal}")
    if ordinal == 0:
        return "0"

    digits = []
    while ordinal > 0:
        ordinal, remainder = divmod(ordinal, BASE)
        digits.append(ALPHABET[remainder])
    return "".join(reversed(digits))
