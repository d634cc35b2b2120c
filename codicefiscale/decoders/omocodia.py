"""Omocodia substitution tables.

When two people would receive the same codice fiscale, the Agenzia delle
Entrate replaces digits (starting from the rightmost one) with letters. Only
the digit positions are affected: year, day and the three place digits.
"""

from __future__ import annotations

DIGIT_TO_LETTER: dict[str, str] = {
    "0": "L", "1": "M", "2": "N", "3": "P", "4": "Q",
    "5": "R", "6": "S", "7": "T", "8": "U", "9": "V",
}

LETTER_TO_DIGIT: dict[str, str] = {letter: digit for digit, letter in DIGIT_TO_LETTER.items()}

_DECODE_TABLE = str.maketrans(LETTER_TO_DIGIT)
_ENCODE_TABLE = str.maketrans(DIGIT_TO_LETTER)


def letter_to_digit(char: str) -> str:
    """Map an omocodia letter back to its digit; other characters pass through."""
    return LETTER_TO_DIGIT.get(char, char)


def digit_to_letter(char: str) -> str:
    """Map a digit to its omocodia letter; other characters pass through."""
    return DIGIT_TO_LETTER.get(char, char)


def decode_omocodia(text: str) -> str:
    return text.translate(_DECODE_TABLE)


def encode_omocodia(text: str) -> str:
    return text.translate(_ENCODE_TABLE)
