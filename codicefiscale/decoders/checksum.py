"""Control character (CIN) computation.

Reference: Decreto MEF 12/03/1974. Characters in odd positions (1-indexed)
are converted with ODD_VALUES, those in even positions with EVEN_VALUES; the
sum modulo 26 indexes the alphabet.
"""

from __future__ import annotations

from codicefiscale.decoders.text import normalize_text
from codicefiscale.errors import LengthError, ShapeError

ODD_VALUES: dict[str, int] = {
    "0": 1, "1": 0, "2": 5, "3": 7, "4": 9, "5": 13, "6": 15,
    "7": 17, "8": 19, "9": 21,
    "A": 1, "B": 0, "C": 5, "D": 7, "E": 9, "F": 13, "G": 15,
    "H": 17, "I": 19, "J": 21, "K": 2, "L": 4, "M": 18, "N": 20,
    "O": 11, "P": 3, "Q": 6, "R": 8, "S": 12, "T": 14, "U": 16,
    "V": 10, "W": 22, "X": 25, "Y": 24, "Z": 23,
}

EVEN_VALUES: dict[str, int] = {
    "0": 0, "1": 1, "2": 2, "3": 3, "4": 4, "5": 5, "6": 6,
    "7": 7, "8": 8, "9": 9,
    "A": 0, "B": 1, "C": 2, "D": 3, "E": 4, "F": 5, "G": 6,
    "H": 7, "I": 8, "J": 9, "K": 10, "L": 11, "M": 12, "N": 13,
    "O": 14, "P": 15, "Q": 16, "R": 17, "S": 18, "T": 19, "U": 20,
    "V": 21, "W": 22, "X": 23, "Y": 24, "Z": 25,
}

CIN_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def compute_cin(code: str) -> str:
    """Compute the control character from the first 15 characters.

    Accepts both the 15-character body and the full 16-character code (the
    trailing character is ignored).

    Raises:
        LengthError: If the code is not 15 or 16 characters long.
        ShapeError: If one of the first 15 characters is not in 0-9/A-Z.
    """
    if not 15 <= len(code) <= 16:
        raise LengthError(code)

    total = 0
    for position, char in enumerate(code[:15], start=1):
        table = ODD_VALUES if position % 2 else EVEN_VALUES
        try:
            total += table[char]
        except KeyError:
            raise ShapeError(code, f"Invalid character {char!r} at position {position}") from None
    return CIN_ALPHABET[total % 26]


def validate_cf_checksum(code: str) -> bool:
    """Check the control character (position 16); case and diacritics are normalized."""
    code = normalize_text(code)
    if len(code) != 16:
        return False
    try:
        return compute_cin(code) == code[15]
    except ShapeError:
        return False
