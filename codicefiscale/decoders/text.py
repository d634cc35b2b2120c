"""Diacritic stripping and uppercasing of raw input."""

from __future__ import annotations

import unicodedata


def _upper_char(ch: str) -> str:
    """Simple (one-to-one) uppercase: characters that would expand stay as-is."""
    upper = ch.upper()
    return upper if len(upper) == 1 else ch


def normalize_text(text: str) -> str:
    """Remove combining marks and uppercase the result.

    "rssmrà77l18h501w" -> "RSSMRA77L18H501W". Whitespace is kept as-is, so a
    padded code still fails the grammar downstream. Uppercasing never changes
    the length: "ß" stays "ß" instead of becoming "SS".
    """
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")
    return "".join(_upper_char(ch) for ch in unicodedata.normalize("NFC", stripped))
