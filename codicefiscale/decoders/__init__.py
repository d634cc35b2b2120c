"""Deterministic codice fiscale decoders: normalization, omocodia, CIN, places."""

from codicefiscale.decoders.checksum import compute_cin, validate_cf_checksum
from codicefiscale.decoders.codice_fiscale import decode_birth, decode_cf, split_cf, validate_cf_format
from codicefiscale.decoders.omocodia import decode_omocodia, digit_to_letter, encode_omocodia, letter_to_digit
from codicefiscale.decoders.places import ResolvedPlace, resolve_place
from codicefiscale.decoders.text import normalize_text

__all__ = [
    "ResolvedPlace",
    "compute_cin",
    "decode_birth",
    "decode_cf",
    "decode_omocodia",
    "digit_to_letter",
    "encode_omocodia",
    "letter_to_digit",
    "normalize_text",
    "resolve_place",
    "split_cf",
    "validate_cf_checksum",
    "validate_cf_format",
]
