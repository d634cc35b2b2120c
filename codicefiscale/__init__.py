"""Italian codice fiscale decoder and validator."""

from codicefiscale.decoders import (
    compute_cin,
    decode_cf,
    decode_omocodia,
    encode_omocodia,
    normalize_text,
    validate_cf_checksum,
    validate_cf_format,
)
from codicefiscale.errors import (
    ChecksumError,
    CodiceFiscaleError,
    FormatError,
    LengthError,
    PlaceTablesError,
    PlaceUnknownError,
    ShapeError,
)
from codicefiscale.schemas import CodiceFiscale, CodiceFiscaleRaw, Comune, Nazione, Sex

__all__ = [
    "ChecksumError",
    "CodiceFiscale",
    "CodiceFiscaleError",
    "CodiceFiscaleRaw",
    "Comune",
    "FormatError",
    "LengthError",
    "Nazione",
    "PlaceTablesError",
    "PlaceUnknownError",
    "Sex",
    "ShapeError",
    "compute_cin",
    "decode_cf",
    "decode_omocodia",
    "encode_omocodia",
    "normalize_text",
    "validate_cf_checksum",
    "validate_cf_format",
]
