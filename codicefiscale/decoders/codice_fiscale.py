"""Italian Codice Fiscale (CF) decoder.

Pure Python, no I/O beyond the cached reference tables. Extracts surname and
name initials, birth date, sex and birthplace from the 16-character code,
reversing omocodia substitutions where present.

CF format: AAABBB 00C00 D000 E
  - AAA:  surname consonants (then vowels, then X)
  - BBB:  name consonants (then vowels, then X)
  - 00:   year of birth (last 2 digits)
  - C:    month of birth (letter A–T, non-sequential)
  - 00:   day of birth (1–31 male, 41–71 female)
  - D000: birthplace code (codice catastale / codice AT)
  - E:    check character

Digits in the year, day and birthplace may be replaced by omocodia letters.

Reference: DPR 605/1973, Decreto MEF 12/03/1974.
"""

from __future__ import annotations

import re
from datetime import date, timedelta

from codicefiscale.decoders.checksum import compute_cin
from codicefiscale.decoders.omocodia import decode_omocodia
from codicefiscale.decoders.places import resolve_place
from codicefiscale.decoders.text import normalize_text
from codicefiscale.errors import ChecksumError, FormatError, ShapeError
from codicefiscale.schemas.codice_fiscale import CodiceFiscale, CodiceFiscaleRaw, Sex
from codicefiscale.tables import PlaceTables, load_tables

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MONTH_LETTERS = "ABCDEHLMPRST"

_CF_PATTERN = re.compile(
    r"(?P<surname>[A-Z]{3})"
    r"(?P<name>[A-Z]{3})"
    r"(?P<birth_date>"
    r"(?P<birth_year>[A-Z0-9]{2})"
    rf"(?P<birth_month>[{MONTH_LETTERS}])"
    r"(?P<birth_day>[A-Z0-9]{2})"
    r")"
    r"(?P<birth_place>[A-Z][A-Z0-9]{3})"
    r"(?P<cin>[A-Z])"
)

_FEMALE_DAY_OFFSET = 40
_DIGITS = re.compile(r"[0-9]+")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _parse_component(component: str, value: str) -> int:
    """Omocodia-decode and convert a numeric component."""
    decoded = decode_omocodia(value)
    if not _DIGITS.fullmatch(decoded):
        raise FormatError(component, value)
    return int(decoded)


def _infer_year(two_digits: int, today: date) -> int:
    """Place a 2-digit year in the latest century not after today's year."""
    year = two_digits + (today.year // 100) * 100
    if year > today.year:
        year -= 100
    return year


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_cf_format(cf: str) -> bool:
    """Check that the (normalized) CF matches the 16-character grammar."""
    return bool(_CF_PATTERN.fullmatch(normalize_text(cf)))


def split_cf(cf: str) -> CodiceFiscaleRaw:
    """Normalize a CF and split it into its positional slices.

    Raises:
        ShapeError: If the normalized code does not match the grammar.
    """
    normalized = normalize_text(cf)
    match = _CF_PATTERN.fullmatch(normalized)
    if match is None:
        raise ShapeError(cf, normalized=normalized)
    return CodiceFiscaleRaw(code=normalized, **match.groupdict())


def decode_birth(
    year: str,
    month: str,
    day: str,
    *,
    today: date | None = None,
) -> tuple[date, Sex, int, int, int]:
    """Rebuild birth date and sex from the raw year, month and day slices.

    Args:
        year: 2 characters, digits or omocodia letters.
        month: month letter from MONTH_LETTERS.
        day: 2 characters, digits or omocodia letters; +40 for women.
        today: reference date for the century rule (defaults to today).

    Returns:
        (birth_date, sex, year, month, day). The date is not checked against
        the month length: an overflowing day rolls into the next month
        (February 30 becomes March 2) while the returned day stays 30.

    Raises:
        FormatError: If year or day are not numeric after omocodia decoding,
            if the month letter is unknown, or if the day is outside 1–31
            once the female offset is removed.
    """
    today = today or date.today()

    two_digit_year = _parse_component("year", year)
    if len(month) != 1 or month not in MONTH_LETTERS:
        raise FormatError("month", month)
    birth_month = MONTH_LETTERS.index(month) + 1
    birth_day = _parse_component("day", day)

    if birth_day > _FEMALE_DAY_OFFSET:
        sex = Sex.FEMALE
        birth_day -= _FEMALE_DAY_OFFSET
    else:
        sex = Sex.MALE

    if not 1 <= birth_day <= 31:
        raise FormatError("day", day)

    birth_year = _infer_year(two_digit_year, today)
    birth_date = date(birth_year, birth_month, 1) + timedelta(days=birth_day - 1)

    return birth_date, sex, birth_year, birth_month, birth_day


def decode_cf(
    cf: str,
    *,
    tables: PlaceTables | None = None,
    today: date | None = None,
) -> CodiceFiscale:
    """Decode an Italian codice fiscale into personal data.

    Checks run in a fixed order (shape, date, place, checksum) and the first
    failure is raised, so a wrong control character is only reported for
    codes that are otherwise well formed.

    Args:
        cf: The codice fiscale; case and diacritics are normalized.
        tables: Place reference tables (defaults to the packaged ones).
        today: Reference date for century inference (defaults to today).

    Returns:
        CodiceFiscale record.

    Raises:
        ShapeError, FormatError, PlaceUnknownError, ChecksumError.
    """
    raw = split_cf(cf)

    birth_date, sex, birth_year, birth_month, birth_day = decode_birth(
        raw.birth_year, raw.birth_month, raw.birth_day, today=today
    )

    if tables is None:
        tables = load_tables()
    place = resolve_place(raw.birth_place, tables)

    expected_cin = compute_cin(raw.code)
    if expected_cin != raw.cin:
        raise ChecksumError(expected=expected_cin, got=raw.cin)

    return CodiceFiscale(
        code=raw.code,
        surname=raw.surname,
        name=raw.name,
        sex=sex,
        birth_date=birth_date,
        birth_year=birth_year,
        birth_month=birth_month,
        birth_day=birth_day,
        birth_place_name=place.name,
        birth_place_comune=place.comune,
        birth_place_nazione=place.nazione,
        raw=raw,
    )
