"""Decoded codice fiscale records.

Pure data classes, immutable once built by the decoder.
"""

from __future__ import annotations

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict

from codicefiscale.schemas.places import Comune, Nazione


class Sex(str, Enum):
    MALE = "M"
    FEMALE = "F"


class CodiceFiscaleRaw(BaseModel):
    """Positional slices of a code, before omocodia decoding."""

    model_config = ConfigDict(frozen=True)

    code: str
    surname: str        # positions 1-3
    name: str           # positions 4-6
    birth_date: str     # positions 7-11, year + month + day
    birth_year: str
    birth_month: str
    birth_day: str
    birth_place: str    # positions 12-15
    cin: str            # position 16


class CodiceFiscale(BaseModel):
    """Result of a successful decode."""

    model_config = ConfigDict(frozen=True)

    code: str
    surname: str
    name: str
    sex: Sex
    birth_date: date
    birth_year: int
    birth_month: int
    birth_day: int
    birth_place_name: str
    birth_place_comune: Comune | None = None   # set iff the place is an Italian comune
    birth_place_nazione: Nazione               # Italia for comuni
    raw: CodiceFiscaleRaw
