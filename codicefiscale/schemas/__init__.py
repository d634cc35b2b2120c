"""Pydantic schemas for decoded codes and place reference records."""

from codicefiscale.schemas.codice_fiscale import CodiceFiscale, CodiceFiscaleRaw, Sex
from codicefiscale.schemas.places import Comune, Nazione, Provincia, Regione, Zona

__all__ = [
    "CodiceFiscale",
    "CodiceFiscaleRaw",
    "Comune",
    "Nazione",
    "Provincia",
    "Regione",
    "Sex",
    "Zona",
]
