"""Place reference records: Italian comuni and foreign states (nazioni).

Comune field aliases follow the comuni-json document; Nazione fields follow
the column order of the ISTAT foreign territorial units catalogue.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Provincia(BaseModel):
    model_config = ConfigDict(frozen=True)

    codice: str
    nome: str


class Regione(BaseModel):
    model_config = ConfigDict(frozen=True)

    codice: str
    nome: str


class Zona(BaseModel):
    model_config = ConfigDict(frozen=True)

    codice: str
    nome: str


class Comune(BaseModel):
    """Italian municipality."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    cap: list[str] = Field(default_factory=list)
    codice: str                                       # ISTAT code, e.g. "058091"
    codice_catastale: str = Field(alias="codiceCatastale")  # Belfiore code, e.g. "H501"
    nome: str
    popolazione: int = 0
    provincia: Provincia
    regione: Regione
    sigla: str                                        # province abbreviation, e.g. "RM"
    zona: Zona


# Column order of the ISTAT CSV; parse_nazioni_zip relies on it.
NAZIONE_FIELDS: tuple[str, ...] = (
    "stato_territorio",
    "codice_continente",
    "denominazione_continente",
    "codice_area",
    "denominazione_area",
    "codice_istat",
    "denominazione_it",
    "denominazione_en",
    "codice_min",
    "codice_at",
    "codice_unsd_m49",
    "codice_iso_3166_alpha2",
    "codice_iso_3166_alpha3",
    "codice_istat_stato_padre",
    "codice_iso_alpha3_stato_padre",
)


class Nazione(BaseModel):
    """Foreign state or territory (Italia included)."""

    model_config = ConfigDict(frozen=True)

    stato_territorio: str                  # "S" state, "T" territory
    codice_continente: str
    denominazione_continente: str
    codice_area: str
    denominazione_area: str
    codice_istat: str
    denominazione_it: str
    denominazione_en: str
    codice_min: str
    codice_at: str                         # CF place code, e.g. "Z103"; "n.d." when missing
    codice_unsd_m49: str
    codice_iso_3166_alpha2: str
    codice_iso_3166_alpha3: str
    codice_istat_stato_padre: str = ""
    codice_iso_alpha3_stato_padre: str = ""
