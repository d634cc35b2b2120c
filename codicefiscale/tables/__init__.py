"""Place reference tables: Italian comuni and foreign states.

Loaded once per process from data/comuni.json and data/nazioni.json
(regenerated offline by codicefiscale.tables.builder) and indexed by the
4-character place code used in the codice fiscale.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType

from pydantic import TypeAdapter

from codicefiscale.config import settings
from codicefiscale.errors import PlaceTablesError
from codicefiscale.schemas.places import Comune, Nazione

logger = logging.getLogger(__name__)

# AT codes the ISTAT catalogue uses for states without a CF place code
_MISSING_AT_CODES = frozenset({"", "n.d."})

_COMUNI_ADAPTER = TypeAdapter(list[Comune])
_NAZIONI_ADAPTER = TypeAdapter(list[Nazione])


@dataclass(frozen=True)
class PlaceTables:
    """Immutable, indexed view over the two reference sequences."""

    comuni: tuple[Comune, ...]
    nazioni: tuple[Nazione, ...]
    catastale_to_comune: Mapping[str, int]
    at_to_nazione: Mapping[str, int]
    italy_index: int | None

    @property
    def italy(self) -> Nazione:
        if self.italy_index is None:
            raise PlaceTablesError("No 'Italia' record in the nazioni table")
        return self.nazioni[self.italy_index]


def _is_italy(nazione: Nazione) -> bool:
    return nazione.denominazione_it.lower() == "italia" or nazione.denominazione_en.lower() == "italy"


def build_tables(comuni: Iterable[Comune], nazioni: Iterable[Nazione]) -> PlaceTables:
    """Index comuni by codice catastale and nazioni by codice AT.

    Later entries win on duplicate codes. Nazioni without an AT code are kept
    in the sequence but not indexed.

    Raises:
        PlaceTablesError: If comuni are present but no Italia record exists.
    """
    comuni_seq = tuple(comuni)
    nazioni_seq = tuple(nazioni)

    italy_index: int | None = None
    at_to_nazione: dict[str, int] = {}
    for index, nazione in enumerate(nazioni_seq):
        if _is_italy(nazione):
            italy_index = index
        if nazione.codice_at in _MISSING_AT_CODES:
            continue
        at_to_nazione[nazione.codice_at] = index

    catastale_to_comune = {comune.codice_catastale: index for index, comune in enumerate(comuni_seq)}

    if catastale_to_comune and italy_index is None:
        raise PlaceTablesError("Comuni table is not empty but no 'Italia' record exists in nazioni")

    return PlaceTables(
        comuni=comuni_seq,
        nazioni=nazioni_seq,
        catastale_to_comune=MappingProxyType(catastale_to_comune),
        at_to_nazione=MappingProxyType(at_to_nazione),
        italy_index=italy_index,
    )


def read_comuni(path: Path) -> list[Comune]:
    """Read a comuni-json document; a missing file yields an empty table."""
    if not path.exists():
        logger.warning("Comuni table not found at %s, municipalities will not resolve", path)
        return []
    with open(path, encoding="utf-8") as f:
        return _COMUNI_ADAPTER.validate_python(json.load(f))


def read_nazioni(path: Path) -> list[Nazione]:
    """Read the nazioni JSON table; a missing file yields an empty table."""
    if not path.exists():
        logger.warning("Nazioni table not found at %s, foreign states will not resolve", path)
        return []
    with open(path, encoding="utf-8") as f:
        return _NAZIONI_ADAPTER.validate_python(json.load(f))


@lru_cache(maxsize=1)
def load_tables() -> PlaceTables:
    """Load and index the configured reference tables (cached)."""
    tables = build_tables(
        read_comuni(settings.tables.comuni_path),
        read_nazioni(settings.tables.nazioni_path),
    )
    logger.debug(
        "Loaded %d comuni and %d nazioni from %s",
        len(tables.comuni),
        len(tables.nazioni),
        settings.tables.tables_data_dir,
    )
    return tables


__all__ = ["PlaceTables", "build_tables", "load_tables", "read_comuni", "read_nazioni"]
