"""Birth place resolution: codice catastale (comune) or codice AT (nazione)."""

from __future__ import annotations

from typing import NamedTuple

from codicefiscale.decoders.omocodia import decode_omocodia
from codicefiscale.errors import PlaceUnknownError
from codicefiscale.schemas.places import Comune, Nazione
from codicefiscale.tables import PlaceTables


class ResolvedPlace(NamedTuple):
    comune: Comune | None
    nazione: Nazione
    name: str


def resolve_place(place: str, tables: PlaceTables) -> ResolvedPlace:
    """Resolve a raw 4-character place code.

    The first character is always a letter; the remaining three may be
    omocodia letters and are decoded before lookup. Comuni take precedence
    over nazioni.

    Raises:
        PlaceUnknownError: If the code is in neither table.
    """
    code = place[:1] + decode_omocodia(place[1:])

    comune_index = tables.catastale_to_comune.get(code)
    if comune_index is not None:
        comune = tables.comuni[comune_index]
        return ResolvedPlace(comune=comune, nazione=tables.italy, name=comune.nome)

    nazione_index = tables.at_to_nazione.get(code)
    if nazione_index is not None:
        nazione = tables.nazioni[nazione_index]
        return ResolvedPlace(comune=None, nazione=nazione, name=nazione.denominazione_it)

    raise PlaceUnknownError(code)
