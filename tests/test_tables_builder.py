"""Tests for the offline table builder.

Covers:
- ISTAT CSV parsing: header skipped, short rows skipped, ISO-8859-1 decoding
- ZIP extraction: non-CSV members ignored, invalid archives rejected
- comuni-json validation
- Download helpers with a mocked httpx client
- Writing tables that load back through the regular readers
"""

from __future__ import annotations

import io
import json
import logging
import zipfile
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from codicefiscale.errors import PlaceTablesError
from codicefiscale.tables import build_tables, read_comuni, read_nazioni
from codicefiscale.tables.builder import (
    fetch_comuni,
    fetch_nazioni,
    parse_comuni_json,
    parse_nazioni_csv,
    parse_nazioni_zip,
    regenerate,
    write_tables,
)

# ── Fixtures ─────────────────────────────────────────────────────────

_HEADER = (
    "Stato(S)/Territorio(T);Codice Continente;Denominazione Continente (IT);Codice Area;"
    "Denominazione Area (IT);Codice ISTAT;Denominazione IT;Denominazione EN;Codice MIN;"
    "Codice AT;Codice UNSD_M49;Codice ISO 3166 alpha2;Codice ISO 3166 alpha3;"
    "Codice_ISTAT_Stato_Padre;Codice_ISO_alpha3_Stato_Padre"
)

_ROWS = [
    "S;1;Europa;11;Unione europea;100;Italia;Italy;086;n.d.;380;IT;ITA;;",
    "S;1;Europa;11;Unione europea;206;Belgio;Belgium;009;Z103;056;BE;BEL;;",
    "S;1;Europa;13;Altri paesi europei;245;Città del Vaticano;Holy See;093;Z106;336;VA;VAT;;",
    "S;4;America;42;America centro-meridionale;605;Brasile;Brazil;011;Z602;076;BR;BRA;;",
]

_COMUNI = [
    {
        "nome": "Roma",
        "codice": "058091",
        "zona": {"codice": "3", "nome": "Centro"},
        "regione": {"codice": "12", "nome": "Lazio"},
        "provincia": {"codice": "058", "nome": "Roma"},
        "sigla": "RM",
        "codiceCatastale": "H501",
        "cap": ["00118", "00119"],
        "popolazione": 2761477,
    },
    {
        "nome": "Olmo Gentile",
        "codice": "058073",
        "zona": {"codice": "3", "nome": "Centro"},
        "regione": {"codice": "12", "nome": "Lazio"},
        "provincia": {"codice": "058", "nome": "Roma"},
        "sigla": "RM",
        "codiceCatastale": "G048",
        "cap": ["00020"],
        "popolazione": 188,
    },
]


def _csv_text(*rows: str) -> str:
    return "\n".join([_HEADER, *rows]) + "\n"


def _zip_payload(members: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in members.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def _make_response(content: bytes, status_code: int = 200) -> MagicMock:
    """Build a mock httpx.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = content
    resp.raise_for_status = MagicMock()  # no-op for 200
    return resp


# ── CSV / ZIP parsing ────────────────────────────────────────────────


class TestParseNazioniCsv:
    def test_header_skipped(self) -> None:
        nazioni = parse_nazioni_csv(_csv_text(*_ROWS))
        assert [n.denominazione_it for n in nazioni] == ["Italia", "Belgio", "Città del Vaticano", "Brasile"]

    def test_columns_mapped_in_order(self) -> None:
        belgio = parse_nazioni_csv(_csv_text(_ROWS[1]))[0]
        assert belgio.stato_territorio == "S"
        assert belgio.codice_continente == "1"
        assert belgio.denominazione_area == "Unione europea"
        assert belgio.codice_istat == "206"
        assert belgio.denominazione_en == "Belgium"
        assert belgio.codice_at == "Z103"
        assert belgio.codice_unsd_m49 == "056"
        assert belgio.codice_iso_3166_alpha3 == "BEL"
        assert belgio.codice_istat_stato_padre == ""

    def test_short_rows_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        nazioni = parse_nazioni_csv(_csv_text("S;1;Europa;too;short", _ROWS[1]))
        assert len(nazioni) == 1
        assert "Too few columns" in caplog.text

    def test_extra_columns_ignored(self) -> None:
        nazioni = parse_nazioni_csv(_csv_text(_ROWS[1] + ";extra;columns"))
        assert nazioni[0].codice_iso_alpha3_stato_padre == ""

    def test_empty_document(self) -> None:
        assert parse_nazioni_csv("") == []


class TestParseNazioniZip:
    def test_latin1_csv(self) -> None:
        payload = _zip_payload({"nazioni.csv": _csv_text(*_ROWS).encode("iso-8859-1")})
        nazioni = parse_nazioni_zip(payload)
        assert nazioni[2].denominazione_it == "Città del Vaticano"

    def test_non_csv_members_ignored(self) -> None:
        payload = _zip_payload(
            {
                "LEGGIMI.txt": b"not a table",
                "Elenco.CSV": _csv_text(*_ROWS).encode("iso-8859-1"),
            }
        )
        assert len(parse_nazioni_zip(payload)) == len(_ROWS)

    def test_first_csv_with_records_wins(self) -> None:
        payload = _zip_payload(
            {
                "empty.csv": _csv_text().encode("iso-8859-1"),
                "full.csv": _csv_text(_ROWS[1]).encode("iso-8859-1"),
                "other.csv": _csv_text(*_ROWS).encode("iso-8859-1"),
            }
        )
        assert [n.codice_at for n in parse_nazioni_zip(payload)] == ["Z103"]

    def test_no_csv_member(self) -> None:
        assert parse_nazioni_zip(_zip_payload({"readme.txt": b"x"})) == []

    def test_not_a_zip(self) -> None:
        with pytest.raises(PlaceTablesError):
            parse_nazioni_zip(b"<html>not found</html>")


class TestParseComuniJson:
    def test_valid(self) -> None:
        comuni = parse_comuni_json(json.dumps(_COMUNI).encode("utf-8"))
        assert [c.codice_catastale for c in comuni] == ["H501", "G048"]
        assert comuni[0].provincia.nome == "Roma"

    def test_invalid_json(self) -> None:
        with pytest.raises(PlaceTablesError):
            parse_comuni_json(b"{not json")

    def test_missing_fields(self) -> None:
        with pytest.raises(PlaceTablesError):
            parse_comuni_json(b'[{"nome": "Roma"}]')


# ── Download helpers ─────────────────────────────────────────────────


class TestFetch:
    @pytest.mark.asyncio()
    async def test_fetch_comuni(self) -> None:
        client = AsyncMock()
        client.get = AsyncMock(return_value=_make_response(json.dumps(_COMUNI).encode("utf-8")))

        comuni = await fetch_comuni(client, "https://example.org/comuni.json")

        assert len(comuni) == 2
        client.get.assert_awaited_once_with("https://example.org/comuni.json", follow_redirects=True)

    @pytest.mark.asyncio()
    async def test_fetch_nazioni(self) -> None:
        payload = _zip_payload({"nazioni.csv": _csv_text(*_ROWS).encode("iso-8859-1")})
        client = AsyncMock()
        client.get = AsyncMock(return_value=_make_response(payload))

        nazioni = await fetch_nazioni(client, "https://example.org/nazioni.zip")

        assert [n.codice_at for n in nazioni][1:] == ["Z103", "Z106", "Z602"]

    @pytest.mark.asyncio()
    async def test_http_error_propagates(self) -> None:
        response = _make_response(b"")
        response.raise_for_status = MagicMock(
            side_effect=httpx.HTTPStatusError("404", request=MagicMock(), response=MagicMock())
        )
        client = AsyncMock()
        client.get = AsyncMock(return_value=response)

        with pytest.raises(httpx.HTTPStatusError):
            await fetch_comuni(client, "https://example.org/comuni.json")


# ── Output ───────────────────────────────────────────────────────────


class TestWriteTables:
    def test_written_tables_load_back(self, tmp_path: Path) -> None:
        comuni = parse_comuni_json(json.dumps(_COMUNI).encode("utf-8"))
        nazioni = parse_nazioni_csv(_csv_text(*_ROWS))

        comuni_path, nazioni_path = write_tables(comuni, nazioni, tmp_path / "data")

        tables = build_tables(read_comuni(comuni_path), read_nazioni(nazioni_path))
        assert tables.comuni[tables.catastale_to_comune["G048"]].nome == "Olmo Gentile"
        assert tables.nazioni[tables.at_to_nazione["Z106"]].denominazione_it == "Città del Vaticano"
        assert tables.italy_index == 0

    def test_comuni_file_uses_json_aliases(self, tmp_path: Path) -> None:
        comuni = parse_comuni_json(json.dumps(_COMUNI).encode("utf-8"))
        comuni_path, _ = write_tables(comuni, parse_nazioni_csv(_csv_text(*_ROWS)), tmp_path)
        assert "codiceCatastale" in json.loads(comuni_path.read_text(encoding="utf-8"))[0]

    def test_inconsistent_tables_not_written(self, tmp_path: Path) -> None:
        comuni = parse_comuni_json(json.dumps(_COMUNI).encode("utf-8"))
        nazioni = parse_nazioni_csv(_csv_text(_ROWS[1]))  # no Italia

        with pytest.raises(PlaceTablesError):
            write_tables(comuni, nazioni, tmp_path)
        assert not (tmp_path / "comuni.json").exists()


class TestRegenerate:
    @pytest.mark.asyncio()
    async def test_regenerate(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        zip_payload = _zip_payload({"nazioni.csv": _csv_text(*_ROWS).encode("iso-8859-1")})
        comuni_payload = json.dumps(_COMUNI).encode("utf-8")

        async def _get(url: str, **kwargs) -> MagicMock:
            return _make_response(zip_payload if url.endswith(".zip") else comuni_payload)

        with patch("httpx.AsyncClient") as mock_client_cls:
            mock_http = AsyncMock()
            mock_http.get = AsyncMock(side_effect=_get)
            mock_client_cls.return_value.__aenter__ = AsyncMock(return_value=mock_http)
            mock_client_cls.return_value.__aexit__ = AsyncMock(return_value=False)

            with caplog.at_level(logging.INFO, logger="codicefiscale.tables.builder"):
                comuni_path, nazioni_path = await regenerate(tmp_path)

        assert mock_http.get.await_count == 2
        assert "env=" in caplog.text
        assert len(read_comuni(comuni_path)) == 2
        assert len(read_nazioni(nazioni_path)) == len(_ROWS)
