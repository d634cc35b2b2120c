"""Offline regeneration of the place reference tables.

Usage:
    python -m codicefiscale.tables.builder

Downloads the comuni-json document and the ISTAT foreign states catalogue,
then writes comuni.json and nazioni.json into the configured data directory.
The decoder never calls this module; it only reads the written files.
"""

from __future__ import annotations

import asyncio
import csv
import io
import json
import logging
import sys
import zipfile
from pathlib import Path

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from codicefiscale.config import settings
from codicefiscale.errors import PlaceTablesError
from codicefiscale.schemas.places import NAZIONE_FIELDS, Comune, Nazione
from codicefiscale.tables import build_tables

logger = logging.getLogger(__name__)

_COMUNI_ADAPTER = TypeAdapter(list[Comune])
_CSV_ENCODING = "iso-8859-1"
_CSV_DELIMITER = ";"


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_nazioni_csv(text: str) -> list[Nazione]:
    """Parse the ISTAT foreign states CSV (already decoded to str).

    The first row is the header. Rows with fewer columns than NAZIONE_FIELDS
    are skipped; extra trailing columns are ignored.
    """
    reader = csv.reader(io.StringIO(text), delimiter=_CSV_DELIMITER)
    next(reader, None)

    records: list[Nazione] = []
    for line_number, fields in enumerate(reader, start=2):
        if len(fields) < len(NAZIONE_FIELDS):
            logger.warning("Too few columns (%d) on line %d, skipping", len(fields), line_number)
            continue
        values = [field.strip() for field in fields[: len(NAZIONE_FIELDS)]]
        records.append(Nazione(**dict(zip(NAZIONE_FIELDS, values, strict=True))))
    return records


def parse_nazioni_zip(payload: bytes) -> list[Nazione]:
    """Extract nazioni from the first CSV member of the catalogue archive.

    Members are scanned in archive order; the first .csv file yielding at
    least one record wins.

    Raises:
        PlaceTablesError: If the payload is not a ZIP archive.
    """
    try:
        archive = zipfile.ZipFile(io.BytesIO(payload))
    except zipfile.BadZipFile as exc:
        raise PlaceTablesError(f"Nazioni catalogue is not a ZIP archive: {exc}") from exc

    with archive:
        for member in archive.infolist():
            if Path(member.filename).suffix.lower() != ".csv":
                continue
            text = archive.read(member).decode(_CSV_ENCODING)
            records = parse_nazioni_csv(text)
            logger.info("Parsed %d nazioni from %s", len(records), member.filename)
            if records:
                return records
    return []


def parse_comuni_json(payload: bytes) -> list[Comune]:
    """Validate the comuni-json document.

    Raises:
        PlaceTablesError: If the document is not valid JSON or does not match
            the Comune schema.
    """
    try:
        return _COMUNI_ADAPTER.validate_json(payload)
    except ValidationError as exc:
        raise PlaceTablesError(f"Invalid comuni document: {exc}") from exc


# ---------------------------------------------------------------------------
# Download
# ---------------------------------------------------------------------------


async def fetch_comuni(client: httpx.AsyncClient, url: str) -> list[Comune]:
    """Download and parse the municipalities JSON."""
    logger.info("Downloading comuni from %s", url)
    response = await client.get(url, follow_redirects=True)
    response.raise_for_status()
    return parse_comuni_json(response.content)


async def fetch_nazioni(client: httpx.AsyncClient, url: str) -> list[Nazione]:
    """Download and parse the foreign states ZIP catalogue."""
    logger.info("Downloading nazioni from %s", url)
    response = await client.get(url, follow_redirects=True)
    response.raise_for_status()
    return parse_nazioni_zip(response.content)


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def write_tables(comuni: list[Comune], nazioni: list[Nazione], data_dir: Path) -> tuple[Path, Path]:
    """Write both tables as JSON after checking they index cleanly.

    Returns:
        Paths of the written comuni and nazioni files.

    Raises:
        PlaceTablesError: If the tables are inconsistent (no Italia record).
    """
    tables = build_tables(comuni, nazioni)

    data_dir.mkdir(parents=True, exist_ok=True)
    comuni_path = data_dir / "comuni.json"
    nazioni_path = data_dir / "nazioni.json"

    with open(comuni_path, "w", encoding="utf-8") as f:
        json.dump([c.model_dump(by_alias=True) for c in comuni], f, ensure_ascii=False, indent=1)
    with open(nazioni_path, "w", encoding="utf-8") as f:
        json.dump([n.model_dump() for n in nazioni], f, ensure_ascii=False, indent=1)

    logger.info(
        "Wrote %d comuni and %d nazioni (%d AT codes) to %s",
        len(tables.comuni),
        len(tables.nazioni),
        len(tables.at_to_nazione),
        data_dir,
    )
    return comuni_path, nazioni_path


async def regenerate(data_dir: Path | None = None) -> tuple[Path, Path]:
    """Download both upstream sources and rewrite the data directory."""
    cfg = settings.tables
    logger.info("Regenerating place tables (env=%s)", settings.environment)
    timeout = httpx.Timeout(cfg.download_timeout, connect=10.0)
    async with httpx.AsyncClient(timeout=timeout) as client:
        nazioni = await fetch_nazioni(client, cfg.nazioni_url)
        comuni = await fetch_comuni(client, cfg.comuni_url)
    return write_tables(comuni, nazioni, data_dir or cfg.tables_data_dir)


# ── Entry point ──────────────────────────────────────────────────────


def _configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
        stream=sys.stdout,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def main() -> None:
    _configure_logging()
    try:
        asyncio.run(regenerate())
    except (httpx.HTTPError, PlaceTablesError):
        logger.exception("Table regeneration failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
