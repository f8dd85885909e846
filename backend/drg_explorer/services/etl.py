"""ETL loader for the Medicare inpatient geography/DRG public use file.

Extract: read the CSV out of the CMS ZIP archive with every field as a string.
Transform: apply the fixed coercion rules to each row, failing the whole load
on the first bad value.
Load: replace the observations table in a single transaction, inserting in
fixed-size batches.

Nothing touches the store until extraction and transformation have both
succeeded, and the replace itself is all-or-nothing, so readers only ever
see the previous table or the complete new one.
"""

from __future__ import annotations

import logging
import math
import re
import zipfile
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any

import pandas as pd

from drg_explorer.database import StoreClient
from drg_explorer.errors import RowParseError, SourceMissingError
from drg_explorer.models import Observation
from drg_explorer.repositories import ObservationRepository
from drg_explorer.services.filters import SQL_INT_MAX, SQL_INT_MIN

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 1000

# Source CSV header -> Observation attribute
COLUMN_MAP: dict[str, str] = {
    "Rndrng_Prvdr_Geo_Lvl": "geo_level",
    "Rndrng_Prvdr_Geo_Cd": "geo_code",
    "Rndrng_Prvdr_Geo_Desc": "geo_description",
    "DRG_Cd": "drg_code",
    "DRG_Desc": "drg_description",
    "Tot_Dschrgs": "total_discharges",
    "Avg_Submtd_Cvrd_Chrg": "avg_submitted_charge",
    "Avg_Tot_Pymt_Amt": "avg_total_payment",
    "Avg_Mdcr_Pymt_Amt": "avg_medicare_payment",
}

TEXT_COLUMNS = ("Rndrng_Prvdr_Geo_Lvl", "Rndrng_Prvdr_Geo_Desc", "DRG_Desc")

# The CMS file writes "NaN" where a geography has no code (e.g. National)
GEO_CODE_NULL_SENTINEL = "NaN"

_INT_RE = re.compile(r"[+-]?[0-9]+")


@dataclass
class LoadResult:
    """Outcome of a completed load."""

    deleted: int
    inserted: int
    total: int
    sample: Observation | None


# ---------------------------------------------------------------------------
# Extract
# ---------------------------------------------------------------------------


def _read_csv(source: IO[bytes] | Path) -> list[dict[str, str]]:
    """Read a CSV with every value as a trimmed string."""
    df = pd.read_csv(
        source,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        encoding="utf-8-sig",
    )
    df.columns = [str(c).strip() for c in df.columns]

    missing = [c for c in COLUMN_MAP if c not in df.columns]
    if missing:
        raise SourceMissingError(f"CSV is missing required columns: {', '.join(missing)}")

    df = df[list(COLUMN_MAP)].copy()
    for column in df.columns:
        df[column] = df[column].str.strip()
    return df.to_dict(orient="records")


def extract_rows(archive_path: Path, member_name: str) -> list[dict[str, str]]:
    """Read raw rows from the source archive.

    Args:
        archive_path: ZIP archive holding the CSV. A bare ``.csv`` path is
            read directly and ``member_name`` is ignored.
        member_name: Name of the CSV inside the archive.

    Returns:
        One dict per data row, keyed by source column name.

    Raises:
        SourceMissingError: The archive, the member, or a required column
            is absent.
    """
    archive_path = Path(archive_path)
    if not archive_path.is_file():
        raise SourceMissingError(f"ZIP file not found at: {archive_path}")

    if archive_path.suffix.lower() == ".csv":
        return _read_csv(archive_path)

    try:
        with zipfile.ZipFile(archive_path) as zf:
            members = [m for m in zf.namelist() if not m.endswith("/")]
            if member_name not in members:
                raise SourceMissingError(
                    f'CSV file "{member_name}" not found in ZIP. '
                    f"Found {len(members)} files: {members[:5]}"
                )
            with zf.open(member_name) as member_file:
                return _read_csv(member_file)
    except zipfile.BadZipFile as e:
        raise SourceMissingError(f"Not a readable ZIP archive: {archive_path} ({e})") from e


# ---------------------------------------------------------------------------
# Transform
# ---------------------------------------------------------------------------


def _parse_int(raw: Mapping[str, Any], column: str, row: int) -> int:
    value = raw.get(column)
    if value is None:
        raise RowParseError(row, column, value, "value is missing")
    text = str(value).strip()
    if not _INT_RE.fullmatch(text):
        raise RowParseError(row, column, value, "not a base-10 integer")
    number = int(text, 10)
    if not SQL_INT_MIN <= number <= SQL_INT_MAX:
        raise RowParseError(row, column, value, "out of range")
    return number


def _parse_float(raw: Mapping[str, Any], column: str, row: int) -> float:
    value = raw.get(column)
    if value is None:
        raise RowParseError(row, column, value, "value is missing")
    try:
        number = float(str(value).strip())
    except ValueError:
        raise RowParseError(row, column, value, "not a number") from None
    if not math.isfinite(number):
        raise RowParseError(row, column, value, "not a finite number")
    return number


def _geo_code(value: str | None) -> str | None:
    if not value or value == GEO_CODE_NULL_SENTINEL:
        return None
    return value


def transform_row(raw: Mapping[str, Any], row: int = 1) -> dict[str, Any]:
    """Convert one raw source row into Observation attributes.

    Args:
        raw: Source row keyed by CSV header.
        row: 1-based data row number, used in error messages.

    Raises:
        RowParseError: A numeric field does not parse, or a required text
            field is absent.
    """
    for column in TEXT_COLUMNS:
        if raw.get(column) is None:
            raise RowParseError(row, column, None, "value is missing")

    return {
        "geo_level": raw["Rndrng_Prvdr_Geo_Lvl"],
        "geo_code": _geo_code(raw.get("Rndrng_Prvdr_Geo_Cd")),
        "geo_description": raw["Rndrng_Prvdr_Geo_Desc"],
        "drg_code": _parse_int(raw, "DRG_Cd", row),
        "drg_description": raw["DRG_Desc"],
        "total_discharges": _parse_int(raw, "Tot_Dschrgs", row),
        "avg_submitted_charge": _parse_float(raw, "Avg_Submtd_Cvrd_Chrg", row),
        "avg_total_payment": _parse_float(raw, "Avg_Tot_Pymt_Amt", row),
        "avg_medicare_payment": _parse_float(raw, "Avg_Mdcr_Pymt_Amt", row),
    }


def transform_rows(raw_rows: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Transform every row up front; the first bad row aborts the load."""
    return [transform_row(raw, row) for row, raw in enumerate(raw_rows, start=1)]


# ---------------------------------------------------------------------------
# Load
# ---------------------------------------------------------------------------


def _log_progress(inserted: int, total: int) -> None:
    logger.info("Progress: %s / %s records", f"{inserted:,}", f"{total:,}")


async def load_observations(
    store: StoreClient,
    rows: list[dict[str, Any]],
    batch_size: int = DEFAULT_BATCH_SIZE,
    on_batch: Callable[[int, int], None] | None = _log_progress,
) -> LoadResult:
    """Replace the observations table with ``rows`` in one transaction.

    Args:
        store: Record store to load into.
        rows: Transformed rows (see transform_row).
        batch_size: Rows per INSERT statement.
        on_batch: Progress callback, called with (inserted, total).

    Returns:
        Deleted/inserted counts plus the post-load row count and a sample row.
    """
    async with store.session() as session:
        repo = ObservationRepository(session)

        async with session.begin():
            deleted, inserted = await repo.replace_all(rows, batch_size, on_batch)
        logger.info("Deleted %d existing records, inserted %d", deleted, inserted)

        total = await repo.count()
        sample = await repo.first()

    return LoadResult(deleted=deleted, inserted=inserted, total=total, sample=sample)


async def import_archive(
    store: StoreClient,
    archive_path: Path,
    member_name: str,
    batch_size: int = DEFAULT_BATCH_SIZE,
    on_batch: Callable[[int, int], None] | None = _log_progress,
) -> LoadResult:
    """Extract, transform and load the source archive into ``store``.

    Source and parse errors surface before the schema is created or any
    existing row is deleted.
    """
    archive_path = Path(archive_path)
    raw_rows = extract_rows(archive_path, member_name)
    logger.info("Parsed %s records from %s", f"{len(raw_rows):,}", archive_path.name)

    rows = transform_rows(raw_rows)

    await store.create_schema()
    return await load_observations(store, rows, batch_size, on_batch)
