"""Import the CMS inpatient geography/DRG file into the record store.

Reads the CSV out of the published ZIP, validates and converts every row,
then replaces the observations table in a single transaction.

Usage:
    python -m drg_explorer.scripts.import_data
    python -m drg_explorer.scripts.import_data --archive path/to/file.zip --batch-size 500

The script is idempotent - running it twice with the same source leaves the
same table contents. A failure at any point leaves the previous contents in
place and exits with status 1.
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from drg_explorer.config import settings
from drg_explorer.database import StoreClient
from drg_explorer.errors import DrgExplorerError
from drg_explorer.services.etl import LoadResult, import_archive


def _print_progress(inserted: int, total: int) -> None:
    print(f"\r   Progress: {inserted:,} / {total:,} records", end="", flush=True)


async def run_import(
    database_url: str,
    archive_path: Path,
    member_name: str,
    batch_size: int,
) -> LoadResult:
    """Open the store, run the import and always dispose of the engine."""
    store = StoreClient.from_url(database_url)
    try:
        return await import_archive(
            store,
            archive_path,
            member_name,
            batch_size=batch_size,
            on_batch=_print_progress,
        )
    finally:
        await store.dispose()


def print_statistics(result: LoadResult) -> None:
    print("\nDatabase Statistics:")
    print(f"   Deleted existing records: {result.deleted:,}")
    print(f"   Total records: {result.total:,}")
    sample = result.sample
    if sample is not None:
        print(f"   Sample record ID: {sample.id}")
        print(f"   Sample DRG: {sample.drg_code} - {sample.drg_description}")
        print(f"   Sample Geography: {sample.geo_description} ({sample.geo_level})")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Load the Medicare inpatient geography/DRG dataset into the record store.",
    )
    parser.add_argument(
        "--archive",
        type=Path,
        default=settings.source_archive,
        help=f"ZIP archive (or bare CSV) to import (default: {settings.source_archive})",
    )
    parser.add_argument(
        "--member",
        default=settings.source_member,
        help=f"CSV file name inside the archive (default: {settings.source_member})",
    )
    parser.add_argument(
        "--database-url",
        default=settings.database_url,
        help="SQLAlchemy async database URL (default: DATABASE_URL setting)",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=settings.load_batch_size,
        help=f"Rows per insert batch (default: {settings.load_batch_size})",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the import script. Returns the process exit status."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.batch_size < 1:
        print("Batch size must be a positive integer", file=sys.stderr)
        return 1

    print("=" * 50)
    print("DRG Explorer Data Import")
    print("=" * 50)
    print(f"  Source: {args.archive}")
    print(f"  Member: {args.member}")

    try:
        result = asyncio.run(
            run_import(args.database_url, args.archive, args.member, args.batch_size)
        )
    except (DrgExplorerError, SQLAlchemyError) as e:
        print(f"\nImport failed: {e}", file=sys.stderr)
        return 1

    print("\nData import complete!")
    print_statistics(result)
    print("\nImport successful!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
