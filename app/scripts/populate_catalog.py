"""
Loads the EEG tariff workbook into the tariff store.

Source sheet: https://www.netztransparenz.de/de-de/Erneuerbare-Energien-und-Umlagen/Abwicklungshinweise-und-Umsetzungshilfen/EEG

Usage:
    python -m app.scripts.populate_catalog excel-data/eeg-verguetungskategorien.xlsx
    python -m app.scripts.populate_catalog sheet.xlsx --sheet "EEG-Vergütungen und vNNE" --dry-run
"""

import argparse
import sys
from collections import Counter

from app.core import logger, settings
from app.database import SessionLocal, init_db, redis_client
from app.repositories import TariffRepository, TariffCacheRepository
from app.services import ingest_rows, read_sheet_rows, populate_catalog_service


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Populate the EEG tariff catalog from an .xlsx workbook.")
    parser.add_argument("workbook", help="path to the .xlsx file")
    parser.add_argument("--sheet", default=settings.EEG_SHEET_NAME, help="worksheet name")
    parser.add_argument(
        "--start-row",
        type=int,
        default=settings.EEG_DATA_START_ROW,
        help="0-based index of the first data row",
    )
    parser.add_argument("--dry-run", action="store_true", help="parse and summarize without writing")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.dry_run:
        records = ingest_rows(read_sheet_rows(args.workbook, args.sheet, args.start_row))
        per_source = Counter(record.energy_source for record in records)
        unparsed_dates = sum(1 for record in records if record.commissioning_date_from is None)
        unparsed_power = sum(1 for record in records if record.power_output_from is None)
        print(f"{len(records)} records")
        for source, count in sorted(per_source.items()):
            print(f"  {source}: {count}")
        print(f"without date range: {unparsed_dates}, without power range: {unparsed_power}")
        return 0

    init_db()
    db = SessionLocal()
    try:
        cache = TariffCacheRepository(redis_client) if redis_client is not None else None
        stats = populate_catalog_service(TariffRepository(db, cache=cache), args.workbook, args.sheet, args.start_row)
    finally:
        db.close()

    logger.info(
        f"📊 Ingestion summary: {stats['written']}/{stats['total']} written, "
        f"{len(stats['failed_batches'])} failed batches"
    )
    return 1 if stats["failed_batches"] else 0


if __name__ == "__main__":
    sys.exit(main())
