# app/services/catalog_ingestion_service.py

"""
Turns the rows of the EEG tariff sheet into normalized TariffRecords and
writes them to the tariff store in chunks.

Sheet columns, in order: designation (category code), energy source,
commissioning text, criteria text, proportional allocation, feed-in tariff,
reference value, fallback payment, tenant-power surcharge, added date.
"""

from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, Sequence

import openpyxl

from app.core import logger, log_critical_error, settings, StoreFailure
from app.parsers import parse_commissioning_period, parse_power_criteria
from app.schemas.tariff_schema import TariffRecord
from .tariff_catalog_service import TariffStore

COL_DESIGNATION = 0
COL_ENERGY_SOURCE = 1
COL_PERIOD = 2
COL_CRITERIA = 3
COL_ALLOCATION = 4
COL_FEED_IN = 5
COL_REFERENCE = 6
COL_FALLBACK = 7
COL_TENANT_POWER = 8
COL_ADDED = 9


def _cell(row: Sequence[Any], index: int) -> str | None:
    """Stripped text of a cell; None for missing or blank cells."""
    if index >= len(row) or row[index] is None:
        return None
    value = row[index]
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.isoformat()
    text = str(value).strip()
    return text or None


def _rate(row: Sequence[Any], index: int) -> float | None:
    """ct/kWh value; accepts numbers and German decimal-comma text."""
    if index >= len(row) or row[index] is None:
        return None
    value = row[index]
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    try:
        return float(str(value).strip().replace(",", "."))
    except ValueError:
        return None


def row_to_record(row: Sequence[Any]) -> TariffRecord | None:
    """Normalizes one sheet row; None when the row has to be skipped."""
    category_code = _cell(row, COL_DESIGNATION)
    if not category_code:
        return None

    # The sheet has a single identifier column: it is both code and designation
    designation = category_code
    energy_source = _cell(row, COL_ENERGY_SOURCE)
    if not energy_source:
        logger.warning(
            f"Skipping record with missing keys: energietraeger={energy_source!r}, "
            f"bezeichnung={designation!r}"
        )
        return None

    period_text = _cell(row, COL_PERIOD)
    criteria_text = _cell(row, COL_CRITERIA)

    # Unparsable text just leaves the range empty
    date_range = parse_commissioning_period(period_text).value_or_none()
    power_range = parse_power_criteria(criteria_text).value_or_none()

    return TariffRecord(
        energy_source=energy_source,
        category_code=category_code,
        designation=designation,
        raw_period_text=period_text,
        raw_criteria_text=criteria_text,
        proportional_allocation=_cell(row, COL_ALLOCATION),
        commissioning_date_from=date_range.start if date_range else None,
        commissioning_date_to=date_range.end if date_range else None,
        power_output_from=power_range.start if power_range else None,
        power_output_to=power_range.end if power_range else None,
        feed_in_tariff=_rate(row, COL_FEED_IN),
        reference_value=_rate(row, COL_REFERENCE),
        fallback_payment=_rate(row, COL_FALLBACK),
        tenant_power_surcharge=_rate(row, COL_TENANT_POWER),
        added_date=_cell(row, COL_ADDED),
    )


def ingest_rows(rows: Iterable[Sequence[Any]]) -> list[TariffRecord]:
    """Normalizes data rows in input order; no deduplication."""
    records = []
    for row in rows:
        if not row:
            continue
        record = row_to_record(row)
        if record is not None:
            records.append(record)
    logger.info(f"Parsed {len(records)} records")
    return records


def read_sheet_rows(path: str | Path, sheet_name: str | None = None, start_row: int | None = None) -> list[tuple]:
    """Data rows of the tariff worksheet, skipping the header region."""
    sheet_name = sheet_name or settings.EEG_SHEET_NAME
    start_row = settings.EEG_DATA_START_ROW if start_row is None else start_row

    workbook = openpyxl.load_workbook(Path(path), read_only=True, data_only=True)
    try:
        worksheet = workbook[sheet_name]
        rows = list(worksheet.iter_rows(values_only=True))
    finally:
        workbook.close()
    return rows[start_row:]


def write_catalog(store: TariffStore, records: list[TariffRecord], batch_size: int | None = None) -> dict:
    """
    Writes records in fixed-size chunks. A failing chunk is logged and
    skipped so the rest of the catalog still lands in the store.
    """
    batch_size = batch_size or settings.INGEST_BATCH_SIZE
    total_batches = (len(records) + batch_size - 1) // batch_size
    stats = {"written": 0, "failed_batches": [], "total": len(records)}

    for batch_index, start in enumerate(range(0, len(records), batch_size), start=1):
        batch = records[start:start + batch_size]
        try:
            stats["written"] += store.upsert_batch(batch)
            logger.info(f"Wrote batch {batch_index}/{total_batches}")
        except StoreFailure as e:
            logger.error(f"❌ Error writing batch starting at {start}: {e.__cause__ or e}")
            stats["failed_batches"].append(start)

    return stats


def populate_catalog_service(store: TariffStore, path: str | Path, sheet_name: str | None = None, start_row: int | None = None) -> dict:
    """Full ingestion run: read workbook, normalize, write."""
    logger.info(f"📥 Loading tariff catalog from {path}")
    records = ingest_rows(read_sheet_rows(path, sheet_name, start_row))
    stats = write_catalog(store, records)

    if stats["failed_batches"]:
        log_critical_error(
            f"Catalog ingestion finished with {len(stats['failed_batches'])} failed batches "
            f"({stats['written']}/{stats['total']} records written)"
        )
    logger.info("Data population completed")
    return stats
