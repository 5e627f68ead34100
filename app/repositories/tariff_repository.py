# app/repositories/tariff_repository.py

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.core import logger, StoreFailure
from app.models import Tariff
from app.schemas.tariff_schema import TariffRecord
from .tariff_cache_repository import TariffCacheRepository


def _to_record(row: Tariff) -> TariffRecord:
    return TariffRecord(
        energy_source=row.trf_energy_source,
        category_code=row.trf_category_code,
        designation=row.trf_designation,
        raw_period_text=row.trf_period_text,
        raw_criteria_text=row.trf_criteria_text,
        proportional_allocation=row.trf_allocation,
        commissioning_date_from=row.trf_date_from,
        commissioning_date_to=row.trf_date_to,
        power_output_from=row.trf_power_from_kw,
        power_output_to=row.trf_power_to_kw,
        feed_in_tariff=row.trf_feed_in_ct_kwh,
        reference_value=row.trf_reference_ct_kwh,
        fallback_payment=row.trf_fallback_ct_kwh,
        tenant_power_surcharge=row.trf_tenant_power_ct_kwh,
        added_date=row.trf_added_date,
    )


def _to_row(record: TariffRecord) -> Tariff:
    return Tariff(
        trf_energy_source=record.energy_source,
        trf_category_code=record.category_code,
        trf_designation=record.designation,
        trf_period_text=record.raw_period_text,
        trf_criteria_text=record.raw_criteria_text,
        trf_allocation=record.proportional_allocation,
        trf_date_from=record.commissioning_date_from,
        trf_date_to=record.commissioning_date_to,
        trf_power_from_kw=record.power_output_from,
        trf_power_to_kw=record.power_output_to,
        trf_feed_in_ct_kwh=record.feed_in_tariff,
        trf_reference_ct_kwh=record.reference_value,
        trf_fallback_ct_kwh=record.fallback_payment,
        trf_tenant_power_ct_kwh=record.tenant_power_surcharge,
        trf_added_date=record.added_date,
    )


class TariffRepository:
    """Tariff store keyed by energy source; no ordering guarantee on reads."""

    def __init__(self, db: Session, cache: TariffCacheRepository | None = None):
        self.db = db
        self.cache = cache

    def get_by_energy_source(self, energy_source: str) -> list[TariffRecord]:
        if self.cache is not None:
            cached = self.cache.get_partition(energy_source)
            if cached is not None:
                return cached

        try:
            rows = (
                self.db.query(Tariff)
                .filter(Tariff.trf_energy_source == energy_source)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Could not query tariffs for {energy_source}: {e}")
            raise StoreFailure() from e

        records = [_to_record(row) for row in rows]
        logger.info(f"Queried {len(records)} records for energyType={energy_source}")

        if self.cache is not None:
            self.cache.set_partition(energy_source, records)
        return records

    def upsert_batch(self, records: list[TariffRecord]) -> int:
        """
        Writes one chunk in a single transaction. A record with an existing
        (energy source, category code) replaces the stored one.
        """
        # Last occurrence wins when a chunk repeats a category code
        latest = {(record.energy_source, record.category_code): record for record in records}
        try:
            for record in latest.values():
                self.db.merge(_to_row(record))
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreFailure(f"Could not write {len(latest)} tariffs") from e

        if self.cache is not None:
            self.cache.invalidate(record.energy_source for record in records)
        return len(latest)
