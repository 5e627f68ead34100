# app/services/tariff_catalog_service.py

import math
from datetime import date
from typing import Iterable, Protocol

from app.core import logger, ValidationError
from app.schemas.tariff_schema import TariffQuery, TariffRecord, TariffResponse
from .range_matcher import commissioning_date_matches, power_in_range

ENERGY_TYPE_REQUIRED = "energyType parameter is required"
INVALID_COMMISSIONING_DATE = "commissioningDate must be an ISO date (YYYY-MM-DD)"
INVALID_POWER_OUTPUT = "powerOutput must be a number"


class TariffStore(Protocol):
    def get_by_energy_source(self, energy_source: str) -> list[TariffRecord]: ...

    def upsert_batch(self, records: list[TariffRecord]) -> int: ...


def build_query(
    energy_type: str | None,
    commissioning_date: str | None = None,
    power_output: str | float | None = None,
    criteria: str | None = None,
    bezeichnung: str | None = None,
) -> TariffQuery:
    """
    Turns raw request parameters into a TariffQuery.
    Empty strings count as "not given" for the optional filters.
    """
    if not energy_type:
        raise ValidationError(ENERGY_TYPE_REQUIRED)

    parsed_date = None
    if commissioning_date:
        try:
            parsed_date = date.fromisoformat(commissioning_date)
        except ValueError:
            raise ValidationError(INVALID_COMMISSIONING_DATE)

    parsed_power = None
    if power_output is not None and power_output != "":
        try:
            parsed_power = float(str(power_output).replace(",", "."))
        except ValueError:
            raise ValidationError(INVALID_POWER_OUTPUT)
        if math.isnan(parsed_power):
            raise ValidationError(INVALID_POWER_OUTPUT)

    return TariffQuery(
        energy_source=energy_type,
        commissioning_date=parsed_date,
        power_output=parsed_power,
        criteria_text=criteria or None,
        designation_text=bezeichnung or None,
    )


def _contains(haystack: str | None, needle: str) -> bool:
    return haystack is not None and needle.lower() in haystack.lower()


def _power_sort_key(record: TariffRecord) -> float:
    return record.power_output_from if record.power_output_from is not None else math.inf


def sort_by_power(records: Iterable[TariffRecord]) -> list[TariffRecord]:
    """Smallest installations first; records without a power range go last, in input order."""
    return sorted(records, key=_power_sort_key)


def filter_tariffs(records: Iterable[TariffRecord], query: TariffQuery) -> TariffResponse:
    """
    Applies the date, criteria, designation and power filters in that order,
    then sorts by power. ``records`` is the energy-source partition.
    """
    if not query.energy_source:
        raise ValidationError(ENERGY_TYPE_REQUIRED)

    selected = list(records)

    if query.commissioning_date is not None:
        selected = [
            record for record in selected
            if record.date_range is not None
            and commissioning_date_matches(query.commissioning_date, record.date_range)
        ]

    if query.criteria_text:
        selected = [r for r in selected if _contains(r.raw_criteria_text, query.criteria_text)]

    if query.designation_text:
        selected = [r for r in selected if _contains(r.designation, query.designation_text)]

    if query.power_output is not None:
        selected = [
            record for record in selected
            if record.power_range is not None
            and power_in_range(query.power_output, record.power_range)
        ]

    selected = sort_by_power(selected)
    return TariffResponse(found=len(selected) > 0, records=selected, total_count=len(selected))


def lookup_tariffs_service(store: TariffStore, query: TariffQuery) -> TariffResponse:
    """
    Fetches the partition for ``query.energy_source`` and filters it.
    Raises ValidationError before touching the store; StoreFailure propagates.
    """
    if not query.energy_source:
        raise ValidationError(ENERGY_TYPE_REQUIRED)

    candidates = store.get_by_energy_source(query.energy_source)
    response = filter_tariffs(candidates, query)
    logger.info(
        f"Tariff lookup energyType={query.energy_source}: "
        f"{response.total_count}/{len(candidates)} records matched"
    )
    return response


def select_best_match(records: list[TariffRecord], power_output: float | None = None) -> TariffRecord | None:
    """
    Picks the tariff for one installation from a power-sorted result list:
    the first record whose power range contains ``power_output``, otherwise
    the first (smallest) record. None for an empty list.
    """
    if not records:
        return None

    if power_output is not None:
        for record in records:
            if record.power_range is not None and power_in_range(power_output, record.power_range):
                return record

    return records[0]
