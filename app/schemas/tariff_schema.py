# app/schemas/tariff_schema.py

from datetime import date
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.parsers import DateRange, PowerRange


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TariffRecord(CamelModel):
    """Normalized EEG tariff category; identity is (energy_source, category_code)."""

    energy_source: str
    category_code: str
    designation: str
    raw_period_text: str | None = None
    raw_criteria_text: str | None = None
    proportional_allocation: str | None = None

    commissioning_date_from: date | None = None
    commissioning_date_to: date | None = None
    power_output_from: float | None = None   # kW
    power_output_to: float | None = None     # kW, None = no upper limit

    # ct/kWh
    feed_in_tariff: float | None = None
    reference_value: float | None = None
    fallback_payment: float | None = None
    tenant_power_surcharge: float | None = None

    added_date: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def date_range(self) -> DateRange | None:
        if self.commissioning_date_from is None:
            return None
        return DateRange(self.commissioning_date_from, self.commissioning_date_to)

    @property
    def power_range(self) -> PowerRange | None:
        if self.power_output_from is None:
            return None
        return PowerRange(self.power_output_from, self.power_output_to)


class TariffQuery(BaseModel):
    energy_source: str
    commissioning_date: date | None = None
    power_output: float | None = None   # kW
    criteria_text: str | None = None
    designation_text: str | None = None


class TariffResponse(CamelModel):
    found: bool
    records: list[TariffRecord] = Field(default_factory=list)
    total_count: int = 0
    error: str | None = None
