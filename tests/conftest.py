"""
Shared fixtures. Stores and HTTP collaborators are replaced by in-memory
doubles so the tests never need a database server, Redis or network access.
"""
from datetime import date

import pytest

from app.core import StoreFailure
from app.schemas import TariffRecord


class FakeStore:
    """In-memory tariff store recording every call."""

    def __init__(self, records=None, fail_on_read=False, failing_batches=()):
        self.records = list(records or [])
        self.fail_on_read = fail_on_read
        self.failing_batches = set(failing_batches)
        self.lookups = []
        self.batches = []

    def get_by_energy_source(self, energy_source):
        self.lookups.append(energy_source)
        if self.fail_on_read:
            raise StoreFailure()
        return [r for r in self.records if r.energy_source == energy_source]

    def upsert_batch(self, records):
        batch_number = len(self.batches)
        self.batches.append(list(records))
        if batch_number in self.failing_batches:
            raise StoreFailure("write rejected")
        self.records.extend(records)
        return len(records)


class FakeRedis:
    """Just enough of redis.Redis for the partition cache."""

    def __init__(self):
        self.data = {}
        self.ttls = {}

    def get(self, key):
        return self.data.get(key)

    def setex(self, key, ttl, value):
        self.data[key] = value
        self.ttls[key] = ttl

    def delete(self, *keys):
        for key in keys:
            self.data.pop(key, None)


def _make_record(
    code="SgK001",
    energy_source="Solar/Gebäude",
    power=None,
    period=None,
    criteria=None,
    designation=None,
    **rates,
):
    """power and period are (from, to) tuples; to may be None."""
    power_from, power_to = power if power else (None, None)
    date_from, date_to = period if period else (None, None)
    return TariffRecord(
        energy_source=energy_source,
        category_code=code,
        designation=designation or code,
        raw_criteria_text=criteria,
        commissioning_date_from=date.fromisoformat(date_from) if date_from else None,
        commissioning_date_to=date.fromisoformat(date_to) if date_to else None,
        power_output_from=power_from,
        power_output_to=power_to,
        **rates,
    )


@pytest.fixture
def make_record():
    return _make_record


@pytest.fixture
def fake_store_factory():
    return FakeStore


@pytest.fixture
def fake_redis():
    return FakeRedis()
