# app/services/range_matcher.py

from datetime import date, timedelta

from app.parsers import DateRange, PowerRange

# Open-ended categories stop applying one year after they start
# (365 * 24 * 60 * 60 * 1000 ms), since newer categories supersede them.
OPEN_ENDED_VALIDITY = timedelta(days=365)


def date_in_range(value: date, period: DateRange) -> bool:
    """Inclusive on both ends; a missing end means no upper bound."""
    if value < period.start:
        return False
    if period.end is not None and value > period.end:
        return False
    return True


def power_in_range(value: float, power: PowerRange) -> bool:
    """Inclusive on both ends; a missing end means no upper limit."""
    if value < power.start:
        return False
    if power.end is not None and value > power.end:
        return False
    return True


def is_stale_open_ended(value: date, period: DateRange) -> bool:
    """
    True when ``period`` has no end and ``value`` lies more than one year
    after its start. Closed periods are never stale.
    """
    if not period.is_open_ended:
        return False
    return value - period.start > OPEN_ENDED_VALIDITY


def commissioning_date_matches(value: date, period: DateRange) -> bool:
    """Date predicate used by the catalog: range check plus the staleness rule."""
    return date_in_range(value, period) and not is_stale_open_ended(value, period)
