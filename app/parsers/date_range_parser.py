# app/parsers/date_range_parser.py

"""
Parses the free-text commissioning periods of the EEG tariff sheet
("Inbetriebnahme ab 01/2017", "Modernisierung 01-07/2014", ...) into
``DateRange`` values.

Rules are tried in order and the first one that matches wins. The order is
part of the contract: several texts fit more than one rule, and changing it
would silently reclassify historical categories.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Callable, List, Tuple

from dateutil.relativedelta import relativedelta

from app.core import logger
from .ranges import DateRange
from .result import Parsed, ParseResult, Unparsed

# Start of "valid until year Y" periods, which have no known beginning
EPOCH_START = date(1900, 1, 1)

_DD = r"(\d{2})"
_YYYY = r"(\d{4})"

DateRule = Tuple[str, "re.Pattern[str]", Callable[[re.Match], DateRange]]


def _day(year: str, month: str, day: str) -> date:
    return date(int(year), int(month), int(day))


def _first_of_month(year: str, month: str) -> date:
    return date(int(year), int(month), 1)


def _last_of_month(year: str, month: str) -> date:
    # relativedelta clamps day=31 to the real month length (leap years included)
    return _first_of_month(year, month) + relativedelta(day=31)


def _whole_year(m: re.Match) -> DateRange:
    year = m.group(1)
    return DateRange(_day(year, "1", "1"), _day(year, "12", "31"))


def _month_span(m: re.Match) -> DateRange:
    from_month, to_month, year = m.groups()
    return DateRange(_first_of_month(year, from_month), _last_of_month(year, to_month))


def _same_year_span(m: re.Match) -> DateRange:
    from_day, from_month, to_day, to_month, year = m.groups()
    return DateRange(_day(year, from_month, from_day), _day(year, to_month, to_day))


def _cross_year_span(m: re.Match) -> DateRange:
    from_day, from_month, from_year, to_day, to_month, to_year = m.groups()
    return DateRange(_day(from_year, from_month, from_day), _day(to_year, to_month, to_day))


RULES: List[DateRule] = [
    # "Inbetriebnahme bis 2001"
    ("until_year", re.compile(rf"bis {_YYYY}"),
     lambda m: DateRange(EPOCH_START, _day(m.group(1), "12", "31"))),
    # "Inbetriebnahme 2005"
    ("year", re.compile(rf"inbetriebnahme {_YYYY}$"), _whole_year),
    # "Inbetriebnahme 01-07/2004"
    ("month_span", re.compile(rf"inbetriebnahme {_DD}-{_DD}/{_YYYY}"), _month_span),
    # "Inbetriebnahme ab 01/2017"
    ("from_month", re.compile(rf"ab {_DD}/{_YYYY}"),
     lambda m: DateRange(_first_of_month(m.group(2), m.group(1)))),
    # "Inbetriebnahme ab 25.07.2017"
    ("from_day", re.compile(rf"ab {_DD}\.{_DD}\.{_YYYY}"),
     lambda m: DateRange(_day(m.group(3), m.group(2), m.group(1)))),
    # "Inbetriebnahme 04/2020"
    ("single_month", re.compile(rf"inbetriebnahme {_DD}/{_YYYY}"),
     lambda m: DateRange(_first_of_month(m.group(2), m.group(1)), _last_of_month(m.group(2), m.group(1)))),
    # "Modernisierung 2020"
    ("modernization_year", re.compile(rf"modernisierung {_YYYY}$"), _whole_year),
    # "Modernisierung 01-07/2014"
    ("modernization_month_span", re.compile(rf"modernisierung {_DD}-{_DD}/{_YYYY}"), _month_span),
    # "Inbetriebnahme 30.07. bis 31.12.2022"
    ("same_year_until", re.compile(rf"inbetriebnahme {_DD}\.{_DD}\. bis {_DD}\.{_DD}\.{_YYYY}"), _same_year_span),
    # "Inbetriebnahme 25.07.2017 bis 31.12.2020"
    ("cross_year_until", re.compile(rf"inbetriebnahme {_DD}\.{_DD}\.{_YYYY} bis {_DD}\.{_DD}\.{_YYYY}"), _cross_year_span),
    # "Inbetriebnahme 01.01. - 15.05.2024"
    ("same_year_dash", re.compile(rf"inbetriebnahme {_DD}\.{_DD}\. - {_DD}\.{_DD}\.{_YYYY}"), _same_year_span),
    # "Inbetriebnahme 25.07.2017 - 31.12.2020"
    ("cross_year_dash", re.compile(rf"inbetriebnahme {_DD}\.{_DD}\.{_YYYY} - {_DD}\.{_DD}\.{_YYYY}"), _cross_year_span),
]


def parse_commissioning_period(text: str | None) -> ParseResult[DateRange]:
    """
    Normalizes a commissioning period description.

    Returns ``Parsed`` with the first matching rule's range, or ``Unparsed``
    when the text is empty, matches no rule, or names an impossible date.
    """
    if not text or not text.strip():
        return Unparsed(text or "", "empty text")

    normalized = text.lower().strip()

    for name, pattern, build in RULES:
        match = pattern.search(normalized)
        if not match:
            continue
        try:
            return Parsed(build(match), name)
        except ValueError as e:
            logger.warning(f"Could not parse commissioning date: {text} ({e})")
            return Unparsed(text, f"invalid date for rule {name}")

    logger.warning(f"Could not parse commissioning date: {text}")
    return Unparsed(text)


def parse_date_range(text: str | None) -> DateRange | None:
    """Shortcut for callers that only need the range or None."""
    return parse_commissioning_period(text).value_or_none()
