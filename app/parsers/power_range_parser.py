# app/parsers/power_range_parser.py

"""
Parses the power criteria of the EEG tariff sheet ("0-0,5 MW", "> 100 kW",
"≤ 1 MW", ...) into ``PowerRange`` values normalized to kW.

Bare values such as "100 kW" are left unparsed on purpose: the sheet does not
say whether they mean "exactly" or "up to".
"""

from __future__ import annotations

import re
from typing import Callable, List, Tuple

from app.core import logger
from .ranges import PowerRange
from .result import Parsed, ParseResult, Unparsed

KW_PER_MW = 1000

# German decimal comma: "0,5"
_NUM = r"(\d+(?:,\d+)?)"

PowerRule = Tuple[str, "re.Pattern[str]", Callable[[re.Match], PowerRange]]


def _number(raw: str) -> float:
    return float(raw.replace(",", "."))


def _mw(raw: str) -> float:
    return _number(raw) * KW_PER_MW


RULES: List[PowerRule] = [
    # "0-0,5 MW", "1 - 10 MW"
    ("mw_span", re.compile(rf"{_NUM}\s*-\s*{_NUM}\s*mw"),
     lambda m: PowerRange(_mw(m.group(1)), _mw(m.group(2)))),
    # "10 - 40 kW", "0-30 kW"
    ("kw_span", re.compile(rf"{_NUM}\s*-\s*{_NUM}\s*kw"),
     lambda m: PowerRange(_number(m.group(1)), _number(m.group(2)))),
    # "40 kW - 1 MW"
    ("kw_to_mw_span", re.compile(rf"{_NUM}\s*kw\s*-\s*{_NUM}\s*mw"),
     lambda m: PowerRange(_number(m.group(1)), _mw(m.group(2)))),
    # "> 1 MW"
    ("above_mw", re.compile(rf"(?:>=?|≥)\s*{_NUM}\s*mw"),
     lambda m: PowerRange(_mw(m.group(1)))),
    # "> 100 kW"
    ("above_kw", re.compile(rf"(?:>=?|≥)\s*{_NUM}\s*kw"),
     lambda m: PowerRange(_number(m.group(1)))),
    # "≤ 100 kW", "<= 100 kW"
    ("up_to_kw", re.compile(rf"(?:≤|<=?)\s*{_NUM}\s*kw"),
     lambda m: PowerRange(0.0, _number(m.group(1)))),
    # "≤ 1 MW", "<= 1 MW"
    ("up_to_mw", re.compile(rf"(?:≤|<=?)\s*{_NUM}\s*mw"),
     lambda m: PowerRange(0.0, _mw(m.group(1)))),
]


def parse_power_criteria(text: str | None) -> ParseResult[PowerRange]:
    """Normalizes a power criteria description to a kW range."""
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
            logger.warning(f"Could not parse power range: {text} ({e})")
            return Unparsed(text, f"invalid range for rule {name}")

    logger.warning(f"Could not parse power range: {text}")
    return Unparsed(text)


def parse_power_range(text: str | None) -> PowerRange | None:
    return parse_power_criteria(text).value_or_none()
