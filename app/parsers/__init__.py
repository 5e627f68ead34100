from .ranges import DateRange, PowerRange
from .result import Parsed, Unparsed, ParseResult
from .date_range_parser import EPOCH_START, parse_commissioning_period, parse_date_range
from .power_range_parser import parse_power_criteria, parse_power_range
