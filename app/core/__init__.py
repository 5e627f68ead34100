from .settings import settings
from .logger import logger, log_critical_error
from .exceptions import (
    TariffError,
    ValidationError,
    ParseFailure,
    StoreFailure,
    EntityUpdateFailure,
    CallbackFailure,
)
