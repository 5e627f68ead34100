# app/repositories/__init__.py

from .tariff_cache_repository import TariffCacheRepository
from .tariff_repository import TariffRepository
