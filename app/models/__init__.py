from .tariff import Tariff
