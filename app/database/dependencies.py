# app/database/dependencies.py

from fastapi import Depends
from sqlalchemy.orm import Session

from .database import get_db, get_redis_client
from app.repositories import TariffRepository, TariffCacheRepository


def get_tariff_store(db: Session = Depends(get_db), redis_client=Depends(get_redis_client)) -> TariffRepository:
    """Tariff store for one request; cached when Redis is configured."""
    cache = TariffCacheRepository(redis_client) if redis_client is not None else None
    return TariffRepository(db, cache=cache)
