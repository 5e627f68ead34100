# app/database/database.py 

from app.core import settings
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base
import redis
from app.core import logger

# --- SQL store for the tariff catalog ---
Base = declarative_base()

def build_engine(url: str):
    if url.startswith("sqlite"):
        # SQLite ignores pool sizing; allow use from FastAPI's threadpool
        return create_engine(url, connect_args={"check_same_thread": False}, echo=False)
    return create_engine(
        url,
        pool_size=8,
        max_overflow=4,
        pool_timeout=20,
        pool_recycle=1800,
        pool_pre_ping=True,     # check the connection is alive before using it
        pool_use_lifo=True,
        echo=False,
    )

engine = build_engine(settings.URL_DATABASE_SQL)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

def init_db():
    # Registers the models on Base before creating tables
    import app.models  # noqa: F401
    Base.metadata.create_all(bind=engine)

def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# --- Redis partition cache (optional) ---
redis_client = None
if settings.URL_DATABASE_REDIS:
    try:
        redis_client = redis.from_url(settings.URL_DATABASE_REDIS, decode_responses=True)
        redis_client.ping()
        logger.info("Connection to Redis established.")
    except redis.exceptions.ConnectionError as e:
        logger.error(f"Could not connect to Redis, running without cache: {e}")
        redis_client = None

# --- Redis dependency; None means "no cache" ---
def get_redis_client():
    yield redis_client
