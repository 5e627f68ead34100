from .database import Base, engine, SessionLocal, build_engine, init_db, get_db, redis_client, get_redis_client
