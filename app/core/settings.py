from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    URL_DATABASE_SQL: str = "sqlite:///./eeg_tariffs.db"
    URL_DATABASE_REDIS: str | None = None
    TARIFF_CACHE_TTL: int = 3600
    INGEST_BATCH_SIZE: int = 25
    EEG_SHEET_NAME: str = "EEG-Vergütungen und vNNE"
    EEG_DATA_START_ROW: int = 4
    ENTITY_API_URL: str = "https://entity.sls.epilot.io"
    HTTP_TIMEOUT_SECONDS: float = 10.0
    DISCORD_WEBHOOK_URL: str | None = None


    model_config = {"env_file":".env"}


settings = Settings()
