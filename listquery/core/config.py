from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    APP_ENV: str = "local"
    APP_NAME: str = "listquery"
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: str = "http://localhost:3000"

    DATABASE_URL: str = "sqlite+pysqlite:///:memory:"

    # Listing defaults applied when the client omits pageSize
    QUERY_DEFAULT_PAGE_SIZE: int = 25

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

settings = Settings()
