from dotenv import load_dotenv
from functools import lru_cache
import os

load_dotenv()


def _database_url():
    url = os.getenv("DATABASE_URL")
    if not url:
        url = (
            f"postgresql+psycopg2://{os.getenv('POSTGRES_USER')}:{os.getenv('POSTGRES_PASSWORD')}"
            f"@{os.getenv('POSTGRES_HOST')}:{os.getenv('POSTGRES_PORT')}/{os.getenv('POSTGRES_DB')}"
        )
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+psycopg2://", 1)
    return url


class Settings:
    APP_NAME: str = "Camp Events Calendar"

    def __init__(self, **overrides):
        self.DATABASE_URL = _database_url()
        self.APP_ENV = os.getenv("APP_ENV", "production")
        self.HOST = os.getenv("HOST", "0.0.0.0")
        self.PORT = os.getenv("PORT", "5000")

        self.DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "20"))
        self.DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "5"))
        self.DB_POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "30"))
        self.DB_CONNECT_RETRIES = int(os.getenv("DB_CONNECT_RETRIES", "5"))
        self.DB_RETRY_BASE_DELAY = float(os.getenv("DB_RETRY_BASE_DELAY", "2.0"))

        self.SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "sid")
        self.TIMEZONE = os.getenv("TIMEZONE", "America/Los_Angeles")
        self.DEFAULT_LOCATION = os.getenv("DEFAULT_LOCATION", "Hume Lake, CA")
        self.MAX_EVENTS_PER_DAY = int(os.getenv("MAX_EVENTS_PER_DAY", "2"))
        self.SHARE_BASE_URL = os.getenv("SHARE_BASE_URL", "http://localhost:5000")

        for key, value in overrides.items():
            setattr(self, key, value)

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()
