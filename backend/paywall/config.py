from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Stripe
    stripe_api_key: str
    stripe_webhook_secret: str

    db_path: Path = BASE_DIR / "data" / "db.sqlite3"

    log_level: str = "INFO"


@lru_cache
def get_settings() -> "Settings":
    return Settings()

settings = get_settings()
