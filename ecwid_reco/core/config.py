from functools import lru_cache
from typing import Literal
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["development", "production"]

def _env_file_for(app_env: EnvName) -> str:
    return ".env.development" if app_env == "development" else ".env.production"

class Settings(BaseSettings):

    # Core
    APP_ENV: EnvName = "development"
    APP_NAME: str = "EcwidRelatedProducts"
    DEBUG: bool = False
    GIT_SHA: str = "unknown"

    # Mongo (catalog cache: products, orders, categories, stores)
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DB: str = "ecwid_reco"
    MONGO_TLS: bool = False

    # Redis (optional; empty disables caching and generate-all locks)
    REDIS_URL: str = ""

    # Cache config
    recommendations_cache_ttl: int = 60 * 60     # 1 hour, reads are invalidated on regenerate
    generate_lock_ttl: int = 15 * 60             # seconds; covers a full store batch

    # API
    api_prefix: str = "/api"

    # pydantic-settings config will be set dynamically in the factory below
    model_config = SettingsConfigDict(env_file=None, case_sensitive=True)

@lru_cache
def get_settings() -> Settings:
    """
    Factory that chooses the right .env file based on APP_ENV.
    Cache makes it cheap to inject via FastAPI dependencies.
    """
    app_env: EnvName = os.getenv("APP_ENV", "development")  # earliest switch
    env_file = _env_file_for(app_env)
    return Settings(
                _env_file=env_file,  # load .env.development or .env.production
                _env_file_encoding="utf-8"
    )
