import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()


@lru_cache
def get_env_filename():
    runtime_env = os.getenv("ENV")
    return f".env.{runtime_env}" if runtime_env else ".env"


class Settings(BaseSettings):
    ENVIRONMENT: str = "development"
    APP_NAME: str = "MedScan Relay"
    APP_VERSION: str = "1.0.0"
    APP_HOST: str = "0.0.0.0"
    PORT: int = 5001
    LOG_LEVEL: str = "INFO"

    GEMINI_API_KEY: str

    # Inline base64 images make request bodies large
    MAX_REQUEST_BODY_BYTES: int = 50 * 1024 * 1024

    IMAGE_MAX_DIMENSION: int = 800

    VISION_MODEL: str = "gemini-2.5-flash"
    CHAT_MODEL: str = "gemini-2.5-flash"
    CHAT_MAX_OUTPUT_TOKENS: int = 1000
    CHAT_INCLUDE_HISTORY: bool = False

    class Config:
        env_file = get_env_filename()
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


@lru_cache
def get_settings():
    return Settings()
