'''
Holds all the configurations
'''
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """
    Manages application configuration using environment variables.
    """
    # Application Metadata
    APP_NAME: str = "Nurse Availability Editor"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Weekly nurse availability editor for the workforce scheduling dashboard."

    # Level of the shared application logger (DEBUG, INFO, WARNING, ...)
    LOG_LEVEL: str = "INFO"

    # Remote workforce API
    API_BASE_URL: str = "http://localhost:3000/api"
    REQUEST_TIMEOUT_SECONDS: float = 10.0

    # Grid settings
    FIRST_DAY_OF_WEEK: int = 0  # 0 is Monday

    # 'runs' emits one record per contiguous run (lossless).
    # 'bounding' emits one record per status per day (legacy wire format).
    ENCODE_MODE: Literal["runs", "bounding"] = "runs"

    # Emit the 00:00-00:00 marker record for days saved with nothing set
    EMIT_EMPTY_DAY_SENTINEL: bool = True

    BACKEND_CORS_ORIGINS: list[str] = []

    model_config = SettingsConfigDict(env_file=".env") # automatically loads the .env

# Create a single, importable instance of the settings
settings = Settings()
