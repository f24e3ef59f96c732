from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreBackend(Enum):
    MEMORY = "memory"
    JSON_FILE = "json_file"


class StoreConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STORE_", env_file=".env", extra="ignore")

    backend: StoreBackend = StoreBackend.MEMORY
    path: str = "clinic_data.json"


class AppConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    clinic_timezone: str = "America/New_York"
    booking_window_days: int = Field(default=14, ge=1)
    store: StoreConfig = Field(default_factory=lambda: StoreConfig())
