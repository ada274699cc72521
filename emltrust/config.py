# emltrust/config.py
from pydantic_settings import BaseSettings
from typing import List
import os


class Settings(BaseSettings):
    APP_NAME: str = "emltrust"

    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")

    # DNS
    DNS_TIMEOUT: float = float(os.environ.get("DNS_TIMEOUT", 5.0))
    DNS_NAMESERVERS: List[str] = []
    DEFAULT_DKIM_SELECTOR: str = os.environ.get("DEFAULT_DKIM_SELECTOR", "default")

    # History store. Empty REDIS_URL keeps history in a local JSON file.
    REDIS_URL: str = os.environ.get("REDIS_URL", "")
    HISTORY_PATH: str = os.environ.get(
        "HISTORY_PATH", os.path.join(os.path.expanduser("~"), ".emltrust", "history.json")
    )
    HISTORY_STORAGE_KEY: str = "eml-viewer-history"
    HISTORY_MAX_ENTRIES: int = int(os.environ.get("HISTORY_MAX_ENTRIES", 50))

    # File upload limits
    MAX_UPLOAD_SIZE_MB: int = int(os.environ.get("MAX_UPLOAD_SIZE_MB", 25))

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
