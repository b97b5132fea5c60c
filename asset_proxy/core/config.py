"""
Application configuration from environment variables.
A .env file in the working directory is loaded first if present.
"""
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from dotenv import load_dotenv

from asset_proxy.core.redis import get_redis_connection
from asset_proxy.services.download_counter import (
    CounterStorage,
    DownloadCounter,
    JsonFileStorage,
    NullStorage,
    RedisStorage,
)

logger = logging.getLogger(__name__)

load_dotenv()

DOWNLOADS_BACKENDS = ("file", "redis", "memory")


@dataclass
class Settings:
    asset_provider: str = "freepik"
    downloads_backend: str = "file"
    downloads_file: Path = Path("downloads.json")
    static_dir: Path = Path("public")
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    @classmethod
    def from_env(cls) -> "Settings":
        backend = os.getenv("DOWNLOADS_BACKEND", "file").strip().lower()
        if backend not in DOWNLOADS_BACKENDS:
            raise ValueError(
                f"Invalid DOWNLOADS_BACKEND: {backend} (expected one of {', '.join(DOWNLOADS_BACKENDS)})"
            )

        origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

        return cls(
            asset_provider=os.getenv("ASSET_PROVIDER", "freepik").strip().lower(),
            downloads_backend=backend,
            downloads_file=Path(os.getenv("DOWNLOADS_FILE", "downloads.json")),
            static_dir=Path(os.getenv("STATIC_DIR", "public")),
            cors_origins=origins or ["*"],
        )


def build_counter_storage(settings: Settings) -> CounterStorage:
    if settings.downloads_backend == "redis":
        return RedisStorage(get_redis_connection())
    if settings.downloads_backend == "memory":
        return NullStorage()
    return JsonFileStorage(settings.downloads_file)


def build_download_counter(settings: Settings) -> DownloadCounter:
    counter = DownloadCounter(build_counter_storage(settings))
    counter.load()
    return counter


def mask_secret(value: str, visible: int = 10) -> str:
    if not value:
        return "NOT FOUND"
    return f"{value[:visible]}..."
