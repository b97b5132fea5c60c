"""Per-asset download tallies.

Counts live in memory and are the source of truth for the life of the
process. After every increment the storage gets a best-effort flush; a
storage that cannot be written (read-only filesystem, Redis down) never
affects the counter or the HTTP response.

Storages:
- JsonFileStorage: flat JSON object on disk (local dev)
- RedisStorage: one Redis hash, shared between restarts
- NullStorage: nothing is persisted (serverless / read-only deployments)
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Protocol

import redis

logger = logging.getLogger(__name__)

REDIS_HASH_KEY = "asset_downloads"


class CounterStorage(Protocol):
    def load(self) -> Dict[str, int]: ...

    def flush(self, counts: Dict[str, int]) -> None: ...


class NullStorage:
    def load(self) -> Dict[str, int]:
        return {}

    def flush(self, counts: Dict[str, int]) -> None:
        return None


class JsonFileStorage:
    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Dict[str, int]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.info(f"No usable download counts at {self.path}, starting fresh ({e})")
            return {}
        return _clean_counts(data)

    def flush(self, counts: Dict[str, int]) -> None:
        # previous file stays intact until the rename
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.path.parent,
                prefix=f".{self.path.name}.", suffix=".tmp", delete=False,
            ) as f:
                tmp_path = f.name
                json.dump(counts, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.debug(f"Skipping download count flush to {self.path}: {e}")
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)


class RedisStorage:
    def __init__(self, client: redis.Redis, key: str = REDIS_HASH_KEY):
        self.client = client
        self.key = key

    def load(self) -> Dict[str, int]:
        try:
            data = self.client.hgetall(self.key)
        except redis.RedisError as e:
            logger.info(f"Could not load download counts from Redis, starting fresh ({e})")
            return {}
        return _clean_counts({
            (k.decode() if isinstance(k, bytes) else k): v for k, v in data.items()
        })

    def flush(self, counts: Dict[str, int]) -> None:
        if not counts:
            return
        try:
            self.client.hset(self.key, mapping=counts)
        except redis.RedisError as e:
            logger.debug(f"Skipping download count flush to Redis: {e}")


def _clean_counts(data) -> Dict[str, int]:
    if not isinstance(data, dict):
        return {}

    counts: Dict[str, int] = {}
    for key, value in data.items():
        try:
            count = int(value)
        except (TypeError, ValueError):
            continue
        if count >= 0:
            counts[str(key)] = count
    return counts


class DownloadCounter:
    """In-memory download counter with pluggable best-effort persistence."""

    def __init__(self, storage: CounterStorage):
        self.storage = storage
        self._counts: Dict[str, int] = {}

    def load(self) -> None:
        self._counts = self.storage.load()
        logger.info(f"Loaded download counts for {len(self._counts)} assets")

    def get(self, asset_id: str) -> int:
        return self._counts.get(asset_id, 0)

    def increment(self, asset_id: str) -> int:
        count = self._counts.get(asset_id, 0) + 1
        self._counts[asset_id] = count
        self.storage.flush(dict(self._counts))
        return count

    def all(self) -> Dict[str, int]:
        return dict(self._counts)
