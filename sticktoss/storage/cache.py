import json
import logging
from typing import Dict, Optional

import redis

from sticktoss.config.settings import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


class GameCache:
    """Read-through cache for shared game snapshots. The database stays authoritative."""

    def __init__(self, redis_url: str = settings.redis_url, client=None, ttl_seconds: int = settings.game_cache_ttl_seconds):
        self.redis_client = client if client is not None else redis.from_url(redis_url, decode_responses=True)
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def key(share_id: str) -> str:
        return f"game:{share_id}"

    def get(self, share_id: str) -> Optional[Dict]:
        """Retrieve cached game snapshot; a redis failure counts as a miss."""
        try:
            cached = self.redis_client.get(self.key(share_id))
        except redis.RedisError as exc:
            logger.warning(f"Cache read failed for {share_id}: {exc}")
            return None
        if cached:
            return json.loads(cached)
        return None

    def set(self, share_id: str, snapshot: Dict) -> None:
        try:
            self.redis_client.setex(self.key(share_id), self.ttl_seconds, json.dumps(snapshot, default=str))
        except redis.RedisError as exc:
            logger.warning(f"Cache write failed for {share_id}: {exc}")

    def delete(self, share_id: str) -> None:
        try:
            self.redis_client.delete(self.key(share_id))
        except redis.RedisError as exc:
            logger.warning(f"Cache delete failed for {share_id}: {exc}")

    def health_check(self) -> bool:
        """Check Redis connection."""
        try:
            self.redis_client.ping()
            return True
        except redis.RedisError:
            return False


_cache: Optional[GameCache] = None


def get_cache() -> GameCache:
    global _cache
    if _cache is None:
        _cache = GameCache()
    return _cache
