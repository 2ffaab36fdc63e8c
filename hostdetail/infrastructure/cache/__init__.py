"""Cache infrastructure package.

Usage:
    from hostdetail.infrastructure.cache import CacheKeys, RedisAdapter
"""

from hostdetail.infrastructure.cache.cache_keys import CacheKeys
from hostdetail.infrastructure.cache.redis_adapter import RedisAdapter

__all__ = ["CacheKeys", "RedisAdapter"]
