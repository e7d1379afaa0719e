from hostel_lifecycle.services.base.base_service import BaseService
from hostel_lifecycle.services.base.cache_service import (
    CacheService,
    MemoryCacheClient,
    build_cache_client,
    get_cache_client,
)

__all__ = ["BaseService", "CacheService", "MemoryCacheClient", "build_cache_client", "get_cache_client"]
