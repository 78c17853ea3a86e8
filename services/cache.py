import threading
from cachetools import TTLCache


class ProductCountCache:
    """
    Cached number of active catalog products.

    The count expires after `ttl_seconds` and is dropped immediately by
    `invalidate()`, which every product write calls. One instance lives on
    `app.state` and is handed to services through a dependency.
    """

    _KEY = "active_product_count"

    def __init__(self, ttl_seconds: int, timer=None):
        kwargs = {"timer": timer} if timer is not None else {}
        self._cache = TTLCache(maxsize=1, ttl=ttl_seconds, **kwargs)
        self._lock = threading.Lock()

    def get_or_load(self, loader) -> int:
        with self._lock:
            count = self._cache.get(self._KEY)
            if count is None:
                count = loader()
                self._cache[self._KEY] = count
            return count

    def invalidate(self):
        with self._lock:
            self._cache.pop(self._KEY, None)
