# apps/core/cache.py
import logging
from typing import Any, Callable, Optional

from django.conf import settings
from django.core.cache import cache as django_cache
from django.db import DatabaseError

logger = logging.getLogger(__name__)

_MISSING = object()


class ReadThroughCache:
    """
    Cache "stale-while-revalidate" nad frameworkiem cache Django.

    Wpisy służą tylko do natychmiastowego wyrenderowania widoku; każdy
    udany fetch nadpisuje wpis. To nie jest cache write-back: zapisy idą
    zawsze do bazy, a po nich wpis jest unieważniany.
    """

    def __init__(self, key: str, fetch: Callable[[], Any], timeout: Optional[int] = None, backend=None):
        self.key = key
        self.fetch = fetch
        self.timeout = timeout if timeout is not None else settings.DASHBOARD_CACHE_TIMEOUT
        self.backend = backend or django_cache

    def peek(self, default=None):
        """Zwraca to, co jest w cache (może być nieaktualne), bez pytania bazy."""
        value = self.backend.get(self.key, _MISSING)
        return default if value is _MISSING else value

    def get(self):
        value = self.backend.get(self.key, _MISSING)
        if value is not _MISSING:
            return value
        return self.revalidate()

    def revalidate(self):
        """Pobiera świeże dane. Przy błędzie odczytu zostawia ostatni dobry stan."""
        try:
            value = self.fetch()
        except DatabaseError:
            stale = self.backend.get(self.key, _MISSING)
            if stale is _MISSING:
                raise
            logger.warning("Revalidation of %s failed, serving stale data", self.key, exc_info=True)
            return stale

        self.backend.set(self.key, value, self.timeout)
        return value

    def invalidate(self):
        self.backend.delete(self.key)
