"""src/mycurl/cache/__init__.py

On-disk response cache for mycurl.
"""

from .store import CacheEntry, ResponseCache

__all__ = ["CacheEntry", "ResponseCache"]
