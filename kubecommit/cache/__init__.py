"""
Local caches hold the most recently observed snapshot of each record. They are
eventually consistent with the store and shared between all callers, so any
snapshot read from a cache must be copied before it is modified.
"""

# Local
from .base import LocalCacheBase
from .indexer import Indexer
from .read_through import ReadThroughCache
