"""
Thread-safe in-memory index of record snapshots keyed by namespace/name
"""

# Standard
from threading import RLock
from typing import Iterable, List, Optional
import copy

# First Party
import alog

# Local
from ..exceptions import CacheMissError
from ..managed_record import ManagedRecord
from .base import LocalCacheBase

log = alog.use_channel("CACHE")


class Indexer(LocalCacheBase):
    """The Indexer is the backing map of a local cache. Writes store a private
    copy of the given record. Reads return the stored instance itself, exactly
    as a shared informer cache does, so readers must copy before mutating.
    """

    def __init__(self, records: Optional[Iterable[ManagedRecord]] = None):
        self._lock = RLock()
        self._items = {}
        for record in records or []:
            self.add(record)

    @staticmethod
    def key_for(namespace: str, name: str) -> str:
        return f"{namespace}/{name}"

    ## Interface ###############################################################

    def get(self, namespace: str, name: str) -> ManagedRecord:
        key = self.key_for(namespace, name)
        with self._lock:
            snapshot = self._items.get(key)
        if snapshot is None:
            log.debug2("No snapshot found for [%s]", key)
            raise CacheMissError(f"{key} not found in cache")
        return snapshot

    ## Mutators ################################################################

    def add(self, record: ManagedRecord):
        """Store a copy of the record under its key"""
        key = self.key_for(*record.key)
        log.debug3("Indexing [%s] at resourceVersion %s", key, record.resource_version)
        with self._lock:
            self._items[key] = ManagedRecord(copy.deepcopy(record.definition))

    def update(self, record: ManagedRecord):
        """Replace the stored copy of the record"""
        self.add(record)

    def delete(self, record: ManagedRecord):
        """Drop the record's key if present"""
        key = self.key_for(*record.key)
        with self._lock:
            self._items.pop(key, None)

    ## Inspection ##############################################################

    def keys(self) -> List[str]:
        with self._lock:
            return sorted(self._items)

    def list(self) -> List[ManagedRecord]:
        with self._lock:
            return [self._items[key] for key in sorted(self._items)]

    def __len__(self):
        with self._lock:
            return len(self._items)
