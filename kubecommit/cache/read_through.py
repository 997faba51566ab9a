"""
Cache view that reads straight from a store. This is used where no informer
feeds an Indexer, such as one-shot command line updates.
"""

# Local
from ..exceptions import CacheMissError, RecordNotFoundError
from ..managed_record import ManagedRecord
from .base import LocalCacheBase


class ReadThroughCache(LocalCacheBase):
    """Serve cache lookups with a store get for a fixed kind/api_version"""

    def __init__(self, store: "StoreClientBase", kind: str, api_version: str):  # noqa: F821
        self.store = store
        self.kind = kind
        self.api_version = api_version

    def get(self, namespace: str, name: str) -> ManagedRecord:
        try:
            return self.store.get(
                namespace, name, kind=self.kind, api_version=self.api_version
            )
        except RecordNotFoundError as err:
            raise CacheMissError(str(err)) from err
