"""
This defines the base class for all local cache types
"""

# Standard
import abc

# Local
from ..managed_record import ManagedRecord


class LocalCacheBase(abc.ABC):
    """Point-lookup view of the most recently observed record snapshots"""

    @abc.abstractmethod
    def get(self, namespace: str, name: str) -> ManagedRecord:
        """Look up the latest snapshot of a record

        Args:
            namespace:  str
                The namespace of the record
            name:  str
                The name of the record

        Returns:
            snapshot:  ManagedRecord
                The cached snapshot. This instance may be shared with other
                readers and must not be mutated.

        Raises:
            CacheMissError: If no snapshot is present for the key
        """
