"""
This defines the base class for all store client types
"""

# Standard
from typing import Optional
import abc

# Local
from ..managed_record import ManagedRecord


class StoreClientBase(abc.ABC):
    """
    Base class for clients of the remote, versioned record store
    """

    @abc.abstractmethod
    def update(self, record: ManagedRecord) -> ManagedRecord:
        """Write the record, guarded by its resourceVersion

        Args:
            record:  ManagedRecord
                The record to persist

        Returns:
            updated:  ManagedRecord
                The authoritative post-write record

        Raises:
            ConflictError: If the record's resourceVersion is stale
            StoreError: For any other failure
        """

    @abc.abstractmethod
    def get(
        self,
        namespace: str,
        name: str,
        kind: Optional[str] = None,
        api_version: Optional[str] = None,
    ) -> ManagedRecord:
        """Read the current state of a record

        Args:
            namespace:  str
                The namespace of the record
            name:  str
                The name of the record
            kind:  Optional[str]
                The kind of the record
            api_version:  Optional[str]
                The api_version of the record's kind

        Returns:
            current:  ManagedRecord
                A private copy of the stored record

        Raises:
            RecordNotFoundError: If the record does not exist
        """
