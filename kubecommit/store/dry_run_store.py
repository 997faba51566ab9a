"""
The DryRunStore implements the store interface without a cluster. It holds
records in a local map and enforces resourceVersion conflicts the way the API
server does, so contention can be reproduced in-process.
"""

# Standard
from contextlib import contextmanager
from datetime import datetime
from threading import RLock
from typing import Callable, Iterable, List, Optional
import copy
import uuid

# First Party
import alog

# Local
from ..exceptions import ConflictError, RecordNotFoundError, StoreError
from ..managed_record import ManagedRecord
from .base import StoreClientBase

log = alog.use_channel("DRYST")


class DryRunStore(StoreClientBase):
    """
    Store which doesn't actually store anywhere but memory!
    """

    def __init__(
        self,
        records: Optional[Iterable[ManagedRecord]] = None,
        strict_resource_version: bool = True,
    ):
        """
        Args:
            records:  Optional[Iterable[ManagedRecord]]
                Records to create up front. Watches are not notified for these.
            strict_resource_version:  bool
                If true, writes carrying a stale resourceVersion are rejected
                with a ConflictError
        """
        self.strict_resource_version = strict_resource_version
        self._lock = RLock()
        self._content = {}
        self._watches = []
        self._watches_paused = False
        self._last_version = 0

        for record in records or []:
            self.create(record, call_watches=False)

    ## Interface ###############################################################

    def get(self, namespace, name, kind=None, api_version=None):
        log.debug("DRY RUN get [%s/%s] in [%s]", kind, name, namespace)
        with self._lock:
            current = self._lookup(namespace, name, kind, api_version)
            return ManagedRecord(copy.deepcopy(current))

    def update(self, record: ManagedRecord) -> ManagedRecord:
        log.debug(
            "DRY RUN update [%s] at resourceVersion %s", record, record.resource_version
        )
        with self._lock:
            current = self._lookup(
                record.namespace, record.name, record.kind, record.api_version
            )
            current_version = current["metadata"].get("resourceVersion")
            if (
                self.strict_resource_version
                and record.resource_version
                and record.resource_version != current_version
            ):
                log.debug2(
                    "Rejecting stale write of [%s]: %s != %s",
                    record,
                    record.resource_version,
                    current_version,
                )
                raise ConflictError(
                    f'Operation cannot be fulfilled on {record.kind} "{record.name}": '
                    "the object has been modified; please apply your changes to "
                    "the latest version and try again"
                )

            updated = copy.deepcopy(record.definition)
            metadata = updated.setdefault("metadata", {})
            metadata["namespace"] = record.namespace
            metadata["uid"] = current["metadata"].get("uid")
            metadata["creationTimestamp"] = current["metadata"].get("creationTimestamp")
            metadata["resourceVersion"] = self._next_version()
            self._entries(record.namespace, record.kind)[record.name] = updated
            self._call_watches(updated)

        return ManagedRecord(copy.deepcopy(updated))

    ## Dry Run Methods #########################################################

    def create(self, record: ManagedRecord, call_watches: bool = True) -> ManagedRecord:
        """Create a new record, assigning its uid and resourceVersion"""
        log.debug("DRY RUN create [%s]", record)
        with self._lock:
            entries = self._entries(record.namespace, record.kind)
            if record.name in entries:
                raise StoreError(f"{record.kind} {record.name} already exists")
            created = copy.deepcopy(record.definition)
            metadata = created.setdefault("metadata", {})
            metadata["namespace"] = record.namespace
            metadata.setdefault("uid", str(uuid.uuid4()))
            metadata["creationTimestamp"] = datetime.now().isoformat()
            metadata["resourceVersion"] = self._next_version()
            entries[record.name] = created
            if call_watches:
                self._call_watches(created)

        return ManagedRecord(copy.deepcopy(created))

    def delete(self, namespace: str, name: str, kind: Optional[str] = None):
        """Remove a record if present"""
        log.debug("DRY RUN delete [%s/%s] in [%s]", kind, name, namespace)
        with self._lock:
            current = self._lookup(namespace, name, kind)
            del self._content[namespace][current["kind"]][name]

    def register_watch(self, callback: Callable[[ManagedRecord], None]):
        """Register a callback invoked with a copy of every written record.
        Callbacks run under the store lock in write order. This is how a cache
        Indexer follows the store.
        """
        self._watches.append(callback)

    @contextmanager
    def paused_watches(self):
        """Hold back watch notifications so that caches fall behind the store
        for the duration of the context
        """
        self._watches_paused = True
        try:
            yield
        finally:
            self._watches_paused = False

    def list(self, namespace: Optional[str] = None) -> List[ManagedRecord]:
        """List copies of all records, optionally limited to one namespace"""
        with self._lock:
            namespaces = [namespace] if namespace is not None else list(self._content)
            return [
                ManagedRecord(copy.deepcopy(definition))
                for ns in namespaces
                for entries in self._content.get(ns, {}).values()
                for definition in entries.values()
            ]

    ## Implementation Details ##################################################

    def _next_version(self) -> str:
        self._last_version += 1
        return str(self._last_version)

    def _entries(self, namespace: str, kind: str) -> dict:
        return self._content.setdefault(namespace, {}).setdefault(kind, {})

    def _lookup(
        self,
        namespace: str,
        name: str,
        kind: Optional[str] = None,
        api_version: Optional[str] = None,
    ) -> dict:
        matches = [
            entries[name]
            for entry_kind, entries in self._content.get(namespace, {}).items()
            if name in entries
            and (kind is None or entry_kind == kind)
            and (api_version is None or entries[name].get("apiVersion") == api_version)
        ]
        if not matches:
            raise RecordNotFoundError(f"{kind or 'record'} {namespace}/{name} not found")
        if len(matches) > 1:
            raise StoreError(f"Found {len(matches)} records named {namespace}/{name}")
        return matches[0]

    def _call_watches(self, definition: dict):
        if self._watches_paused:
            log.debug2("Watches paused. Not notifying for %s", definition["metadata"])
            return
        for callback in self._watches:
            log.debug2("Calling registered watch [%s]", callback)
            callback(ManagedRecord(copy.deepcopy(definition)))
