"""
The UpdateLoop commits locally computed changes to a shared, versioned record
while other writers may be changing the same record.

Each call to update makes a bounded number of write attempts. Before every
attempt the caller's intended fields are re-applied onto the working copy.
When a write fails, the working copy is replaced with a private copy of the
latest cached snapshot so that the next attempt carries a fresh
resourceVersion. Exactly one outcome event is emitted per call.
"""

# Standard
from typing import List, Optional
import copy

# First Party
import alog

# Local
from . import config
from .cache import LocalCacheBase
from .constants import RETRY_ON_ALL, RETRY_ON_CONFLICT, UPDATE_VERB
from .diagnostics import DiagnosticsSinkBase, LoggingDiagnosticsSink
from .event_recorder import EventRecorderBase, record_outcome_event
from .exceptions import CacheMissError, ConflictError, assert_config
from .managed_record import ManagedRecord
from .retry import RetryPolicy, retry_on_error
from .store import StoreClientBase
from .utils import nested_get, nested_has, nested_set

log = alog.use_channel("UPDTE")


class UpdateLoop:
    """Optimistic-concurrency update of a single record"""

    def __init__(  # pylint: disable=too-many-arguments
        self,
        store: StoreClientBase,
        cache: LocalCacheBase,
        recorder: EventRecorderBase,
        retry_policy: Optional[RetryPolicy] = None,
        diagnostics: Optional[DiagnosticsSinkBase] = None,
        preserved_fields: Optional[List[str]] = None,
        retry_on: Optional[str] = None,
    ):
        """
        Args:
            store:  StoreClientBase
                The store that performs the versioned write
            cache:  LocalCacheBase
                The local cache used to recover from failed writes
            recorder:  EventRecorderBase
                The recorder receiving the outcome event of each update
            retry_policy:  Optional[RetryPolicy]
                The retry budget and backoff. Defaults to the library config.
            diagnostics:  Optional[DiagnosticsSinkBase]
                Sink for cache lookup failures during recovery
            preserved_fields:  Optional[List[str]]
                Dotted keys of the fields owned by the caller. These are the
                fields re-applied onto every attempt. Defaults to the library
                config (["status"]).
            retry_on:  Optional[str]
                "all" to retry every store error or "conflict" to retry only
                ConflictErrors. Defaults to the library config.
        """
        self.store = store
        self.cache = cache
        self.recorder = recorder
        self.retry_policy = retry_policy or RetryPolicy.from_config()
        self.diagnostics = diagnostics or LoggingDiagnosticsSink()
        self.preserved_fields = list(preserved_fields or config.preserved_fields)
        self.retry_on = retry_on or config.retry.retry_on
        assert_config(
            self.retry_on in [RETRY_ON_ALL, RETRY_ON_CONFLICT],
            f"Unknown retry_on value: {self.retry_on}",
        )

    def update(self, record: ManagedRecord) -> ManagedRecord:
        """Persist the caller's intended fields of the record

        Args:
            record:  ManagedRecord
                The record with the caller's changes already applied. The loop
                takes ownership of this instance and may modify it.

        Returns:
            updated:  ManagedRecord
                The record as reported by the store after the successful write

        Raises:
            Exception: The last store error, unchanged, once the retry budget
                is exhausted or a non-retriable error is hit
        """
        namespace, name = record.key
        intended = self._save_intended(record)
        working = record
        attempt = 0

        def attempt_update() -> ManagedRecord:
            nonlocal working, attempt
            attempt += 1
            self._apply_intended(working, intended)
            try:
                updated = self.store.update(working)
            except Exception as err:
                log.warning(
                    "Failed to update %s: [%s/%s] on attempt %d: %s",
                    working.kind,
                    namespace,
                    name,
                    attempt,
                    err,
                    extra={"resource": working.definition},
                )
                working = self._refresh(working, namespace, name)
                raise
            log.info(
                "%s: [%s/%s] updated successfully",
                working.kind,
                namespace,
                name,
                extra={"resource": updated.definition},
            )
            return updated

        error = None
        try:
            return retry_on_error(
                self.retry_policy, attempt_update, should_retry=self._should_retry
            )
        except BaseException as err:  # pylint: disable=broad-except
            error = err
            raise
        finally:
            # The last refresh may have replaced the working copy
            self._apply_intended(working, intended)
            record_outcome_event(self.recorder, UPDATE_VERB, working, error)

    ## Implementation Details ##################################################

    def _should_retry(self, error: Exception) -> bool:
        if self.retry_on == RETRY_ON_CONFLICT:
            return isinstance(error, ConflictError)
        return True

    def _save_intended(self, record: ManagedRecord) -> dict:
        """Copy out the caller's fields so that later changes to the working
        copy cannot reach them
        """
        return {
            key: copy.deepcopy(nested_get(record.definition, key))
            for key in self.preserved_fields
            if nested_has(record.definition, key)
        }

    @staticmethod
    def _apply_intended(working: ManagedRecord, intended: dict):
        for key, value in intended.items():
            nested_set(working.definition, key, copy.deepcopy(value))

    def _refresh(
        self, working: ManagedRecord, namespace: str, name: str
    ) -> ManagedRecord:
        """Replace the working copy with a private copy of the latest cached
        snapshot. If the lookup fails for any reason, the failure is reported
        to diagnostics and the current working copy is kept.
        """
        try:
            snapshot = self.cache.get(namespace, name).deep_copy()
        except Exception as err:  # pylint: disable=broad-except
            miss = CacheMissError(
                f"error getting updated {working.kind} {namespace}/{name} "
                f"from cache: {err}"
            )
            miss.__cause__ = err
            self.diagnostics.report(miss)
            return working
        log.debug2(
            "Refreshed [%s/%s] from cache at resourceVersion %s",
            namespace,
            name,
            snapshot.resource_version,
        )
        return snapshot
