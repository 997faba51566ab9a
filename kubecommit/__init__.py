"""
Package exports
"""

# Local
from . import config
from .cache import Indexer, LocalCacheBase, ReadThroughCache
from .diagnostics import DiagnosticsSinkBase, LoggingDiagnosticsSink
from .event_recorder import (
    EventRecorderBase,
    FakeEventRecorder,
    KubeEventRecorder,
    OutcomeEvent,
    make_outcome_event,
    record_outcome_event,
)
from .exceptions import (
    CacheMissError,
    ConflictError,
    RecordNotFoundError,
    StoreError,
    assert_config,
    assert_store,
)
from .managed_record import ManagedRecord
from .retry import RetryPolicy, retry_on_error
from .store import (
    DryRunStore,
    FaultInjectingStore,
    FaultSchedule,
    KubeStoreClient,
    StoreClientBase,
)
from .update_loop import UpdateLoop
