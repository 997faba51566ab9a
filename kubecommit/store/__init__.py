"""
A store performs the versioned writes that the update loop commits. Writes
fail with a ConflictError when the record's version moved since it was read.
"""

# Local
from .base import StoreClientBase
from .dry_run_store import DryRunStore
from .fault_injecting_store import FaultInjectingStore, FaultSchedule
from .kube_store import KubeStoreClient
