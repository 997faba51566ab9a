"""
This module holds common helper functions for making testing easy
"""

# Standard
from contextlib import contextmanager
from typing import List, Optional
import copy
import os

# First Party
import aconfig
import alog

# Local
from kubecommit.cache import Indexer
from kubecommit.config import library_config as config_detail_dict
from kubecommit.diagnostics import DiagnosticsSinkBase
from kubecommit.event_recorder import FakeEventRecorder
from kubecommit.exceptions import ConflictError
from kubecommit.managed_record import ManagedRecord
from kubecommit.retry import RetryPolicy
from kubecommit.store import FaultInjectingStore
from kubecommit.update_loop import UpdateLoop

log = alog.use_channel("TEST")


def configure_logging():
    alog.configure(
        os.environ.get("LOG_LEVEL", "off"),
        os.environ.get("LOG_FILTERS", ""),
        formatter="json"
        if os.environ.get("LOG_JSON", "").lower() == "true"
        else "pretty",
        thread_id=os.environ.get("LOG_THREAD_ID", "").lower() == "true",
    )


configure_logging()

TEST_NAMESPACE = "default"
TEST_NAME = "cluster-a"
TEST_KIND = "TidbCluster"
TEST_API_VERSION = "pingcap.com/v1alpha1"
TEST_MAX_STEPS = 5


def make_record(
    status: Optional[dict] = None,
    name: str = TEST_NAME,
    namespace: str = TEST_NAMESPACE,
    kind: str = TEST_KIND,
    api_version: str = TEST_API_VERSION,
    resource_version: Optional[str] = None,
    **kwargs,
) -> ManagedRecord:
    """Build a record with the given status. Extra kwargs become top-level
    keys of the definition (e.g. spec).
    """
    definition = copy.deepcopy(kwargs)
    definition["kind"] = kind
    definition["apiVersion"] = api_version
    metadata = definition.setdefault("metadata", {})
    metadata["name"] = name
    metadata["namespace"] = namespace
    if resource_version is not None:
        metadata["resourceVersion"] = resource_version
    if status is not None:
        definition["status"] = copy.deepcopy(status)
    return ManagedRecord(definition)


def make_conflict(name: str = TEST_NAME) -> ConflictError:
    return ConflictError(
        f'Operation cannot be fulfilled on {TEST_KIND} "{name}": '
        "the object has been modified"
    )


class CollectingDiagnosticsSink(DiagnosticsSinkBase):
    """Sink that keeps every reported error for assertions"""

    def __init__(self):
        self.errors: List[Exception] = []

    def report(self, error: Exception):
        log.debug("Collected diagnostic: %s", error)
        self.errors.append(error)


class LoopHarness:
    """Bundle of an UpdateLoop wired to a fault-injecting store, an Indexer
    acting as its cache, a fake recorder and a collecting diagnostics sink
    """

    def __init__(
        self,
        cached: Optional[List[ManagedRecord]] = None,
        steps: int = TEST_MAX_STEPS,
        **loop_kwargs,
    ):
        self.indexer = Indexer(cached or [])
        self.store = FaultInjectingStore(self.indexer)
        self.recorder = FakeEventRecorder()
        self.diagnostics = CollectingDiagnosticsSink()
        self.loop = UpdateLoop(
            store=self.store,
            cache=self.indexer,
            recorder=self.recorder,
            retry_policy=RetryPolicy.no_backoff(steps),
            diagnostics=self.diagnostics,
            **loop_kwargs,
        )

    @property
    def events(self) -> List[str]:
        return list(self.recorder.events)


@contextmanager
def library_config(**config_overrides):
    """This context manager sets library config values temporarily and reverts
    them on completion
    """
    old_vals = {}
    for key, val in config_overrides.items():
        if key in config_detail_dict:
            old_vals[key] = config_detail_dict[key]
        if isinstance(val, dict):
            val = aconfig.Config(val, override_env_vars=False)
        config_detail_dict[key] = val

    try:
        yield
    finally:
        for key in config_overrides:
            if key in old_vals:
                config_detail_dict[key] = old_vals[key]
            else:
                del config_detail_dict[key]
