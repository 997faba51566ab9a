"""
Outcome events for operations against a managed record.

Every operation that commits a record emits exactly one event describing
whether it worked. The mapping from (verb, record, error) to the event is
pure so that it can be reused for any verb; the recorders below decide where
the event goes.
"""

# Standard
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional
import abc
import threading

# Third Party
from openshift.dynamic import DynamicClient
from openshift.dynamic.exceptions import DynamicApiError

# First Party
import alog

# Local
from . import config
from .constants import EVENT_TYPE_NORMAL, EVENT_TYPE_WARNING
from .kube_client import setup_client
from .managed_record import ManagedRecord
from .utils import title_case

log = alog.use_channel("EVNTS")


@dataclass(frozen=True)
class OutcomeEvent:
    """The audit record describing the outcome of one operation"""

    verb: str
    event_type: str
    reason: str
    message: str

    def __str__(self):
        return f"{self.event_type} {self.reason} {self.message}"


def make_outcome_event(
    verb: str,
    record: ManagedRecord,
    error: Optional[Exception] = None,
) -> OutcomeEvent:
    """Build the outcome event for an operation

    Args:
        verb:  str
            The operation that was performed (e.g. "update")
        record:  ManagedRecord
            The record the operation targeted
        error:  Optional[Exception]
            The error the operation ended with, or None on success

    Returns:
        event:  OutcomeEvent
            Normal/Successful<Verb> on success, Warning/Failed<Verb> with the
            error text in the message on failure
    """
    if error is None:
        return OutcomeEvent(
            verb=verb,
            event_type=EVENT_TYPE_NORMAL,
            reason=f"Successful{title_case(verb)}",
            message=f"{verb.lower()} {record.kind} {record.name} successful",
        )
    return OutcomeEvent(
        verb=verb,
        event_type=EVENT_TYPE_WARNING,
        reason=f"Failed{title_case(verb)}",
        message=f"{verb.lower()} {record.kind} {record.name} failed error: {error}",
    )


def record_outcome_event(
    recorder: "EventRecorderBase",
    verb: str,
    record: ManagedRecord,
    error: Optional[Exception] = None,
) -> OutcomeEvent:
    """Build the outcome event and emit it once through the recorder"""
    event = make_outcome_event(verb, record, error)
    recorder.emit(record, event.event_type, event.reason, event.message)
    return event


## Recorders ###################################################################


class EventRecorderBase(abc.ABC):
    """Interface for a fire-and-forget event sink"""

    @abc.abstractmethod
    def emit(
        self,
        subject: ManagedRecord,
        event_type: str,
        reason: str,
        message: str,
    ):
        """Emit an event about the subject record

        Args:
            subject:  ManagedRecord
                The record the event is about
            event_type:  str
                Normal or Warning
            reason:  str
                CamelCase machine-readable reason
            message:  str
                Human-readable description
        """


class FakeEventRecorder(EventRecorderBase):
    """Recorder that buffers events in memory. Each event is kept as the
    "<type> <reason> <message>" string in events and as the full emit
    arguments in emitted. Once the buffer is full, the oldest events are
    dropped.
    """

    def __init__(self, buffer_size: Optional[int] = None):
        buffer_size = buffer_size or config.event_buffer_size
        self._lock = threading.Lock()
        self.events = deque(maxlen=buffer_size)
        self.emitted = deque(maxlen=buffer_size)

    def emit(self, subject, event_type, reason, message):
        log.debug2("Recording event for [%s]: %s %s", subject, event_type, reason)
        with self._lock:
            self.events.append(f"{event_type} {reason} {message}")
            self.emitted.append((subject, event_type, reason, message))

    def drain(self) -> List[str]:
        """Return and clear all buffered event strings"""
        with self._lock:
            events = list(self.events)
            self.events.clear()
            self.emitted.clear()
        return events


class KubeEventRecorder(EventRecorderBase):
    """Recorder that creates core/v1 Event objects in the cluster"""

    def __init__(
        self,
        client: Optional[DynamicClient] = None,
        source_component: Optional[str] = None,
    ):
        """
        Args:
            client:  Optional[DynamicClient]
                The client to create events with. If None, one is set up
                lazily from the in-cluster or local kube config.
            source_component:  Optional[str]
                The component name reported as the event source
        """
        self._client = client
        self.source_component = source_component or config.event_source_component

    @property
    def client(self) -> DynamicClient:
        """Lazy property access to the client"""
        if self._client is None:
            self._client = setup_client()
        return self._client

    def emit(self, subject, event_type, reason, message):
        body = self._make_event_body(subject, event_type, reason, message)
        try:
            handle = self.client.resources.get(api_version="v1", kind="Event")
            handle.create(body=body, namespace=subject.namespace)
            log.debug2("Created %s event [%s] for %s", event_type, reason, subject)
        except DynamicApiError as err:
            log.warning(
                "Failed to create event [%s] for %s: %s",
                reason,
                subject,
                err,
                extra={"resource": subject.definition},
            )

    def _make_event_body(
        self,
        subject: ManagedRecord,
        event_type: str,
        reason: str,
        message: str,
    ) -> dict:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        involved_object = {
            "apiVersion": subject.api_version,
            "kind": subject.kind,
            "name": subject.name,
            "namespace": subject.namespace,
        }
        if subject.uid:
            involved_object["uid"] = subject.uid
        if subject.resource_version:
            involved_object["resourceVersion"] = subject.resource_version
        return {
            "apiVersion": "v1",
            "kind": "Event",
            "metadata": {
                "generateName": f"{subject.name}.",
                "namespace": subject.namespace,
            },
            "involvedObject": involved_object,
            "type": event_type,
            "reason": reason,
            "message": message,
            "source": {"component": self.source_component},
            "firstTimestamp": timestamp,
            "lastTimestamp": timestamp,
            "count": 1,
        }
