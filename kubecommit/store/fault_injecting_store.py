"""
Deterministic fault injection for exercising retry behavior.

The FaultInjectingStore writes straight into a cache Indexer, standing in for
the store and the informer that would feed the cache. Its FaultSchedule decides
which calls fail:

* A new schedule is inert and every call succeeds.
* configure(error, after, times) arms it. Once `after` calls have been made,
  each call raises `error`, up to `times` firings (None means every call).
* When the firings are used up, the schedule disarms itself.
"""

# Standard
from typing import Optional

# First Party
import alog

# Local
from ..cache import Indexer
from ..exceptions import CacheMissError, RecordNotFoundError
from ..managed_record import ManagedRecord
from .base import StoreClientBase

log = alog.use_channel("FAULT")


class FaultSchedule:
    """Counter-based trigger for injected errors"""

    def __init__(self):
        self.calls = 0
        self.error = None
        self.after = 0
        self.remaining = None

    @property
    def armed(self) -> bool:
        return self.error is not None

    def configure(
        self,
        error: Exception,
        after: int = 0,
        times: Optional[int] = 1,
    ):
        """Arm the schedule

        Args:
            error:  Exception
                The error raised by each firing
            after:  int
                The number of calls to let through before firing
            times:  Optional[int]
                How many times to fire before disarming. None fires forever.
        """
        assert times is None or times > 0, "times must be positive or None"
        self.error = error
        self.after = after
        self.remaining = times

    def error_ready(self) -> bool:
        return self.armed and self.calls >= self.after

    def consume(self) -> Exception:
        """Use up one firing, disarming when none remain"""
        error = self.error
        if self.remaining is not None:
            self.remaining -= 1
            if self.remaining == 0:
                self.reset()
        return error

    def inc(self):
        self.calls += 1

    def reset(self):
        self.error = None
        self.after = 0
        self.remaining = None


class FaultInjectingStore(StoreClientBase):
    """Store double that fails on a configured schedule and otherwise writes
    into the given Indexer
    """

    def __init__(self, indexer: Indexer, schedule: Optional[FaultSchedule] = None):
        self.indexer = indexer
        self.schedule = schedule or FaultSchedule()

    @property
    def calls(self) -> int:
        return self.schedule.calls

    def configure(self, error: Exception, after: int = 0, times: Optional[int] = 1):
        """Arm the underlying schedule (see FaultSchedule.configure)"""
        self.schedule.configure(error, after=after, times=times)

    def update(self, record: ManagedRecord) -> ManagedRecord:
        try:
            if self.schedule.error_ready():
                error = self.schedule.consume()
                log.debug("Injecting failure on call %d: %s", self.schedule.calls, error)
                raise error
            self.indexer.update(record)
            return record
        finally:
            self.schedule.inc()

    def get(self, namespace, name, kind=None, api_version=None):
        try:
            return self.indexer.get(namespace, name).deep_copy()
        except CacheMissError as err:
            raise RecordNotFoundError(str(err)) from err
