"""
Diagnostics sinks receive non-fatal errors that are worth surfacing but must
not interrupt the caller, such as a failed cache lookup while recovering from
a conflict.
"""

# Standard
import abc
import threading

# First Party
import alog

log = alog.use_channel("DIAG")


class DiagnosticsSinkBase(abc.ABC):
    """Interface for a sink of non-fatal errors"""

    @abc.abstractmethod
    def report(self, error: Exception):
        """Report a non-fatal error

        Args:
            error:  Exception
                The error to surface
        """


class LoggingDiagnosticsSink(DiagnosticsSinkBase):
    """Sink that writes every reported error to the error log and keeps a
    running count
    """

    def __init__(self):
        self._count = 0
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        return self._count

    def report(self, error: Exception):
        with self._lock:
            self._count += 1
        log.error("%s", error)
