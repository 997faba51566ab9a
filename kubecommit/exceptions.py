"""
This module implements custom exceptions
"""

## Base Error ##################################################################


class KubeCommitError(Exception):
    """Base class for all kubecommit exceptions"""

    def __init__(self, message: str, is_fatal_error: bool):
        """Construct with a flag indicating whether this is a fatal error. This
        will be a static property of all children.
        """
        super().__init__(message)
        self._is_fatal_error = is_fatal_error

    @property
    def is_fatal_error(self):
        """Property indicating whether or not this error should be treated as
        unrecoverable by the caller
        """
        return self._is_fatal_error


## Fatal Errors ################################################################


class KubeCommitFatalError(KubeCommitError):
    """A KubeCommitFatalError is one that indicates an unexpected, and likely
    unrecoverable, failure while committing a record.
    """

    def __init__(self, message: str = ""):
        super().__init__(message=message, is_fatal_error=True)


class ConfigError(KubeCommitFatalError):
    """Exception caused during usage of user-provided configuration"""


class StoreError(KubeCommitFatalError):
    """Exception raised when a write to or read from the backing store fails
    for a reason other than a version conflict
    """


class RecordNotFoundError(StoreError):
    """Exception raised when the store has no record for the requested key"""


## Expected Errors #############################################################


class KubeCommitExpectedError(KubeCommitError):
    """A KubeCommitExpectedError is one that indicates an expected failure
    condition which is expected to resolve on a subsequent attempt.
    """

    def __init__(self, message: str = ""):
        super().__init__(message=message, is_fatal_error=False)


class ConflictError(KubeCommitExpectedError):
    """Exception raised when a write is rejected because the record's remote
    version moved since the writer last observed it
    """


class CacheMissError(KubeCommitExpectedError):
    """Exception raised when the local cache holds no snapshot for a key. The
    cache may lag behind the store, so this never indicates a hard fault.
    """


## Assertions ##################################################################


def assert_config(condition: bool, message: str = ""):
    """Replacement for assert() which will throw a ConfigError. This should be
    used when validating user-provided configuration.
    """
    if not condition:
        raise ConfigError(message)


def assert_store(condition: bool, message: str = ""):
    """Replacement for assert() which will throw a StoreError. This should be
    used when an operation against the store does not return what it must.
    """
    if not condition:
        raise StoreError(message)
