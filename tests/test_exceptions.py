"""
Test the custom exceptions and assert functions
"""

# Third Party
import pytest

# Local
from kubecommit import exceptions


def test_assert_config_pass():
    """Make sure that no exception is throw by assert_config when it
    passes
    """
    exceptions.assert_config(True)


def test_assert_config_fail():
    """Make sure the right exception is thrown by assert_config when it
    fails
    """
    exception_msg = "error mesage"
    with pytest.raises(exceptions.ConfigError, match=exception_msg):
        exceptions.assert_config(False, exception_msg)


def test_assert_store_pass():
    """Make sure that no exception is throw by assert_store when it passes"""
    exceptions.assert_store(True)


def test_assert_store_fail():
    """Make sure the right exception is thrown by assert_store when it fails"""
    exception_msg = "error mesage"
    with pytest.raises(exceptions.StoreError, match=exception_msg):
        exceptions.assert_store(False, exception_msg)


def test_exception_derived_from_base():
    """Make sure the derived classes are instances of the base class"""
    assert isinstance(exceptions.KubeCommitFatalError(), exceptions.KubeCommitError)
    assert isinstance(
        exceptions.KubeCommitExpectedError(), exceptions.KubeCommitError
    )


def test_store_errors_are_fatal():
    """Make sure non-conflict store errors carry the fatal flag"""
    assert exceptions.StoreError().is_fatal_error
    not_found = exceptions.RecordNotFoundError("gone")
    assert isinstance(not_found, exceptions.StoreError)
    assert not_found.is_fatal_error


def test_conflict_and_cache_miss_are_expected():
    """Make sure conflicts and cache misses are not fatal"""
    for error in [exceptions.ConflictError(), exceptions.CacheMissError()]:
        assert not error.is_fatal_error
        assert isinstance(error, exceptions.KubeCommitExpectedError)
        assert not isinstance(error, exceptions.StoreError)
