"""
Tests for the custom json log formatter
"""

# Standard
from unittest import mock
import logging

# First Party
from alog import AlogJsonFormatter

# Local
from kubecommit.log_format import KubeCommitJsonFormatter
from kubecommit.test_helpers.helpers import make_record


def _make_log_record(**extra):
    record = logging.LogRecord("UPDTE", logging.INFO, __file__, 1, "msg", (), None)
    for key, val in extra.items():
        setattr(record, key, val)
    return record


def test_fields_include_record_identifiers():
    """Make sure the record identifiers are printed"""
    for field in ["kind", "namespace", "resourceName", "resourceVersion"]:
        assert field in KubeCommitJsonFormatter._FIELDS_TO_PRINT


def test_resource_extra_populates_fields():
    """Make sure the resource passed as an extra sets the identifier fields"""
    resource = make_record(resource_version="4").definition
    with mock.patch.object(AlogJsonFormatter, "format", lambda self, rec: rec):
        log_record = KubeCommitJsonFormatter().format(
            _make_log_record(resource=resource)
        )
    assert log_record.kind == resource["kind"]
    assert log_record.apiVersion == resource["apiVersion"]
    assert log_record.namespace == "default"
    assert log_record.resourceName == "cluster-a"
    assert log_record.resourceVersion == "4"


def test_manifest_fallback():
    """Make sure the construction manifest is used without a resource extra"""
    manifest = make_record(name="cluster-b").definition
    with mock.patch.object(AlogJsonFormatter, "format", lambda self, rec: rec):
        log_record = KubeCommitJsonFormatter(manifest).format(_make_log_record())
    assert log_record.resourceName == "cluster-b"


def test_no_resource_leaves_record_untouched():
    """Make sure a log line with no resource gets no identifier fields"""
    with mock.patch.object(AlogJsonFormatter, "format", lambda self, rec: rec):
        log_record = KubeCommitJsonFormatter().format(_make_log_record())
    assert not hasattr(log_record, "resourceName")
