"""
Tests for the library config module

NOTE: Python makes it hard to change env vars in a way that will effect import
    time, so we're relying on the fact that aconfig is well tested and not
    actually validating the env-var override behavior!
"""

# Standard
from unittest import mock

# Third Party
import pytest

# First Party
import aconfig

# Local
from kubecommit import config
from kubecommit.test_helpers.helpers import library_config


def test_config_keys():
    """Make sure that the expected keys are present"""
    assert isinstance(config.retry.steps, int)
    assert config.retry.retry_on in ["all", "conflict"]
    assert config.preserved_fields == ["status"]


def test_missing_config_attribute():
    """Make sure unknown attributes raise"""
    with pytest.raises(AttributeError):
        config.not_a_real_key  # pylint: disable=pointless-statement


def test_loaded_config_is_valid():
    """Make sure the shipped config passes its own validation"""
    assert not config.validation.get_invalid_params(
        config.library_config,
        config.config.validation_config,
    )


def test_configure_logging_formatter():
    """Make sure the json formatter is only used when log_json is set"""
    formatter = object()
    with mock.patch("alog.configure") as configure_mock:
        with library_config(log_json=True):
            config.config.configure_logging(json_formatter=formatter)
        assert configure_mock.call_args.kwargs["formatter"] is formatter

        config.config.configure_logging(json_formatter=formatter)
        assert configure_mock.call_args.kwargs["formatter"] == "pretty"
        assert configure_mock.call_args.kwargs["default_level"] == config.log_level


########################
## get_invalid_params ##
########################


def test_get_invalid_params_all_valid_params():
    """Test that get_invalid_params returns no invalid params when all are set
    to valid values
    """
    assert not config.validation.get_invalid_params(
        config=aconfig.Config({"key": 1}, override_env_vars=False),
        validation_config=aconfig.Config(
            {"key": {"type": "int", "min": 0, "max": 1}}, override_env_vars=False
        ),
    )


def test_get_invalid_params_some_invalid_params():
    """Test that get_invalid_params returns only the invalid parameters when
    some are invalid and some are valid
    """
    assert config.validation.get_invalid_params(
        config=aconfig.Config(
            {"retry": {"steps": 0, "retry_on": "all"}}, override_env_vars=False
        ),
        validation_config=aconfig.Config(
            {
                "retry": {
                    "steps": {"type": "int", "min": 1},
                    "retry_on": {"type": "enum", "values": ["all", "conflict"]},
                },
            },
            override_env_vars=False,
        ),
    ) == ["retry.steps"]


#####################
## parameter types ##
#####################


def test_number_parameter():
    """Test all validation cases for _NumberParameter"""
    ParamType = config.validation._NumberParameter

    # Valid Cases
    assert ParamType().validate(1)
    assert ParamType().validate(0.01)
    assert ParamType(min=0).validate(0)
    assert ParamType(max=1).validate(0.5)
    assert ParamType(optional=True).validate(None)

    # Invalid Cases
    assert not ParamType().validate("not a number")
    assert not ParamType(min=0).validate(-1)
    assert not ParamType(max=1).validate(1.5)
    assert not ParamType().validate(None)


def test_int_parameter():
    """Test all validation cases for _IntParameter"""
    ParamType = config.validation._IntParameter

    assert ParamType().validate(1)
    assert ParamType(min=1).validate(5)
    assert not ParamType().validate(1.2)
    assert not ParamType(min=1).validate(0)


def test_str_parameter():
    """Test all validation cases for _StrParameter"""
    ParamType = config.validation._StrParameter

    assert ParamType().validate("")
    assert ParamType(min_len=1).validate("kubecommit")
    assert not ParamType(min_len=1).validate("")
    assert not ParamType(max_len=3).validate("test")
    assert not ParamType().validate(b"test")


def test_bool_parameter():
    """Test all validation cases for _BoolParameter"""
    ParamType = config.validation._BoolParameter

    assert ParamType().validate(True)
    assert ParamType().validate(False)
    assert not ParamType().validate("true")


def test_enum_parameter():
    """Test all validation cases for _EnumParameter"""
    ParamType = config.validation._EnumParameter

    with pytest.raises(AssertionError):
        ParamType(values=[])

    assert ParamType(values=["all", "conflict"]).validate("conflict")
    assert not ParamType(values=["all", "conflict"]).validate("some")


def test_list_parameter():
    """Test all validation cases for _ListParameter"""
    ParamType = config.validation._ListParameter

    assert ParamType().validate([])
    assert ParamType(item_type="str").validate(["status", "spec.replicas"])
    assert not ParamType(min_len=1).validate([])
    assert not ParamType(item_type="str").validate(["status", 1])
    assert not ParamType().validate("status")


#############
## factory ##
#############


def test_construct_parameter_known_types():
    """Make sure that all known types can be constructed via the factory"""
    validation = config.validation
    assert isinstance(
        validation._construct_parameter({"type": "number"}),
        validation._NumberParameter,
    )
    assert isinstance(
        validation._construct_parameter({"type": "int", "min": 1}),
        validation._IntParameter,
    )
    assert isinstance(
        validation._construct_parameter({"type": "str", "min_len": 1}),
        validation._StrParameter,
    )
    assert isinstance(
        validation._construct_parameter({"type": "bool"}),
        validation._BoolParameter,
    )
    assert isinstance(
        validation._construct_parameter({"type": "enum", "values": [1]}),
        validation._EnumParameter,
    )
    assert isinstance(
        validation._construct_parameter({"type": "list", "item_type": "str"}),
        validation._ListParameter,
    )


def test_construct_parameter_extra_params_error():
    """Make sure that a param construction call with bad arguments raises"""
    with pytest.raises(TypeError):
        config.validation._construct_parameter({"type": "number", "foo": "bar"})


def test_construct_parameter_unknown_type():
    """Unknown types construct to None"""
    assert config.validation._construct_parameter({"type": "foobar"}) is None


def test_parse_validation_config_nested_type_key():
    """Make sure that parsing a validation config is robust to having the key
    'type' not represent an actual parameter
    """
    assert list(
        config.validation._parse_validation_config(
            aconfig.Config(
                {"foo": {"type": {"baz": {"type": "int"}}}}, override_env_vars=False
            )
        ).keys()
    ) == ["foo.type.baz"]
