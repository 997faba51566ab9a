"""
Validation of the library config against config_validation.yaml.

The validation file mirrors the shape of config.yaml. Any dict in it holding a
"type" that names a registered parameter type is a validator for the key at
the same dotted path; every other dict is recursed into.
"""

# Standard
from typing import Any, Callable, Dict, List, Optional
import builtins

# First Party
import aconfig
import alog

# Local
from .. import constants
from ..utils import nested_get

log = alog.use_channel("CONFG")

## Public ######################################################################


def get_invalid_params(
    config: aconfig.Config,
    validation_config: aconfig.Config,
) -> List[str]:
    """Get the dotted keys of all config values that fail validation

    Args:
        config:  aconfig.Config
            The loaded config, including any overrides
        validation_config:  aconfig.Config
            The parallel config holding the validators

    Returns:
        invalid_params:  List[str]
            Keys whose values have the wrong type or violate a constraint
    """
    validators = _parse_validation_config(validation_config)
    invalid_params = [
        key for key, param in validators.items() if not param.validate(nested_get(config, key))
    ]
    for key in invalid_params:
        log.warning("Found invalid config key [%s]", key)
    return invalid_params


## Parameter Types #############################################################

_factory_map: Dict[str, type] = {}


def _parameter_type(type_key: str) -> Callable[[type], type]:
    """Register a parameter class under the name used in validation files"""

    def decorator(param_class: type) -> type:
        param_class.TYPE_KEY = type_key
        _factory_map[type_key] = param_class
        return param_class

    return decorator


# pylint: disable=too-few-public-methods


class _ValidatedParameter:
    """Base for a single validated config value. Subclasses set the python
    types they accept and override _check for value constraints.
    """

    TYPE_KEY = None
    TYPES = ()

    def __init__(self, optional: bool = False):
        self.optional = optional

    def validate(self, value: Any) -> bool:
        if value is None and self.optional:
            return True
        if not isinstance(value, self.TYPES):
            log.warning("Invalid type <%s> for %s parameter", type(value), self.TYPE_KEY)
            return False
        if not self._check(value):
            log.warning("Invalid value [%s] for %s parameter", value, self.TYPE_KEY)
            return False
        return True

    def _check(self, value: Any) -> bool:
        return True


def _in_bounds(value, lower, upper) -> bool:
    return (lower is None or value >= lower) and (upper is None or value <= upper)


@_parameter_type("number")
class _NumberParameter(_ValidatedParameter):
    TYPES = (int, float)

    # pylint: disable=redefined-builtin
    def __init__(self, *, min=None, max=None, **kwargs):
        super().__init__(**kwargs)
        self.bounds = (min, max)

    def _check(self, value) -> bool:
        return not isinstance(value, bool) and _in_bounds(value, *self.bounds)


@_parameter_type("int")
class _IntParameter(_NumberParameter):
    TYPES = (int,)


@_parameter_type("str")
class _StrParameter(_ValidatedParameter):
    TYPES = (str,)

    def __init__(self, *, min_len=None, max_len=None, **kwargs):
        super().__init__(**kwargs)
        self.len_bounds = (min_len, max_len)

    def _check(self, value) -> bool:
        return _in_bounds(len(value), *self.len_bounds)


@_parameter_type("bool")
class _BoolParameter(_ValidatedParameter):
    TYPES = (bool,)


@_parameter_type("enum")
class _EnumParameter(_ValidatedParameter):
    """One of a fixed set of str or int values"""

    TYPES = (str, int, type(None))

    def __init__(self, *, values: List[Any], **kwargs):
        super().__init__(**kwargs)
        assert isinstance(values, list) and values, "Enum parameters need values"
        self.values = list(values)

    def _check(self, value) -> bool:
        return value in self.values


@_parameter_type("list")
class _ListParameter(_StrParameter):
    """A list with optional length bounds and a builtin item type name"""

    TYPES = (list,)

    def __init__(self, *, item_type: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.item_type = None
        if item_type is not None:
            self.item_type = getattr(builtins, item_type, None)
            assert isinstance(self.item_type, type), f"Unknown item_type {item_type}"

    def _check(self, value) -> bool:
        if self.item_type is not None and not all(
            isinstance(item, self.item_type) for item in value
        ):
            return False
        return super()._check(value)


# pylint: enable=too-few-public-methods

## Parsing #####################################################################


def _construct_parameter(param_args: Dict[str, Any]) -> Optional[_ValidatedParameter]:
    """Build the parameter described by a validation entry, or None when the
    entry's "type" is not a registered parameter type
    """
    assert "type" in param_args, "All parameters must have a 'type'"
    kwargs = {key: val for key, val in param_args.items() if key != "type"}
    param_type = param_args["type"]
    param_class = _factory_map.get(param_type) if isinstance(param_type, str) else None
    return param_class(**kwargs) if param_class is not None else None


def _parse_validation_config(
    validation_config: dict,
    prefix: str = "",
) -> Dict[str, _ValidatedParameter]:
    """Flatten the validation config into dotted keys mapped to parameters"""
    params = {}
    for key, val in validation_config.items():
        assert isinstance(key, str), "Only string keys allowed!"
        if not isinstance(val, dict):
            continue
        nested_key = f"{prefix}{constants.NESTED_DICT_DELIM}{key}" if prefix else key
        param = _construct_parameter(val) if "type" in val else None
        if param is None:
            log.debug3("Recursing into %s", nested_key)
            params.update(_parse_validation_config(val, prefix=nested_key))
        else:
            log.debug3("Found parameter at %s", nested_key)
            params[nested_key] = param
    return params
