"""
Loads the library config and its validators at import time. Any value in
config.yaml can be overridden by an env var named after its upper-cased path
(e.g. RETRY_STEPS=3 or RETRY_RETRY_ON=conflict).
"""

# Standard
import os

# First Party
import aconfig
import alog

# Local
from ..exceptions import assert_config
from .validation import get_invalid_params

_CONFIG_DIR = os.path.dirname(__file__)


def _load_yaml(file_name: str, override_env_vars: bool) -> aconfig.Config:
    return aconfig.Config.from_yaml(
        os.path.join(_CONFIG_DIR, file_name),
        override_env_vars=override_env_vars,
    )


def configure_logging(json_formatter="json"):
    """Apply the logging section of the library config to alog

    Args:
        json_formatter:  Union[str, AlogFormatterBase]
            The formatter used when log_json is set
    """
    alog.configure(
        default_level=library_config.log_level,
        filters=library_config.log_filters,
        formatter=json_formatter if library_config.log_json else "pretty",
        thread_id=library_config.log_thread_id,
    )


library_config = _load_yaml("config.yaml", override_env_vars=True)
validation_config = _load_yaml("config_validation.yaml", override_env_vars=False)

invalid_params = get_invalid_params(library_config, validation_config)
assert_config(
    not invalid_params,
    "Invalid kubecommit config values (check env overrides for): "
    + ", ".join(invalid_params),
)

configure_logging()
