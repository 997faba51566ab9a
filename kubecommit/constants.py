"""
Shared module to hold constant values for the library
"""

# Default namespace if none given
DEFAULT_NAMESPACE = "default"

# Delimiter used for nested dict keys
NESTED_DICT_DELIM = "."

# Kubernetes event types
EVENT_TYPE_NORMAL = "Normal"
EVENT_TYPE_WARNING = "Warning"

# Verb used for outcome events of the update loop
UPDATE_VERB = "update"

# Values for the retry.retry_on config
RETRY_ON_ALL = "all"
RETRY_ON_CONFLICT = "conflict"
