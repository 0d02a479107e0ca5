"""
This module just loads config at import time and does the initial log config
"""

# Standard
import os

# First Party
import aconfig
import alog

# Levels accepted by alog.configure
VALID_LOG_LEVELS = [
    "off",
    "fatal",
    "error",
    "warning",
    "info",
    "trace",
    "debug",
    "debug1",
    "debug2",
    "debug3",
    "debug4",
]

# Read the library config, allowing env overrides
library_config = aconfig.Config.from_yaml(
    os.path.join(os.path.dirname(__file__), "config.yaml"),
    override_env_vars=True,
)


def get_invalid_params(config: aconfig.Config):
    """Get the list of config keys holding values that can't be used"""
    invalid_params = []
    if str(config.log_level).lower() not in VALID_LOG_LEVELS:
        invalid_params.append("log_level")
    if not isinstance(config.log_filters, str):
        invalid_params.append("log_filters")
    if not config.field_manager:
        invalid_params.append("field_manager")
    return invalid_params


# Validate the loaded config values
invalid_params = get_invalid_params(library_config)
assert (
    not invalid_params
), f"Library configuration found invalid values: {invalid_params}"

# Do initial alog configuration
alog.configure(
    default_level=library_config.log_level,
    filters=library_config.log_filters,
    formatter="json" if library_config.log_json else "pretty",
    thread_id=library_config.log_thread_id,
)
