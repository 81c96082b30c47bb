"""Process-wide init and exit registries and the functions that forward to
them. Libraries register callbacks here, the program's entry point decides
when they run:

    import lifehooks

    lifehooks.on_init_with_priority(10, open_database)
    lifehooks.on_exit(close_database)

    def main():
        lifehooks.run_init()
        ...
        lifehooks.terminate(0)

`exit_registry.exit_func` and `exit_registry.exit_delay` control how
`terminate()` ends the process.

Settings are read once, at import, from the environment. If LIFEHOOKS_CONFIG
names a YAML file its settings are loaded first and the environment variables
override them.
"""
import dataclasses
import logging
import os
import warnings

import yaml

from lifehooks.config import Config
from lifehooks.errors import ConfigError
from lifehooks.initregistry import InitRegistry
from lifehooks.exitregistry import ExitRegistry
from lifehooks.logging import ROOT_LOGGER_NAME, init_logging, logger

CONFIG_PATH_VAR = "LIFEHOOKS_CONFIG"

def load_config(environ=None) -> Config:
    """Read the configuration from the LIFEHOOKS_CONFIG file (if any) and the
    environment, falling back to the defaults (with a warning) if either is
    unreadable or invalid.
    """
    if environ is None:
        environ = os.environ
    config_path = environ.get(CONFIG_PATH_VAR, "").strip()
    try:
        defaults = {}
        if config_path:
            defaults = dataclasses.asdict(Config.from_yaml(config_path))
        return Config.from_env(environ, defaults=defaults)
    except (ConfigError, OSError, yaml.YAMLError) as exc:
        logger().warning(f"ignoring invalid lifehooks configuration: {exc}")
        return Config()

def enable_debug_logging(config) -> bool:
    """Send lifehooks DEBUG records to stderr when `config.debug` is set and the
    application has not configured lifehooks logging itself. Returns True if
    logging was initialized.
    """
    if not config.debug or logging.getLogger(ROOT_LOGGER_NAME).handlers:
        return False
    init_logging(level=logging.DEBUG)
    return True

config = load_config()
enable_debug_logging(config)
init_registry = InitRegistry(config=config)
exit_registry = ExitRegistry(config=config)

def on_init_with_priority(priority, func):
    """Register an init callback. The smaller the priority, the earlier it runs."""
    return init_registry.register(priority, func, stacklevel=2)

def on_init(func):
    """Register an init callback with the next default priority, starting at
    100. For example,
        on_init(func) # ==> on_init_with_priority(100, func)
        on_init(func) # ==> on_init_with_priority(101, func)
    """
    return init_registry.register_default(func, stacklevel=2)

def run_init():
    """Run the registered init callbacks. Only the first call does anything."""
    return init_registry.run()

def list_init_callbacks():
    return init_registry.callbacks()

def on_exit_with_priority(priority, func):
    """Register an exit callback. The bigger the priority, the earlier it runs."""
    return exit_registry.register(priority, func, stacklevel=2)

def on_exit(func):
    """Register an exit callback with the next default priority, starting at
    100. For example,
        on_exit(func) # ==> on_exit_with_priority(100, func)
        on_exit(func) # ==> on_exit_with_priority(101, func)
    """
    return exit_registry.register_default(func, stacklevel=2)

def execute():
    """Run the registered exit callbacks in reverse priority order, once."""
    return exit_registry.execute()

def is_executed():
    return exit_registry.executed

def wait(timeout=None):
    """Wait until the exit callbacks have finished running."""
    return exit_registry.wait(timeout)

def terminate(code=0):
    """Run the exit callbacks and end the process with `code`."""
    exit_registry.terminate(code)

def done():
    """Return the event that is set as soon as the exit callbacks start running."""
    return exit_registry.context

def install(**kwargs):
    """Run the exit callbacks at interpreter exit and on SIGTERM/SIGINT. See
    `ExitRegistry.install()`.
    """
    return exit_registry.install(**kwargs)

def list_exit_callbacks():
    return exit_registry.callbacks()

def _deprecated(old, new):
    warnings.warn(f"lifehooks.{old} is deprecated, use lifehooks.{new}", DeprecationWarning, stacklevel=3)

def register(func):
    """Deprecated alias of on_exit."""
    _deprecated("register", "on_exit")
    return exit_registry.register_default(func, stacklevel=2)

def register_with_priority(priority, func):
    """Deprecated alias of on_exit_with_priority."""
    _deprecated("register_with_priority", "on_exit_with_priority")
    return exit_registry.register(priority, func, stacklevel=2)

def register_init(func):
    """Deprecated alias of on_init."""
    _deprecated("register_init", "on_init")
    return init_registry.register_default(func, stacklevel=2)

def register_init_with_priority(priority, func):
    """Deprecated alias of on_init_with_priority."""
    _deprecated("register_init_with_priority", "on_init_with_priority")
    return init_registry.register(priority, func, stacklevel=2)
