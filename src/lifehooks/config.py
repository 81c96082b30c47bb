"""src/lifehooks/config.py"""
import os
import dataclasses
from typing import final
import yaml
import voluptuous as vlp

from lifehooks.errors import ConfigError

class ConfigSchema():
    """Voluptuous schema and validator functions for lifehooks settings."""

    class ErrMsg:
        BOOL_INVALID = "Not a valid boolean (expected one of 1, t, T, TRUE, true, True, 0, f, F, FALSE, false, False)"
        DELAY_INVALID = "Not a number of seconds"
        DELAY_NEGATIVE = "Exit delay must not be negative"
        NOT_A_MAPPING = "Configuration must be a mapping of setting names to values"

    # spellings accepted for the DEBUG toggle
    TRUE_STRINGS = ("1", "t", "T", "TRUE", "true", "True")
    FALSE_STRINGS = ("0", "f", "F", "FALSE", "false", "False")

    @staticmethod
    def schema() -> vlp.Schema:
        """Validate and coerce a dict of freshly parsed settings (from YAML or
        from the environment). Missing settings take their defaults and unknown
        settings are rejected.
        """
        return vlp.Schema(
            { vlp.Optional("debug", default=False): ConfigSchema.parse_bool,
              vlp.Optional("exit_delay", default=0.0): vlp.All(
                  vlp.Coerce(float, msg=ConfigSchema.ErrMsg.DELAY_INVALID),
                  vlp.Range(min=0, msg=ConfigSchema.ErrMsg.DELAY_NEGATIVE))
            })

    @staticmethod
    def parse_bool(value) -> bool:
        """Validator that accepts a bool, the ints 0 and 1, or one of the
        TRUE_STRINGS or FALSE_STRINGS, and returns the matching bool.
        """
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        if isinstance(value, str):
            if value in ConfigSchema.TRUE_STRINGS:
                return True
            if value in ConfigSchema.FALSE_STRINGS:
                return False
        raise vlp.Invalid(ConfigSchema.ErrMsg.BOOL_INVALID)

@dataclasses.dataclass
class Config:
    """Runtime settings for the lifehooks registries.

    `debug` turns on a DEBUG log record for every callback invocation.
    `exit_delay` is the number of seconds `terminate()` sleeps between running
    the exit callbacks and ending the process."""
    debug: bool = False
    exit_delay: float = 0.0

    ENV_VARS = {"debug": ("LIFEHOOKS_DEBUG", "DEBUG"),
                "exit_delay": ("LIFEHOOKS_EXIT_DELAY",)}

    @final
    @staticmethod
    def from_dict(data) -> "Config":
        """Validate `data` with `ConfigSchema` and build a Config from it.
        Raises `ConfigError` listing every invalid setting.
        """
        if not isinstance(data, dict):
            raise ConfigError([("<root>", ConfigSchema.ErrMsg.NOT_A_MAPPING)])
        try:
            validated = ConfigSchema.schema()(data)
        except vlp.MultipleInvalid as exc:
            errors = []
            for err in exc.errors:
                setting = ".".join(str(p) for p in err.path) or "<root>"
                errors.append((setting, err.msg))
            raise ConfigError(errors) from exc
        return Config(**validated)

    @staticmethod
    def from_env(environ=None, defaults=None) -> "Config":
        """Build a Config from environment variables. For each setting the
        first non-empty variable in `Config.ENV_VARS` wins, so LIFEHOOKS_DEBUG
        overrides the plain DEBUG toggle. Settings with no variable set are
        taken from the `defaults` dict, for example the settings of a config
        file.
        """
        if environ is None:
            environ = os.environ
        data = dict(defaults or {})
        for setting, names in Config.ENV_VARS.items():
            for name in names:
                value = environ.get(name, "").strip()
                if value:
                    data[setting] = value
                    break
        return Config.from_dict(data)

    @staticmethod
    def from_yaml(config_path) -> "Config":
        """Returns a Config, given a YAML config file.

        Throws `OSError` if unable to open `config_path`."""
        with open(config_path, "r", encoding="utf-8") as f:
            return parse_yaml_string(f.read())

def parse_yaml_string(string: str) -> Config:
    """Returns a Config, given a YAML string. An empty document gives the
    defaults.

    Throws `yaml.YAMLError` if the string is malformed and `ConfigError` if a
    setting is invalid."""
    data = yaml.safe_load(string)
    if data is None:
        data = {}
    return Config.from_dict(data)
