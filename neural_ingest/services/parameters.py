"""
Type-checked extraction of scalar parameters from untyped configuration maps.
Every failure raises ConfigValidationError naming the parameter.
"""

import math
from typing import Any

from neural_ingest.services.errors import ConfigValidationError


def _type_error(name: str, expected: type) -> ConfigValidationError:
    return ConfigValidationError(f"Parameter [{name}] must be of {expected.__name__} type", field=name)


def parse_string_parameter(parameters: dict[str, Any], name: str, default: str) -> str:
    """Return a non-blank string parameter, or `default` when absent."""
    if name not in parameters:
        return default
    value = parameters[name]
    if not isinstance(value, str):
        raise _type_error(name, str)
    if not value.strip():
        raise ConfigValidationError(f"Parameter [{name}] should not be empty.", field=name)
    return value


def parse_integer_parameter(parameters: dict[str, Any], name: str, default: int) -> int:
    """
    Return an integer parameter, or `default` when absent.
    Accepts ints and integer strings; booleans and fractional numbers are rejected.
    """
    if name not in parameters:
        return default
    value = parameters[name]
    if isinstance(value, bool):
        raise _type_error(name, int)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise _type_error(name, int) from None
    raise _type_error(name, int)


def parse_positive_integer_parameter(parameters: dict[str, Any], name: str, default: int) -> int:
    value = parse_integer_parameter(parameters, name, default)
    if value <= 0:
        raise ConfigValidationError(f"Parameter [{name}] must be positive.", field=name, limit=0)
    return value


def parse_double_parameter(parameters: dict[str, Any], name: str, default: float) -> float:
    """
    Return a finite float parameter, or `default` when absent. Accepts ints,
    floats and numeric strings; nan and infinities are rejected.
    """
    if name not in parameters:
        return default
    value = parameters[name]
    if isinstance(value, bool):
        raise _type_error(name, float)
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            raise _type_error(name, float) from None
    else:
        raise _type_error(name, float)
    if not math.isfinite(number):
        raise ConfigValidationError(f"Parameter [{name}] must be a finite number", field=name)
    return number


def parse_boolean_parameter(parameters: dict[str, Any], name: str, default: bool) -> bool:
    if name not in parameters:
        return default
    value = parameters[name]
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise _type_error(name, bool)


# Processor configuration readers


def read_optional_map(config: dict[str, Any], name: str) -> dict[str, Any] | None:
    if config.get(name) is None:
        return None
    value = config[name]
    if not isinstance(value, dict):
        raise ConfigValidationError(f"[{name}] property isn't a map, but of type [{type(value).__name__}]", field=name)
    return value


def read_required_map(config: dict[str, Any], name: str) -> dict[str, Any]:
    value = read_optional_map(config, name)
    if value is None:
        raise ConfigValidationError(f"[{name}] required property is missing", field=name)
    return value


def read_required_string(config: dict[str, Any], name: str) -> str:
    if config.get(name) is None:
        raise ConfigValidationError(f"[{name}] required property is missing", field=name)
    value = config[name]
    if not isinstance(value, str):
        raise ConfigValidationError(f"[{name}] property isn't a string, but of type [{type(value).__name__}]", field=name)
    return value
