"""
Value kinds of the JSON-like trees used for both documents and field maps.
kind_of is the single place where a raw value is classified; traversal code
branches on the returned kind.
"""

from enum import Enum
from typing import Any


class ValueKind(Enum):
    NULL = "null"
    STRING = "string"
    SCALAR = "scalar"  # numbers and booleans; never valid input text
    LIST = "list"
    MAP = "map"


def kind_of(value: Any) -> ValueKind:
    if value is None:
        return ValueKind.NULL
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, dict):
        return ValueKind.MAP
    if isinstance(value, (list, tuple)):
        return ValueKind.LIST
    return ValueKind.SCALAR


def type_name(value: Any) -> str:
    return kind_of(value).value
