"""Runtime values for the Orus simulator.

A value is one of:

* Number: a Python ``float`` (64-bit IEEE double)
* Text: a Python ``str``
* Array: an `ArrayVal`, whose items are an immutable tuple of values
* Undefined: the `UNDEFINED` singleton, produced by ``nil``

Arrays never change in place. Operations that "modify" an array build a
new one, so two bindings that started from the same literal can never
observe each other's changes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Tuple


class UndefinedVal:
    """Marker object for the Orus `nil` value."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'nil'


UNDEFINED = UndefinedVal()


@dataclass(frozen=True)
class ArrayVal:
    items: Tuple[Any, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        return f"Array({list(self.items)!r})"

    def appended(self, value: Any) -> 'ArrayVal':
        return ArrayVal(self.items + (value,))


def type_name(value: Any) -> str:
    """Return the Orus type name of a runtime value."""
    if isinstance(value, float):
        return 'Number'
    if isinstance(value, str):
        return 'Text'
    if isinstance(value, ArrayVal):
        return 'Array'
    if isinstance(value, UndefinedVal):
        return 'Undefined'
    return type(value).__name__


def format_number(value: float) -> str:
    """Display text for a Number.

    Integral values print without a trailing ``.0`` so ``5 + 10`` shows as
    ``15``, the way the editor's users expect; negative zero shows as ``0``.
    Other values use the shortest text that reads back as the same double.
    """
    if math.isnan(value):
        return 'NaN'
    if math.isinf(value):
        return 'inf' if value > 0 else '-inf'
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def to_string(value: Any) -> str:
    """Convert an Orus value to its display text for printing."""
    if isinstance(value, float):
        return format_number(value)
    if isinstance(value, str):
        return value
    if isinstance(value, ArrayVal):
        return '[' + ', '.join(to_string(item) for item in value.items) + ']'
    if isinstance(value, UndefinedVal):
        return 'nil'
    return str(value)


def to_plain(value: Any) -> Any:
    """Convert a value to JSON-friendly Python data for the debug dump."""
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e16:
            return int(value)
        if math.isnan(value) or math.isinf(value):
            return format_number(value)
        return value
    if isinstance(value, ArrayVal):
        return [to_plain(item) for item in value.items]
    if isinstance(value, UndefinedVal):
        return None
    return value


def is_truthy(value: Any) -> bool:
    if isinstance(value, float):
        return value != 0.0 and not math.isnan(value)
    if isinstance(value, str):
        return len(value) > 0
    if isinstance(value, ArrayVal):
        return len(value.items) > 0
    return False


def equal_values(a: Any, b: Any) -> bool:
    """Deep structural equality; values of different types are never equal."""
    if isinstance(a, float) and isinstance(b, float):
        return a == b
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    if isinstance(a, ArrayVal) and isinstance(b, ArrayVal):
        if len(a.items) != len(b.items):
            return False
        return all(equal_values(x, y) for x, y in zip(a.items, b.items))
    if isinstance(a, UndefinedVal) and isinstance(b, UndefinedVal):
        return True
    return False


def as_integer(value: Any) -> int:
    """Return `value` as an int if it is an integral Number, else raise TypeError."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise TypeError(f"expected an integral Number, got {type_name(value)} {to_string(value)}")
