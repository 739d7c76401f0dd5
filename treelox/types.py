"""Runtime values for treelox.

A treelox value is one of four kinds, mapped onto Python objects:

* Number  -> ``float``
* String  -> ``str``
* Boolean -> ``bool``
* Nil     -> the ``NIL`` singleton

All four are immutable, so values can be shared freely; there is no
reference identity visible to programs. This module also holds the
language-level rules that only depend on values: display strings,
truthiness and equality.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Union


@dataclass(frozen=True)
class NilVal:
    """Marker object for the treelox ``nil`` value."""

    def __repr__(self) -> str:
        return 'nil'


NIL = NilVal()

Value = Union[float, str, bool, NilVal]


def type_name(value: Any) -> str:
    """Return the treelox type name of a runtime value."""
    # bool first: it is a subclass of int, and must not read as a number
    if isinstance(value, bool):
        return 'Boolean'
    if isinstance(value, float):
        return 'Number'
    if isinstance(value, str):
        return 'String'
    if isinstance(value, NilVal):
        return 'Nil'
    return type(value).__name__


def to_string(value: Any) -> str:
    """Convert a value to the text that ``print`` shows for it.

    Numbers use the shortest decimal form that reads back to the same
    float, minus a trailing ``.0`` so integral values print as ``3``.
    Exponent notation is spelled out in full (``1e+21`` prints as
    ``1000000000000000000000``) since the scanner only reads plain decimals.
    Strings are shown without quotes.
    """
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        text = repr(value)
        if 'e' in text:
            text = format(Decimal(text), 'f')
        if text.endswith('.0'):
            text = text[:-2]
        return text
    if isinstance(value, str):
        return value
    if isinstance(value, NilVal):
        return 'nil'
    return str(value)


def is_truthy(value: Any) -> bool:
    """``false`` and ``nil`` are falsy; everything else, 0 and "" included, is truthy."""
    if isinstance(value, NilVal):
        return False
    if isinstance(value, bool):
        return value
    return True


def values_equal(a: Any, b: Any) -> bool:
    """Structural equality. Values of different kinds are never equal."""
    if type(a) is not type(b):
        return False
    return a == b
