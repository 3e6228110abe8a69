"""
Closed set of value shapes understood by the renderer.

Live Python objects are mapped onto these shapes by to_value(). The mapping looks
only at the object's own type: containers are wrapped, never iterated or copied,
and text is kept as-is so the renderer can slice it before anything else.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
import ctypes
import datetime as dt
import enum
import logging
import numbers
import pathlib
import re
import sys
import uuid
import weakref
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .utils import type_name, type_tag

logger = logging.getLogger(__name__)

TEXT_TYPES = (str, bytes, bytearray)

# Flat values with a short, meaningful str()
SCALAR_TYPES = (
    numbers.Number,  # bool, int, float, complex, Decimal, Fraction, numpy scalars
    enum.Enum,
    dt.date,  # datetime is a date subclass
    dt.time,
    dt.timedelta,
    uuid.UUID,
    pathlib.PurePath,
)

Text = str | bytes | bytearray

# Numbers whose digits take more memory than this are not converted with str()
MAX_NUMBER_BYTES = 4096

# ctypes type codes of c_char_p, c_wchar_p and c_void_p
_POINTER_CODES = ("z", "Z", "P")


# Classes --------------------------------------------------------------------------------------------------------------

class Value:
    """Base of all value shapes. Every shape carries a type_tag."""
    type_tag: str = ""


@dataclass(frozen=True)
class Nil(Value):
    """Absence of a value."""


@dataclass(frozen=True)
class _TextValue(Value):
    """Shared validation of the text-holding shapes."""
    text: Text

    def __post_init__(self):
        if not isinstance(self.text, TEXT_TYPES):
            raise TypeError(f"{type(self).__name__}.text must be str, bytes or bytearray, "
                            f"but got {type_name(self.text)}")


@dataclass(frozen=True)
class Scalar(_TextValue):
    """A flat textual or numeric value, numbers given as their str() text. Never tagged."""
    type_tag: str = field(default="", init=False)


@dataclass(frozen=True)
class ScalarRef(_TextValue):
    """A reference to a flat value, already dereferenced once."""
    type_tag: str = "ref"


@dataclass(frozen=True)
class Pattern(_TextValue):
    """A compiled pattern, displayed by its source text."""
    type_tag: str = "Pattern"


@dataclass(frozen=True)
class ListLike(Value):
    """
    An ordered collection of children.

    Children may be Values or live objects; they are converted one by one, and only
    the sampled ones. Any sized iterable is accepted, sets and dict views included,
    in which case "first" means first in native iteration order.
    """
    items: abc.Collection
    type_tag: str = "list"


@dataclass(frozen=True)
class MapLike(Value):
    """
    A mapping of keys to children.

    Iteration order is the mapping's native order; no stable order is promised.
    """
    items: abc.Mapping
    type_tag: str = "dict"


@dataclass(frozen=True)
class Function(Value):
    """Identifying metadata of a function-like value. The body is never rendered."""
    name: str
    start_line: int
    end_line: int
    owner: str
    source_location: str
    type_tag: str = "function"


@dataclass(frozen=True)
class Opaque(Value):
    """Any reference not otherwise understood. Only its type tag is known."""
    type_tag: str = "object"


NIL = Nil()


# Methods --------------------------------------------------------------------------------------------------------------

def to_value(obj: Any) -> Value:
    """
    Map a live Python object onto a Value shape.

    Constant time: containers are wrapped without iterating them, text is kept
    without copying.

    Mapping:
        - Value instances are returned unchanged
        - None → Nil
        - str, bytes, bytearray → Scalar holding the original text
        - numbers, enums, dates and times, UUIDs, paths → Scalar(str(obj))
        - re.Pattern → Pattern
        - fixed-size ctypes simple data and live weak references to a scalar → ScalarRef
        - ctypes pointers → Opaque, never followed
        - dead weak references and NULL ctypes pointers → Nil
        - Mapping → MapLike
        - non-text Sequence, Set, dict views → ListLike
        - functions and methods → Function
        - anything else → Opaque

    Objects whose str() fails, numbers larger than MAX_NUMBER_BYTES, and callables
    without code metadata become Opaque.

    Examples:
        >>> to_value("blorg")
        Scalar(text='blorg', type_tag='')

        >>> to_value(3.5)
        Scalar(text='3.5', type_tag='')

        >>> to_value(open)
        Opaque(type_tag='builtin_function_or_method')
    """
    if isinstance(obj, Value):
        return obj
    if obj is None:
        return NIL
    if isinstance(obj, TEXT_TYPES):
        return Scalar(obj)
    if isinstance(obj, SCALAR_TYPES):
        return _from_scalar(obj)
    if isinstance(obj, re.Pattern):
        return Pattern(obj.pattern, type_tag=type_tag(obj))
    if isinstance(obj, (weakref.ref, ctypes._SimpleCData)):
        return _from_reference(obj)
    if isinstance(obj, abc.Mapping):
        return MapLike(obj, type_tag=type_tag(obj))
    if isinstance(obj, (abc.Sequence, abc.Set, abc.MappingView)):
        return ListLike(obj, type_tag=type_tag(obj))
    if callable(obj) and not isinstance(obj, type):
        return _from_callable(obj)
    return Opaque(type_tag(obj))


# Private Methods ------------------------------------------------------------------------------------------------------

def _from_scalar(obj: Any) -> Value:
    if _too_large(obj):
        logger.debug("%s is larger than %d bytes, no sample taken", type_tag(obj), MAX_NUMBER_BYTES)
        return Opaque(type_tag(obj))
    try:
        return Scalar(str(obj))
    except Exception as exc:
        # Broken __str__, or int too large for str() conversion
        logger.debug("str() of %s failed with %s, no sample taken", type_tag(obj), type_tag(exc))
        return Opaque(type_tag(obj))


def _too_large(obj: Any) -> bool:
    """True if str(obj) would walk more than MAX_NUMBER_BYTES of digits."""
    if isinstance(obj, (numbers.Integral, Decimal)):
        parts = (obj,)
    elif isinstance(obj, numbers.Rational):
        parts = (obj.numerator, obj.denominator)
    else:
        return False
    return any(sys.getsizeof(part) > MAX_NUMBER_BYTES for part in parts)


def _from_reference(ref: Any) -> Value:
    """
    Dereference exactly once.

    Pointer types (c_char_p, c_wchar_p, c_void_p) are never followed: their .value
    reads memory at an arbitrary address and copies it up to the first NUL. Only the
    pointer's own bytes are checked, a NULL pointer being Nil.
    """
    tag = type_tag(ref)
    if getattr(type(ref), "_type_", None) in _POINTER_CODES:
        return Opaque(tag) if ref else NIL
    try:
        target = ref() if isinstance(ref, weakref.ref) else ref.value
    except Exception as exc:
        logger.debug("dereferencing %s failed with %s, no sample taken", tag, type_tag(exc))
        return Opaque(tag)

    if target is None:
        return NIL
    if isinstance(target, TEXT_TYPES):
        return ScalarRef(target, type_tag=tag)
    if isinstance(target, SCALAR_TYPES):
        scalar = _from_scalar(target)
        if isinstance(scalar, Scalar):
            return ScalarRef(scalar.text, type_tag=tag)
    return Opaque(tag)


def _from_callable(obj: Any) -> Value:
    tag = type_tag(obj)
    func = getattr(obj, "__func__", obj)  # unwrap bound methods
    try:
        code = func.__code__
        start_line = code.co_firstlineno
        end_line = max((line for _, _, line in code.co_lines() if line is not None), default=start_line)
        return Function(
            name=getattr(func, "__qualname__", None) or func.__name__,
            start_line=start_line,
            end_line=max(start_line, end_line),
            owner=func.__module__ or "?",
            source_location=code.co_filename,
            type_tag=tag,
        )
    except Exception as exc:
        logger.debug("no code metadata for %s (%s), no sample taken", tag, type_tag(exc))
        return Opaque(tag)
