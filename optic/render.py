"""
Bounded, human-readable rendering of arbitrary values.

render() turns any value into a one-line summary whose size and cost depend only
on the RenderOptions limits, never on the size of the value: long text is sliced
before display, containers are sampled with islice(), and children are shown by
their type tag instead of being expanded. The result is meant for log lines and
traces read by humans; it is not a serialization format.

Output formats:
    (undef)                                                 None / Nil
    "" (len 0)                                              empty text
    blorg (len 5)                                           short text
    abc... (truncated to len 3; len 5)                      long text
    Pattern ^a+$ (len 4)                                    tagged scalar
    list: [baz, blorg, dict] (len 3)                        list-like sample
    dict: {a => 1, b => list ...} (9 keys)                  map-like sample
    function: sub f { ... } (L3-7 in pkg.mod (/src/mod.py)) callable
    socket: (no sample)                                     anything else
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging
from itertools import islice
from typing import Any, Callable

# Local ----------------------------------------------------------------------------------------------------------------
from .classify import Category, classify
from .options import RenderOptions
from .utils import type_name, type_tag
from .values import Function, ListLike, MapLike, Nil, Scalar, Text, Value, to_value

logger = logging.getLogger(__name__)

UNDEF = "(undef)"
ELLIPSIS = "..."
MORE = " ..."
NO_SAMPLE = "(no sample)"

_DEFAULT_OPTIONS = RenderOptions()


# Methods --------------------------------------------------------------------------------------------------------------

def render(value: Any, options: RenderOptions | None = None) -> str:
    """
    Render any value into a short, bounded summary string.

    Never fails on the value: shapes that cannot be sampled, and objects that raise
    while being sampled, degrade to the '<tag>: (no sample)' form.

    Args:
        value: A Value shape or any live Python object.
        options: Size limits. Defaults to RenderOptions().

    Returns:
        The summary string.

    Raises:
        TypeError: If options is not a RenderOptions instance.

    Examples:
        >>> render("blorg")
        'blorg (len 5)'

        >>> render(None)
        '(undef)'

        >>> render(["a"] * 7)
        'list: [a, a, a, a ...] (len 7)'

        >>> render({"bar": ["baz"]})
        'dict: {bar => list} (1 keys)'
    """
    if options is None:
        options = _DEFAULT_OPTIONS
    elif not isinstance(options, RenderOptions):
        raise TypeError(f"options must be a RenderOptions instance, but got {type_name(options)}")

    val = to_value(value)
    renderer = _RENDERERS[classify(val)]
    try:
        return renderer(val, options)
    except Exception as exc:
        # Hostile __len__, __iter__, __getitem__ or __str__ in a sampled container
        logger.debug("sampling %s failed with %s, no sample taken", val.type_tag, type_tag(exc))
        return _render_opaque(val, options)


# Private Methods ------------------------------------------------------------------------------------------------------

def _render_scalar(val: Value, opt: RenderOptions) -> str:
    if isinstance(val, Nil):
        return UNDEF

    text = val.text
    tag = f"{val.type_tag} " if val.type_tag else ""
    size = len(text)
    if size == 0:
        return f'{tag}"" (len 0)'

    limit = opt.scalar_truncation_size
    if size <= limit:
        return f"{tag}{_as_str(text)} (len {size})"
    return f"{tag}{_as_str(text[:limit])}{ELLIPSIS} (truncated to len {limit}; len {size})"


def _render_list(val: ListLike, opt: RenderOptions) -> str:
    items = val.items
    total = len(items)
    shown = min(opt.sample_count, total)

    chunks = [_sample_chunk(child, opt) for child in islice(items, shown)]
    more = MORE if total > shown else ""
    return f"{val.type_tag}: [{', '.join(chunks)}{more}] (len {total})"


def _render_map(val: MapLike, opt: RenderOptions) -> str:
    mapping = val.items
    total = len(mapping)
    shown = min(opt.sample_count, total)

    pairs = [
        f"{_sample_chunk(key, opt)} => {_sample_chunk(child, opt)}"
        for key, child in islice(mapping.items(), shown)
    ]
    more = MORE if total > shown else ""
    return f"{val.type_tag}: {{{', '.join(pairs)}{more}}} ({total} keys)"


def _render_function(val: Function, opt: RenderOptions) -> str:
    return (f"{val.type_tag}: sub {val.name} {{ ... }} "
            f"(L{val.start_line}-{val.end_line} in {val.owner} ({val.source_location}))")


def _render_opaque(val: Value, opt: RenderOptions) -> str:
    return f"{val.type_tag}: {NO_SAMPLE}"


def _sample_chunk(child: Any, opt: RenderOptions) -> str:
    """One child of a container: plain text is trimmed, anything else shows its tag."""
    val = to_value(child)
    if isinstance(val, Nil):
        return UNDEF
    if isinstance(val, Scalar):
        return _trim(val.text, opt.scalar_sample_size)
    return val.type_tag


def _trim(text: Text, size: int) -> str:
    """Keep at most size units of text, ellipsis appended only if something was cut."""
    chunk = text[:size]
    if len(chunk) < len(text):
        return _as_str(chunk) + ELLIPSIS
    return _as_str(chunk)


def _as_str(text: Text) -> str:
    if isinstance(text, str):
        return text
    return text.decode("utf-8", "backslashreplace")


_RENDERERS: dict[Category, Callable[[Any, RenderOptions], str]] = {
    Category.DIRECT_SCALAR: _render_scalar,
    Category.LIST_LIKE: _render_list,
    Category.MAP_LIKE: _render_map,
    Category.CALLABLE: _render_function,
    Category.OPAQUE: _render_opaque,
}
