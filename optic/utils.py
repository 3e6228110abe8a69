"""
Optic utilities shared across the package.

Contains helpers used by multiple modules to avoid circular imports.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any


# Methods --------------------------------------------------------------------------------------------------------------


def type_tag(obj: Any, fully_qualified: bool = False) -> str:
    """
    Get a short type label for an object, used in place of its contents.

    The tag is the name of the object's class, so a class object is tagged 'type'.
    It never touches the object's contents, so it is safe and O(1) for arbitrarily
    large containers and for objects with broken __repr__.

    Parameters:
        obj (Any): Any object.
        fully_qualified (bool): If true, prefix non-builtin names with their module.

    Returns:
        str: The type tag.

    Examples:
        >>> type_tag([1, 2, 3])
        'list'

        >>> type_tag({"a": 1})
        'dict'

        >>> import collections
        >>> type_tag(collections.OrderedDict(), fully_qualified=True)
        'collections.OrderedDict'
    """
    cls = type(obj)
    name = getattr(cls, "__qualname__", None) or cls.__name__

    if fully_qualified and cls.__module__ not in ("builtins", None):
        return f"{cls.__module__}.{name}"
    return name


def type_name(obj: Any) -> str:
    """Type label of an object for error messages, never its value."""
    return f"<{type_tag(obj, fully_qualified=True)}>"
