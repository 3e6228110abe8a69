"""
Shape classification driving renderer dispatch.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from enum import StrEnum, unique
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .values import Function, ListLike, MapLike, Nil, Opaque, Pattern, Scalar, ScalarRef, Value, to_value


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class Category(StrEnum):
    """Renderer category of a value."""
    DIRECT_SCALAR = "direct_scalar"
    LIST_LIKE = "list_like"
    MAP_LIKE = "map_like"
    CALLABLE = "callable"
    OPAQUE = "opaque"


_CATEGORIES: dict[type, Category] = {
    Nil: Category.DIRECT_SCALAR,
    Scalar: Category.DIRECT_SCALAR,
    ScalarRef: Category.DIRECT_SCALAR,
    Pattern: Category.DIRECT_SCALAR,
    ListLike: Category.LIST_LIKE,
    MapLike: Category.MAP_LIKE,
    Function: Category.CALLABLE,
    Opaque: Category.OPAQUE,
}


# Methods --------------------------------------------------------------------------------------------------------------

def classify(value: Any) -> Category:
    """
    Assign a value to exactly one renderer category.

    Looks only at the type of the value itself, never at its children. Live objects
    are mapped with to_value() first. Subclasses of the Value shapes are resolved
    through their MRO; anything unknown is OPAQUE.

    Examples:
        >>> classify(None)
        <Category.DIRECT_SCALAR: 'direct_scalar'>

        >>> classify({"a": [1, 2]})
        <Category.MAP_LIKE: 'map_like'>
    """
    val: Value = to_value(value)
    for cls in type(val).__mro__:
        category = _CATEGORIES.get(cls)
        if category is not None:
            return category
    return Category.OPAQUE
