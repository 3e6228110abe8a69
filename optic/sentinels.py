"""
Sentinel objects used across optic.

Sentinels:
    UNSET: An option that was not provided (distinct from an explicit None)
    NOT_FOUND: A lookup that failed, where None is a legitimate value

Both sentinels are falsy singletons compared with 'is'.

Example:
    >>> opts.merge(sample_count=UNSET) == opts
    True

    >>> if _lookup(scope, "x") is NOT_FOUND:
    ...     raise NotFoundError("x")
"""

from typing import Any

__all__ = [
    'UNSET',
    'NOT_FOUND',
    'UnsetType',
    'NotFoundType',
]


# Base Sentinel --------------------------------------------------------------------------------------------------------

class _SentinelBase:
    """
    Base class for singleton sentinels.
    """
    __slots__ = ('_name',)

    _instance: '_SentinelBase | None' = None
    _label: str = "SENTINEL"

    def __new__(cls):
        """One instance per sentinel class."""
        if cls.__dict__.get('_instance') is None:
            cls._instance = super().__new__(cls)
            cls._instance._name = cls._label
        return cls._instance

    def __repr__(self) -> str:
        return f'<{self._name}>'

    def __eq__(self, other: Any) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> tuple:
        """Unpickle to the singleton."""
        return (self.__class__, ())


# Sentinel Types -------------------------------------------------------------------------------------------------------

class UnsetType(_SentinelBase):
    """
    Sentinel type for UNSET.

    Marks an override argument that was not provided, see RenderOptions.merge().
    """
    _label = "UNSET"


class NotFoundType(_SentinelBase):
    """
    Sentinel type for NOT_FOUND.

    Returned by scope and container lookups that miss.
    """
    _label = "NOT_FOUND"


# Sentinel Instances ---------------------------------------------------------------------------------------------------

UNSET = UnsetType()
NOT_FOUND = NotFoundType()
