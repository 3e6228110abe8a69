"""
Path queries over a variable scope.

A lens picks one value out of a scope (a mapping of variable names to values)
given a query string. The default PathLens accepts a variable name followed by
subscripts, written the way they are in Python:

    foo
    foo['bar']
    foo['bar'][-1]['clang']
    foo[key]                 key is looked up in the same scope
    foo[index['a'][0]]       nested queries resolve first

Queries are parsed with ast and walked node by node; nothing is evaluated.
Only Mapping lookups and integer indexing of non-text Sequences are performed,
so a query never runs attribute access, calls, or slicing on the inspected
objects. Each step is a single lookup: cost grows with the query, not the data.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import ast
import collections.abc as abc
from typing import Any, Protocol, runtime_checkable

# Local ----------------------------------------------------------------------------------------------------------------
from .options import RenderOptions
from .render import render
from .sentinels import NOT_FOUND
from .utils import type_name

# Keys and containers in error messages are rendered small
_MESSAGE_OPTIONS = RenderOptions(scalar_truncation_size=64, scalar_sample_size=16, sample_count=2)


# Classes --------------------------------------------------------------------------------------------------------------

class ResolutionError(LookupError):
    """A query could not be resolved against a scope."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class NotFoundError(ResolutionError, KeyError):
    """A variable, key or index named by the query does not exist."""


class InvalidPathError(ResolutionError, ValueError):
    """The query is not a valid path expression."""


@runtime_checkable
class Lens(Protocol):
    """Anything that resolves a query against a scope."""

    def inspect(self, scope: abc.Mapping[str, Any], query: str) -> Any:
        """
        Return the value the query points at.

        Raises:
            NotFoundError: If the path does not exist in the scope.
            InvalidPathError: If the query is malformed.
        """
        ...


class PathLens:
    """
    Default lens: a variable name followed by Python-style subscripts.

    Example:
        >>> scope = {"foo": {"bar": ["baz", "blorg", {"clang": "pop"}]}}
        >>> PathLens().inspect(scope, "foo['bar'][-1]['clang']")
        'pop'
    """

    def inspect(self, scope: abc.Mapping[str, Any], query: str) -> Any:
        if not isinstance(query, str):
            raise TypeError(f"query must be a str, but got {type_name(query)}")
        if not query.strip():
            raise InvalidPathError("query is empty")

        try:
            tree = ast.parse(query.strip(), mode="eval")
        except SyntaxError as exc:
            raise InvalidPathError(f"malformed query {query!r}: {exc.msg}") from exc
        except (MemoryError, RecursionError, ValueError) as exc:
            # Nesting beyond the parser's stack, or NUL bytes on older interpreters
            raise InvalidPathError(f"malformed query {_clip(query)}: {type(exc).__name__}") from exc

        try:
            return self._resolve(tree.body, scope, query)
        except RecursionError as exc:
            raise InvalidPathError(f"query {_clip(query)} is nested too deeply") from exc

    def _resolve(self, node: ast.expr, scope: abc.Mapping[str, Any], query: str) -> Any:
        if isinstance(node, ast.Name):
            value = scope.get(node.id, NOT_FOUND)
            if value is NOT_FOUND:
                raise NotFoundError(f"variable {node.id!r} not found in scope")
            return value

        if isinstance(node, ast.Subscript):
            container = self._resolve(node.value, scope, query)
            key = self._key(node.slice, scope, query)
            return _lookup(container, key)

        raise InvalidPathError(f"unsupported {type(node).__name__} in query {query!r}, "
                               f"expected a name followed by [key] or [index] subscripts")

    def _key(self, node: ast.expr, scope: abc.Mapping[str, Any], query: str) -> Any:
        if isinstance(node, ast.Constant) and node.value is not Ellipsis:
            return node.value

        # Negative index literal
        if (isinstance(node, ast.UnaryOp) and isinstance(node.op, ast.USub)
                and isinstance(node.operand, ast.Constant) and isinstance(node.operand.value, int)
                and not isinstance(node.operand.value, bool)):
            return -node.operand.value

        if isinstance(node, (ast.Name, ast.Subscript)):
            return self._resolve(node, scope, query)

        raise InvalidPathError(f"unsupported subscript {type(node).__name__} in query {query!r}, "
                               f"expected a literal, a name or a nested query")


# Private Methods ------------------------------------------------------------------------------------------------------

def _lookup(container: Any, key: Any) -> Any:
    """One subscript step."""
    if isinstance(container, abc.Mapping):
        try:
            found = key in container
        except TypeError as exc:
            raise NotFoundError(f"unusable key {render(key, _MESSAGE_OPTIONS)}") from exc
        if not found:
            raise NotFoundError(f"key {render(key, _MESSAGE_OPTIONS)} not found in "
                                f"{render(container, _MESSAGE_OPTIONS)}")
        return container[key]

    if isinstance(container, abc.Sequence) and not isinstance(container, (str, bytes, bytearray)):
        if not isinstance(key, int) or isinstance(key, bool):
            raise NotFoundError(f"index must be an int, but got {render(key, _MESSAGE_OPTIONS)}")
        size = len(container)
        if not -size <= key < size:
            raise NotFoundError(f"index {key} out of range for {render(container, _MESSAGE_OPTIONS)}")
        return container[key]

    raise NotFoundError(f"cannot look up {render(key, _MESSAGE_OPTIONS)} in "
                        f"{render(container, _MESSAGE_OPTIONS)}")


def _clip(query: str) -> str:
    """Query text for error messages, cut to the message scalar limit."""
    return render(query, _MESSAGE_OPTIONS)
