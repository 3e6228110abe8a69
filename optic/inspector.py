"""
Production safe variable inspector.

Optic looks into a live call stack frame, picks a value out of it with a path
query, and summarizes that value into a short bounded string fit for a log line:

    >>> from optic.inspector import Optic
    >>> def handler():
    ...     foo = {"bar": ["baz", "blorg", {"clang": "pop"}]}
    ...     optic = Optic()
    ...     return [optic.inspect("foo"),
    ...             optic.inspect("foo['bar']"),
    ...             optic.inspect("foo['bar'][-1]['clang']")]
    >>> handler()
    ['dict: {bar => list} (1 keys)', 'list: [baz, blorg, dict] (len 3)', 'pop (len 3)']

Nothing in the inspected program is modified or evaluated, and the summary costs
the same whether the value holds ten items or ten million.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging
import sys
from collections import ChainMap
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .lens import Lens, PathLens, ResolutionError
from .options import RenderOptions
from .render import render
from .sentinels import UNSET, UnsetType
from .utils import type_name

logger = logging.getLogger(__name__)


# Classes --------------------------------------------------------------------------------------------------------------

class Optic:
    """
    Inspect variables of a calling scope by path query.

    Args:
        uplevel: Which frame to look into. 1 is the frame that calls inspect(), 2 its
            caller, and so on. Default: 1.
        options: Render limits. Default: RenderOptions().
        lens: Query resolver. Default: PathLens().
        scalar_truncation_size: Override of options.scalar_truncation_size.
        scalar_sample_size: Override of options.scalar_sample_size.
        sample_count: Override of options.sample_count.

    Raises:
        TypeError: If uplevel is not an int, or lens does not implement Lens.
        ValueError: If uplevel is less than 1.
        ConfigurationError: If a render limit is not positive.
    """

    def __init__(self,
                 uplevel: int = 1,
                 *,
                 options: RenderOptions | None = None,
                 lens: Lens | None = None,
                 scalar_truncation_size: int | UnsetType = UNSET,
                 scalar_sample_size: int | UnsetType = UNSET,
                 sample_count: int | UnsetType = UNSET,
                 ):
        if not isinstance(uplevel, int) or isinstance(uplevel, bool):
            raise TypeError(f"uplevel must be an int, but got {type_name(uplevel)}")
        if uplevel < 1:
            raise ValueError(f"uplevel must be 1 or greater, but got {uplevel!r}")

        options = options if options is not None else RenderOptions()
        if not isinstance(options, RenderOptions):
            raise TypeError(f"options must be a RenderOptions instance, but got {type_name(options)}")

        lens = lens if lens is not None else PathLens()
        if not isinstance(lens, Lens):
            raise TypeError(f"lens must provide inspect(scope, query), but got {type_name(lens)}")

        self.uplevel = uplevel
        self.options = options.merge(
            scalar_truncation_size=scalar_truncation_size,
            scalar_sample_size=scalar_sample_size,
            sample_count=sample_count,
        )
        self.lens = lens

    def __repr__(self) -> str:
        return f"Optic(uplevel={self.uplevel}, options={self.options!r}, lens={type_name(self.lens)})"

    def inspect(self, query: str) -> str:
        """
        Resolve query in the scope uplevel frames above this call and summarize the result.

        The scope holds the frame's local variables, falling back to its module globals.

        Raises:
            NotFoundError: If the variable or a key/index along the path does not exist.
            InvalidPathError: If the query is malformed.
            IndexError: If the call stack is not deep enough for uplevel.
        """
        try:
            frame = sys._getframe(self.uplevel)
        except ValueError as exc:
            raise IndexError(f"call stack is not deep enough to access frame at uplevel {self.uplevel}") from exc

        try:
            scope = ChainMap(frame.f_locals, frame.f_globals)
        finally:
            del frame

        try:
            full_picture = self.lens.inspect(scope, query)
        except ResolutionError as exc:
            logger.debug("query %r not resolved: %s", query, exc)
            raise
        return self.fit_to_view(full_picture)

    def fit_to_view(self, subject: Any) -> str:
        """
        Summarize subject with this optic's limits.

        Example:
            >>> Optic().fit_to_view(['a', 'b', {'foo': 'bar'}, ['blorg']])
            'list: [a, b, dict, list] (len 4)'
        """
        return render(subject, self.options)
