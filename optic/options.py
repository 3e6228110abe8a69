"""
Size limits for bounded rendering.

A RenderOptions instance is immutable and safe to share between threads and
across any number of render() calls.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass, fields

# Local ----------------------------------------------------------------------------------------------------------------
from .sentinels import UNSET, UnsetType
from .utils import type_name

DEFAULT_SCALAR_TRUNCATION_SIZE = 256
DEFAULT_SCALAR_SAMPLE_SIZE = 64
DEFAULT_SAMPLE_COUNT = 4


# Classes --------------------------------------------------------------------------------------------------------------

class ConfigurationError(ValueError):
    """A render limit is zero or negative."""


@dataclass(frozen=True)
class RenderOptions:
    """
    Size limits applied by render().

    Attributes:
        scalar_truncation_size: Max length of a standalone scalar before it is
            truncated. Default: 256.
        scalar_sample_size: Max length of each scalar child (key or element) shown
            in a container sample. Default: 64.
        sample_count: Max number of elements or keys shown in a container sample.
            Default: 4.

    Lengths are len() units of the rendered text: characters for str, bytes for
    bytes and bytearray.

    Example:
        >>> opts = RenderOptions(sample_count=2)
        >>> opts.merge(scalar_sample_size=8)
        RenderOptions(scalar_truncation_size=256, scalar_sample_size=8, sample_count=2)

    Raises:
        TypeError: If a limit is not an int.
        ConfigurationError: If a limit is zero or negative.
    """
    scalar_truncation_size: int = DEFAULT_SCALAR_TRUNCATION_SIZE
    scalar_sample_size: int = DEFAULT_SCALAR_SAMPLE_SIZE
    sample_count: int = DEFAULT_SAMPLE_COUNT

    def __post_init__(self):
        """Validate limits"""
        for f in fields(self):
            val = getattr(self, f.name)
            # bool is an int subclass but never a meaningful limit
            if not isinstance(val, int) or isinstance(val, bool):
                raise TypeError(f"RenderOptions.{f.name} must be an int, but got {type_name(val)}")
            if val <= 0:
                raise ConfigurationError(f"RenderOptions.{f.name} must be > 0, but got {val!r}")

    def merge(self,
              scalar_truncation_size: int | UnsetType = UNSET,
              scalar_sample_size: int | UnsetType = UNSET,
              sample_count: int | UnsetType = UNSET,
              ) -> "RenderOptions":
        """
        Create a new RenderOptions with the given limits overridden.

        Limits not provided (UNSET) are inherited from the current instance.
        """
        return RenderOptions(
            scalar_truncation_size=(self.scalar_truncation_size
                                    if scalar_truncation_size is UNSET else scalar_truncation_size),
            scalar_sample_size=self.scalar_sample_size if scalar_sample_size is UNSET else scalar_sample_size,
            sample_count=self.sample_count if sample_count is UNSET else sample_count,
        )
