#
# Pytest Fixtures
#

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from optic.options import RenderOptions


# Classes --------------------------------------------------------------------------------------------------------------

class ExplodingSequence(abc.Sequence):
    """A sequence whose every access raises."""

    def __len__(self):
        raise RuntimeError("len exploded")

    def __getitem__(self, index):
        raise RuntimeError("getitem exploded")


class ExplodingMapping(abc.Mapping):
    """A mapping that reports a size but fails on iteration."""

    def __len__(self):
        return 3

    def __iter__(self):
        raise RuntimeError("iter exploded")

    def __getitem__(self, key):
        raise KeyError(key)


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture
def tiny_options() -> RenderOptions:
    """Small limits that make truncation and sampling visible in short inputs."""
    return RenderOptions(scalar_truncation_size=8, scalar_sample_size=3, sample_count=2)


@pytest.fixture
def exploding_sequence() -> ExplodingSequence:
    return ExplodingSequence()


@pytest.fixture
def exploding_mapping() -> ExplodingMapping:
    return ExplodingMapping()
