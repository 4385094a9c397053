"""
Shared fixtures for the prodrug targeting tests.
"""
import random

import pytest

from core.grid import TissueGrid
from core.vessel import Vessel


class FixedRandom(random.Random):
    """Random source whose ``random()`` always returns the same value."""

    def __init__(self, value: float):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def straight_vessel():
    """Vertical vessel wall at x=100."""
    return Vessel(base_x=100.0, slope=0.0, amplitude=0.0, freq=0.0, phase=0.0)


@pytest.fixture
def far_vessel():
    """Vessel wall beyond the grid, so every site is tissue."""
    return Vessel(base_x=1000.0, slope=0.0, amplitude=0.0, freq=0.0, phase=0.0)


@pytest.fixture
def grid():
    """10x10 lattice with spacing 18 (site x = 9, 27, ..., 171)."""
    return TissueGrid(cols=10, rows=10, spacing=18.0)


@pytest.fixture
def always_cascade():
    return FixedRandom(0.0)


@pytest.fixture
def never_cascade():
    return FixedRandom(0.99)
