"""
Tumor growth automaton.

Each healthy tissue site with n tumor neighbors turns tumor with

    prob = 1 - (1 - g) ** n,    g = growth_rate / 15000

i.e. every tumor neighbor independently attempts to invade with
probability g. Decisions for a tick are all taken against the grid as it
was at the start of the tick and applied together at the end, so a site
converted this tick cannot help convert its neighbors until the next.
"""

import random
from typing import List

from core.grid import TissueGrid
from core.vessel import Vessel

GROWTH_SCALE = 15000.0
GROWN_SIZE_MIN = 6.0
GROWN_SIZE_SPAN = 10.0


def per_neighbor_probability(growth_rate: float) -> float:
    """Invasion probability contributed by a single tumor neighbor."""
    return max(0.0, float(growth_rate)) / GROWTH_SCALE


def growth_probability(growth_rate: float, n_neighbors: int) -> float:
    """Probability that a healthy site with n tumor neighbors converts."""
    if n_neighbors < 0 or n_neighbors > 8:
        raise ValueError("n_neighbors must be in [0, 8]")
    if n_neighbors == 0:
        return 0.0
    g = min(1.0, per_neighbor_probability(growth_rate))
    return 1.0 - (1.0 - g) ** n_neighbors


def grow_tumor(
    grid: TissueGrid,
    vessel: Vessel,
    growth_rate: float,
    rng: random.Random,
) -> List[int]:
    """Advance the growth automaton by one tick.

    Returns:
        Indices of the sites converted this tick.
    """
    converted = []
    for site in grid.sites:
        if site.is_tumor or vessel.is_inside(site.x, site.y):
            continue
        n = grid.neighbor_count(site.index)
        if n == 0:
            continue
        if rng.random() < growth_probability(growth_rate, n):
            converted.append(site.index)

    for idx in converted:
        grid.make_tumor(idx, GROWN_SIZE_MIN + rng.random() * GROWN_SIZE_SPAN)
    return converted
