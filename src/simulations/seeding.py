"""
Initial tumor seeding.

A single connected cluster is grown from one origin site by a
randomized breadth-first expansion. Sites inside the vessel act as a
wall: they are never converted and the expansion does not pass through
them, so the cluster stays 8-connected and entirely in tissue.
"""

import random
from collections import deque
from typing import Optional, Tuple

from core.grid import TissueGrid, round_half_up
from core.vessel import Vessel

SEED_SIZE_MIN = 12.0
SEED_SIZE_SPAN = 10.0
MAX_SEED_SITES = 45


def seed_target_count(start_percent: float) -> int:
    """Sites to seed for a percentage in [0, 100]; never fewer than 3."""
    pct = max(0.0, min(100.0, float(start_percent)))
    return max(3, round_half_up(pct / 100.0 * MAX_SEED_SITES))


def default_origin(grid: TissueGrid, vessel: Vessel, rng: random.Random) -> Tuple[float, float]:
    """A point near mid-height, three lattice spacings into tissue from the wall."""
    yc = grid.height * (0.35 + rng.random() * 0.3)
    xc = max(grid.spacing, vessel.boundary_x(yc) - grid.spacing * 3)
    return (xc, yc)


def seed_cluster(
    grid: TissueGrid,
    vessel: Vessel,
    start_percent: float,
    rng: random.Random,
    origin: Optional[Tuple[float, float]] = None,
) -> int:
    """Reset the grid and seed one connected tumor cluster.

    Args:
        grid: Tissue grid, reset to all-healthy first.
        vessel: Vessel whose interior is excluded.
        start_percent: Seeding density in [0, 100].
        rng: Random source.
        origin: Point to grow from. Defaults to ``default_origin``.

    Returns:
        Number of sites seeded. Lower than the target only when the
        reachable tissue around the origin is exhausted.
    """
    grid.reset()
    target = seed_target_count(start_percent)

    if origin is None:
        origin = default_origin(grid, vessel, rng)
    start = grid.nearest_index(*origin)
    if start is None:
        start = len(grid) // 2

    queue = deque([start])
    seen = {start}
    seeded = 0
    while queue and seeded < target:
        idx = queue.popleft()
        site = grid[idx]
        if vessel.is_inside(site.x, site.y):
            continue
        if not site.is_tumor:
            grid.make_tumor(idx, SEED_SIZE_MIN + rng.random() * SEED_SIZE_SPAN)
            seeded += 1

        neighbors = grid.neighbor_indices(idx)
        rng.shuffle(neighbors)
        for n in neighbors:
            if n not in seen:
                seen.add(n)
                queue.append(n)

    return seeded
