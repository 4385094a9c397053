"""
Kill-cascade interaction between drug particles and tumor sites.

  - A leached compound touching a tumor site kills it and splits into
    exactly four cytotoxic particles, which are spread round-robin over
    the site's tumor neighbors.
  - A cytotoxic particle touching its target kills it (and the site its
    parent compound entered), then may cascade into one more neighbor.
  - Every cascade step succeeds with a fixed chance (30% by default).

Particles created here are collected in a ``spawned`` list and only
join the simulation after the current pass, via ``admit``.
"""

import math
import random
from typing import List, Optional

from core.grid import TissueGrid
from core.particle import Compound, Cytotoxic, MotionMode, Particle
from core.vessel import Vessel, normalized
from .parameter_profiles import SimulationConfig


def cascade_kill(grid: TissueGrid, index: int, rng: random.Random, chance: float) -> Optional[int]:
    """With probability ``chance``, kill one random tumor neighbor of a site.

    Returns:
        Index of the killed neighbor, or None.
    """
    neighbors = grid.tumor_neighbor_indices(index)
    if not neighbors or rng.random() >= chance:
        return None
    pick = neighbors[rng.randrange(len(neighbors))]
    return pick if grid.kill(pick) else None


def first_contact(grid: TissueGrid, x: float, y: float, padding: float) -> Optional[int]:
    """Lowest-index tumor site within ``size + padding`` of a point."""
    for site in grid.sites:
        if site.is_tumor and math.hypot(site.x - x, site.y - y) <= site.size + padding:
            return site.index
    return None


def split_compound(
    compound: Compound,
    contact: int,
    grid: TissueGrid,
    config: SimulationConfig,
    rng: random.Random,
    spawned: List[Particle],
) -> int:
    """Kill the contacted site and release the cytotoxic payload.

    Returns:
        Number of tumor sites killed.
    """
    site = grid[contact]
    kills = int(grid.kill(contact))
    neighbors = grid.tumor_neighbor_indices(contact)

    for k in range(config.split_count):
        rx = site.x + (rng.random() - 0.5) * site.size * 0.45
        ry = site.y + (rng.random() - 0.5) * site.size * 0.45
        speed = 0.9 + rng.random() * 0.4

        if neighbors:
            t_idx = neighbors[k % len(neighbors)]
            target = grid[t_idx]
            if target.is_tumor:
                grid.kill(t_idx)
                jitter_x = (rng.random() - 0.5) * target.size * 0.4
                jitter_y = (rng.random() - 0.5) * target.size * 0.4
                kills += 1
                if cascade_kill(grid, t_idx, rng, config.cascade_chance) is not None:
                    kills += 1
                spawned.append(Cytotoxic(
                    x=target.x + jitter_x,
                    y=target.y + jitter_y,
                    ttl=config.idle_cytotoxic_ttl,
                    mode=MotionMode.IDLE,
                    parent_index=contact,
                ))
            else:
                particle = Cytotoxic(
                    x=rx,
                    y=ry,
                    ttl=config.seeking_cytotoxic_ttl,
                    target_index=t_idx,
                    parent_index=contact,
                )
                particle.set_velocity(normalized(target.x - rx, target.y - ry), speed)
                spawned.append(particle)
            continue

        best = grid.nearest_tumor_index(rx, ry)
        if best is not None:
            target = grid[best]
            particle = Cytotoxic(
                x=rx,
                y=ry,
                ttl=config.seeking_cytotoxic_ttl,
                target_index=best,
                parent_index=contact,
            )
            particle.set_velocity(normalized(target.x - rx, target.y - ry), speed)
            spawned.append(particle)
        else:
            spawned.append(Cytotoxic(
                x=rx,
                y=ry,
                ttl=config.idle_cytotoxic_ttl,
                mode=MotionMode.IDLE,
                parent_index=contact,
            ))

    compound.dead = True
    return kills


def resolve_contacts(
    particle: Particle,
    grid: TissueGrid,
    config: SimulationConfig,
    rng: random.Random,
    spawned: List[Particle],
) -> int:
    """Apply contact effects for one live particle.

    Returns:
        Number of tumor sites killed.
    """
    if particle.dead:
        return 0

    if isinstance(particle, Compound):
        if not particle.leached:
            return 0
        contact = first_contact(grid, particle.x, particle.y, config.compound_contact_padding)
        if contact is None:
            return 0
        return split_compound(particle, contact, grid, config, rng, spawned)

    if particle.target_index is not None:
        target = grid[particle.target_index]
        if not target.is_tumor:
            particle.dead = True
            return 0
        if math.hypot(target.x - particle.x, target.y - particle.y) > target.size + config.cytotoxic_contact_padding:
            return 0
        kills = int(grid.kill(particle.target_index))
        parent = getattr(particle, "parent_index", None)
        if parent is not None and grid.kill(parent):
            kills += 1
        if cascade_kill(grid, particle.target_index, rng, config.cascade_chance) is not None:
            kills += 1
        particle.dead = True
        return kills

    contact = first_contact(grid, particle.x, particle.y, config.cytotoxic_contact_padding)
    if contact is None:
        return 0
    kills = int(grid.kill(contact))
    if cascade_kill(grid, contact, rng, config.cascade_chance) is not None:
        kills += 1
    particle.dead = True
    return kills


def admit(particles: List[Particle], spawned: List[Particle], cap: int) -> List[Particle]:
    """Append as much of a new batch as fits under the particle cap."""
    allowed = max(0, cap - len(particles))
    return particles + spawned[:allowed]


def wall_contact_kill(
    grid: TissueGrid,
    vessel: Vessel,
    x: float,
    y: float,
    drug_amount: float,
    rng: random.Random,
    radius: float = 26.0,
) -> List[int]:
    """Kill a tumor site near a point on the vessel wall.

    A random tumor site outside the vessel within ``radius`` of (x, y) is
    killed; each of its tumor neighbors then dies with probability
    ``drug_amount / 200``.

    Returns:
        Indices of all sites killed.
    """
    nearby = [
        s.index for s in grid.sites
        if s.is_tumor
        and not vessel.is_inside(s.x, s.y)
        and math.hypot(s.x - x, s.y - y) <= radius
    ]
    if not nearby:
        return []

    hit = nearby[rng.randrange(len(nearby))]
    grid.kill(hit)
    killed = [hit]
    extra_chance = max(0.0, drug_amount) / 200.0
    for n in grid.tumor_neighbor_indices(hit):
        if rng.random() < extra_chance:
            grid.kill(n)
            killed.append(n)
    return killed
