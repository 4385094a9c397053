"""
Particle transport and targeting.

Per tick, every particle:
  1. ages by one tick (expiring at zero),
  2. re-steers toward its target once in tissue,
  3. moves by its velocity,
  4. if still in the vessel, either leaches through the wall or is
     re-aligned with the flow (blended toward its target if it has one),
  5. may be diluted away if it is a wandering compound,
  6. dies if it has left the canvas.

There is no obstacle avoidance: targeting is a pure seek toward the
goal, mixed with the flow only while the particle is still confined to
the vessel.
"""

import math
import random
from typing import List, Optional

from core.grid import TissueGrid, round_half_up
from core.particle import Compound, Cytotoxic, MotionMode, Particle
from core.vessel import Vessel, normalized
from .parameter_profiles import SimulationConfig, SimulationInputs


def leech_speed(config: SimulationConfig, drug_amount: float) -> float:
    """Speed of particles moving through tissue."""
    return config.leech_speed * (1 + drug_amount / 120.0)


def flow_speed(config: SimulationConfig, drug_amount: float) -> float:
    """Speed of untargeted particles carried by the vessel flow."""
    return config.vessel_speed * (1 + drug_amount / 80.0)


def _live_target(particle: Particle, grid: TissueGrid):
    if particle.target_index is None:
        return None
    site = grid[particle.target_index]
    return site if site.is_tumor else None


def _steer_at(particle: Particle, site, speed: float):
    particle.set_velocity(normalized(site.x - particle.x, site.y - particle.y), speed)


def _resteer(particle: Particle, grid: TissueGrid, speed: float):
    """Step 2: keep leached particles pointed at a live target."""
    if particle.mode == MotionMode.IDLE or particle.target_index is None:
        return

    if isinstance(particle, Cytotoxic):
        target = _live_target(particle, grid)
        if target is not None:
            _steer_at(particle, target, speed)
        else:
            particle.go_idle()
        return

    if not particle.leached:
        return
    target = _live_target(particle, grid)
    if target is None:
        replacement = grid.nearest_tumor_index(particle.x, particle.y)
        if replacement is None:
            particle.target_index = None
            particle.go_idle()
            return
        particle.target_index = replacement
        target = grid[replacement]
    particle.mode = MotionMode.SEEKING
    _steer_at(particle, target, speed)


def _in_vessel(particle: Particle, grid: TissueGrid, vessel: Vessel,
               inputs: SimulationInputs, config: SimulationConfig):
    """Step 4: leach through the wall or follow the flow."""
    if particle.x <= vessel.boundary_x(particle.y):
        speed = leech_speed(config, inputs.drug_amount)
        target = _live_target(particle, grid)
        if target is not None:
            particle.mode = MotionMode.SEEKING
            _steer_at(particle, target, speed)
        else:
            particle.mode = MotionMode.FALLBACK
            particle.set_velocity(vessel.tissue_normal(particle.y), speed)
        return

    flow = vessel.flow_direction(particle.y)
    if particle.target_index is None:
        particle.set_velocity(flow, flow_speed(config, inputs.drug_amount))
        return

    # Blend toward the target site even after it has been killed.
    target = grid[particle.target_index]
    alpha = getattr(particle, "steer_aggression", 0.9)
    to_target = normalized(target.x - particle.x, target.y - particle.y)
    direction = normalized(
        flow[0] * (1 - alpha) + to_target[0] * alpha,
        flow[1] * (1 - alpha) + to_target[1] * alpha,
    )
    particle.set_velocity(direction, flow_speed(config, inputs.drug_amount) * (1 + (alpha - 0.5) * 0.4))


def out_of_bounds(particle: Particle, grid: TissueGrid, margin: float) -> bool:
    return (
        particle.x < -margin
        or particle.x > grid.width + margin
        or particle.y < -margin
        or particle.y > grid.height + margin
    )


def advance_particle(
    particle: Particle,
    grid: TissueGrid,
    vessel: Vessel,
    inputs: SimulationInputs,
    config: SimulationConfig,
    rng: random.Random,
):
    """Advance one particle by one tick. Sets ``particle.dead`` when it dies."""
    if not particle.age():
        return

    _resteer(particle, grid, leech_speed(config, inputs.drug_amount))

    particle.x += particle.vx
    particle.y += particle.vy

    if not particle.leached:
        _in_vessel(particle, grid, vessel, inputs, config)

    if isinstance(particle, Compound) and particle.wander:
        if rng.random() < config.wander_death_chance:
            particle.dead = True

    if out_of_bounds(particle, grid, config.bounds_margin):
        particle.dead = True


def spawn_doses(
    amount: float,
    grid: TissueGrid,
    vessel: Vessel,
    config: SimulationConfig,
    rng: random.Random,
    limit: Optional[int] = None,
) -> List[Compound]:
    """Release compounds into the vessel for a dose.

    ``max(1, round(amount))`` compounds are created at random points inside
    the vessel, but never more than ``limit``. Most are aimed at the nearest
    tumor site; a small share (2-3%), and all of them when there is no
    tumor, wander instead.
    """
    if not amount or amount <= 0 or not math.isfinite(amount):
        return []

    count = max(1, round_half_up(amount))
    if limit is not None:
        count = min(count, max(0, limit))

    compounds = []
    for _ in range(count):
        y = rng.random() * grid.height
        bx = vessel.boundary_x(y)
        x = bx + 4 + rng.random() * (grid.width - bx - 4)

        wander_chance = 0.02 + rng.random() * 0.01
        wander = rng.random() < wander_chance
        if not wander:
            best = grid.nearest_tumor_index(x, y)
            if best is not None:
                site = grid[best]
                speed = config.vessel_speed * (1 + amount / 80.0) * (0.95 + rng.random() * 0.2)
                compound = Compound(
                    x=x,
                    y=y,
                    ttl=config.compound_ttl,
                    mode=MotionMode.FLOWING,
                    target_index=best,
                    steer_aggression=0.92,
                )
                compound.set_velocity(normalized(site.x - x, site.y - y), speed)
                compounds.append(compound)
                continue

        angle = rng.random() * math.pi * 2
        speed = config.vessel_speed * 0.6 * (0.6 + rng.random() * 0.8)
        compound = Compound(
            x=x,
            y=y,
            ttl=config.wander_ttl,
            mode=MotionMode.WANDERING,
            wander=True,
        )
        compound.set_velocity((math.cos(angle), math.sin(angle)), speed)
        compounds.append(compound)
    return compounds
