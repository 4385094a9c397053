"""
Configuration and parameter profiles for simulation runs.

Two kinds of parameters drive the model:
  - SimulationConfig: fixed constants (canvas, lattice, speeds, contact
    radii, lifetimes, particle cap). Chosen once per simulation.
  - SimulationInputs: the three operator-controlled scalars (seeding
    percentage, growth rate, drug amount). They may change between
    ticks, so the engine takes a clamped snapshot at the start of each.
"""

import math
from dataclasses import dataclass, replace
from typing import Tuple


def clamp(value: float, low: float, high: float) -> float:
    """Clamp to [low, high]. NaN, infinities and non-numeric junk map to ``low``."""
    try:
        value = float(value)
    except (TypeError, ValueError):
        return low
    if not math.isfinite(value):
        return low
    return max(low, min(high, value))


@dataclass(frozen=True)
class SimulationConfig:
    # Canvas and lattice
    width: float = 720.0
    height: float = 540.0
    spacing: float = 18.0

    # Vessel shape (phase is randomized per simulation)
    vessel_slope: float = 0.18
    vessel_amplitude: float = 26.0
    vessel_freq: float = 0.010

    # Particle motion
    vessel_speed: float = 3.2
    leech_speed: float = 2.4

    # Contact and cascade
    compound_contact_padding: float = 9.0
    cytotoxic_contact_padding: float = 10.0
    cascade_chance: float = 0.30
    split_count: int = 4
    wall_kill_radius: float = 26.0

    # Lifetimes (ticks) and decay
    compound_ttl: int = 400
    wander_ttl: int = 120
    seeking_cytotoxic_ttl: int = 220
    idle_cytotoxic_ttl: int = 80
    wander_death_chance: float = 0.015
    bounds_margin: float = 40.0

    # Capacity and scheduling
    max_particles: int = 1200
    tick_interval: float = 0.12

    # Input ranges
    max_growth_rate: float = 100.0
    max_drug_amount: float = 100.0


DEFAULT_CONFIG = SimulationConfig()


@dataclass(frozen=True)
class SimulationInputs:
    """Operator inputs. Ranges: start_percent [0,100], growth_rate and
    drug_amount [0, configured maximum]."""

    start_percent: float = 20.0
    growth_rate: float = 20.0
    drug_amount: float = 10.0

    def clamped(self, config: SimulationConfig = DEFAULT_CONFIG) -> "SimulationInputs":
        return replace(
            self,
            start_percent=clamp(self.start_percent, 0.0, 100.0),
            growth_rate=clamp(self.growth_rate, 0.0, config.max_growth_rate),
            drug_amount=clamp(self.drug_amount, 0.0, config.max_drug_amount),
        )


@dataclass(frozen=True)
class ParameterProfile:
    name: str
    start_percent: float
    growth_rate: float
    drug_amount: float
    dose_every: int
    note: str
    tags: Tuple[str, ...] = ()

    def inputs(self) -> SimulationInputs:
        return SimulationInputs(
            start_percent=self.start_percent,
            growth_rate=self.growth_rate,
            drug_amount=self.drug_amount,
        )


DEFAULT_PROFILE = ParameterProfile(
    name="default",
    start_percent=20.0,
    growth_rate=20.0,
    drug_amount=10.0,
    dose_every=25,
    note="Mid-sized seed cluster, slow growth, periodic small doses.",
)


AGGRESSIVE_GROWTH_PROFILE = ParameterProfile(
    name="aggressive-growth",
    start_percent=60.0,
    growth_rate=100.0,
    drug_amount=10.0,
    dose_every=25,
    note="Large seed and maximal growth rate; dosing rarely keeps up.",
    tags=("stress",),
)


HIGH_DOSE_PROFILE = ParameterProfile(
    name="high-dose",
    start_percent=20.0,
    growth_rate=20.0,
    drug_amount=60.0,
    dose_every=25,
    note="Same tumor as the default profile with six times the dose.",
)


PROFILES = {
    p.name: p for p in (DEFAULT_PROFILE, AGGRESSIVE_GROWTH_PROFILE, HIGH_DOSE_PROFILE)
}
