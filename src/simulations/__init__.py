"""Prodrug tumor-targeting simulation engine."""
from .engine import Simulation
from .seeding import seed_cluster, seed_target_count
from .growth import grow_tumor, growth_probability
from .transport import advance_particle, spawn_doses
from .interaction import (
    admit,
    cascade_kill,
    resolve_contacts,
    wall_contact_kill,
)
from .parameter_profiles import (
    SimulationConfig,
    SimulationInputs,
    ParameterProfile,
    DEFAULT_CONFIG,
    DEFAULT_PROFILE,
    AGGRESSIVE_GROWTH_PROFILE,
    HIGH_DOSE_PROFILE,
)
