"""
Simulation engine for the prodrug targeting model.

Owns all mutable state (vessel, tissue grid, particles, tick counter,
history) and exposes the operations a front end needs: start, stop,
tick, dose and read-only views for rendering.

A tick is one atomic batch:
  1. snapshot and clamp the operator inputs,
  2. tumor growth (snapshot-then-apply),
  3. transport pass over all particles,
  4. interaction pass over all surviving particles,
  5. admit newly spawned particles up to the cap,
  6. purge dead particles and record metrics.

Particles spawned during a tick act from the next tick on.
"""

import logging
import random
import time
from typing import Callable, Dict, List, Optional

from core.grid import SiteState, TissueGrid
from core.metrics import tumor_clusters, vessel_violations
from core.particle import Compound, Particle
from core.vessel import Vessel
from .growth import grow_tumor
from .interaction import admit, resolve_contacts, wall_contact_kill
from .parameter_profiles import DEFAULT_CONFIG, SimulationConfig, SimulationInputs, clamp
from .seeding import seed_cluster
from .transport import advance_particle, spawn_doses

logger = logging.getLogger(__name__)


class Simulation:
    """Run the tumor/drug simulation and record metrics at each tick."""

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        inputs: Optional[SimulationInputs] = None,
        seed: Optional[int] = None,
        input_source: Optional[Callable[[], SimulationInputs]] = None,
        vessel: Optional[Vessel] = None,
        grid: Optional[TissueGrid] = None,
    ):
        self.config = config or DEFAULT_CONFIG
        self.inputs = inputs or SimulationInputs()
        self.input_source = input_source
        self.rng = random.Random(seed)

        self.vessel = vessel or Vessel.for_canvas(
            self.config.width,
            self.rng,
            slope=self.config.vessel_slope,
            amplitude=self.config.vessel_amplitude,
            freq=self.config.vessel_freq,
        )
        self.grid = grid or TissueGrid.for_canvas(
            self.config.width, self.config.height, self.config.spacing
        )
        self.particles: List[Particle] = []
        self.running = False
        self.tick_count = 0

        # History
        self.history: List[Dict] = []

    # --- Inputs ---

    def current_inputs(self) -> SimulationInputs:
        """Clamped snapshot of the operator inputs."""
        if self.input_source is not None:
            self.inputs = self.input_source()
        return self.inputs.clamped(self.config)

    def set_inputs(self, **kwargs):
        """Update one or more of start_percent, growth_rate, drug_amount."""
        values = {
            "start_percent": self.inputs.start_percent,
            "growth_rate": self.inputs.growth_rate,
            "drug_amount": self.inputs.drug_amount,
        }
        values.update(kwargs)
        self.inputs = SimulationInputs(**values)

    # --- Lifecycle ---

    def start(self, origin=None) -> int:
        """Reset the tissue, seed a tumor cluster and begin running.

        Returns:
            Number of tumor sites seeded (0 if already running).
        """
        if self.running:
            logger.debug("start() ignored: simulation already running")
            return 0
        inputs = self.current_inputs()
        seeded = seed_cluster(self.grid, self.vessel, inputs.start_percent, self.rng, origin=origin)
        self.particles = []
        self.tick_count = 0
        self.history = []
        self.running = True
        logger.info("Simulation started: %d tumor sites seeded (start_percent=%.1f)",
                    seeded, inputs.start_percent)
        return seeded

    def stop(self):
        if self.running:
            logger.info("Simulation stopped at tick %d", self.tick_count)
        self.running = False

    # --- Dosing ---

    def dose(self, amount: float) -> int:
        """Release ``max(1, round(amount))`` compounds into the vessel.

        The amount is clamped to ``[0, max_drug_amount]`` and no more
        compounds are built than the particle cap has room for.

        Returns:
            Number of compounds admitted under the particle cap.
        """
        amount = clamp(amount, 0.0, self.config.max_drug_amount)
        room = self.config.max_particles - len(self.particles)
        if room <= 0:
            logger.debug("Particle cap reached: dose of %s skipped", amount)
            return 0
        compounds = spawn_doses(amount, self.grid, self.vessel, self.config, self.rng, limit=room)
        if not compounds:
            return 0
        before = len(self.particles)
        self.particles = admit(self.particles, compounds, self.config.max_particles)
        admitted = len(self.particles) - before
        logger.debug("Dose of %s released %d compounds", amount, admitted)
        return admitted

    def give_dose(self) -> int:
        """Dose with the current drug amount input."""
        return self.dose(self.current_inputs().drug_amount)

    def wall_contact(self, x: float, y: float) -> List[int]:
        """Apply a wall-contact kill at (x, y) with the current drug amount."""
        return wall_contact_kill(
            self.grid,
            self.vessel,
            x,
            y,
            self.current_inputs().drug_amount,
            self.rng,
            radius=self.config.wall_kill_radius,
        )

    # --- Stepping ---

    def tick(self):
        """Advance the simulation by one step."""
        inputs = self.current_inputs()

        grown = grow_tumor(self.grid, self.vessel, inputs.growth_rate, self.rng)

        for particle in self.particles:
            advance_particle(particle, self.grid, self.vessel, inputs, self.config, self.rng)

        spawned: List[Particle] = []
        kills = 0
        for particle in self.particles:
            if not particle.dead:
                kills += resolve_contacts(particle, self.grid, self.config, self.rng, spawned)

        admitted = admit(self.particles, spawned, self.config.max_particles)
        if len(admitted) - len(self.particles) < len(spawned):
            logger.debug("Particle cap reached: %d of %d spawned particles admitted",
                         len(admitted) - len(self.particles), len(spawned))
        self.particles = [p for p in admitted if not p.dead]

        self.tick_count += 1
        self._record(grown=len(grown), kills=kills)

    def run(self, ticks: int = 100, dose_every: Optional[int] = None):
        """Tick repeatedly without waiting between ticks.

        Args:
            ticks: Number of ticks.
            dose_every: If set, give a dose every this many ticks.
        """
        for _ in range(ticks):
            if dose_every and self.tick_count % dose_every == 0:
                self.give_dose()
            self.tick()

    def play(
        self,
        max_ticks: Optional[int] = None,
        interval: Optional[float] = None,
        on_frame: Optional[Callable[["Simulation"], None]] = None,
    ) -> int:
        """Tick at a fixed rate while running.

        Starts the simulation if needed. Ends when ``stop()`` is called
        (for example from ``on_frame``) or after ``max_ticks`` ticks.

        Returns:
            Number of ticks played.
        """
        if interval is None:
            interval = self.config.tick_interval
        if not self.running:
            self.start()

        played = 0
        next_due = time.monotonic()
        while self.running and (max_ticks is None or played < max_ticks):
            self.tick()
            played += 1
            if on_frame is not None:
                on_frame(self)
            next_due += interval
            delay = next_due - time.monotonic()
            if delay > 0:
                time.sleep(delay)
            else:
                # Behind schedule: drop the missed slots.
                next_due = time.monotonic()
        return played

    def _record(self, grown: int = 0, kills: int = 0):
        counts = self.grid.count_by_state()
        compounds = sum(1 for p in self.particles if isinstance(p, Compound))
        self.history.append({
            "time": self.tick_count,
            "tumor": counts.get(SiteState.TUMOR, 0),
            "healthy": counts.get(SiteState.HEALTHY, 0),
            "grown": grown,
            "killed": kills,
            "compound": compounds,
            "cytotoxic": len(self.particles) - compounds,
        })

    # --- Render views ---

    def sites(self) -> List[Dict]:
        """Per-site render records: position, state and size."""
        return [
            {"x": s.x, "y": s.y, "state": s.state, "size": s.size}
            for s in self.grid.sites
        ]

    def particle_view(self) -> List[Dict]:
        """Per-particle render records: position, kind and leached flag."""
        return [
            {"x": p.x, "y": p.y, "kind": p.kind, "leached": p.leached}
            for p in self.particles
        ]

    # --- Convenience accessors ---

    def tumor_series(self) -> List[int]:
        return [h["tumor"] for h in self.history]

    def particle_series(self) -> List[int]:
        return [h["compound"] + h["cytotoxic"] for h in self.history]

    def kill_series(self) -> List[int]:
        return [h["killed"] for h in self.history]

    def summary(self) -> str:
        if not self.history:
            return "No simulation data."
        h = self.history[-1]
        peak = max(self.tumor_series())
        clusters = tumor_clusters(self.grid)

        if h["tumor"] == 0:
            status = "Tumor cleared"
        elif h["tumor"] < peak * 0.5:
            status = "Responding"
        elif h["tumor"] < peak:
            status = "Partial response"
        else:
            status = "Progressing"

        lines = [
            f"=== Simulation t={h['time']} ===",
            f"  Tumor:     {h['tumor']} sites (peak={peak}, clusters={len(clusters)})  ({status})",
            f"  Particles: compound={h['compound']}, cytotoxic={h['cytotoxic']}",
            f"  Killed:    {sum(self.kill_series())} total",
        ]
        violations = vessel_violations(self.grid, self.vessel)
        if violations:
            lines.append(f"  WARNING: {len(violations)} tumor sites inside the vessel")
        return "\n".join(lines)
