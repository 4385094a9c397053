"""
Vessel geometry for the prodrug targeting model.

The vessel occupies everything to the right of a closed-form boundary
curve x = X(y). The curve is a tilted line with a sinusoidal bend:

    X(y) = base_x + slope * y + amplitude * sin(freq * y + phase)

Every component that needs to know "inside or outside the vessel"
(seeding, growth, transport, metrics, rendering) goes through this
module, so all of them agree on where the wall is.
"""

import math
import random
from dataclasses import dataclass
from typing import Optional, Tuple


Vector = Tuple[float, float]


def normalized(vx: float, vy: float) -> Vector:
    """Unit vector along (vx, vy). A zero vector maps to (0, 1)."""
    m = math.hypot(vx, vy)
    if m == 0.0 or not math.isfinite(m):
        return (0.0, 1.0)
    return (vx / m, vy / m)


@dataclass(frozen=True)
class Vessel:
    """A curved vessel wall.

    Attributes:
        base_x: Boundary x at y = 0 before the sinusoidal term.
        slope: Diagonal tilt (positive moves the wall right going down).
        amplitude: Height of the bends.
        freq: Spatial frequency of the bends.
        phase: Phase offset, randomized once per simulation.
    """

    base_x: float
    slope: float = 0.18
    amplitude: float = 26.0
    freq: float = 0.010
    phase: float = 0.0

    @classmethod
    def for_canvas(
        cls,
        width: float,
        rng: Optional[random.Random] = None,
        slope: float = 0.18,
        amplitude: float = 26.0,
        freq: float = 0.010,
    ) -> "Vessel":
        """Default vessel for a canvas: wall at 62% of the width, random phase."""
        rng = rng or random.Random()
        return cls(
            base_x=float(math.floor(width * 0.62)),
            slope=slope,
            amplitude=amplitude,
            freq=freq,
            phase=rng.random() * 2.0 * math.pi,
        )

    def boundary_x(self, y: float) -> float:
        return self.base_x + self.slope * y + self.amplitude * math.sin(self.freq * y + self.phase)

    def tangent_slope(self, y: float) -> float:
        """Analytic dx/dy of the boundary at height y."""
        return self.slope + self.amplitude * self.freq * math.cos(self.freq * y + self.phase)

    def is_inside(self, x: float, y: float) -> bool:
        return x >= self.boundary_x(y)

    def flow_direction(self, y: float) -> Vector:
        """Direction particles drift along while still confined to the vessel."""
        return normalized(-1.0, -self.tangent_slope(y))

    def tissue_normal(self, y: float) -> Vector:
        """Unit normal to the wall at height y, pointing out into tissue (x < 0)."""
        nx, ny = normalized(-1.0, self.tangent_slope(y))
        if nx > 0:
            nx, ny = -nx, -ny
        return (nx, ny)
