"""
Drug particles for the prodrug targeting model.

Two kinds of particle exist:
  - COMPOUND: the prodrug. Released into the vessel by dosing, it flows
    with the vessel, leaches into tissue and splits on tumor contact.
  - CYTOTOXIC: the payload released by a split. It seeks one tumor site
    (or sits idle where it was released) and kills on contact.

Motion is described by a single MotionMode instead of loose flags:

    FLOWING    inside the vessel, carried by the flow (targeted or not)
    WANDERING  inside the vessel, no target, random heading
    SEEKING    in tissue, heading for a target site
    FALLBACK   in tissue, drifting away from the wall without a target
    IDLE       in tissue, stationary

Target and parent references are integer indices into the tissue grid.
They do not own the sites; the site behind an index may die at any time.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Tuple


class ParticleKind(Enum):
    COMPOUND = "compound"
    CYTOTOXIC = "cytotoxic"


class MotionMode(Enum):
    FLOWING = "flowing"
    WANDERING = "wandering"
    SEEKING = "seeking"
    FALLBACK = "fallback"
    IDLE = "idle"


IN_VESSEL_MODES = (MotionMode.FLOWING, MotionMode.WANDERING)


@dataclass
class Particle:
    """State shared by both particle kinds.

    Attributes:
        x, y: Position.
        vx, vy: Velocity per tick.
        ttl: Remaining lifetime in ticks.
        mode: Current motion mode.
        target_index: Grid index of the site being sought, if any.
        dead: Set once the particle should be purged.
    """

    kind: ClassVar[ParticleKind]

    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    ttl: int = 300
    mode: MotionMode = MotionMode.FLOWING
    target_index: Optional[int] = None
    dead: bool = False

    @property
    def leached(self) -> bool:
        """True once the particle has crossed the vessel wall into tissue."""
        return self.mode not in IN_VESSEL_MODES

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def set_velocity(self, direction: Tuple[float, float], speed: float):
        self.vx = direction[0] * speed
        self.vy = direction[1] * speed

    def go_idle(self):
        self.mode = MotionMode.IDLE
        self.vx = 0.0
        self.vy = 0.0

    def age(self) -> bool:
        """Consume one tick of lifetime. Returns False once expired."""
        self.ttl -= 1
        if self.ttl <= 0:
            self.dead = True
        return not self.dead


@dataclass
class Compound(Particle):
    """Prodrug particle.

    ``wander`` is a spawn trait: a wandering compound carries no target
    and is diluted away faster. ``steer_aggression`` weighs target
    seeking against the vessel flow while still in the vessel.
    """

    kind: ClassVar[ParticleKind] = ParticleKind.COMPOUND

    wander: bool = False
    steer_aggression: float = 0.9


@dataclass
class Cytotoxic(Particle):
    """Payload particle released by a compound split.

    ``parent_index`` is the tumor site the originating compound entered.
    """

    kind: ClassVar[ParticleKind] = ParticleKind.CYTOTOXIC

    mode: MotionMode = MotionMode.SEEKING
    parent_index: Optional[int] = None
