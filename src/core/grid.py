"""
Tissue lattice for the prodrug targeting model.

The tissue is a fixed rectangular lattice of sites. Each site is either
HEALTHY or TUMOR and sits at the center of its lattice cell:

    x = spacing / 2 + ix * spacing
    y = spacing / 2 + iy * spacing

Sites live in a flat list indexed by ``iy * cols + ix``. The list is
never resized or reordered, so particles can hold plain integer indices
as references to sites.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple


class SiteState(Enum):
    HEALTHY = "HEALTHY"
    TUMOR = "TUMOR"


NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (ox, oy) for oy in (-1, 0, 1) for ox in (-1, 0, 1) if not (ox == 0 and oy == 0)
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


@dataclass
class GridSite:
    """One lattice site.

    Attributes:
        index: Position in the grid's site list.
        ix, iy: Lattice coordinates.
        x, y: Continuous position of the site center.
        state: HEALTHY or TUMOR.
        size: Interaction/visual radius. 0 while healthy.
    """

    index: int
    ix: int
    iy: int
    x: float
    y: float
    state: SiteState = SiteState.HEALTHY
    size: float = 0.0

    @property
    def is_tumor(self) -> bool:
        return self.state == SiteState.TUMOR


class TissueGrid:
    """Fixed lattice of tissue sites with 8-neighborhood queries."""

    def __init__(self, cols: int, rows: int, spacing: float = 18.0):
        if cols <= 0 or rows <= 0:
            raise ValueError("grid must have at least one row and one column")
        if spacing <= 0:
            raise ValueError("spacing must be positive")
        self.cols = cols
        self.rows = rows
        self.spacing = float(spacing)
        self.sites: List[GridSite] = []

        for iy in range(rows):
            for ix in range(cols):
                self.sites.append(GridSite(
                    index=iy * cols + ix,
                    ix=ix,
                    iy=iy,
                    x=self.spacing / 2 + ix * self.spacing,
                    y=self.spacing / 2 + iy * self.spacing,
                ))

    @classmethod
    def for_canvas(cls, width: float, height: float, spacing: float = 18.0) -> "TissueGrid":
        return cls(int(width // spacing), int(height // spacing), spacing)

    def __len__(self) -> int:
        return len(self.sites)

    def __getitem__(self, index: int) -> GridSite:
        return self.sites[index]

    @property
    def width(self) -> float:
        return self.cols * self.spacing

    @property
    def height(self) -> float:
        return self.rows * self.spacing

    # --- Coordinate mapping ---

    def lattice_coords(self, x: float, y: float) -> Tuple[int, int]:
        """Lattice cell whose center is nearest to (x, y) (may be out of bounds)."""
        half = self.spacing / 2
        return (
            round_half_up((x - half) / self.spacing),
            round_half_up((y - half) / self.spacing),
        )

    def index_at(self, ix: int, iy: int) -> Optional[int]:
        if ix < 0 or iy < 0 or ix >= self.cols or iy >= self.rows:
            return None
        return iy * self.cols + ix

    def nearest_index(self, x: float, y: float) -> Optional[int]:
        return self.index_at(*self.lattice_coords(x, y))

    # --- Neighborhood queries ---

    def neighbor_indices(self, index: int) -> List[int]:
        """In-bounds 8-neighborhood of a site, in a fixed row-major order."""
        site = self.sites[index]
        out = []
        for ox, oy in NEIGHBOR_OFFSETS:
            nidx = self.index_at(site.ix + ox, site.iy + oy)
            if nidx is not None:
                out.append(nidx)
        return out

    def tumor_neighbor_indices(self, index: int) -> List[int]:
        return [n for n in self.neighbor_indices(index) if self.sites[n].is_tumor]

    def neighbor_count(self, index: int) -> int:
        """Number of TUMOR sites among the 8 neighbors."""
        return len(self.tumor_neighbor_indices(index))

    # --- State queries ---

    def tumor_indices(self) -> List[int]:
        return [s.index for s in self.sites if s.is_tumor]

    def nearest_tumor_index(self, x: float, y: float) -> Optional[int]:
        """Closest TUMOR site to a point; the lowest index wins ties."""
        best_idx = None
        best_d = math.inf
        for site in self.sites:
            if not site.is_tumor:
                continue
            d = math.hypot(site.x - x, site.y - y)
            if d < best_d:
                best_d = d
                best_idx = site.index
        return best_idx

    def count_by_state(self) -> Dict[SiteState, int]:
        counts = {s: 0 for s in SiteState}
        for site in self.sites:
            counts[site.state] += 1
        return counts

    # --- Mutation ---

    def make_tumor(self, index: int, size: float):
        site = self.sites[index]
        site.state = SiteState.TUMOR
        site.size = size

    def kill(self, index: int) -> bool:
        """Return a tumor site to healthy. True if the site was tumor."""
        site = self.sites[index]
        if not site.is_tumor:
            return False
        site.state = SiteState.HEALTHY
        site.size = 0.0
        return True

    def reset(self):
        for site in self.sites:
            site.state = SiteState.HEALTHY
            site.size = 0.0
