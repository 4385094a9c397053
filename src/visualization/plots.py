"""
Visualization functions for the prodrug targeting model.

Generates:
- Single frames of the tissue (vessel, healthy tissue, tumor, particles)
- Tumor response time series (tumor size, particle counts, kills)
"""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from simulations.engine import Simulation


HEALTHY_FILL = "#ffd6da"
HEALTHY_EDGE = "#ff9aa2"
TUMOR_FILL = "#ffffff"
TUMOR_EDGE = "#b4b4b4"
VESSEL_FILL = (1.0, 200 / 255, 200 / 255, 0.6)
COMPOUND_COLOR = "#c81e1e"
CYTOTOXIC_COLOR = "#dcb41e"


def plot_frame(
    sim: "Simulation",
    title: Optional[str] = None,
    save_path: Optional[str] = None,
    show: bool = False,
):
    """
    Draw the current state of the simulation.

    The vessel is the shaded band right of its wall. Healthy tissue
    sites are pink discs; vessel-interior sites are not drawn. Tumor
    sites are white discs scaled by their size. Compounds are red,
    cytotoxic particles yellow; compounds still in the vessel are drawn
    hollow.
    """
    import matplotlib.pyplot as plt
    import numpy as np
    from core.grid import SiteState
    from core.particle import ParticleKind

    grid = sim.grid
    vessel = sim.vessel
    width, height = grid.width, grid.height

    fig, ax = plt.subplots(figsize=(10, 10 * height / width))
    ax.set_facecolor("#f7f7f7")

    ys = np.linspace(0.0, height, max(2, int(height // 4) + 1))
    wall = np.array([vessel.boundary_x(y) for y in ys])
    ax.fill_betweenx(ys, wall, width, color=VESSEL_FILL, linewidth=0)
    ax.plot(wall, ys, color=(150 / 255, 0, 0, 0.2), linewidth=2)

    sites = [s for s in sim.sites() if not vessel.is_inside(s["x"], s["y"])]
    healthy_radius = max(6.0, grid.spacing * 0.48)
    # Scatter sizes are squared diameters in points.
    scale = (2 * fig.get_size_inches()[0] * 72 / width) ** 2

    hx = [s["x"] for s in sites if s["state"] == SiteState.HEALTHY]
    hy = [s["y"] for s in sites if s["state"] == SiteState.HEALTHY]
    ax.scatter(hx, hy, s=scale * healthy_radius ** 2, c=HEALTHY_FILL,
               edgecolors=HEALTHY_EDGE, linewidths=1.0)

    tumor = [s for s in sites if s["state"] == SiteState.TUMOR]
    if tumor:
        tx = np.array([s["x"] for s in tumor])
        ty = np.array([s["y"] for s in tumor])
        radii = np.array([s["size"] or healthy_radius * 1.5 for s in tumor])
        ax.scatter(tx, ty, s=scale * radii ** 2, c=TUMOR_FILL,
                   edgecolors=TUMOR_EDGE, linewidths=1.5, zorder=3)
        ax.scatter(tx, ty, s=scale * (radii * 0.3) ** 2, c="#999999", zorder=4)

    particles = sim.particle_view()
    for kind, color, marker, size in (
        (ParticleKind.COMPOUND, COMPOUND_COLOR, "o", 30),
        (ParticleKind.CYTOTOXIC, CYTOTOXIC_COLOR, "v", 18),
    ):
        group = [p for p in particles if p["kind"] == kind]
        if not group:
            continue
        px = [p["x"] for p in group]
        py = [p["y"] for p in group]
        faces = [color if p["leached"] else "none" for p in group]
        ax.scatter(px, py, s=size, marker=marker, facecolors=faces,
                   edgecolors=color, zorder=5, label=kind.value)

    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.set_aspect("equal")
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_title(title or f"Tissue at t={sim.tick_count}")
    if particles:
        ax.legend(loc="upper left", fontsize=8)

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches="tight")
        print(f"Saved to {save_path}")
    if show:
        plt.show()
    else:
        plt.close(fig)


def plot_tumor_response(
    sim: "Simulation",
    title: str = "Tumor Response to Prodrug Dosing",
    save_path: Optional[str] = None,
    show: bool = False,
):
    """
    Three stacked panels: tumor site count, live particles by kind, and
    tumor sites killed per tick.
    """
    import matplotlib.pyplot as plt

    fig, (ax1, ax2, ax3) = plt.subplots(3, 1, figsize=(12, 10), sharex=True)

    steps = [h["time"] for h in sim.history]
    compounds = [h["compound"] for h in sim.history]
    cytotoxic = [h["cytotoxic"] for h in sim.history]

    ax1.plot(steps, sim.tumor_series(), "r-", linewidth=2, label="Tumor sites")
    ax1.set_ylabel("Tumor Site Count")
    ax1.legend(loc="upper left")
    ax1.set_title(title)
    ax1.grid(True, alpha=0.3)

    ax2.plot(steps, compounds, "b-", linewidth=1.5, label="Compound")
    ax2.plot(steps, cytotoxic, color="goldenrod", linewidth=1.5, label="Cytotoxic")
    ax2.set_ylabel("Live Particles")
    ax2.legend(loc="upper right")
    ax2.grid(True, alpha=0.3)

    ax3.bar(steps, sim.kill_series(), color="k", width=1.0, label="Killed")
    ax3.set_ylabel("Sites Killed")
    ax3.set_xlabel("Ticks")
    ax3.legend(loc="upper right")
    ax3.grid(True, alpha=0.3)

    plt.tight_layout()
    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches="tight")
        print(f"Saved to {save_path}")
    if show:
        plt.show()
    else:
        plt.close(fig)
