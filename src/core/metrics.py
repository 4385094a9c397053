"""
Tumor burden and cluster metrics for the prodrug targeting model.

The tumor is analysed as a graph: every TUMOR site is a node and two
nodes are joined when the sites are 8-neighbors on the lattice. A
freshly seeded tumor is a single connected component; treatment
fragments it into several.
"""

from typing import TYPE_CHECKING, List, Set

import networkx as nx

if TYPE_CHECKING:
    from .grid import TissueGrid
    from .vessel import Vessel


def tumor_burden(grid: "TissueGrid") -> int:
    """Number of TUMOR sites."""
    return len(grid.tumor_indices())


def tumor_fraction(grid: "TissueGrid", vessel: "Vessel") -> float:
    """Fraction of tissue (non-vessel) sites that are TUMOR.

    Returns:
        Fraction in [0, 1]; 0.0 when the vessel covers the whole grid.
    """
    tissue = [s for s in grid.sites if not vessel.is_inside(s.x, s.y)]
    if not tissue:
        return 0.0
    return sum(1 for s in tissue if s.is_tumor) / len(tissue)


def tumor_graph(grid: "TissueGrid") -> nx.Graph:
    """Adjacency graph over TUMOR sites (8-neighborhood edges)."""
    G = nx.Graph()
    tumor = grid.tumor_indices()
    G.add_nodes_from(tumor)
    for idx in tumor:
        for n in grid.tumor_neighbor_indices(idx):
            G.add_edge(idx, n)
    return G


def tumor_clusters(grid: "TissueGrid") -> List[Set[int]]:
    """Connected tumor clusters, largest first."""
    G = tumor_graph(grid)
    return sorted(nx.connected_components(G), key=len, reverse=True)


def is_single_cluster(grid: "TissueGrid") -> bool:
    """True when all TUMOR sites form one 8-connected cluster.

    An empty tumor does not count as a cluster.
    """
    G = tumor_graph(grid)
    return G.number_of_nodes() > 0 and nx.is_connected(G)


def vessel_violations(grid: "TissueGrid", vessel: "Vessel") -> List[int]:
    """Indices of TUMOR sites lying inside the vessel. Should always be empty."""
    return [s.index for s in grid.sites if s.is_tumor and vessel.is_inside(s.x, s.y)]
