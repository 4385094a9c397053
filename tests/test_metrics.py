from core.metrics import (
    is_single_cluster,
    tumor_burden,
    tumor_clusters,
    tumor_fraction,
    tumor_graph,
    vessel_violations,
)


def test_diagonal_sites_are_connected(grid):
    grid.make_tumor(grid.index_at(2, 2), 10.0)
    grid.make_tumor(grid.index_at(3, 3), 10.0)
    assert tumor_graph(grid).number_of_edges() == 1
    assert is_single_cluster(grid)


def test_separate_clusters_are_counted(grid):
    grid.make_tumor(grid.index_at(0, 0), 10.0)
    grid.make_tumor(grid.index_at(1, 0), 10.0)
    grid.make_tumor(grid.index_at(5, 5), 10.0)

    clusters = tumor_clusters(grid)
    assert [len(c) for c in clusters] == [2, 1]
    assert not is_single_cluster(grid)
    assert tumor_burden(grid) == 3


def test_empty_tumor_is_not_a_cluster(grid):
    assert not is_single_cluster(grid)
    assert tumor_clusters(grid) == []


def test_tumor_fraction_counts_tissue_only(grid, straight_vessel):
    # Columns 0-5 are tissue: 60 sites.
    for ix in range(6):
        grid.make_tumor(grid.index_at(ix, 0), 10.0)
    assert tumor_fraction(grid, straight_vessel) == 0.1


def test_vessel_violations_reports_sites_inside(grid, straight_vessel):
    inside = grid.index_at(7, 3)
    grid.make_tumor(inside, 10.0)
    grid.make_tumor(grid.index_at(1, 3), 10.0)
    assert vessel_violations(grid, straight_vessel) == [inside]
