import random

import pytest

from core.grid import TissueGrid
from core.metrics import is_single_cluster, tumor_burden, tumor_clusters, vessel_violations
from core.vessel import Vessel
from simulations.growth import grow_tumor, growth_probability, per_neighbor_probability
from simulations.seeding import seed_cluster, seed_target_count


def test_seed_target_count():
    assert seed_target_count(0) == 3
    assert seed_target_count(20) == 9
    assert seed_target_count(100) == 45
    assert seed_target_count(-10) == 3
    assert seed_target_count(250) == 45


def test_seeding_scenario_builds_nine_connected_sites(grid, straight_vessel):
    seeded = seed_cluster(grid, straight_vessel, 20, random.Random(0), origin=(50.0, 90.0))

    assert seeded == 9
    assert tumor_burden(grid) == 9
    assert is_single_cluster(grid)
    assert all(grid[i].x < 100 for i in grid.tumor_indices())
    assert all(12.0 <= grid[i].size <= 22.0 for i in grid.tumor_indices())


@pytest.mark.parametrize("seed", range(10))
def test_seeded_cluster_is_connected_and_outside_vessel(seed):
    rng = random.Random(seed)
    grid = TissueGrid.for_canvas(720, 540)
    vessel = Vessel.for_canvas(720, rng)

    seeded = seed_cluster(grid, vessel, rng.random() * 100, rng)

    assert seeded == tumor_burden(grid)
    assert is_single_cluster(grid)
    assert vessel_violations(grid, vessel) == []


def test_seeding_resets_previous_tumor(grid, straight_vessel):
    grid.make_tumor(grid.index_at(0, 0), 10.0)
    seed_cluster(grid, straight_vessel, 0, random.Random(1), origin=(81.0, 153.0))
    assert tumor_burden(grid) == 3
    assert len(tumor_clusters(grid)) == 1


def test_vessel_is_a_hard_barrier_for_seeding(grid):
    vessel = Vessel(base_x=50.0, slope=0.0, amplitude=0.0, freq=0.0, phase=0.0)
    seeded = seed_cluster(grid, vessel, 100, random.Random(2), origin=(20.0, 90.0))

    # Only columns x=9, 27, 45 are tissue: 30 sites, all reachable.
    assert seeded == 30
    assert vessel_violations(grid, vessel) == []


def test_origin_inside_vessel_seeds_nothing(grid, straight_vessel):
    assert seed_cluster(grid, straight_vessel, 50, random.Random(0), origin=(150.0, 90.0)) == 0
    assert tumor_burden(grid) == 0


def test_zero_growth_rate_never_grows():
    for n in range(9):
        assert growth_probability(0, n) == 0.0


def test_growth_probability_increases_with_neighbors():
    probs = [growth_probability(50, n) for n in range(9)]
    assert probs[0] == 0.0
    assert all(a < b for a, b in zip(probs, probs[1:]))
    assert all(0.0 <= p < 1.0 for p in probs)
    assert probs[1] == pytest.approx(per_neighbor_probability(50))


def test_growth_probability_rejects_impossible_neighbor_counts():
    with pytest.raises(ValueError):
        growth_probability(10, 9)
    with pytest.raises(ValueError):
        growth_probability(10, -1)


def test_isolated_tumor_site_without_neighbors_never_grows(far_vessel):
    grid = TissueGrid(cols=1, rows=1)
    grid.make_tumor(0, 10.0)
    rng = random.Random(5)
    for _ in range(50):
        assert grow_tumor(grid, far_vessel, 100, rng) == []
    assert tumor_burden(grid) == 1


def test_growth_without_tumor_does_nothing(grid, far_vessel):
    rng = random.Random(5)
    for _ in range(50):
        grow_tumor(grid, far_vessel, 100, rng)
    assert tumor_burden(grid) == 0


def test_growth_is_applied_from_tick_start_snapshot(far_vessel):
    grid = TissueGrid(cols=5, rows=1)
    grid.make_tumor(0, 10.0)

    # growth_rate 15000 gives g = 1: every eligible site converts.
    converted = grow_tumor(grid, far_vessel, 15000, random.Random(0))

    assert converted == [1]
    assert grid.tumor_indices() == [0, 1]
    assert 6.0 <= grid[1].size <= 16.0


def test_growth_is_monotonic_and_respects_vessel(grid, straight_vessel):
    rng = random.Random(9)
    seed_cluster(grid, straight_vessel, 40, rng, origin=(81.0, 90.0))
    for _ in range(30):
        before = set(grid.tumor_indices())
        grow_tumor(grid, straight_vessel, 15000, rng)
        after = set(grid.tumor_indices())
        assert before <= after
        assert vessel_violations(grid, straight_vessel) == []
