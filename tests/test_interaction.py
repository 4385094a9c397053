import random

from core.particle import Compound, Cytotoxic, MotionMode
from core.vessel import Vessel
from simulations.interaction import (
    admit,
    cascade_kill,
    resolve_contacts,
    wall_contact_kill,
)
from simulations.parameter_profiles import DEFAULT_CONFIG


def _leached_compound_on(grid, index):
    site = grid[index]
    return Compound(x=site.x, y=site.y, mode=MotionMode.FALLBACK)


def test_compound_split_on_isolated_tumor_releases_four_idle_payloads(grid, never_cascade):
    contact = grid.index_at(4, 4)
    grid.make_tumor(contact, 12.0)
    compound = _leached_compound_on(grid, contact)
    spawned = []

    kills = resolve_contacts(compound, grid, DEFAULT_CONFIG, never_cascade, spawned)

    assert kills == 1
    assert compound.dead
    assert not grid[contact].is_tumor
    assert len(spawned) == 4
    assert all(isinstance(p, Cytotoxic) for p in spawned)
    assert all(p.mode == MotionMode.IDLE and p.ttl == 80 for p in spawned)
    assert all(p.parent_index == contact for p in spawned)


def test_split_changes_particle_count_by_three(grid, never_cascade):
    contact = grid.index_at(4, 4)
    grid.make_tumor(contact, 12.0)
    particles = [_leached_compound_on(grid, contact)]
    spawned = []

    resolve_contacts(particles[0], grid, DEFAULT_CONFIG, never_cascade, spawned)
    after = [p for p in admit(particles, spawned, DEFAULT_CONFIG.max_particles) if not p.dead]

    assert len(after) - len(particles) == 3


def test_split_without_neighbors_seeks_distant_tumor(grid, never_cascade):
    contact = grid.index_at(2, 2)
    distant = grid.index_at(8, 8)
    grid.make_tumor(contact, 12.0)
    grid.make_tumor(distant, 12.0)
    spawned = []

    resolve_contacts(_leached_compound_on(grid, contact), grid, DEFAULT_CONFIG, never_cascade, spawned)

    assert len(spawned) == 4
    assert all(p.mode == MotionMode.SEEKING for p in spawned)
    assert all(p.target_index == distant and p.ttl == 220 for p in spawned)
    assert grid[distant].is_tumor


def test_split_spreads_round_robin_over_neighbors(grid, never_cascade):
    contact = grid.index_at(4, 4)
    neighbor = grid.index_at(5, 4)
    grid.make_tumor(contact, 12.0)
    grid.make_tumor(neighbor, 12.0)
    spawned = []

    kills = resolve_contacts(_leached_compound_on(grid, contact), grid, DEFAULT_CONFIG, never_cascade, spawned)

    # First payload kills the neighbor on arrival; the rest are aimed at it.
    assert kills == 2
    assert not grid[neighbor].is_tumor
    assert len(spawned) == 4
    assert spawned[0].mode == MotionMode.IDLE and spawned[0].ttl == 80
    for p in spawned[1:]:
        assert p.mode == MotionMode.SEEKING
        assert p.target_index == neighbor
        assert p.ttl == 220


def test_split_payloads_start_on_killed_sites(grid, never_cascade):
    contact = grid.index_at(4, 4)
    neighbor = grid.index_at(5, 4)
    grid.make_tumor(contact, 12.0)
    grid.make_tumor(neighbor, 12.0)
    spawned = []

    resolve_contacts(_leached_compound_on(grid, contact), grid, DEFAULT_CONFIG, never_cascade, spawned)

    assert (spawned[0].x, spawned[0].y) == (grid[neighbor].x, grid[neighbor].y)
    assert all((p.x, p.y) == (grid[contact].x, grid[contact].y) for p in spawned[1:])


def test_compound_still_in_vessel_does_not_split(grid, never_cascade):
    contact = grid.index_at(4, 4)
    grid.make_tumor(contact, 12.0)
    compound = Compound(x=grid[contact].x, y=grid[contact].y)
    spawned = []

    assert resolve_contacts(compound, grid, DEFAULT_CONFIG, never_cascade, spawned) == 0
    assert spawned == []
    assert grid[contact].is_tumor


def test_targeted_cytotoxic_kills_target_and_parent(grid, never_cascade):
    target = grid.index_at(2, 2)
    parent = grid.index_at(7, 7)
    grid.make_tumor(target, 10.0)
    grid.make_tumor(parent, 10.0)
    p = Cytotoxic(x=grid[target].x + 5, y=grid[target].y, target_index=target, parent_index=parent)

    kills = resolve_contacts(p, grid, DEFAULT_CONFIG, never_cascade, [])

    assert kills == 2
    assert p.dead
    assert not grid[target].is_tumor
    assert not grid[parent].is_tumor


def test_targeted_cytotoxic_waits_until_in_range(grid, never_cascade):
    target = grid.index_at(2, 2)
    grid.make_tumor(target, 10.0)
    p = Cytotoxic(x=grid[target].x + 21, y=grid[target].y, target_index=target)

    assert resolve_contacts(p, grid, DEFAULT_CONFIG, never_cascade, []) == 0
    assert not p.dead
    assert grid[target].is_tumor


def test_targeted_cytotoxic_expires_when_target_is_gone(grid, never_cascade):
    p = Cytotoxic(x=45.0, y=45.0, target_index=grid.index_at(2, 2))
    assert resolve_contacts(p, grid, DEFAULT_CONFIG, never_cascade, []) == 0
    assert p.dead


def test_untargeted_cytotoxic_kills_on_contact_and_cascades(grid, always_cascade):
    hit = grid.index_at(3, 3)
    neighbor = grid.index_at(3, 4)
    grid.make_tumor(hit, 10.0)
    grid.make_tumor(neighbor, 10.0)
    p = Cytotoxic(x=grid[hit].x, y=grid[hit].y - 15, mode=MotionMode.IDLE)

    kills = resolve_contacts(p, grid, DEFAULT_CONFIG, always_cascade, [])

    assert kills == 2
    assert p.dead
    assert grid.tumor_indices() == []


def test_cascade_kill_respects_chance(grid, always_cascade, never_cascade):
    center = grid.index_at(5, 5)
    grid.make_tumor(center, 10.0)
    grid.make_tumor(grid.index_at(5, 6), 10.0)

    assert cascade_kill(grid, center, never_cascade, 0.3) is None
    assert cascade_kill(grid, center, always_cascade, 0.3) == grid.index_at(5, 6)
    assert cascade_kill(grid, center, always_cascade, 0.3) is None


def test_admit_truncates_new_batch_at_cap():
    existing = [Cytotoxic(x=0.0, y=0.0) for _ in range(1199)]
    batch = [Cytotoxic(x=1.0, y=1.0) for _ in range(4)]

    admitted = admit(existing, batch, 1200)
    assert len(admitted) == 1200
    assert admitted[-1] is batch[0]
    assert admit(admitted, batch, 1200) == admitted


def test_wall_contact_kill(grid, straight_vessel):
    hit = grid.index_at(5, 5)
    neighbor = grid.index_at(4, 5)
    grid.make_tumor(hit, 10.0)
    grid.make_tumor(neighbor, 10.0)

    killed = wall_contact_kill(grid, straight_vessel, 110.0, grid[hit].y, 0.0, random.Random(0))
    assert killed == [hit]
    assert grid[neighbor].is_tumor

    assert wall_contact_kill(grid, straight_vessel, 170.0, 10.0, 50.0, random.Random(0)) == []


def test_wall_contact_ignores_sites_inside_vessel(grid):
    vessel = Vessel(base_x=90.0, slope=0.0, amplitude=0.0, freq=0.0, phase=0.0)
    inside = grid.index_at(5, 5)
    grid.make_tumor(inside, 10.0)
    assert wall_contact_kill(grid, vessel, 95.0, grid[inside].y, 100.0, random.Random(0)) == []
