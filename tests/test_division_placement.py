"""Tests for the division split."""

import pytest

from domain.models.candidate import Gender
from domain.models.division import Division, DivisionBucket, DivisionTarget
from domain.models.placement_unit import PlacementUnit
from domain.services.division_placement_service import DivisionPlacementService, to_division_rosters


def _ids(bucket):
    return sorted(p.id for p in bucket.players())


class TestDivisionModel:
    """Test Division and DivisionBucket models."""

    def test_division_requires_positive_team_count(self):
        with pytest.raises(ValueError):
            Division(id=1, name="Broken", rank=1, team_count=0)

    def test_bucket_fit_checks(self, make_candidate, make_division):
        bucket = DivisionBucket(
            division=make_division(1),
            target=DivisionTarget(size=2, male=1, non_male=1),
        )
        male = PlacementUnit.from_players([make_candidate("m", 10)])
        pair = PlacementUnit.from_players([make_candidate("a", 10), make_candidate("b", 20)])

        assert bucket.fits_strict(male)
        assert bucket.fits_size(pair)
        assert not bucket.fits_strict(pair)  # two males against a male target of one

        filled = bucket.with_unit(male)
        assert filled.size == 1
        assert filled.has_room
        assert bucket.size == 0  # buckets are immutable
        assert filled.without_unit(male).size == 0


class TestDivisionPlacementService:
    """Test DivisionPlacementService.place()."""

    def test_fills_strongest_division_first(self, make_candidate, make_division):
        divisions = [make_division(1), make_division(2), make_division(3)]
        pool = [make_candidate(f"p{i}", i) for i in range(1, 7)]

        placement = DivisionPlacementService().place(divisions, pool)

        assert _ids(placement[1]) == ["p1", "p2"]
        assert _ids(placement[2]) == ["p3", "p4"]
        assert _ids(placement[3]) == ["p5", "p6"]

    def test_captain_pair_goes_to_locked_division(self, make_candidate, make_division):
        """A weak captain and partner land in the top division despite their scores."""
        divisions = [make_division(1), make_division(2)]
        pool = [
            make_candidate("x1", 10),
            make_candidate("x2", 20),
            make_candidate("cap", 500, is_captain=True, captain_division_id=1, pair_user_id="mate"),
            make_candidate("mate", 600, pair_user_id="cap"),
        ]

        placement = DivisionPlacementService().place(divisions, pool)

        assert _ids(placement[1]) == ["cap", "mate"]
        assert _ids(placement[2]) == ["x1", "x2"]

    def test_locked_units_ignore_size_targets(self, make_candidate, make_division):
        divisions = [make_division(1), make_division(2)]
        pool = [
            make_candidate("c1", 300, is_captain=True, captain_division_id=1),
            make_candidate("c2", 400, is_captain=True, captain_division_id=1),
            make_candidate("c3", 500, is_captain=True, captain_division_id=1),
            make_candidate("x", 10),
        ]

        placement = DivisionPlacementService().place(divisions, pool)

        assert _ids(placement[1]) == ["c1", "c2", "c3"]
        assert _ids(placement[2]) == ["x"]

    def test_unknown_locked_division_goes_to_catch_all(self, make_candidate, make_division):
        divisions = [make_division(1), make_division(2)]
        pool = [
            make_candidate("ghost_cap", 10, is_captain=True, captain_division_id=99),
            make_candidate("x", 20),
        ]

        placement = DivisionPlacementService().place(divisions, pool)

        assert "ghost_cap" in _ids(placement[2])

    def test_gender_rebalance_swaps_between_neighbours(self, make_candidate, make_division):
        """
        Greedy fill puts both males on top; the swap pass trades the weaker
        male for the stronger non-male below.
        """
        divisions = [make_division(1), make_division(2)]
        pool = [
            make_candidate("m1", 10),
            make_candidate("m2", 20),
            make_candidate("f1", 30, gender=Gender.NOT_MALE),
            make_candidate("f2", 40, gender=Gender.NOT_MALE),
        ]

        placement = DivisionPlacementService().place(divisions, pool)

        assert _ids(placement[1]) == ["f1", "m1"]
        assert _ids(placement[2]) == ["f2", "m2"]
        for bucket in placement.values():
            assert bucket.male_count == bucket.target.male

    def test_rebalance_disabled(self, make_candidate, make_division):
        divisions = [make_division(1), make_division(2)]
        pool = [
            make_candidate("m1", 10),
            make_candidate("m2", 20),
            make_candidate("f1", 30, gender=Gender.NOT_MALE),
            make_candidate("f2", 40, gender=Gender.NOT_MALE),
        ]

        placement = DivisionPlacementService(rebalance_passes=0).place(divisions, pool)

        assert _ids(placement[1]) == ["m1", "m2"]

    def test_pairs_never_split(self, make_candidate, make_division):
        divisions = [make_division(1), make_division(2), make_division(3)]
        pool = [
            make_candidate("s1", 10),
            make_candidate("a", 20, pair_user_id="b"),
            make_candidate("b", 30, pair_user_id="a"),
            make_candidate("s2", 40),
            make_candidate("s3", 50),
            make_candidate("s4", 60),
        ]

        placement = DivisionPlacementService().place(divisions, pool)

        division_of = {p.id: d for d, b in placement.items() for p in b.players()}
        assert division_of["a"] == division_of["b"]

    def test_every_candidate_placed_once(self, make_candidate, make_division):
        divisions = [make_division(1, 2), make_division(2, 2), make_division(3, 1)]
        pool = [
            make_candidate(f"p{i}", (i * 37) % 101, gender=Gender.NOT_MALE if i % 3 == 0 else Gender.MALE)
            for i in range(23)
        ]

        placement = DivisionPlacementService().place(divisions, pool)
        placed = [p.id for b in placement.values() for p in b.players()]

        assert sorted(placed) == sorted(p.id for p in pool)
        assert sum(b.size for b in placement.values()) == len(pool)

    def test_empty_pool(self, make_division):
        placement = DivisionPlacementService().place([make_division(1), make_division(2)], [])
        assert all(b.size == 0 for b in placement.values())

    def test_no_divisions(self, make_candidate):
        assert DivisionPlacementService().place([], [make_candidate("a", 1)]) == {}


class TestCatchAllRedistribution:
    """Test pulling units back out of an overfilled catch-all."""

    def test_fills_short_division_with_strict_fits(self, make_candidate, make_division):
        top, catch_all = make_division(1), make_division(2)
        male = PlacementUnit.from_players([make_candidate("m", 10)])
        female = PlacementUnit.from_players([make_candidate("f", 20, gender=Gender.NOT_MALE)])
        pair = PlacementUnit.from_players([make_candidate("a", 5), make_candidate("b", 6)])
        captain = PlacementUnit.from_players(
            [make_candidate("c", 1, is_captain=True, captain_division_id=2)]
        )
        placement = {
            1: DivisionBucket(division=top, target=DivisionTarget(size=2, male=1, non_male=1)),
            2: DivisionBucket(
                division=catch_all,
                target=DivisionTarget(size=3, male=3, non_male=0),
                units=(captain, pair, male, female),
            ),
        }

        DivisionPlacementService()._redistribute_from_catch_all(placement, [1], 2)

        assert _ids(placement[1]) == ["f", "m"]
        assert _ids(placement[2]) == ["a", "b", "c"]

    def test_stops_when_nothing_fits(self, make_candidate, make_division):
        pair = PlacementUnit.from_players([make_candidate("a", 5), make_candidate("b", 6)])
        placement = {
            1: DivisionBucket(division=make_division(1), target=DivisionTarget(size=1, male=1)),
            2: DivisionBucket(division=make_division(2), units=(pair,)),
        }

        DivisionPlacementService()._redistribute_from_catch_all(placement, [1], 2)

        assert placement[1].size == 0
        assert _ids(placement[2]) == ["a", "b"]


class TestToDivisionRosters:
    """Test flattening placement into display-ordered rosters."""

    def test_males_first_then_score(self, make_candidate, make_division):
        divisions = [make_division(1)]
        pool = [
            make_candidate("f1", 5, gender=Gender.NOT_MALE),
            make_candidate("m2", 30),
            make_candidate("m1", 20),
        ]

        rosters = to_division_rosters(DivisionPlacementService().place(divisions, pool))

        assert [p.id for p in rosters[1]] == ["m1", "m2", "f1"]
