"""Tests for manual division moves with compensating swaps."""

import pytest

from domain.models.candidate import Gender
from services import error_codes
from services.roster_moves import captain_partner_ids, find_closest_replacement, move_player


@pytest.fixture
def divisions(make_division):
    return [make_division(1), make_division(2), make_division(3)]


def _ids(players):
    return [p.id for p in players]


class TestFindClosestReplacement:
    """Test replacement selection."""

    def test_closest_score_same_gender(self, make_candidate):
        mover = make_candidate("mover", 20)
        players = [
            make_candidate("far", 50),
            make_candidate("near", 26),
            make_candidate("nearest_f", 21, gender=Gender.NOT_MALE),
        ]

        assert find_closest_replacement(players, mover, set()).id == "near"

    def test_tie_uses_global_order(self, make_candidate):
        mover = make_candidate("mover", 20)
        players = [make_candidate("above", 30), make_candidate("below", 10)]

        assert find_closest_replacement(players, mover, set()).id == "below"

    def test_skips_captains_pairs_and_used(self, make_candidate):
        mover = make_candidate("mover", 20)
        players = [
            make_candidate("cap", 20, is_captain=True),
            make_candidate("paired", 20, pair_user_id="someone"),
            make_candidate("used", 20),
            make_candidate("ok", 90),
        ]

        assert find_closest_replacement(players, mover, {"used"}).id == "ok"

    def test_unknown_gender_is_its_own_value(self, make_candidate):
        mover = make_candidate("mover", 20, gender=Gender.UNKNOWN)
        players = [make_candidate("f", 20, gender=Gender.NOT_MALE)]

        assert find_closest_replacement(players, mover, set()) is None


class TestCaptainPartnerIds:
    """Test detection of players paired with a captain."""

    def test_partner_anywhere_in_pool(self, make_candidate):
        rosters = {
            1: (make_candidate("cap", 10, is_captain=True, captain_division_id=1),),
            2: (make_candidate("fan", 50, pair_user_id="cap"), make_candidate("other", 60)),
        }

        assert captain_partner_ids(rosters) == {"fan"}


class TestMovePlayer:
    """Test move_player()."""

    def test_move_down_swaps_closest_player(self, make_candidate, divisions):
        a, b = make_candidate("a", 10), make_candidate("b", 20)
        c, d = make_candidate("c", 30), make_candidate("d", 40)
        rosters = {1: (a, b), 2: (c, d), 3: ()}

        result = move_player(rosters, divisions, 0, "b", 1)

        assert result.success
        assert _ids(result.value[1]) == ["a", "c"]
        assert _ids(result.value[2]) == ["b", "d"]
        assert result.value[3] == ()

    def test_move_up(self, make_candidate, divisions):
        a, b = make_candidate("a", 10), make_candidate("b", 20)
        c, d = make_candidate("c", 30), make_candidate("d", 40)
        rosters = {1: (a, b), 2: (c, d), 3: ()}

        result = move_player(rosters, divisions, 1, "d", -1)

        assert result.success
        assert _ids(result.value[1]) == ["a", "d"]
        assert _ids(result.value[2]) == ["b", "c"]

    def test_sizes_preserved(self, make_candidate, divisions):
        rosters = {
            1: tuple(make_candidate(f"a{i}", i) for i in range(5)),
            2: tuple(make_candidate(f"b{i}", 10 + i) for i in range(3)),
            3: (),
        }

        result = move_player(rosters, divisions, 0, "a2", 1)

        assert result.success
        assert len(result.value[1]) == 5
        assert len(result.value[2]) == 3

    def test_result_in_display_order(self, make_candidate, divisions):
        rosters = {
            1: (make_candidate("m1", 10), make_candidate("f1", 5, gender=Gender.NOT_MALE)),
            2: (make_candidate("m2", 30), make_candidate("m3", 12)),
            3: (),
        }

        result = move_player(rosters, divisions, 0, "m1", 1)

        # m3 (12) is closer to m1 (10) than m2 (30); males first, then score
        assert _ids(result.value[1]) == ["m3", "f1"]
        assert _ids(result.value[2]) == ["m1", "m2"]

    def test_mutual_pair_moves_together(self, make_candidate, divisions):
        rosters = {
            1: (
                make_candidate("a", 10),
                make_candidate("p1", 15, pair_user_id="p2"),
                make_candidate("p2", 18, pair_user_id="p1"),
                make_candidate("b", 20),
            ),
            2: tuple(make_candidate(name, score) for name, score in (("c", 30), ("d", 35), ("e", 40), ("f", 50))),
            3: (),
        }

        result = move_player(rosters, divisions, 0, "p1", 1)

        assert result.success
        assert _ids(result.value[1]) == ["a", "b", "c", "d"]
        assert _ids(result.value[2]) == ["p1", "p2", "e", "f"]

    def test_non_mutual_request_moves_alone(self, make_candidate, divisions):
        rosters = {
            1: (make_candidate("x", 10, pair_user_id="y"), make_candidate("y", 20)),
            2: (make_candidate("z", 30),),
            3: (),
        }

        result = move_player(rosters, divisions, 0, "x", 1)

        assert result.success
        assert _ids(result.value[1]) == ["y", "z"]
        assert _ids(result.value[2]) == ["x"]

    def test_partner_in_other_division_fails(self, make_candidate, divisions):
        rosters = {
            1: (make_candidate("p1", 15, pair_user_id="p2"), make_candidate("a", 10)),
            2: (make_candidate("p2", 30, pair_user_id="p1"), make_candidate("c", 40)),
            3: (),
        }

        result = move_player(rosters, divisions, 0, "p1", 1)

        assert not result.success
        assert result.error_code == error_codes.PAIR_SPLIT

    def test_out_of_range(self, make_candidate, divisions):
        rosters = {1: (make_candidate("a", 10),), 2: (), 3: (make_candidate("z", 90),)}

        up = move_player(rosters, divisions, 0, "a", -1)
        down = move_player(rosters, divisions, 2, "z", 1)

        assert up.error_code == error_codes.DIVISION_OUT_OF_RANGE
        assert down.error_code == error_codes.DIVISION_OUT_OF_RANGE

    def test_player_not_found(self, make_candidate, divisions):
        rosters = {1: (make_candidate("a", 10),), 2: (make_candidate("b", 20),), 3: ()}

        result = move_player(rosters, divisions, 0, "b", 1)

        assert result.error_code == error_codes.PLAYER_NOT_FOUND

    def test_captain_is_locked(self, make_candidate, divisions):
        rosters = {
            1: (make_candidate("cap", 10, is_captain=True, captain_division_id=1),),
            2: (make_candidate("b", 20),),
            3: (),
        }

        result = move_player(rosters, divisions, 0, "cap", 1)

        assert result.error_code == error_codes.CAPTAIN_LOCKED

    def test_captain_partner_is_locked(self, make_candidate, divisions):
        rosters = {
            1: (make_candidate("cap", 10, is_captain=True, captain_division_id=1),),
            2: (make_candidate("fan", 20, pair_user_id="cap"), make_candidate("b", 25)),
            3: (make_candidate("z", 30),),
        }

        result = move_player(rosters, divisions, 1, "fan", 1)

        assert result.error_code == error_codes.CAPTAIN_LOCKED

    def test_no_eligible_replacement_leaves_rosters_unchanged(self, make_candidate, divisions):
        rosters = {
            1: (make_candidate("f1", 10, gender=Gender.NOT_MALE), make_candidate("m1", 12)),
            2: (make_candidate("m2", 20), make_candidate("m3", 30)),
            3: (),
        }
        snapshot = dict(rosters)

        result = move_player(rosters, divisions, 0, "f1", 1)

        assert not result.success
        assert result.error_code == error_codes.NO_ELIGIBLE_REPLACEMENT
        assert rosters == snapshot

    def test_pair_needs_two_replacements(self, make_candidate, divisions):
        rosters = {
            1: (
                make_candidate("p1", 15, pair_user_id="p2"),
                make_candidate("p2", 18, pair_user_id="p1"),
            ),
            2: (make_candidate("c", 30), make_candidate("cap", 35, is_captain=True, captain_division_id=2)),
            3: (),
        }

        result = move_player(rosters, divisions, 0, "p1", 1)

        assert result.error_code == error_codes.NO_ELIGIBLE_REPLACEMENT

    def test_invalid_direction_raises(self, make_candidate, divisions):
        rosters = {1: (make_candidate("a", 10),), 2: (), 3: ()}

        with pytest.raises(ValueError):
            move_player(rosters, divisions, 0, "a", 2)
