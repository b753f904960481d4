"""
Team formation domain service.

Builds the teams of one division: captains seed the teams, the remaining
units are dealt in snake order with a multi-criteria cost, and three bounded
swap passes even out gender, new-player and score balance.
"""

import logging
from collections.abc import Callable, Sequence

from domain.models.candidate import Candidate, candidate_sort_key, is_mutual_pair
from domain.models.division import Division
from domain.models.placement_unit import PlacementUnit
from domain.models.team import TeamBucket
from domain.services.apportionment import allocate
from domain.services.pairing_service import build_placement_units

logger = logging.getLogger("roster.team_formation")

# (constraint, gender, new-player, projected score spread, size)
PlacementCost = tuple[int, int, int, float, int]


def team_capacities(player_count: int, team_count: int) -> list[int]:
    """Even split; the first (player_count % team_count) teams get one extra."""
    if team_count <= 0:
        return []
    base, larger = divmod(player_count, team_count)
    return [base + 1 if index < larger else base for index in range(team_count)]


def snake_order(length: int, team_count: int) -> list[int]:
    """
    Draft-style visiting order: 0..n-1, then n-1..0, alternating.

    Example for 3 teams: 0, 1, 2, 2, 1, 0, 0, 1, ...
    """
    order: list[int] = []
    if team_count <= 0:
        return order
    ascending = True
    while len(order) < length:
        indices = range(team_count) if ascending else range(team_count - 1, -1, -1)
        for index in indices:
            if len(order) >= length:
                break
            order.append(index)
        ascending = not ascending
    return order


def _spread(sums: Sequence[float]) -> float:
    return max(sums) - min(sums) if sums else 0.0


class TeamFormationService:
    """
    Pure domain logic for splitting one division into teams.

    Responsibilities:
    - Seed captains (and their mutual partners) into teams by captain rank
    - Greedy unit placement in snake order, scored by a lexicographic cost
    - Local search swaps for gender quota, new-player quota and score spread
    """

    def __init__(
        self,
        gender_swap_passes: int = 20,
        new_player_swap_passes: int = 12,
        score_swap_passes: int = 24,
    ):
        """
        Initialize the team formation service.

        Args:
            gender_swap_passes: Maximum swaps balancing non-male counts
            new_player_swap_passes: Maximum swaps balancing new-player counts
            score_swap_passes: Maximum swaps reducing the team score spread
        """
        self.gender_swap_passes = gender_swap_passes
        self.new_player_swap_passes = new_player_swap_passes
        self.score_swap_passes = score_swap_passes

    def form_teams(
        self,
        division: Division,
        players: Sequence[Candidate],
        is_catch_all: bool = False,
    ) -> list[TeamBucket]:
        """
        Split a division's players into division.team_count teams.

        Args:
            division: The division being formed
            players: Every candidate placed in this division
            is_catch_all: The catch-all division has no gender quota ceiling

        Returns:
            Teams in index order, each sorted captain first then by score
        """
        team_count = division.team_count
        capacities = team_capacities(len(players), team_count)
        teams = [TeamBucket(index=i, capacity=capacities[i]) for i in range(team_count)]

        locked_ids = self._seed_captains(teams, players)
        remaining = [p for p in players if p.id not in locked_ids]
        units = build_placement_units(remaining)

        total_male = sum(1 for p in players if p.is_male)
        male_targets = allocate(total_male, capacities, [1] * team_count)
        non_male_targets = [cap - male for cap, male in zip(capacities, male_targets)]
        total_new = sum(1 for p in players if p.is_new)
        new_targets = allocate(total_new, capacities, [1] * team_count)

        order = snake_order(len(units), team_count)
        for position, unit in enumerate(units):
            index = self._choose_team(
                teams, unit, order[position], male_targets, non_male_targets, new_targets, is_catch_all
            )
            teams[index] = teams[index].with_players(unit.players)

        def swappable(player: Candidate) -> bool:
            return (
                not player.is_captain
                and player.pair_user_id is None
                and player.id not in locked_ids
            )

        gender_swaps = self._balance_quota(
            teams,
            targets=non_male_targets,
            metric=lambda team: team.non_male_count,
            gives=lambda p: swappable(p) and not p.is_male,
            takes=lambda p: swappable(p) and p.is_male,
            compatible=lambda a, b: True,
            max_passes=self.gender_swap_passes,
        )
        new_swaps = self._balance_quota(
            teams,
            targets=new_targets,
            metric=lambda team: team.new_count,
            gives=lambda p: swappable(p) and p.is_new,
            takes=lambda p: swappable(p) and not p.is_new,
            compatible=lambda a, b: a.gender == b.gender,
            max_passes=self.new_player_swap_passes,
        )
        score_swaps = self._balance_scores(teams, swappable)

        logger.info(
            f"Division {division.name}: {len(players)} players in {team_count} teams "
            f"(captain-locked {len(locked_ids)}, units {len(units)}); swaps "
            f"gender={gender_swaps} new={new_swaps} score={score_swaps}, "
            f"score spread={_spread([t.score_sum for t in teams]):.1f}"
        )
        return [team.sorted_for_display() for team in teams]

    def _seed_captains(self, teams: list[TeamBucket], players: Sequence[Candidate]) -> set[str]:
        """
        Place captains into teams by captain rank, each with their mutual partner.

        Returns:
            Ids of every seeded player; they never move again in this division
        """
        by_id = {p.id: p for p in players}
        captains = sorted((p for p in players if p.is_captain), key=candidate_sort_key)
        locked: set[str] = set()
        seat = 0

        for captain in captains:
            if seat >= len(teams):
                break
            if captain.id in locked:
                continue
            members = [captain]
            partner = by_id.get(captain.pair_user_id) if captain.pair_user_id else None
            if is_mutual_pair(captain, partner) and partner.id not in locked:
                members.append(partner)
            teams[seat] = teams[seat].with_players(members)
            locked.update(p.id for p in members)
            seat += 1

        return locked

    @staticmethod
    def _constraint_penalty(
        size_ok: bool, gender_ok: bool, is_catch_all: bool
    ) -> int:
        if is_catch_all:
            return 0 if size_ok else 1
        if size_ok and gender_ok:
            return 0
        if size_ok:
            return 1
        return 2

    def _choose_team(
        self,
        teams: list[TeamBucket],
        unit: PlacementUnit,
        preferred: int,
        male_targets: list[int],
        non_male_targets: list[int],
        new_targets: list[int],
        is_catch_all: bool,
    ) -> int:
        """Pick the team with the lowest placement cost, preferred team first."""
        priorities = [preferred] + [i for i in range(len(teams)) if i != preferred]
        sums = [team.score_sum for team in teams]
        best_index: int | None = None
        best_cost: PlacementCost | None = None

        for index in priorities:
            team = teams[index]
            projected_size = team.size + unit.size
            if projected_size > team.capacity:
                continue

            projected_male = team.male_count + unit.male_count
            projected_non_male = team.non_male_count + unit.non_male_count
            projected_new = team.new_count + unit.new_count
            gender_ok = (
                projected_male <= male_targets[index]
                and projected_non_male <= non_male_targets[index]
            )
            projected_sums = list(sums)
            projected_sums[index] += unit.score_sum

            cost: PlacementCost = (
                self._constraint_penalty(True, gender_ok, is_catch_all),
                abs(projected_male - male_targets[index])
                + abs(projected_non_male - non_male_targets[index]),
                abs(projected_new - new_targets[index]),
                _spread(projected_sums),
                abs(projected_size - team.capacity),
            )
            if best_cost is None or cost < best_cost:
                best_cost = cost
                best_index = index

        if best_index is None:
            # No team can take the whole unit; overfill the emptiest team
            best_index = min(range(len(teams)), key=lambda i: (-teams[i].remaining, i))
            logger.warning(
                f"No team has room for unit {unit.id}; placing it in team "
                f"{teams[best_index].number} over capacity"
            )
        return best_index

    @staticmethod
    def _closest_pair(
        sources: list[Candidate],
        targets: list[Candidate],
        compatible: Callable[[Candidate, Candidate], bool],
    ) -> tuple[Candidate, Candidate] | None:
        best: tuple[Candidate, Candidate] | None = None
        best_diff = 0.0
        for source in sources:
            for target in targets:
                if not compatible(source, target):
                    continue
                diff = abs(source.placement_score - target.placement_score)
                if best is None or diff < best_diff:
                    best = (source, target)
                    best_diff = diff
        return best

    def _balance_quota(
        self,
        teams: list[TeamBucket],
        targets: list[int],
        metric: Callable[[TeamBucket], int],
        gives: Callable[[Candidate], bool],
        takes: Callable[[Candidate], bool],
        compatible: Callable[[Candidate, Candidate], bool],
        max_passes: int,
    ) -> int:
        """
        Move a counted player from a surplus team to a deficit team, one swap per pass.

        The surplus team hands over a player matching `gives` and receives the
        closest-scored player matching `takes` from the deficit team, so each
        swap lowers the total deviation from target by two.

        Returns:
            Number of swaps made
        """
        swaps = 0
        for _ in range(max_passes):
            deltas = [metric(team) - targets[i] for i, team in enumerate(teams)]
            surpluses = sorted((i for i, d in enumerate(deltas) if d > 0), key=lambda i: -deltas[i])
            deficits = sorted((i for i, d in enumerate(deltas) if d < 0), key=lambda i: deltas[i])
            if not surpluses or not deficits:
                break

            swapped = False
            for source in surpluses:
                for target in deficits:
                    pair = self._closest_pair(
                        [p for p in teams[source].players if gives(p)],
                        [p for p in teams[target].players if takes(p)],
                        compatible,
                    )
                    if pair is None:
                        continue
                    outgoing, incoming = pair
                    teams[source] = teams[source].with_swap(outgoing, incoming)
                    teams[target] = teams[target].with_swap(incoming, outgoing)
                    swapped = True
                    break
                if swapped:
                    break

            if not swapped:
                break
            swaps += 1
        return swaps

    def _balance_scores(
        self,
        teams: list[TeamBucket],
        swappable: Callable[[Candidate], bool],
    ) -> int:
        """
        Swap like-for-like players (same gender and new status) between the
        highest- and lowest-sum teams while that strictly shrinks the spread.

        Returns:
            Number of swaps made
        """
        swaps = 0
        for _ in range(self.score_swap_passes):
            if not teams:
                break
            ranked = sorted(range(len(teams)), key=lambda i: -teams[i].score_sum)
            high, low = ranked[0], ranked[-1]
            if teams[high].score_sum <= teams[low].score_sum:
                break
            if not self._try_score_swap(teams, high, low, swappable):
                break
            swaps += 1
        return swaps

    @staticmethod
    def _try_score_swap(
        teams: list[TeamBucket],
        high: int,
        low: int,
        swappable: Callable[[Candidate], bool],
    ) -> bool:
        sums = [team.score_sum for team in teams]
        current = _spread(sums)
        best: tuple[Candidate, Candidate] | None = None
        best_spread = current

        for high_player in (p for p in teams[high].players if swappable(p)):
            for low_player in (p for p in teams[low].players if swappable(p)):
                if high_player.gender != low_player.gender:
                    continue
                if high_player.is_new != low_player.is_new:
                    continue
                delta = low_player.placement_score - high_player.placement_score
                projected = list(sums)
                projected[high] += delta
                projected[low] -= delta
                spread = _spread(projected)
                if spread < best_spread:
                    best = (high_player, low_player)
                    best_spread = spread

        if best is None:
            return False
        high_player, low_player = best
        teams[high] = teams[high].with_swap(high_player, low_player)
        teams[low] = teams[low].with_swap(low_player, high_player)
        return True
