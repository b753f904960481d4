"""
Division placement domain service.

Splits the candidate pool into divisions: captains' units go to their locked
division, everyone else fills divisions strongest-first under size and gender
targets, and a bounded swap pass evens out gender surpluses between
neighbouring divisions.
"""

import logging
from collections.abc import Sequence

from domain.models.candidate import Candidate, division_display_key
from domain.models.division import Division, DivisionBucket
from domain.models.placement_unit import PlacementUnit
from domain.models.roster_draft import DivisionRosters
from domain.services.division_target_service import compute_division_targets
from domain.services.pairing_service import build_placement_units, unit_sort_key

logger = logging.getLogger("roster.division_placement")


class DivisionPlacementService:
    """
    Pure domain logic for the division split.

    Buckets are immutable; every step stores a rebuilt bucket back into the
    placement map, keyed by division id.
    """

    def __init__(self, rebalance_passes: int = 6):
        """
        Initialize the placement service.

        Args:
            rebalance_passes: Maximum gender swap passes over adjacent divisions
        """
        self.rebalance_passes = rebalance_passes

    def place(
        self,
        divisions: Sequence[Division],
        candidates: Sequence[Candidate],
    ) -> dict[int, DivisionBucket]:
        """
        Assign every candidate to exactly one division.

        Args:
            divisions: Divisions ordered strongest to weakest (last is catch-all)
            candidates: Eligible candidate pool

        Returns:
            Mapping of division id to its final DivisionBucket, in division order
        """
        if not divisions:
            return {}

        targets = compute_division_targets(divisions, candidates)
        placement = {
            d.id: DivisionBucket(division=d, target=targets[d.id]) for d in divisions
        }
        units = build_placement_units(candidates)
        catch_all_id = divisions[-1].id
        upper_ids = [d.id for d in divisions[:-1]]

        for unit in (u for u in units if u.is_locked):
            division_id = unit.locked_division_id
            if division_id not in placement:
                logger.warning(
                    f"Unit {unit.id} is locked to unknown division {division_id}; "
                    f"placing it in the catch-all division"
                )
                division_id = catch_all_id
            placement[division_id] = placement[division_id].with_unit(unit)

        self._place_unlocked(placement, [u for u in units if not u.is_locked], upper_ids, catch_all_id)
        self._redistribute_from_catch_all(placement, upper_ids, catch_all_id)
        swaps = self._rebalance_gender(placement, [d.id for d in divisions])

        for bucket in placement.values():
            logger.info(
                f"Division {bucket.division.name}: {bucket.size}/{bucket.target.size} players, "
                f"male {bucket.male_count}/{bucket.target.male}, "
                f"non-male {bucket.non_male_count}/{bucket.target.non_male}"
            )
        logger.info(f"Division gender rebalancing made {swaps} swaps")
        return placement

    def _place_unlocked(
        self,
        placement: dict[int, DivisionBucket],
        units: list[PlacementUnit],
        upper_ids: list[int],
        catch_all_id: int,
    ) -> None:
        """Greedy strongest-first fill: strict fit, relaxed fit, any room, catch-all."""
        preferred = 0

        for unit in units:
            while preferred < len(upper_ids) and not placement[upper_ids[preferred]].has_room:
                preferred += 1

            scan = upper_ids[preferred:]
            chosen = next((i for i in scan if placement[i].fits_strict(unit)), None)
            if chosen is None:
                chosen = next((i for i in scan if placement[i].fits_size(unit)), None)
            if chosen is None:
                chosen = next((i for i, b in placement.items() if b.fits_size(unit)), None)
            if chosen is None:
                logger.warning(f"No division has room for unit {unit.id}; using catch-all")
                chosen = catch_all_id

            placement[chosen] = placement[chosen].with_unit(unit)

    def _redistribute_from_catch_all(
        self,
        placement: dict[int, DivisionBucket],
        upper_ids: list[int],
        catch_all_id: int,
    ) -> None:
        """
        Pull strictly-fitting unlocked units out of the catch-all into short divisions.

        After the greedy fill the catch-all only overflows once every division
        is full, so this normally moves nothing; it keeps the upper divisions
        at target when a placement is assembled some other way.
        """
        for division_id in upper_ids:
            while placement[division_id].has_room:
                bucket = placement[division_id]
                unit = next(
                    (
                        u
                        for u in placement[catch_all_id].units
                        if not u.is_locked and bucket.fits_strict(u)
                    ),
                    None,
                )
                if unit is None:
                    break
                placement[catch_all_id] = placement[catch_all_id].without_unit(unit)
                placement[division_id] = bucket.with_unit(unit)

    @staticmethod
    def _swap_candidate(
        bucket: DivisionBucket, male: bool, highest: bool
    ) -> PlacementUnit | None:
        """Pick an unlocked single of the given gender, weakest or strongest."""
        singles = sorted(
            (
                u
                for u in bucket.units
                if not u.is_locked and u.size == 1 and u.players[0].is_male == male
            ),
            key=unit_sort_key,
        )
        if not singles:
            return None
        return singles[-1] if highest else singles[0]

    def _rebalance_gender(
        self, placement: dict[int, DivisionBucket], ordered_ids: list[int]
    ) -> int:
        """
        Swap singles between neighbouring divisions with opposite male surplus/deficit.

        The upper division gives away its weakest matching single and takes the
        lower division's strongest one, so scores drift as little as possible.

        Returns:
            Number of swaps made
        """
        swaps = 0
        for _ in range(self.rebalance_passes):
            changed = False

            for upper_id, lower_id in zip(ordered_ids, ordered_ids[1:]):
                upper = placement[upper_id]
                lower = placement[lower_id]
                upper_delta = upper.male_count - upper.target.male
                lower_delta = lower.male_count - lower.target.male

                if upper_delta > 0 and lower_delta < 0:
                    outgoing = self._swap_candidate(upper, male=True, highest=True)
                    incoming = self._swap_candidate(lower, male=False, highest=False)
                elif upper_delta < 0 and lower_delta > 0:
                    outgoing = self._swap_candidate(upper, male=False, highest=True)
                    incoming = self._swap_candidate(lower, male=True, highest=False)
                else:
                    continue

                if outgoing is None or incoming is None:
                    continue

                placement[upper_id] = upper.without_unit(outgoing).with_unit(incoming)
                placement[lower_id] = lower.without_unit(incoming).with_unit(outgoing)
                changed = True
                swaps += 1

            if not changed:
                break

        return swaps


def to_division_rosters(placement: dict[int, DivisionBucket]) -> DivisionRosters:
    """Flatten buckets into per-division candidate lists in display order."""
    return {
        division_id: tuple(sorted(bucket.players(), key=division_display_key))
        for division_id, bucket in placement.items()
    }
