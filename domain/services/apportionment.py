"""
Proportional integer allocation under per-bucket capacity.
"""

import math


def allocate(total: int, capacities: list[int], weights: list[float]) -> list[int]:
    """
    Distribute `total` indivisible units across buckets proportional to weights.

    Each bucket first gets the floor of its exact share (capped by its
    capacity). Remaining units go one at a time to the bucket with the
    largest fractional remainder, ties going to the bucket with the lowest
    count/capacity ratio, until the total is placed or every bucket is full.

    Args:
        total: Number of units to distribute
        capacities: Maximum units per bucket
        weights: Relative weight per bucket

    Returns:
        Units per bucket, same length as capacities
    """
    result = [0] * len(capacities)
    if total <= 0 or not capacities:
        return result

    weight_total = sum(weights)
    if weight_total <= 0:
        return result

    fractions = [0.0] * len(capacities)
    for index, capacity in enumerate(capacities):
        exact = total * weights[index] / weight_total
        floored = math.floor(exact)
        result[index] = min(capacity, floored)
        fractions[index] = exact - floored

    assigned = sum(result)
    while assigned < total:
        best_index = -1
        best_fraction = -1.0
        best_load = math.inf

        for index, capacity in enumerate(capacities):
            if result[index] >= capacity:
                continue
            load = result[index] / capacity if capacity > 0 else math.inf
            if fractions[index] > best_fraction or (
                fractions[index] == best_fraction and load < best_load
            ):
                best_index = index
                best_fraction = fractions[index]
                best_load = load

        if best_index == -1:
            break

        result[best_index] += 1
        assigned += 1

    return result
