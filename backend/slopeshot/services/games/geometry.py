import logging
import math
import random
from typing import List, Optional

from slopeshot.models import Point, RoundState

logger = logging.getLogger(__name__)

SLOPE_DENOMINATOR = 1000
SLOPE_NUMERATOR_MAX = 5000


def lattice_step(k: int, denominator: int = SLOPE_DENOMINATOR):
    """Reduce ``k/denominator`` to lowest terms.

    Returns ``(run, rise)``: the smallest integer step that stays on a line
    of slope ``k/denominator``. ``run`` is always positive.
    """
    divisor = math.gcd(abs(k), denominator)
    return denominator // divisor, k // divisor


def candidate_targets(grid_max: int, intercept: int, run: int, rise: int) -> List[Point]:
    """All in-grid points reachable by whole steps either side of the intercept."""
    found = []
    for n in range(1, 2 * grid_max + 1):
        for sign in (1, -1):
            x = sign * n * run
            y = sign * n * rise + intercept
            if abs(x) <= grid_max and abs(y) <= grid_max:
                found.append(Point(x, y))
    # Drop repeats, first occurrence wins
    return list(dict.fromkeys(found))


def generate_round(
    grid_max: int,
    rng: Optional[random.Random] = None,
    *,
    denominator: int = SLOPE_DENOMINATOR,
    numerator_max: int = SLOPE_NUMERATOR_MAX,
) -> RoundState:
    """Pick a random intercept and slope with at least one in-grid target.

    - intercept is uniform over ``[-(grid_max-1), grid_max-1]``
    - slope is ``k/denominator`` for a nonzero integer ``k`` in ``[-numerator_max, numerator_max]``
    - draws that leave no candidate target are rejected and redrawn
    """
    if grid_max < 1:
        raise ValueError(f'grid_max must be a positive integer, got {grid_max!r}')
    rng = rng or random.Random()

    attempts = 0
    while True:
        attempts += 1
        intercept = rng.randint(-(grid_max - 1), grid_max - 1)
        k = 0
        while k == 0:
            k = rng.randint(-numerator_max, numerator_max)
        run, rise = lattice_step(k, denominator)
        targets = candidate_targets(grid_max, intercept, run, rise)
        if targets:
            break

    if attempts > 1:
        logger.debug(f"[round-gen] grid_max={grid_max} accepted after {attempts} attempts")
    return RoundState(target=rng.choice(targets), intercept=intercept)
