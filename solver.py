"""
0/1 knapsack solver for a single validated Pack.

The default path is a tabulated dynamic program over integer-scaled weights:
weights are multiplied by the smallest power of ten that makes them exact
integers, so ``53.38`` becomes ``5338`` hundredths and the capacity is scaled
the same way. The table keeps, per capacity column, the best Solution found
so far using the items processed up to now:

    best(0, w) = (0, 0, {})
    best(i, w) = best(i-1, w)                                  if weight_i > w
               = better(best(i-1, w), best(i-1, w - weight_i) + item_i)

"better" prefers strictly greater cost, then strictly smaller weight, and
otherwise keeps the exclusion branch. The row is rolled in place by walking
columns from high to low, which keeps every item used at most once.

When the scaled capacity would exceed ``max_dp_columns`` (weights with many
decimal places) the solver switches to an exhaustive include/exclude search,
which is bounded by 2**15 leaves for the largest valid Pack.
"""
import logging
from decimal import localcontext
from typing import List

from domain_types import Pack, Solution
from solver_utils import exact_context, is_better, to_units, with_item

logger = logging.getLogger(__name__)

DEFAULT_MAX_DP_COLUMNS = 100_000


def solve(pack: Pack, max_dp_columns: int = DEFAULT_MAX_DP_COLUMNS) -> Solution:
    """Return the max-cost, then min-weight, subset of ``pack.items`` within ``pack.capacity``.

    Args:
        pack: Validated Pack.
        max_dp_columns: Largest scaled capacity solved with the DP table.

    Returns:
        Solution; empty when the capacity is not positive, there are no
        items, or no item fits.
    """
    if pack.capacity <= 0 or not pack.items:
        return Solution.empty()
    _, capacity_units, scale = to_units(pack.items, pack.capacity)
    if capacity_units > max_dp_columns:
        logger.debug(
            "scaled capacity %d (scale %d) exceeds %d columns, using exhaustive search",
            capacity_units, scale, max_dp_columns,
        )
        return solve_exhaustive(pack)
    return solve_dp(pack)


def solve_dp(pack: Pack) -> Solution:
    if pack.capacity <= 0 or not pack.items:
        return Solution.empty()
    weight_units, capacity_units, _ = to_units(pack.items, pack.capacity)

    best: List[Solution] = [Solution.empty()] * (capacity_units + 1)
    with localcontext(exact_context(pack.items)):
        for item, units in zip(pack.items, weight_units):
            if units > capacity_units:
                continue
            for w in range(capacity_units, units - 1, -1):
                prev = best[w - units]
                cost = prev.total_cost + item.cost
                weight = prev.total_weight + item.weight
                if is_better(cost, weight, best[w]):
                    best[w] = with_item(prev, item)

    result = best[capacity_units]
    logger.debug("dp solved capacity=%s items=%d -> %s", pack.capacity, len(pack.items), sorted(result.indices))
    return result


def solve_exhaustive(pack: Pack) -> Solution:
    """Recursive include/exclude search following the same recurrence as the DP table.

    ``best(i, remaining)`` only looks at the first ``i`` items, so ties are
    resolved exactly as ``solve_dp`` resolves them. Fit checks run on the
    integer weight units.
    """
    if pack.capacity <= 0 or not pack.items:
        return Solution.empty()
    items = pack.items
    weight_units, capacity_units, _ = to_units(items, pack.capacity)

    def best(i: int, remaining: int) -> Solution:
        if i == 0:
            return Solution.empty()
        item = items[i - 1]
        excluded = best(i - 1, remaining)
        if weight_units[i - 1] > remaining:
            return excluded
        prev = best(i - 1, remaining - weight_units[i - 1])
        if is_better(prev.total_cost + item.cost, prev.total_weight + item.weight, excluded):
            return with_item(prev, item)
        return excluded

    with localcontext(exact_context(items)):
        return best(len(items), capacity_units)
