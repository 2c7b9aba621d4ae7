"""
CP-SAT backend for a single Pack:
  • One Boolean per item (selected or not)
  • Capacity on integer-scaled weights
  • Lexicographic objective folded into one integer:
      - maximize total cost first
      - among equal-cost subsets, minimize total weight

Objective
---------
    Maximize:  B * Σ cost_units_i * x_i  -  Σ weight_units_i * x_i
    with B = Σ weight_units_i + 1

Since the weight term can never reach B, one extra cost unit always outweighs
any weight difference, and a weight difference decides only between subsets
of equal cost. This matches the DP solver's comparator.

If CP-SAT does not prove optimality within the time limit, the DP solver's
answer is returned instead and a warning is logged. The same happens when the
scaled coefficients would not fit CP-SAT's 64-bit integers (weights with many
decimal places).
"""
import logging
from decimal import Decimal, localcontext
from typing import Optional

from ortools.sat.python import cp_model

from domain_types import Pack, Solution
from solver import DEFAULT_MAX_DP_COLUMNS, solve
from solver_utils import decimal_places, exact_context, to_int_units, to_units

logger = logging.getLogger(__name__)

INT64_MAX = 2**63 - 1


def optimize_pack(
    pack: Pack,
    *,
    time_limit_s: float = 10.0,
    log: bool = False,
    random_seed: Optional[int] = None,
    num_search_workers: Optional[int] = None,
    max_dp_columns: int = DEFAULT_MAX_DP_COLUMNS,
) -> Solution:
    """
    Solve one Pack with CP-SAT.

    Solver controls
    ---------------
    - time_limit_s: CpSolverParameters.max_time_in_seconds.
    - log: CpSolverParameters.log_search_progress.
    - random_seed (Optional[int]): If provided, sets CpSolverParameters.random_seed.
    - num_search_workers (Optional[int]): If provided, sets CpSolverParameters.num_search_workers;
        1 makes the search reproducible.
    - max_dp_columns: Passed to the DP solver whenever it answers instead of CP-SAT.

    Returns
    -------
    Solution
        Max-cost, then min-weight subset. Empty when nothing fits.
    """
    if pack.capacity <= 0 or not pack.items:
        return Solution.empty()

    weight_units, capacity_units, _ = to_units(pack.items, pack.capacity)
    cost_places = max(decimal_places(it.cost) for it in pack.items)
    cost_units = [to_int_units(it.cost, cost_places) for it in pack.items]
    B = sum(weight_units) + 1

    # objective stays within B * (max cost * items + 1)
    if max(capacity_units, B * (max(cost_units) * len(cost_units) + 1)) > INT64_MAX:
        logger.warning(
            "CP-SAT coefficients exceed int64 for capacity=%s items=%d, falling back to DP",
            pack.capacity, len(pack.items),
        )
        return solve(pack, max_dp_columns=max_dp_columns)

    m = cp_model.CpModel()
    x = [m.NewBoolVar(f"x_{it.index}") for it in pack.items]
    m.Add(sum(w * xi for w, xi in zip(weight_units, x)) <= capacity_units)
    total_cost = sum(c * xi for c, xi in zip(cost_units, x))
    total_weight = sum(w * xi for w, xi in zip(weight_units, x))
    m.Maximize(B * total_cost - total_weight)

    s = cp_model.CpSolver()
    s.parameters.max_time_in_seconds = float(time_limit_s)
    s.parameters.log_search_progress = bool(log)
    if random_seed is not None:
        s.parameters.random_seed = int(random_seed)
    if num_search_workers is not None:
        s.parameters.num_search_workers = int(num_search_workers)
    status = s.Solve(m)

    if status != cp_model.OPTIMAL:
        logger.warning(
            "CP-SAT status %s for capacity=%s items=%d, falling back to DP",
            s.StatusName(status), pack.capacity, len(pack.items),
        )
        return solve(pack, max_dp_columns=max_dp_columns)

    chosen = [it for it, xi in zip(pack.items, x) if s.Value(xi)]
    with localcontext(exact_context(pack.items)):
        result = Solution(
            total_cost=sum((it.cost for it in chosen), Decimal(0)),
            total_weight=sum((it.weight for it in chosen), Decimal(0)),
            indices=frozenset(it.index for it in chosen),
        )
    logger.debug("cp-sat solved capacity=%s items=%d -> %s", pack.capacity, len(pack.items), sorted(result.indices))
    return result
