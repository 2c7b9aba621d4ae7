"""
Unit tests for the knapsack solver in solver.py.

Covers:
- Optimality against exhaustive subset enumeration on seeded random packs.
- Capacity never exceeded.
- Cost ties resolved by minimum weight.
- Boundary: an item whose weight equals the capacity fits.
- Exhaustive search fallback agrees with the DP table.
- Idempotence.

Uses Python's built-in unittest to keep dependencies minimal.
"""
from __future__ import annotations

import itertools
import random
import unittest
from decimal import Decimal
from typing import List, Tuple

from domain_types import Item, Pack, Solution
from solver import solve, solve_dp, solve_exhaustive
from solver_utils import decimal_places, to_int_units, to_units, weight_scale


def _item(index: int, weight: str, cost: int) -> Item:
    return Item(index=index, weight=Decimal(weight), cost=Decimal(cost))


def _oracle(pack: Pack) -> Tuple[Decimal, Decimal]:
    """Best (cost, -weight) over every subset, as (max cost, min weight at that cost)."""
    best = (Decimal(0), Decimal(0))
    for r in range(1, len(pack.items) + 1):
        for combo in itertools.combinations(pack.items, r):
            weight = sum((it.weight for it in combo), Decimal(0))
            if weight > pack.capacity:
                continue
            cost = sum((it.cost for it in combo), Decimal(0))
            if cost > best[0] or (cost == best[0] and weight < best[1]):
                best = (cost, weight)
    return best


def _random_pack(rng: random.Random, n: int) -> Pack:
    items: List[Item] = []
    for i in range(1, n + 1):
        weight = Decimal(rng.randint(1, 10000)) / 100
        items.append(Item(index=i, weight=weight, cost=Decimal(rng.randint(1, 100))))
    return Pack(capacity=rng.randint(1, 100), items=tuple(items))


class TestSolverOptimality(unittest.TestCase):
    def test_matches_exhaustive_enumeration(self) -> None:
        rng = random.Random(20240917)
        for trial in range(40):
            pack = _random_pack(rng, rng.randint(1, 10))
            with self.subTest(trial=trial, pack=pack):
                solution = solve(pack)
                self.assertEqual((solution.total_cost, solution.total_weight), _oracle(pack))
                self.assertLessEqual(solution.total_weight, pack.capacity)

    def test_totals_match_selected_items(self) -> None:
        rng = random.Random(7)
        for _ in range(20):
            pack = _random_pack(rng, 8)
            solution = solve(pack)
            chosen = [it for it in pack.items if it.index in solution.indices]
            self.assertEqual(solution.total_cost, sum((it.cost for it in chosen), Decimal(0)))
            self.assertEqual(solution.total_weight, sum((it.weight for it in chosen), Decimal(0)))

    def test_fifteen_items_at_full_capacity(self) -> None:
        rng = random.Random(15)
        pack = _random_pack(rng, 15)
        pack = Pack(capacity=100, items=pack.items)
        self.assertEqual(solve(pack), solve_exhaustive(pack))


class TestSolverCases(unittest.TestCase):
    def test_only_lighter_item_fits(self) -> None:
        pack = Pack(capacity=81, items=(_item(1, "53.38", 45), _item(2, "88.62", 98)))
        self.assertEqual(solve(pack).indices, frozenset({1}))

    def test_nothing_fits(self) -> None:
        pack = Pack(capacity=8, items=(_item(1, "15.3", 34),))
        self.assertEqual(solve(pack), Solution.empty())

    def test_weight_equal_to_capacity_fits(self) -> None:
        pack = Pack(capacity=40, items=(_item(1, "40", 10),))
        solution = solve(pack)
        self.assertEqual(solution.indices, frozenset({1}))
        self.assertEqual(solution.total_weight, Decimal(40))

    def test_cost_tie_prefers_lighter_subset(self) -> None:
        pack = Pack(
            capacity=56,
            items=(
                _item(1, "90.72", 13), _item(2, "33.80", 40), _item(3, "43.15", 10),
                _item(4, "37.97", 16), _item(5, "46.81", 36), _item(6, "48.77", 79),
                _item(7, "81.80", 45), _item(8, "19.36", 79), _item(9, "6.76", 64),
            ),
        )
        solution = solve(pack)
        self.assertEqual(solution.indices, frozenset({8, 9}))
        self.assertEqual(solution.total_cost, Decimal(143))
        self.assertEqual(solution.total_weight, Decimal("26.12"))

    def test_equal_cost_single_items_pick_lighter(self) -> None:
        pack = Pack(capacity=30, items=(_item(1, "25", 50), _item(2, "20", 50)))
        self.assertEqual(solve(pack).indices, frozenset({2}))

    def test_full_tie_keeps_earlier_item(self) -> None:
        pack = Pack(capacity=10, items=(_item(1, "6", 50), _item(2, "6", 50)))
        self.assertEqual(solve_dp(pack).indices, frozenset({1}))
        self.assertEqual(solve_exhaustive(pack).indices, frozenset({1}))

    def test_classic_pack(self) -> None:
        pack = Pack(
            capacity=75,
            items=(
                _item(1, "85.31", 29), _item(2, "14.55", 74), _item(3, "3.98", 16),
                _item(4, "26.24", 55), _item(5, "63.69", 52), _item(6, "76.25", 75),
                _item(7, "60.02", 74), _item(8, "93.18", 35), _item(9, "89.95", 78),
            ),
        )
        self.assertEqual(solve(pack).indices, frozenset({2, 7}))

    def test_empty_and_zero_capacity(self) -> None:
        self.assertEqual(solve(Pack(capacity=50, items=())), Solution.empty())
        self.assertEqual(solve(Pack(capacity=0, items=(_item(1, "1", 1),))), Solution.empty())

    def test_idempotent(self) -> None:
        rng = random.Random(3)
        pack = _random_pack(rng, 12)
        self.assertEqual(solve(pack), solve(pack))


class TestExhaustiveFallback(unittest.TestCase):
    def test_small_column_budget_switches_to_search(self) -> None:
        rng = random.Random(99)
        for _ in range(15):
            pack = _random_pack(rng, 9)
            self.assertEqual(solve(pack, max_dp_columns=10), solve_dp(pack))

    def test_many_decimal_places(self) -> None:
        pack = Pack(capacity=10, items=(_item(1, "3.333333", 5), _item(2, "6.666667", 7), _item(3, "6.666666", 7)))
        solution = solve(pack)
        self.assertEqual(solution.indices, frozenset({1, 3}))
        self.assertEqual(solution.total_weight, Decimal("9.999999"))


class TestLongDecimals(unittest.TestCase):
    """Weights with more significant digits than the default 28-digit decimal context."""

    def _pack(self) -> Pack:
        return Pack(capacity=100, items=(_item(1, "50.00000000000000000000000000001", 10), _item(2, "50.0", 10)))

    def test_heavier_item_does_not_overflow_capacity(self) -> None:
        solution = solve(self._pack())
        self.assertEqual(solution.indices, frozenset({2}))
        self.assertEqual(solution.total_weight, Decimal("50.0"))

    def test_exhaustive_search_checks_fit_exactly(self) -> None:
        solution = solve_exhaustive(self._pack())
        self.assertEqual(solution.indices, frozenset({2}))
        self.assertLessEqual(solution.total_weight, 100)

    def test_totals_are_exact(self) -> None:
        pack = Pack(capacity=100, items=(
            _item(1, "10.000000000000000000000000000001", 1),
            _item(2, "20.000000000000000000000000000002", 1),
        ))
        solution = solve(pack)
        self.assertEqual(solution.indices, frozenset({1, 2}))
        self.assertEqual(solution.total_weight, Decimal("30.000000000000000000000000000003"))


class TestSolverUtils(unittest.TestCase):
    def test_decimal_places(self) -> None:
        self.assertEqual(decimal_places(Decimal("53.38")), 2)
        self.assertEqual(decimal_places(Decimal("40.00")), 0)
        self.assertEqual(decimal_places(Decimal("100")), 0)

    def test_to_units(self) -> None:
        items = [_item(1, "53.38", 1), _item(2, "4.5", 1)]
        self.assertEqual(weight_scale(items), 100)
        self.assertEqual(to_units(items, 81), ([5338, 450], 8100, 100))

    def test_long_decimals_scale_exactly(self) -> None:
        value = Decimal("50.00000000000000000000000000001")
        self.assertEqual(decimal_places(value), 29)
        self.assertEqual(to_int_units(value, 29), 5 * 10 ** 30 + 1)
        self.assertEqual(to_int_units(Decimal("50.0"), 29), 5 * 10 ** 30)
        self.assertEqual(decimal_places(Decimal("1.10000000000000000000000000000000")), 1)


if __name__ == "__main__":
    unittest.main()
