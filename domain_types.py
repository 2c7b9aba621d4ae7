"""
Domain type definitions for the knapsack packer.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import FrozenSet, Tuple


@dataclass(frozen=True)
class Item:
    """
    A candidate item of one input line.

    Attributes
    ----------
    index  : positive identifier, unique within its line
    weight : decimal weight in (0, 100]
    cost   : decimal cost in (0, 100]
    """
    index: int
    weight: Decimal
    cost: Decimal


@dataclass(frozen=True)
class Pack:
    """One line's capacity plus its validated items, in input order."""
    capacity: int
    items: Tuple[Item, ...]


@dataclass(frozen=True)
class Solution:
    """Optimal subset of a Pack with its aggregate cost and weight."""
    total_cost: Decimal
    total_weight: Decimal
    indices: FrozenSet[int]

    @classmethod
    def empty(cls) -> "Solution":
        return cls(total_cost=Decimal(0), total_weight=Decimal(0), indices=frozenset())
