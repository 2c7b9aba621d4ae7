"""
Type definitions for packer results, diagnostics and settings.
"""
from __future__ import annotations

from typing import List, Literal, Optional, TypedDict


LineRejectionReason = Literal["malformed_line", "invalid_capacity", "invalid_item_count"]

ItemDropReason = Literal[
    "unparsable_item",
    "invalid_index",
    "weight_out_of_range",
    "cost_out_of_range",
    "duplicate_index",
]

Backend = Literal["dp", "cp-sat"]


class DroppedItem(TypedDict):
    """One item discarded during line validation and the reason why.

    Reasons:
        - unparsable_item: Text in the item segment that is not a
            ``(index,weight,€cost)`` group.
        - invalid_index: Index is 0.
        - weight_out_of_range: Weight not in (0, 100].
        - cost_out_of_range: Cost not in (0, 100].
        - duplicate_index: Index already accepted earlier on the same line.
    """
    raw: str
    index: Optional[int]
    reason: ItemDropReason


class LineReport(TypedDict):
    """Per-line diagnostic record produced by packer.inspect_line.

    ``rejection`` is None when the line produced a Pack; in that case
    ``capacity``, ``total_cost`` and ``total_weight`` are populated. ``output``
    is exactly the string written for the line (indices or "-").
    """
    line_number: int
    line: str
    output: str
    capacity: Optional[int]
    items_kept: int
    items_dropped: List[DroppedItem]
    rejection: Optional[LineRejectionReason]
    total_cost: Optional[str]
    total_weight: Optional[str]
    backend: Backend


class PackerSettings(TypedDict, total=False):
    """Optional packer configuration.

    Optional:
        backend: Solving engine, "dp" (default) or "cp-sat".
        max_time_seconds: Wall clock limit for the CP-SAT solver (default 10).
        max_dp_columns: Largest scaled capacity solved by the DP table before
            switching to exhaustive search (default 100000).
        random_seed: CP-SAT random seed.
        num_search_workers: CP-SAT worker count.
    """
    backend: Backend
    max_time_seconds: float
    max_dp_columns: int
    random_seed: int
    num_search_workers: int
