"""Knapsack packer pipeline: one optimal item selection per input line.

Overview
========
Each non-blank input line describes a pack capacity and its candidate items:

    81 : (1,53.38,€45) (2,88.62,€98)

For every line we pick the subset of item indices with the highest total cost
whose total weight does not exceed the capacity, and write the indices in
ascending order joined by commas (``1``). Lines are independent and are
processed strictly in input order.

Fault Absorption
----------------
* Item level: groups that cannot be parsed, out-of-range weights or costs,
  index 0 and repeated indices are dropped from the line; the rest of the line
  is still solved.
* Line level: a line without ':', a capacity outside (0, 100], or a line left
  with 0 or more than 15 items after filtering produces ``-``.
* Source level: an input file that cannot be read raises ``SourceUnavailable``
  and nothing is produced. This is the only failure that reaches the caller.

A line whose items are all too heavy for the capacity also produces ``-``.

Tie Break
---------
Among subsets with the same maximum cost the lighter one wins, so
``56 : ... (6,48.77,€79) ... (8,19.36,€79) (9,6.76,€64)`` selects ``8,9``
(weight 26.12) over ``6,9`` (weight 55.53), both at cost 143.

Backends
--------
* ``dp`` (default): tabulated dynamic program, see ``solver``.
* ``cp-sat``: OR-Tools CP-SAT model, see ``optimizer``.
Both honour the same optimality and tie-break rules.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from domain_types import Pack, Solution
from input_loader import load_lines
from inputvalidations import validate_line
from optimizer import optimize_pack
from packer_types import LineReport, PackerSettings
from solver import DEFAULT_MAX_DP_COLUMNS, solve
from utilities import NO_SELECTION, format_solution

logger = logging.getLogger(__name__)


def solve_pack(pack: Pack, settings: Optional[PackerSettings] = None) -> Solution:
  """Dispatch a validated Pack to the configured backend."""
  settings = settings or {}
  if settings.get("backend", "dp") == "cp-sat":
    return optimize_pack(
      pack,
      time_limit_s=float(settings.get("max_time_seconds", 10.0)),
      random_seed=settings.get("random_seed"),
      num_search_workers=settings.get("num_search_workers"),
      max_dp_columns=int(settings.get("max_dp_columns", DEFAULT_MAX_DP_COLUMNS)),
    )
  return solve(pack, max_dp_columns=int(settings.get("max_dp_columns", DEFAULT_MAX_DP_COLUMNS)))


def inspect_line(line: str, settings: Optional[PackerSettings] = None, line_number: int = 0) -> LineReport:
  """
  Validate and solve one line, keeping every diagnostic.

  Args:
    line: Raw input line.
    settings: Optional packer settings (backend and solver controls).
    line_number: 1-based position in the source, for reporting only.

  Returns:
    LineReport whose ``output`` is the string written for this line.
  """
  settings = settings or {}
  validation = validate_line(line)
  report: LineReport = {
    "line_number": line_number,
    "line": line,
    "output": NO_SELECTION,
    "capacity": validation.capacity,
    "items_kept": 0,
    "items_dropped": list(validation.dropped),
    "rejection": validation.rejection,
    "total_cost": None,
    "total_weight": None,
    "backend": settings.get("backend", "dp"),
  }
  if validation.dropped:
    logger.debug("line %d: dropped %d item(s)", line_number, len(validation.dropped))

  if validation.pack is None:
    logger.info("line %d skipped (%s): %r", line_number, validation.rejection, line)
    return report

  solution = solve_pack(validation.pack, settings)
  report["items_kept"] = len(validation.pack.items)
  report["output"] = format_solution(solution)
  report["total_cost"] = str(solution.total_cost)
  report["total_weight"] = str(solution.total_weight)
  return report


def process_line(line: str, settings: Optional[PackerSettings] = None) -> str:
  """One raw line to its output: ascending comma-joined indices or "-"."""
  return inspect_line(line, settings)["output"]


def pack_lines(lines: Iterable[str], settings: Optional[PackerSettings] = None) -> List[str]:
  """Solve every line independently; outputs keep the input order."""
  return [r["output"] for r in report_lines(lines, settings)]


def report_lines(lines: Iterable[str], settings: Optional[PackerSettings] = None) -> List[LineReport]:
  reports = [inspect_line(line, settings, line_number=n) for n, line in enumerate(lines, start=1)]
  skipped = sum(1 for r in reports if r["rejection"] is not None)
  logger.info("packed %d line(s), %d skipped", len(reports), skipped)
  return reports


def pack(file_path: str | Path, settings: Optional[PackerSettings] = None) -> str:
  """
  Read the input file and return one output line per non-blank input line.

  Raises:
    SourceUnavailable: If the file cannot be read; no output is produced.
  """
  return "\n".join(pack_lines(load_lines(file_path), settings))


def pack_report(file_path: str | Path, settings: Optional[PackerSettings] = None) -> List[LineReport]:
  """Like ``pack`` but returns the per-line diagnostic reports."""
  return report_lines(load_lines(file_path), settings)
