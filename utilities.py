# --------------------------- Utilities ---------------------------
from typing import Iterable, List

from domain_types import Solution
from packer_types import LineReport

NO_SELECTION = "-"


def format_solution(solution: Solution) -> str:
    """Ascending indices joined by ',' with no spaces, or "-" when nothing is selected."""
    if not solution.indices:
        return NO_SELECTION
    return ",".join(str(i) for i in sorted(solution.indices))


def _cell(value: object) -> str:
    if value is None:
        return "—"
    return str(value).replace("|", "\\|")


def reports_markdown_table(reports: Iterable[LineReport]) -> str:
    """
    Markdown table with one row per processed line.

    Columns: line number, capacity, kept / dropped item counts, rejection
    reason, output, total cost and total weight.
    """
    header = (
        "### Packed lines\n\n"
        "| Line | Capacity | Items kept | Items dropped | Rejection | Output | Cost | Weight |\n"
        "|---|---|---|---|---|---|---|---|\n"
    )
    rows: List[str] = []
    for r in reports:
        rows.append(
            f"| {r['line_number']} | {_cell(r['capacity'])} | {r['items_kept']} | {len(r['items_dropped'])} "
            f"| {_cell(r['rejection'])} | {_cell(r['output'])} | {_cell(r['total_cost'])} | {_cell(r['total_weight'])} |"
        )
    if not rows:
        rows = ["| *(none)* | — | — | — | — | — | — | — |"]
    return header + "\n".join(rows) + "\n"
