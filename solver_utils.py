from decimal import Context, Decimal, getcontext
from typing import List, Sequence, Tuple

from domain_types import Item, Solution


def decimal_places(value: Decimal) -> int:
    """Number of significant digits after the decimal point (0 for whole numbers)."""
    _, digits, exponent = value.as_tuple()
    places = -int(exponent)
    end = len(digits)
    while places > 0 and end > 0 and digits[end - 1] == 0:
        end -= 1
        places -= 1
    return max(0, places)


def to_int_units(value: Decimal, places: int) -> int:
    """``value * 10**places`` as an exact int; ``value`` must have at most ``places`` decimals."""
    sign, digits, exponent = value.as_tuple()
    coefficient = int("".join(str(d) for d in digits) or "0")
    shift = int(exponent) + places
    units = coefficient * 10 ** shift if shift >= 0 else coefficient // 10 ** -shift
    return -units if sign else units


def exact_context(items: Sequence[Item]) -> Context:
    """
    Decimal context wide enough that sums of these items' weights and costs never round.

    The default context keeps 28 digits, which silently rounds weights such as
    ``50.00000000000000000000000000001``.
    """
    digits = 0
    for it in items:
        for value in (it.weight, it.cost):
            _, coefficient, exponent = value.as_tuple()
            digits = max(digits, len(coefficient), -int(exponent))
    # sums of up to 15 values of at most 100 add 4 integer digits
    return Context(prec=max(getcontext().prec, digits + 8))


def weight_scale(items: Sequence[Item]) -> int:
    """
    Smallest power of ten that turns every item weight into an integer.

    Args:
        items: Items whose weights are scaled.

    Returns:
        10 ** (largest number of decimal places among the weights).
    """
    places = max((decimal_places(it.weight) for it in items), default=0)
    return 10 ** places


def to_units(items: Sequence[Item], capacity: int) -> Tuple[List[int], int, int]:
    """Scale weights and capacity to exact integers: (weight_units, capacity_units, scale)."""
    places = max((decimal_places(it.weight) for it in items), default=0)
    units = [to_int_units(it.weight, places) for it in items]
    return units, capacity * 10 ** places, 10 ** places


def is_better(cost: Decimal, weight: Decimal, current: Solution) -> bool:
    """Strictly greater cost wins; on a cost tie strictly smaller weight wins; otherwise keep current."""
    if cost != current.total_cost:
        return cost > current.total_cost
    return weight < current.total_weight


def with_item(solution: Solution, item: Item) -> Solution:
    return Solution(
        total_cost=solution.total_cost + item.cost,
        total_weight=solution.total_weight + item.weight,
        indices=solution.indices | {item.index},
    )
