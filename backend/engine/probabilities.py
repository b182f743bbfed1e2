# engine/probabilities.py
"""
Odds tables and outcome resolution for every game.

Everything here is a pure function of its parameters and an injected
``rng`` (anything with ``randint``/``randrange``, i.e. random.Random or
random.SystemRandom). Nothing touches the database.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Hashable, Iterable, Optional, Sequence, Tuple

D0 = Decimal("0")
D1 = Decimal("1")

# European wheel: one zero, 37 pockets
WHEEL_POCKETS = 37
RED_NUMBERS = frozenset({1, 3, 5, 7, 9, 12, 14, 16, 18, 19, 21, 23, 25, 27, 30, 32, 34, 36})
BLACK_NUMBERS = frozenset(set(range(1, WHEEL_POCKETS)) - RED_NUMBERS)

RED = "red"
BLACK = "black"
COLORS = (RED, BLACK)

STRAIGHT = "straight"
COLOR = "color"
BET_TYPES = (STRAIGHT, COLOR)

# Gross return including the stake
STRAIGHT_MULTIPLIER = Decimal("36")
COLOR_MULTIPLIER = Decimal("2")


@dataclass(frozen=True)
class Resolution:
    win: bool
    multiplier: Decimal
    detail: dict = field(default_factory=dict)


def color_of(number: int) -> Optional[str]:
    if number in RED_NUMBERS:
        return RED
    if number in BLACK_NUMBERS:
        return BLACK
    return None


def spin_wheel(rng) -> int:
    return rng.randint(0, WHEEL_POCKETS - 1)


def roulette_multiplier(
    bet_type: str, result: int, number: Optional[int] = None, color: Optional[str] = None
) -> Decimal:
    """
    straight pays 36x on an exact hit, color pays 2x when a non-zero result
    matches. Everything else, including unknown bet types, returns 0.
    """
    if bet_type == STRAIGHT and number is not None and number == result:
        return STRAIGHT_MULTIPLIER
    if bet_type == COLOR and result != 0 and color is not None and color_of(result) == color:
        return COLOR_MULTIPLIER
    return D0


def profit_for(multiplier: Decimal, stake: Decimal) -> Decimal:
    return (Decimal(multiplier) - D1) * Decimal(stake)


def resolve_roulette(params: dict, rng) -> Resolution:
    result = spin_wheel(rng)
    multiplier = roulette_multiplier(
        params.get("bet_type"),
        result,
        number=params.get("number"),
        color=params.get("color"),
    )
    return Resolution(
        win=multiplier > D0,
        multiplier=multiplier,
        detail={"result": result, "color": color_of(result)},
    )


def weighted_choice(pairs: Iterable[Tuple[Hashable, int]], rng):
    """
    Pick one key with probability weight / total.

    Walks cumulative [start, end) ranges over the weights and picks the
    range containing randrange(total). Non-positive weights never win.
    """
    ranges = []
    total = 0
    for key, weight in pairs:
        weight = int(weight)
        if weight <= 0:
            continue
        ranges.append((key, total, total + weight))
        total += weight

    if total <= 0:
        raise ValueError("weighted_choice needs at least one positive weight")

    ticket = rng.randrange(total)
    for key, start, end in ranges:
        if start <= ticket < end:
            return key
    raise RuntimeError("ticket fell outside every range")  # unreachable


def pick_draw_winner(entries: Sequence[Tuple[Hashable, int]], rng):
    """entries are (user_id, tokens); more tokens means proportionally better odds."""
    return weighted_choice(entries, rng)


def pick_lootbox_item(items: Sequence[Tuple[Hashable, int]], rng):
    """items are (item_id, weight) from a lootbox's content list."""
    return weighted_choice(items, rng)
