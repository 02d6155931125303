"""Shot selection and scoring resolution.

Shot type comes from one draw against cumulative thresholds; the make
probability is the player's season percentage plus uniform noise, clamped.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, TypeVar

from hoopsim.models.game import ShotType
from hoopsim.models.rules import SimulationRules
from hoopsim.models.team import Player

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything with a ``random()`` returning a float in [0, 1).

    ``random.Random`` satisfies this; tests substitute scripted sources.
    """

    def random(self) -> float: ...


FREE_THROW_THRESHOLD = 0.05

POINTS_FOR_SHOT: dict[ShotType, int] = {
    "three": 3,
    "layup": 2,
    "mid_range": 2,
    "free_throw": 1,
}

SHOT_LABELS: dict[ShotType, str] = {
    "three": "Three-pointer",
    "layup": "Layup",
    "mid_range": "Jump shot",
    "free_throw": "Free throw",
}


@dataclass(frozen=True)
class ShotOutcome:
    """Result of one shot attempt."""

    shot_type: ShotType
    made: bool
    points: int
    action: str


def weighted_choice(items: Sequence[T], weights: Sequence[float], rng: RandomSource) -> T:
    """Cumulative-weight draw. All-zero weights fall back to the first item."""
    if not items:
        raise ValueError("Cannot choose from an empty pool")
    total = sum(weights)
    remaining = rng.random() * total
    for item, weight in zip(items, weights):
        remaining -= weight
        if remaining <= 0:
            return item
    return items[0]


def uniform_choice(items: Sequence[T], rng: RandomSource) -> T:
    """Pick one item uniformly at random."""
    if not items:
        raise ValueError("Cannot choose from an empty pool")
    idx = min(int(rng.random() * len(items)), len(items) - 1)
    return items[idx]


def determine_shot_type(player: Player, rng: RandomSource) -> ShotType:
    """Pick a shot type using sequential thresholds on a single draw.

    Thresholds are measured from zero, so the free-throw slice comes out of
    the three-point band rather than adding to it.
    """
    roll = rng.random()
    if roll < FREE_THROW_THRESHOLD:
        return "free_throw"

    three_tendency = 0.35 if player.three_point_percentage > 0.35 else 0.2
    if roll < three_tendency:
        return "three"

    layup_tendency = 0.5 if player.position in ("C", "PF") else 0.3
    if roll < three_tendency + layup_tendency:
        return "layup"

    return "mid_range"


def base_shot_rate(player: Player, shot_type: ShotType) -> float:
    """Season-average make rate for a shot type. Zero stats use a league default."""
    if shot_type == "three":
        return player.three_point_percentage or 0.33
    if shot_type == "layup":
        return min(player.field_goal_percentage + 0.15, 0.75) or 0.6
    if shot_type == "mid_range":
        return player.field_goal_percentage or 0.45
    return player.free_throw_percentage or 0.75


def adjusted_shot_rate(
    player: Player,
    shot_type: ShotType,
    rules: SimulationRules,
    rng: RandomSource,
) -> float:
    """Base rate plus uniform noise in [-shot_noise, +shot_noise], clamped."""
    noise = (rng.random() - 0.5) * 2 * rules.shot_noise
    rate = base_shot_rate(player, shot_type) + noise
    return max(rules.min_shot_rate, min(rules.max_shot_rate, rate))


def resolve_shot(
    player: Player,
    shot_type: ShotType,
    rules: SimulationRules,
    rng: RandomSource,
) -> ShotOutcome:
    """Resolve a shot attempt. A made free throw rolls again for the second."""
    rate = adjusted_shot_rate(player, shot_type, rules, rng)
    made = rng.random() < rate
    label = SHOT_LABELS[shot_type]
    points = POINTS_FOR_SHOT[shot_type]

    if not made:
        return ShotOutcome(shot_type=shot_type, made=False, points=0, action=f"{label} missed")

    if shot_type == "free_throw":
        second_made = rng.random() < rate
        points = 2 if second_made else 1
        label = "Both free throws" if second_made else "1 of 2 free throws"

    return ShotOutcome(shot_type=shot_type, made=True, points=points, action=f"{label} made")
