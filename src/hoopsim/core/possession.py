"""Possession model — the atomic unit of gameplay.

Lineup → ball handler → turnover check → shot selection → shot resolution →
assist or rebound. Mutates the ledgers of both teams and returns one
immutable Possession.
"""

from __future__ import annotations

from hoopsim.core.scoring import (
    RandomSource,
    determine_shot_type,
    resolve_shot,
    uniform_choice,
    weighted_choice,
)
from hoopsim.core.state import Ledger, PlayerGameStats
from hoopsim.models.game import Possession, ShotType, Side
from hoopsim.models.rules import SimulationRules
from hoopsim.models.team import POSITIONS, Player

LINEUP_SIZE = 5

BALL_HANDLER_POSITION_BONUS = {"PG": 1.5, "SG": 1.2}
REBOUNDER_POSITION_BONUS = {"C": 1.5, "PF": 1.3}


def select_lineup(players: list[Player], rng: RandomSource) -> list[Player]:
    """One random player per position, padded with random others up to five."""
    lineup: list[Player] = []
    for position in POSITIONS:
        candidates = [p for p in players if p.position == position]
        if candidates:
            lineup.append(uniform_choice(candidates, rng))

    while len(lineup) < LINEUP_SIZE:
        remaining = [p for p in players if not any(p is q for q in lineup)]
        if not remaining:
            break
        lineup.append(uniform_choice(remaining, rng))

    return lineup


def select_ball_handler(lineup: list[Player], rng: RandomSource) -> Player:
    """Pick who handles the ball. Weighted by scoring + playmaking, guards favored."""
    if not lineup:
        raise ValueError("No offensive players available")
    weights = [
        (p.points_per_game + 2 * p.assists_per_game)
        * BALL_HANDLER_POSITION_BONUS.get(p.position, 1.0)
        for p in lineup
    ]
    return weighted_choice(lineup, weights, rng)


def select_rebounder(players: list[Player], rng: RandomSource) -> Player:
    """Pick a rebounder weighted by rebounds per game, bigs favored."""
    weights = [
        p.rebounds_per_game * REBOUNDER_POSITION_BONUS.get(p.position, 1.0) for p in players
    ]
    return weighted_choice(players, weights, rng)


def check_turnover(rules: SimulationRules, rng: RandomSource) -> bool:
    """Flat-rate turnover check."""
    return rng.random() < rules.turnover_rate


def format_clock(index: int, period_possessions: int, rules: SimulationRules) -> str:
    """Remaining time in the period before the ``index``-th possession, as M:SS."""
    seconds_per_possession = rules.quarter_seconds / period_possessions
    remaining = rules.quarter_seconds - index * seconds_per_possession
    remaining = max(0.0, remaining)
    minutes = int(remaining // 60)
    seconds = int(remaining % 60)
    return f"{minutes}:{seconds:02d}"


def _credit_attempt(stats: PlayerGameStats, shot_type: ShotType, made: bool, points: int) -> None:
    """Record a shot in the right category. A free-throw trip counts once."""
    if shot_type == "three":
        stats.three_pointers_attempted += 1
        if made:
            stats.three_pointers_made += 1
    elif shot_type == "free_throw":
        stats.free_throws_attempted += 1
        if made:
            stats.free_throws_made += 1
    else:
        stats.field_goals_attempted += 1
        if made:
            stats.field_goals_made += 1
    if made:
        stats.points += points


def resolve_possession(
    side: Side,
    quarter: int,
    clock: str,
    offense: list[Player],
    defense: list[Player],
    offense_ledger: Ledger,
    defense_ledger: Ledger,
    rules: SimulationRules,
    rng: RandomSource,
) -> Possession:
    """Resolve one complete possession for the team on offense."""
    # 1-2. Lineup and ball handler
    lineup = select_lineup(offense, rng)
    handler = select_ball_handler(lineup, rng)
    handler_stats = offense_ledger[handler.id]

    # 3. Turnover (live-ball: steal)
    if check_turnover(rules, rng):
        handler_stats.turnovers += 1
        stealer = uniform_choice(defense, rng)
        defense_ledger[stealer.id].steals += 1
        return Possession(
            team=side,
            quarter=quarter,
            time=clock,
            player=handler.name,
            action=f"Turnover, stolen by {stealer.name}",
            points=0,
            result="turnover",
        )

    # 4-5. Shot selection and resolution
    shot_type = determine_shot_type(handler, rng)
    outcome = resolve_shot(handler, shot_type, rules, rng)
    _credit_attempt(handler_stats, shot_type, outcome.made, outcome.points)

    if outcome.made:
        # 6. Assist credit goes to the first other player in the lineup
        if rng.random() < rules.assist_rate:
            assister = next((p for p in lineup if p is not handler), None)
            if assister is not None:
                offense_ledger[assister.id].assists += 1
    else:
        # 7. Rebound
        defensive = rng.random() < rules.defensive_rebound_rate
        pool, ledger = (defense, defense_ledger) if defensive else (offense, offense_ledger)
        if not pool:
            pool, ledger = (offense, offense_ledger) if defensive else (defense, defense_ledger)
        rebounder = select_rebounder(pool, rng)
        ledger[rebounder.id].rebounds += 1

    return Possession(
        team=side,
        quarter=quarter,
        time=clock,
        player=handler.name,
        action=outcome.action,
        points=outcome.points,
        result="made" if outcome.made else "missed",
        shot_type=shot_type,
    )
