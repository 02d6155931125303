"""Top-level simulation engine.

SimulationEngine(team1, team2).play_match() → MatchResult
Synchronous and self-contained: no database, no network. Each engine owns its
ledgers and random source and simulates exactly one match.

simulate_match() adds the best-effort highlights step on top.
"""

from __future__ import annotations

import logging
import random
import time

from hoopsim.ai.commentary import CommentaryProvider, generate_highlights
from hoopsim.core.highlights import HighlightDetector
from hoopsim.core.possession import format_clock, resolve_possession
from hoopsim.core.scoring import RandomSource
from hoopsim.core.state import Ledger, SimulationError, build_ledger
from hoopsim.models.game import (
    MatchResult,
    MVPRecord,
    Possession,
    QuarterStats,
    Side,
    TeamGameStats,
)
from hoopsim.models.rules import DEFAULT_RULES, SimulationRules
from hoopsim.models.team import Team

logger = logging.getLogger(__name__)

# Safety cap on overtime periods; each one can break the tie, so this is never hit
# in practice.
MAX_OVERTIMES = 50


def _pct(made: int, attempted: int) -> float:
    return made / attempted if attempted > 0 else 0.0


class SimulationEngine:
    """Simulates one match between two teams."""

    def __init__(
        self,
        team1: Team,
        team2: Team,
        rules: SimulationRules = DEFAULT_RULES,
        rng: RandomSource | None = None,
        commentary: CommentaryProvider | None = None,
        commentary_timeout: float = 20.0,
    ) -> None:
        if not team1.players or not team2.players:
            raise SimulationError("Both teams need at least one player")
        self.team1 = team1
        self.team2 = team2
        self.rules = rules
        self.rng: RandomSource = rng if rng is not None else random.Random()
        self.commentary = commentary
        self.commentary_timeout = commentary_timeout
        self.team1_stats: Ledger = build_ledger(team1.players)
        self.team2_stats: Ledger = build_ledger(team2.players)
        self._played = False

    # -- periods ---------------------------------------------------------

    def _resolve(self, side: Side, quarter: int, clock: str) -> Possession:
        if side == "team1":
            return resolve_possession(
                side, quarter, clock,
                self.team1.players, self.team2.players,
                self.team1_stats, self.team2_stats,
                self.rules, self.rng,
            )
        return resolve_possession(
            side, quarter, clock,
            self.team2.players, self.team1.players,
            self.team2_stats, self.team1_stats,
            self.rules, self.rng,
        )

    def _run_period(self, quarter: int, num_possessions: int) -> QuarterStats:
        """Run one period, alternating offense from a coin flip."""
        possessions: list[Possession] = []
        team1_score = 0
        team2_score = 0
        side: Side = "team1" if self.rng.random() > 0.5 else "team2"

        for idx in range(num_possessions):
            clock = format_clock(idx, num_possessions, self.rules)
            possession = self._resolve(side, quarter, clock)
            possessions.append(possession)
            if possession.team == "team1":
                team1_score += possession.points
            else:
                team2_score += possession.points
            side = "team2" if side == "team1" else "team1"

        return QuarterStats(
            quarter=quarter,
            team1_score=team1_score,
            team2_score=team2_score,
            possessions=possessions,
        )

    # -- public API ------------------------------------------------------

    def play_match(self) -> MatchResult:
        """Simulate regulation plus as many overtimes as needed. No highlights."""
        if self._played:
            raise SimulationError("SimulationEngine simulates one match; build a new engine")
        self._played = True
        start_time = time.monotonic()

        quarters: list[QuarterStats] = []
        team1_total = 0
        team2_total = 0

        for q in range(1, self.rules.regulation_quarters + 1):
            quarter = self._run_period(q, self.rules.possessions_per_quarter)
            quarters.append(quarter)
            team1_total += quarter.team1_score
            team2_total += quarter.team2_score

        overtimes = 0
        while team1_total == team2_total:
            overtimes += 1
            if overtimes > MAX_OVERTIMES:
                raise SimulationError(f"Tie survived {MAX_OVERTIMES} overtime periods")
            period = self._run_period(len(quarters) + 1, self.rules.overtime_possessions)
            quarters.append(period)
            team1_total += period.team1_score
            team2_total += period.team2_score

        for stats in (*self.team1_stats.values(), *self.team2_stats.values()):
            stats.check_invariants()

        result = MatchResult(
            team1=self.team1,
            team2=self.team2,
            team1_score=team1_total,
            team2_score=team2_total,
            quarters=quarters,
            winner="team1" if team1_total > team2_total else "team2",
            mvp=self.compute_mvp(),
            box_scores=[s.to_box_score("team1") for s in self.team1_stats.values()]
            + [s.to_box_score("team2") for s in self.team2_stats.values()],
        )

        logger.info(
            "match_complete team1=%s team2=%s score=%d-%d quarters=%d overtimes=%d "
            "mvp=%s duration_ms=%.1f",
            self.team1.name,
            self.team2.name,
            result.team1_score,
            result.team2_score,
            len(quarters),
            overtimes,
            result.mvp.player,
            (time.monotonic() - start_time) * 1000,
        )
        return result

    async def simulate_match(self) -> MatchResult:
        """Play the match, then attach highlights when they can be generated."""
        result = self.play_match()
        try:
            moments = HighlightDetector().detect_key_moments(result)
            highlights = await generate_highlights(
                result,
                moments,
                provider=self.commentary,
                timeout=self.commentary_timeout,
            )
        except Exception:
            logger.exception("highlights_failed team1=%s team2=%s", self.team1.name, self.team2.name)
            return result
        return result.model_copy(update={"highlights": highlights})

    def compute_mvp(self) -> MVPRecord:
        """Pick the MVP from both ledgers.

        Candidates are scored with steals and blocks, but compared against the
        current MVP's points/rebounds/assists composite only.
        """
        rules = self.rules
        mvp = MVPRecord()

        def evaluate(side: Side, ledger: Ledger) -> None:
            nonlocal mvp
            for stats in ledger.values():
                score = (
                    stats.points
                    + stats.rebounds * rules.mvp_rebound_weight
                    + stats.assists * rules.mvp_assist_weight
                    + stats.steals * rules.mvp_steal_weight
                    + stats.blocks * rules.mvp_block_weight
                )
                threshold = (
                    mvp.points
                    + mvp.rebounds * rules.mvp_rebound_weight
                    + mvp.assists * rules.mvp_assist_weight
                )
                if score > threshold:
                    mvp = MVPRecord(
                        player=stats.name,
                        team=side,
                        points=stats.points,
                        rebounds=stats.rebounds,
                        assists=stats.assists,
                    )

        evaluate("team1", self.team1_stats)
        evaluate("team2", self.team2_stats)
        return mvp

    def get_team_stats(self, side: Side) -> TeamGameStats:
        """Aggregate team box score. Only valid after the match has been played."""
        if not self._played:
            raise SimulationError("get_team_stats() called before the match was played")
        team = self.team1 if side == "team1" else self.team2
        ledger = self.team1_stats if side == "team1" else self.team2_stats
        players = list(ledger.values())

        return TeamGameStats(
            team_id=team.id,
            team_name=team.name,
            players=[p.to_box_score(side) for p in players],
            total_points=sum(p.points for p in players),
            total_rebounds=sum(p.rebounds for p in players),
            total_assists=sum(p.assists for p in players),
            total_steals=sum(p.steals for p in players),
            total_blocks=sum(p.blocks for p in players),
            total_turnovers=sum(p.turnovers for p in players),
            field_goal_percentage=_pct(
                sum(p.field_goals_made for p in players),
                sum(p.field_goals_attempted for p in players),
            ),
            three_point_percentage=_pct(
                sum(p.three_pointers_made for p in players),
                sum(p.three_pointers_attempted for p in players),
            ),
            free_throw_percentage=_pct(
                sum(p.free_throws_made for p in players),
                sum(p.free_throws_attempted for p in players),
            ),
        )


async def simulate_match(
    team1: Team,
    team2: Team,
    rules: SimulationRules = DEFAULT_RULES,
    rng: RandomSource | None = None,
    commentary: CommentaryProvider | None = None,
    commentary_timeout: float = 20.0,
) -> MatchResult:
    """Simulate a complete match with a fresh engine, highlights included."""
    engine = SimulationEngine(
        team1,
        team2,
        rules=rules,
        rng=rng,
        commentary=commentary,
        commentary_timeout=commentary_timeout,
    )
    return await engine.simulate_match()
