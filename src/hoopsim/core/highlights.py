"""Key-moment detection over a finished match.

Scans the possession stream of a MatchResult once it is complete and emits
GameMoments for scoring runs, made threes, steals that turn into points,
comebacks and clutch fourth-quarter scores.

This is a pure computation module — no AI calls, no I/O.
"""

from __future__ import annotations

import re

from hoopsim.models.game import MatchResult, Possession, QuarterStats, Side
from hoopsim.models.highlights import GameMoment

RUN_THRESHOLD = 8
BIG_RUN_THRESHOLD = 12
RUN_LOOKBACK = 5
RUN_MAX_PLAYERS = 5
COMEBACK_LEAD = 10
CLUTCH_WINDOW_SECONDS = 120
VERY_CLUTCH_SECONDS = 30

_STOLEN_BY = re.compile(r"stolen by (.+)")


def parse_clock(clock: str) -> int:
    """Convert an ``M:SS`` clock string to seconds remaining."""
    minutes, seconds = clock.split(":")
    return int(minutes) * 60 + int(seconds)


def _team_name(result: MatchResult, side: Side) -> str:
    return result.team_for(side).name


class HighlightDetector:
    """Finds key moments in a MatchResult, in chronological order."""

    def detect_key_moments(self, result: MatchResult) -> list[GameMoment]:
        moments: list[GameMoment] = []
        for quarter in result.quarters:
            moments.extend(self._analyze_quarter(quarter, result))

        comeback = self._detect_comeback(result)
        if comeback is not None:
            moments.append(comeback)
        moments.extend(self._detect_clutch(result))

        # Forward in game time: earlier quarters first, more time left first.
        moments.sort(key=lambda m: (m.quarter, -parse_clock(m.time)))
        return moments

    def _analyze_quarter(self, quarter: QuarterStats, result: MatchResult) -> list[GameMoment]:
        moments: list[GameMoment] = []
        possessions = quarter.possessions
        run = {"team1": 0, "team2": 0}
        last_scoring_team: Side | None = None

        for idx, poss in enumerate(possessions):
            if poss.points > 0:
                other: Side = "team2" if poss.team == "team1" else "team1"
                if last_scoring_team == poss.team:
                    run[poss.team] += poss.points
                else:
                    run[poss.team] = poss.points
                    run[other] = 0
                last_scoring_team = poss.team

                if run["team1"] >= RUN_THRESHOLD or run["team2"] >= RUN_THRESHOLD:
                    run_team: Side = "team1" if run["team1"] >= RUN_THRESHOLD else "team2"
                    run_score = run[run_team]
                    moments.append(
                        GameMoment(
                            quarter=quarter.quarter,
                            time=poss.time,
                            description=(
                                f"{_team_name(result, run_team)} on a {run_score}-0 run"
                            ),
                            importance="high" if run_score >= BIG_RUN_THRESHOLD else "medium",
                            type="run",
                            team_favor=run_team,
                            involved_players=self._players_in_run(possessions, idx, run_team),
                        )
                    )
                    run = {"team1": 0, "team2": 0}

                if poss.points == 3:
                    moments.append(
                        GameMoment(
                            quarter=quarter.quarter,
                            time=poss.time,
                            description=f"{poss.player} drains a three-pointer",
                            importance="medium",
                            type="highlight_play",
                            team_favor=poss.team,
                            involved_players=[poss.player],
                        )
                    )

            # Steal that turns straight into points at the other end
            match = _STOLEN_BY.search(poss.action)
            if match and idx < len(possessions) - 1:
                nxt = possessions[idx + 1]
                if nxt.points > 0 and nxt.team != poss.team:
                    stealer = match.group(1)
                    moments.append(
                        GameMoment(
                            quarter=quarter.quarter,
                            time=poss.time,
                            description=(
                                f"{stealer} with a steal leading to "
                                f"{nxt.player}'s {nxt.points} points"
                            ),
                            importance="medium",
                            type="momentum_swing",
                            team_favor=nxt.team,
                            involved_players=[stealer, nxt.player],
                        )
                    )

        return moments

    @staticmethod
    def _players_in_run(possessions: list[Possession], end: int, team: Side) -> list[str]:
        """Distinct scorers for ``team`` in the window ending at ``end``."""
        players: list[str] = []
        for poss in possessions[max(0, end - RUN_LOOKBACK) : end + 1]:
            if poss.team == team and poss.points > 0 and poss.player not in players:
                players.append(poss.player)
        return players[:RUN_MAX_PLAYERS]

    @staticmethod
    def _detect_comeback(result: MatchResult) -> GameMoment | None:
        """Largest lead after any quarter, blown by the team that held it."""
        max_lead = 0
        max_lead_team: Side | None = None
        team1_running = 0
        team2_running = 0

        for quarter in result.quarters:
            team1_running += quarter.team1_score
            team2_running += quarter.team2_score
            lead = abs(team1_running - team2_running)
            if lead > max_lead:
                max_lead = lead
                max_lead_team = "team1" if team1_running > team2_running else "team2"

        if max_lead < COMEBACK_LEAD or result.winner == max_lead_team:
            return None
        return GameMoment(
            quarter=4,
            time="0:00",
            description=(
                f"{result.winner_team.name} completes a comeback from {max_lead} points down"
            ),
            importance="high",
            type="comeback",
            team_favor=result.winner,
            involved_players=[],
        )

    @staticmethod
    def _detect_clutch(result: MatchResult) -> list[GameMoment]:
        """Fourth-quarter scores in the final seconds."""
        fourth = next((q for q in result.quarters if q.quarter == 4), None)
        if fourth is None:
            return []

        moments: list[GameMoment] = []
        for poss in fourth.possessions:
            seconds = parse_clock(poss.time)
            if seconds > CLUTCH_WINDOW_SECONDS or poss.points <= 0:
                continue
            if seconds <= VERY_CLUTCH_SECONDS:
                moments.append(
                    GameMoment(
                        quarter=4,
                        time=poss.time,
                        description=f"{poss.player} scores in the clutch with {poss.time} left",
                        importance="high",
                        type="clutch_shot",
                        team_favor=poss.team,
                        involved_players=[poss.player],
                    )
                )
        return moments
