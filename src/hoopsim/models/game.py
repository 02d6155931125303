"""Match result models — output types from the simulation engine.

Possession, QuarterStats and MatchResult are produced once and never mutated.
Their validators enforce the scoring invariants of a finished match.
"""

from __future__ import annotations

import json
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from hoopsim.models.highlights import GameHighlights
from hoopsim.models.team import Team

Side = Literal["team1", "team2"]
PossessionResultTag = Literal["made", "missed", "turnover", "foul"]
ShotType = Literal["three", "layup", "mid_range", "free_throw"]


class Possession(BaseModel):
    """Record of a single possession."""

    model_config = ConfigDict(frozen=True)

    team: Side
    quarter: int = Field(ge=1)
    time: str  # M:SS remaining in the period
    player: str
    action: str  # "Three-pointer made", "Turnover, stolen by ...", ...
    points: int = Field(default=0, ge=0, le=3)
    result: PossessionResultTag
    shot_type: ShotType | None = None

    @model_validator(mode="after")
    def _turnovers_score_nothing(self) -> Possession:
        if self.result == "turnover" and self.points != 0:
            msg = f"turnover possession cannot score points (got {self.points})"
            raise ValueError(msg)
        return self


class QuarterStats(BaseModel):
    """Score and play-by-play for one period (5+ are overtime)."""

    model_config = ConfigDict(frozen=True)

    quarter: int = Field(ge=1)
    team1_score: int = Field(ge=0)
    team2_score: int = Field(ge=0)
    possessions: list[Possession] = Field(default_factory=list)

    @model_validator(mode="after")
    def _scores_match_possessions(self) -> QuarterStats:
        t1 = sum(p.points for p in self.possessions if p.team == "team1")
        t2 = sum(p.points for p in self.possessions if p.team == "team2")
        if (t1, t2) != (self.team1_score, self.team2_score):
            msg = (
                f"quarter {self.quarter} score {self.team1_score}-{self.team2_score} "
                f"does not match possessions {t1}-{t2}"
            )
            raise ValueError(msg)
        return self

    @property
    def is_overtime(self) -> bool:
        return self.quarter > 4


class MVPRecord(BaseModel):
    """Most valuable player line."""

    model_config = ConfigDict(frozen=True)

    player: str = ""
    team: Side = "team1"
    points: int = Field(default=0, ge=0)
    rebounds: int = Field(default=0, ge=0)
    assists: int = Field(default=0, ge=0)


class PlayerBoxScore(BaseModel):
    """Per-player stat line for a single match."""

    model_config = ConfigDict(frozen=True)

    player_id: int | str
    player_name: str
    team: Side
    points: int = 0
    rebounds: int = 0
    assists: int = 0
    steals: int = 0
    blocks: int = 0
    turnovers: int = 0
    fouls: int = 0
    field_goals_made: int = 0
    field_goals_attempted: int = 0
    three_pointers_made: int = 0
    three_pointers_attempted: int = 0
    free_throws_made: int = 0
    free_throws_attempted: int = 0

    @property
    def fg_pct(self) -> float:
        if not self.field_goals_attempted:
            return 0.0
        return self.field_goals_made / self.field_goals_attempted


class TeamGameStats(BaseModel):
    """Aggregated team box score, built from the per-player ledgers."""

    team_id: int | str
    team_name: str
    players: list[PlayerBoxScore] = Field(default_factory=list)
    total_points: int = 0
    total_rebounds: int = 0
    total_assists: int = 0
    total_steals: int = 0
    total_blocks: int = 0
    total_turnovers: int = 0
    field_goal_percentage: float = Field(default=0.0, ge=0.0, le=1.0)
    three_point_percentage: float = Field(default=0.0, ge=0.0, le=1.0)
    free_throw_percentage: float = Field(default=0.0, ge=0.0, le=1.0)


class MatchRecord(BaseModel):
    """Payload handed to the match store once a simulation finishes."""

    team1_id: int | str
    team2_id: int | str
    team1_score: int
    team2_score: int
    winner_id: int | str
    play_by_play: str  # JSON-encoded list of quarters


class MatchResult(BaseModel):
    """Complete output of a match simulation."""

    model_config = ConfigDict(frozen=True)

    team1: Team
    team2: Team
    team1_score: int = Field(ge=0)
    team2_score: int = Field(ge=0)
    quarters: list[QuarterStats] = Field(default_factory=list)
    winner: Side
    mvp: MVPRecord = Field(default_factory=MVPRecord)
    box_scores: list[PlayerBoxScore] = Field(default_factory=list)
    highlights: GameHighlights | None = None

    @model_validator(mode="after")
    def _check_final_score(self) -> MatchResult:
        t1 = sum(q.team1_score for q in self.quarters)
        t2 = sum(q.team2_score for q in self.quarters)
        if (t1, t2) != (self.team1_score, self.team2_score):
            msg = (
                f"final score {self.team1_score}-{self.team2_score} "
                f"does not match quarter totals {t1}-{t2}"
            )
            raise ValueError(msg)
        if self.team1_score == self.team2_score:
            raise ValueError("a finished match cannot end in a tie")
        expected = "team1" if self.team1_score > self.team2_score else "team2"
        if self.winner != expected:
            raise ValueError(f"winner {self.winner} does not hold the higher score")
        for idx, q in enumerate(self.quarters):
            if idx < 4 and q.quarter != idx + 1:
                raise ValueError(f"regulation quarter {idx + 1} numbered {q.quarter}")
            if idx >= 4 and q.quarter < 5:
                raise ValueError(f"overtime period numbered {q.quarter}")
        return self

    @property
    def winner_team(self) -> Team:
        return self.team1 if self.winner == "team1" else self.team2

    @property
    def loser_team(self) -> Team:
        return self.team2 if self.winner == "team1" else self.team1

    @property
    def margin(self) -> int:
        return abs(self.team1_score - self.team2_score)

    @property
    def possessions(self) -> list[Possession]:
        """Every possession in game order."""
        return [p for q in self.quarters for p in q.possessions]

    def team_for(self, side: Side) -> Team:
        return self.team1 if side == "team1" else self.team2

    def to_record(self) -> MatchRecord:
        """Build the persistence payload: ids, scores, winner, play-by-play JSON."""
        play_by_play = json.dumps([q.model_dump(mode="json") for q in self.quarters])
        return MatchRecord(
            team1_id=self.team1.id,
            team2_id=self.team2.id,
            team1_score=self.team1_score,
            team2_score=self.team2_score,
            winner_id=self.winner_team.id,
            play_by_play=play_by_play,
        )
