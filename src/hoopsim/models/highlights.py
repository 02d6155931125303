"""Highlight models — output of the highlight detector and commentary layer."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Importance = Literal["high", "medium", "low"]
MomentType = Literal[
    "clutch_shot",
    "momentum_swing",
    "run",
    "comeback",
    "highlight_play",
    "milestone",
]


class GameMoment(BaseModel):
    """A single key moment in a finished match."""

    model_config = ConfigDict(frozen=True)

    quarter: int
    time: str
    description: str
    importance: Importance
    type: MomentType
    team_favor: Literal["team1", "team2"] | None = None
    involved_players: list[str] = Field(default_factory=list)


class GameHighlights(BaseModel):
    """Top moments plus a short narrative and a one-line summary."""

    model_config = ConfigDict(frozen=True)

    moments: list[GameMoment] = Field(default_factory=list)
    narrative: str
    summary: str
