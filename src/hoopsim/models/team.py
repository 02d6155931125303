"""Player and Team models — the read-only inputs to a match simulation.

Rosters come from an external store and are often partially populated, so
every rate stat has a default and ``None`` is treated as missing.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

Position = Literal["PG", "SG", "SF", "PF", "C"]

POSITIONS: list[Position] = ["PG", "SG", "SF", "PF", "C"]

# Season-average defaults used when a roster entry omits a stat.
PLAYER_STAT_DEFAULTS: dict[str, float] = {
    "points_per_game": 10.0,
    "rebounds_per_game": 5.0,
    "assists_per_game": 3.0,
    "steals_per_game": 1.0,
    "blocks_per_game": 0.5,
    "field_goal_percentage": 0.45,
    "three_point_percentage": 0.35,
    "free_throw_percentage": 0.75,
}


class Player(BaseModel):
    """A rostered player with per-game season averages."""

    model_config = ConfigDict(frozen=True)

    id: int | str
    name: str
    position: Position
    points_per_game: float = Field(default=10.0, ge=0.0)
    rebounds_per_game: float = Field(default=5.0, ge=0.0)
    assists_per_game: float = Field(default=3.0, ge=0.0)
    steals_per_game: float = Field(default=1.0, ge=0.0)
    blocks_per_game: float = Field(default=0.5, ge=0.0)
    field_goal_percentage: float = Field(default=0.45, ge=0.0, le=1.0)
    three_point_percentage: float = Field(default=0.35, ge=0.0, le=1.0)
    free_throw_percentage: float = Field(default=0.75, ge=0.0, le=1.0)

    @model_validator(mode="before")
    @classmethod
    def _fill_missing_stats(cls, data: Any) -> Any:
        """Replace explicit ``None`` stats with their defaults."""
        if isinstance(data, dict):
            data = dict(data)
            for key, default in PLAYER_STAT_DEFAULTS.items():
                if key in data and data[key] is None:
                    data[key] = default
        return data


class Team(BaseModel):
    """A named roster. Any size is accepted; the engine needs at least one player."""

    model_config = ConfigDict(frozen=True)

    id: int | str
    name: str
    players: list[Player] = Field(default_factory=list)
