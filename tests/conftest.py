"""Shared test fixtures."""

from __future__ import annotations

import pytest

from hoopsim.config import Settings
from hoopsim.models.team import Player, Team


class ScriptedRandom:
    """Random source that replays a fixed list of draws."""

    def __init__(self, values: list[float]) -> None:
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        if not self.values:
            raise AssertionError(f"ScriptedRandom exhausted after {self.calls} draws")
        self.calls += 1
        return self.values.pop(0)


def make_player(
    player_id: int | str,
    position: str = "SF",
    name: str | None = None,
    **stats: float,
) -> Player:
    return Player(id=player_id, name=name or f"Player-{player_id}", position=position, **stats)


def make_team(team_id: int = 1, name: str | None = None, per_position: int = 1, **stats: float) -> Team:
    """A roster with ``per_position`` players at each of the five positions."""
    players = []
    for slot in range(per_position):
        for position in ("PG", "SG", "SF", "PF", "C"):
            pid = f"{team_id}-{position}-{slot}"
            players.append(make_player(pid, position, name=f"T{team_id} {position}{slot}", **stats))
    return Team(id=team_id, name=name or f"Team-{team_id}", players=players)


@pytest.fixture
def settings() -> Settings:
    """Test settings with commentary disabled."""
    return Settings(anthropic_api_key="", hoopsim_env="development")
