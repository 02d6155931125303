"""Mutable match state for the simulation engine.

PlayerGameStats is the per-player ledger — the working memory of a match in
progress. It is internal to one engine; MatchResult is the immutable output.
"""

from __future__ import annotations

from dataclasses import dataclass

from hoopsim.models.game import PlayerBoxScore, Side
from hoopsim.models.team import Player


class SimulationError(Exception):
    """The engine was used outside its contract."""


class LedgerInvariantError(SimulationError):
    """A ledger recorded more makes than attempts."""


@dataclass
class PlayerGameStats:
    """Mutable in-game stat line for one player."""

    player: Player
    points: int = 0
    rebounds: int = 0
    assists: int = 0
    steals: int = 0
    blocks: int = 0
    turnovers: int = 0
    fouls: int = 0  # fouls are not simulated; always zero
    field_goals_made: int = 0
    field_goals_attempted: int = 0
    three_pointers_made: int = 0
    three_pointers_attempted: int = 0
    free_throws_made: int = 0
    free_throws_attempted: int = 0

    @property
    def name(self) -> str:
        return self.player.name

    def check_invariants(self) -> None:
        """Raise LedgerInvariantError if any category has made > attempted."""
        pairs = {
            "field_goals": (self.field_goals_made, self.field_goals_attempted),
            "three_pointers": (self.three_pointers_made, self.three_pointers_attempted),
            "free_throws": (self.free_throws_made, self.free_throws_attempted),
        }
        for category, (made, attempted) in pairs.items():
            if made > attempted:
                msg = f"{self.name}: {category} made={made} > attempted={attempted}"
                raise LedgerInvariantError(msg)

    def to_box_score(self, team: Side) -> PlayerBoxScore:
        return PlayerBoxScore(
            player_id=self.player.id,
            player_name=self.player.name,
            team=team,
            points=self.points,
            rebounds=self.rebounds,
            assists=self.assists,
            steals=self.steals,
            blocks=self.blocks,
            turnovers=self.turnovers,
            fouls=self.fouls,
            field_goals_made=self.field_goals_made,
            field_goals_attempted=self.field_goals_attempted,
            three_pointers_made=self.three_pointers_made,
            three_pointers_attempted=self.three_pointers_attempted,
            free_throws_made=self.free_throws_made,
            free_throws_attempted=self.free_throws_attempted,
        )


Ledger = dict[int | str, PlayerGameStats]


def build_ledger(players: list[Player]) -> Ledger:
    """Create a zeroed ledger keyed by player id."""
    return {p.id: PlayerGameStats(player=p) for p in players}
