"""Matchup seeding — YAML loading and saving of two rosters.

Stands in for the roster store in scripts and tests. Players in YAML may omit
any season-average stat; the Player model fills in defaults.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel

from hoopsim.models.team import Team


class Matchup(BaseModel):
    """Two teams about to play each other."""

    team1: Team
    team2: Team


def save_matchup_yaml(matchup: Matchup, path: Path) -> None:
    """Save a matchup to YAML."""
    data = matchup.model_dump()
    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def load_matchup_yaml(path: Path) -> Matchup:
    """Load a matchup from YAML."""
    with open(path) as f:
        data = yaml.safe_load(f)
    return Matchup.model_validate(data)
