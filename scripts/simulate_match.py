"""Simulate one match from a YAML matchup file and print the box score.

Usage:
    python scripts/simulate_match.py MATCHUP.yaml [SEED]
    python scripts/simulate_match.py scripts/sample_matchup.yaml 7

Set ANTHROPIC_API_KEY to get AI-enhanced highlights; otherwise the template
highlights are printed.
"""

from __future__ import annotations

import asyncio
import random
import sys
from pathlib import Path

from hoopsim.ai.commentary import build_provider
from hoopsim.config import Settings, configure_logging
from hoopsim.core.seeding import load_matchup_yaml
from hoopsim.core.simulation import SimulationEngine


async def main(path: Path, seed: int | None) -> None:
    settings = Settings()
    configure_logging(settings)
    matchup = load_matchup_yaml(path)

    engine = SimulationEngine(
        matchup.team1,
        matchup.team2,
        rng=random.Random(seed),
        commentary=build_provider(settings),
        commentary_timeout=settings.hoopsim_commentary_timeout_seconds,
    )
    result = await engine.simulate_match()

    print(f"{result.team1.name} {result.team1_score} - {result.team2_score} {result.team2.name}")
    for q in result.quarters:
        label = f"Q{q.quarter}" if q.quarter <= 4 else f"OT{q.quarter - 4}"
        print(f"  {label}: {q.team1_score}-{q.team2_score}")
    mvp = result.mvp
    print(f"MVP: {mvp.player} ({mvp.points} pts, {mvp.rebounds} reb, {mvp.assists} ast)")

    for side in ("team1", "team2"):
        stats = engine.get_team_stats(side)
        print(
            f"{stats.team_name}: {stats.total_points} pts, {stats.total_rebounds} reb, "
            f"{stats.total_assists} ast, FG {stats.field_goal_percentage:.1%}"
        )
        leader = max(stats.players, key=lambda p: p.points)
        print(f"  Top scorer: {leader.player_name} {leader.points} pts, FG {leader.fg_pct:.1%}")

    if result.highlights:
        print()
        for moment in result.highlights.moments:
            print(f"  Q{moment.quarter} {moment.time} [{moment.type}] {moment.description}")
        print()
        print(result.highlights.narrative)
        print(result.highlights.summary)


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)
    seed_arg = int(sys.argv[2]) if len(sys.argv) > 2 else None
    asyncio.run(main(Path(sys.argv[1]), seed_arg))
