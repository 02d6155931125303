"""SimulationRules — the fixed numbers the match engine runs on.

Consumed by the possession resolver, the orchestrator, and the MVP scoring.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class SimulationRules(BaseModel):
    """Engine constants.

    Grouped by concern:
    - Clock: quarter length and possession counts (used to render the clock)
    - Possession: turnover, assist, rebound and shooting rates
    - MVP: box-score weights for the composite score
    """

    # Clock
    quarter_minutes: int = Field(default=12, ge=1, le=20)
    regulation_quarters: int = Field(default=4, ge=1, le=4)
    possessions_per_quarter: int = Field(default=25, ge=1, le=100)
    overtime_possessions: int = Field(default=10, ge=1, le=100)

    # Possession
    turnover_rate: float = Field(default=0.15, ge=0.0, le=1.0)
    assist_rate: float = Field(default=0.4, ge=0.0, le=1.0)
    defensive_rebound_rate: float = Field(default=0.7, ge=0.0, le=1.0)
    shot_noise: float = Field(default=0.05, ge=0.0, le=0.5)
    min_shot_rate: float = Field(default=0.10, ge=0.0, le=1.0)
    max_shot_rate: float = Field(default=0.95, ge=0.0, le=1.0)

    # MVP
    mvp_rebound_weight: float = 1.2
    mvp_assist_weight: float = 1.5
    mvp_steal_weight: float = 2.0
    mvp_block_weight: float = 2.0

    @property
    def quarter_seconds(self) -> int:
        return self.quarter_minutes * 60


DEFAULT_RULES = SimulationRules()
