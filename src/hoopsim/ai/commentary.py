"""AI commentary — turns detected key moments into a highlights package.

Two modes:
- AI-powered (Claude): rewrites each moment's description and adds a narrative
  arc and a punchy summary.
- Mock: template-based fallback when no provider is configured, or whenever
  the AI call fails. Still references real team names, scores and the MVP.

generate_highlights() never raises; the worst case is the mock output.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Protocol

import anthropic

from hoopsim.ai.usage import system_blocks, timed_call
from hoopsim.config import DEFAULT_COMMENTARY_MODEL, Settings
from hoopsim.models.game import MatchResult
from hoopsim.models.highlights import GameHighlights, GameMoment

logger = logging.getLogger(__name__)

MAX_MOMENTS = 8

COMMENTARY_SYSTEM_PROMPT = """\
You are a professional basketball commentator generating exciting play-by-play \
highlights for a basketball game.

Create engaging, dramatic commentary that captures the excitement of key moments.
- Write one line per key moment, in the order given. Keep each to 1-2 sentences.
- Then one line starting with "Narrative:" — 2-3 sentences on the overall game flow.
- Finish with one line starting with "Summary:" — 1-2 sentences on the final result.

No headers. No bullet points. No blank commentary lines."""

_NARRATIVE_PREFIX = re.compile(r"^(narrative:?|summary:?)", re.IGNORECASE)
_SUMMARY_PREFIX = re.compile(r"^summary:?", re.IGNORECASE)


class CommentaryProvider(Protocol):
    """A single-call text-generation service: prompt in, free text out."""

    async def complete(self, system: str, prompt: str) -> str: ...


class AnthropicCommentaryProvider:
    """CommentaryProvider backed by the Anthropic Messages API."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_COMMENTARY_MODEL,
        max_tokens: int = 1000,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens

    def _get_client(self) -> anthropic.AsyncAnthropic:
        return anthropic.AsyncAnthropic(api_key=self.api_key)

    async def complete(self, system: str, prompt: str) -> str:
        client = self._get_client()
        async with timed_call(self.model) as usage:
            response = await client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=system_blocks(system),
                messages=[{"role": "user", "content": prompt}],
            )
            usage.record_response(response)
        return response.content[0].text


def build_provider(settings: Settings) -> CommentaryProvider | None:
    """Return the configured provider, or None when no API key is set."""
    if not settings.commentary_enabled:
        return None
    return AnthropicCommentaryProvider(
        api_key=settings.anthropic_api_key,
        model=settings.hoopsim_commentary_model,
        max_tokens=settings.hoopsim_commentary_max_tokens,
    )


def _winner_loser(result: MatchResult) -> tuple[str, str]:
    return result.winner_team.name, result.loser_team.name


def build_basic_narrative(result: MatchResult) -> str:
    """Template narrative keyed by margin of victory."""
    winner, loser = _winner_loser(result)
    margin = result.margin
    if margin <= 5:
        return (
            f"A nail-biter to the very end as {winner} edges out {loser} in a thriller. "
            "Both teams traded baskets throughout, with the outcome uncertain until "
            "the final buzzer."
        )
    if margin <= 15:
        return (
            f"{winner} controlled the pace and maintained their composure to secure a "
            f"solid victory over {loser}. Despite some resistance, they never let the "
            "lead slip away."
        )
    return (
        f"{winner} dominated from start to finish, putting on a clinic against {loser}. "
        "Their superior execution on both ends of the floor made this a statement win."
    )


def build_basic_summary(result: MatchResult) -> str:
    winner, _ = _winner_loser(result)
    return (
        f"{winner} takes the victory {result.team1_score}-{result.team2_score} behind "
        f"{result.mvp.player}'s {result.mvp.points}-point performance."
    )


def generate_highlights_mock(
    result: MatchResult,
    moments: list[GameMoment],
) -> GameHighlights:
    """Deterministic highlights: top moments unchanged plus template prose."""
    return GameHighlights(
        moments=moments[:MAX_MOMENTS],
        narrative=build_basic_narrative(result),
        summary=build_basic_summary(result),
    )


def _build_highlight_context(result: MatchResult, moments: list[GameMoment]) -> str:
    """Build the user prompt: score, MVP line, and up to eight moments."""
    winner, loser = _winner_loser(result)
    mvp = result.mvp
    lines = [
        "Game Summary:",
        f"{winner} defeats {loser} {result.team1_score}-{result.team2_score}",
        f"MVP: {mvp.player} with {mvp.points} points, {mvp.rebounds} rebounds, "
        f"{mvp.assists} assists",
        "",
        "Key Moments to commentate on:",
    ]
    for idx, moment in enumerate(moments[:MAX_MOMENTS], start=1):
        team_name = result.team_for(moment.team_favor).name if moment.team_favor else "Both teams"
        lines.extend([
            "",
            f"{idx}. Quarter {moment.quarter}, {moment.time} remaining",
            f"Type: {moment.type}",
            f"Players: {', '.join(moment.involved_players) or 'Team effort'}",
            f"Context: {moment.description}",
            f"Team benefiting: {team_name}",
        ])
    lines.extend([
        "",
        "Generate:",
        "1. Enhanced commentary for each moment (make it exciting and contextual)",
        "2. A narrative arc describing the game flow",
        "3. A punchy summary of the result",
    ])
    return "\n".join(lines)


def _parse_generated_content(
    content: str,
    result: MatchResult,
    moments: list[GameMoment],
) -> GameHighlights:
    """Patch moment descriptions line by line; pull out narrative and summary."""
    lines = [line.strip() for line in content.splitlines() if line.strip()]
    if not lines:
        return generate_highlights_mock(result, moments)

    top = moments[:MAX_MOMENTS]
    enhanced = [
        m.model_copy(update={"description": lines[idx]}) if idx < len(lines) else m
        for idx, m in enumerate(top)
    ]

    narrative_line = next((line for line in lines if "narrative" in line.lower()), "")
    narrative = _NARRATIVE_PREFIX.sub("", narrative_line).strip()
    summary = _SUMMARY_PREFIX.sub("", lines[-1]).strip()

    return GameHighlights(
        moments=enhanced,
        narrative=narrative or build_basic_narrative(result),
        summary=summary or build_basic_summary(result),
    )


async def generate_highlights(
    result: MatchResult,
    moments: list[GameMoment],
    provider: CommentaryProvider | None = None,
    timeout: float = 20.0,
) -> GameHighlights:
    """Render highlights, enhanced by ``provider`` when one is configured.

    Falls back to generate_highlights_mock() on any provider failure or timeout.
    """
    if provider is None:
        return generate_highlights_mock(result, moments)

    prompt = _build_highlight_context(result, moments)
    try:
        content = await asyncio.wait_for(
            provider.complete(COMMENTARY_SYSTEM_PROMPT, prompt),
            timeout=timeout,
        )
        return _parse_generated_content(content or "", result, moments)
    except Exception as e:
        logger.warning("commentary_failed error=%r moments=%d", e, len(moments))
        return generate_highlights_mock(result, moments)
