"""Bookkeeping for text-generation calls: latency, token counts, prompt caching.

Every call made by a commentary provider runs inside ``timed_call()``, which
logs one ``commentary_call`` line when the call finishes, successful or not.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class CallUsage:
    """Timing and token counts for one Messages API call."""

    model: str
    latency_ms: float = 0.0
    input_tokens: int = 0
    output_tokens: int = 0
    ok: bool = False

    def record_response(self, response: object) -> None:
        """Copy token counts off a response; a missing ``usage`` block counts as zero."""
        usage = getattr(response, "usage", None)
        self.input_tokens = getattr(usage, "input_tokens", 0) or 0
        self.output_tokens = getattr(usage, "output_tokens", 0) or 0
        self.ok = True


@asynccontextmanager
async def timed_call(model: str) -> AsyncIterator[CallUsage]:
    """Time the enclosed call and log its usage on exit."""
    usage = CallUsage(model=model)
    start = time.monotonic()
    try:
        yield usage
    finally:
        usage.latency_ms = (time.monotonic() - start) * 1000
        logger.info(
            "commentary_call model=%s ok=%s latency_ms=%.1f input_tokens=%d output_tokens=%d",
            usage.model,
            usage.ok,
            usage.latency_ms,
            usage.input_tokens,
            usage.output_tokens,
        )


def system_blocks(text: str) -> list[dict[str, object]]:
    """The system prompt as a single content block marked for prompt caching."""
    return [{"type": "text", "text": text, "cache_control": {"type": "ephemeral"}}]
