"""
Mock generator for offline use and deterministic tests.

Produces a fixed HTML snippet for any prompt after a configurable delay.
Plugs into SuggestionSession wherever the HTTP generator would.
"""

from __future__ import annotations

import asyncio

DELAY_PROFILES: dict[str, float] = {
    "instant": 0.0,
    "realistic": 1.5,
}


class MockGenerator:
    """Simulated text generation. Records every prompt it receives."""

    def __init__(self, profile: str = "instant", output: str | None = None):
        delay = DELAY_PROFILES.get(profile)
        if delay is None:
            raise ValueError(f"Unknown delay profile: {profile!r}. Valid profiles: {list(DELAY_PROFILES)}")
        self.delay = delay
        self.output = output
        self.prompts: list[str] = []

    async def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.output is not None:
            return self.output
        return (
            f"<!-- AI generated snippet for: {prompt} -->\n"
            "<div>\n"
            "  <p>This code was magically generated by AI based on your prompt.</p>\n"
            "</div>"
        )
