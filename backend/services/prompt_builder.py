"""
Prompt builder for the generation passthrough.

Wraps the user's request in a fixed instructional preamble. The user text
is embedded verbatim.
"""

from __future__ import annotations

SYSTEM_PROMPT = (
    "You are an expert coding assistant. Your task is to provide clear, concise, and "
    "well-structured code solutions with comments and best practices. Avoid unnecessary explanations."
)

_TEMPLATE = """{system}

Problem / Request:
{prompt}

Please provide the complete code solution and comments where appropriate."""


def build_generation_prompt(prompt: str) -> str:
    """
    Build the single user-turn text sent to the generation service.

    Args:
        prompt: The user's request, as typed

    Returns:
        Preamble + request + closing instruction
    """
    return _TEMPLATE.format(system=SYSTEM_PROMPT, prompt=prompt)
