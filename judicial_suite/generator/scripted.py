"""
Scripted Generator
==================

Deterministic pattern-matched stand-in for an AI backend. Same instruction and
context always give the same text.
"""

from typing import Mapping

from .base import CASE_TITLE, FAVORED_PARTY, SHORT_FACTS, ResponseGenerator


ADVICE_TEXT = (
    "Legal Assistant: Based on the facts, consider documenting evidence "
    "and reviewing statutory provisions."
)
RULING_REASONING = "Reasoning: The record indicates breach of duty supported by exhibits."


def scripted_response(instruction: str, context: Mapping[str, str]) -> str:
    """Match the instruction against a few keywords, first hit wins"""
    if not instruction:
        return "..."

    text = instruction.lower()
    if "summarize" in text:
        title = context.get(CASE_TITLE) or "No case"
        facts = context.get(SHORT_FACTS) or "No facts provided."
        return f"Summary — {title}: {facts}"
    if "advice" in text or "what should" in text:
        return ADVICE_TEXT
    if "evaluate" in text or "decide" in text:
        favored = context.get(FAVORED_PARTY) or "plaintiff"
        return f"Ruling: In favor of {favored}\n{RULING_REASONING}"
    return f'AI: (Simulated) I can help with: "{instruction}"'


class ScriptedGenerator(ResponseGenerator):
    """Default generator; never fails, never blocks"""

    name = "scripted"

    async def generate(self, instruction: str, context: Mapping[str, str]) -> str:
        return scripted_response(instruction, context)
