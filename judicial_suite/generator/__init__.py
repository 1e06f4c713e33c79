"""
Generator Module
================

Response generator adapters behind one async contract.

Backends:
- scripted: deterministic keyword stub (default, no network)
- openrouter: OpenRouter chat completions over httpx

Usage:
    from judicial_suite.generator import get_generator, call_generator

    generator = get_generator(settings)
    text = await call_generator(generator, "Summarize", {"caseTitle": "..."}, timeout=10)
"""

from ..schemas import GeneratorMode
from .base import (
    CASE_TITLE,
    FAVORED_PARTY,
    SHORT_FACTS,
    ResponseGenerator,
    call_generator,
    safe_log_content,
)
from .openrouter import OpenRouterGenerator
from .scripted import ScriptedGenerator, scripted_response


def get_generator(settings) -> ResponseGenerator:
    """Build the generator selected by GENERATOR_MODE"""
    if settings.generator_mode == GeneratorMode.OPENROUTER:
        return OpenRouterGenerator(
            api_key=settings.openrouter_api_key,
            model=settings.openrouter_model,
            base_url=settings.openrouter_base_url,
            timeout=settings.generator_timeout,
        )
    return ScriptedGenerator()


__all__ = [
    # Base
    "ResponseGenerator",
    "call_generator",
    "safe_log_content",
    "CASE_TITLE",
    "SHORT_FACTS",
    "FAVORED_PARTY",
    # Backends
    "ScriptedGenerator",
    "scripted_response",
    "OpenRouterGenerator",
    "get_generator",
]
