"""
Response Generator Base
=======================

The boundary between the core and whatever produces "AI" text.

Contract:
    await generator.generate(instruction, context) -> str
    or raise GenerationUnavailable

Callers go through `call_generator`, which bounds the call with a timeout and
normalizes backend failures. Nothing is mutated before the call returns.
"""

import asyncio
import hashlib
import logging
from abc import ABC, abstractmethod
from typing import Mapping, Optional

from ..errors import GenerationUnavailable

logger = logging.getLogger(__name__)

# Context field names understood by generators
CASE_TITLE = "caseTitle"
SHORT_FACTS = "shortFacts"
FAVORED_PARTY = "favoredParty"


def safe_log_content(content: str, max_chars: int = 60) -> str:
    """
    Log-safe representation of user text: length, hash and a short preview.
    """
    if not content:
        return "(empty)"

    content_hash = hashlib.sha256(content.encode()).hexdigest()[:12]
    preview = content[:max_chars].replace('\n', ' ')

    return f"len={len(content)} hash={content_hash} preview='{preview}...'"


class ResponseGenerator(ABC):
    """Abstract text generator"""

    name = "base"

    @abstractmethod
    async def generate(self, instruction: str, context: Mapping[str, str]) -> str:
        """
        Produce response text for an instruction.

        Args:
            instruction: What the caller asked for
            context: Named fields (caseTitle, shortFacts, favoredParty)

        Raises:
            GenerationUnavailable: backend failed
        """

    async def close(self):
        """Release backend resources (no-op by default)"""


async def call_generator(
    generator: ResponseGenerator,
    instruction: str,
    context: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = None,
) -> str:
    """
    Time-bounded generator call.

    Timeouts, backend exceptions and a None result all surface as
    GenerationUnavailable. Cancellation propagates unchanged.
    """
    context = dict(context or {})
    try:
        result = await asyncio.wait_for(generator.generate(instruction, context), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Generator '{generator.name}' timed out after {timeout}s")
        raise GenerationUnavailable(f"Response generator timed out after {timeout}s") from None
    except GenerationUnavailable:
        raise
    except Exception as e:
        logger.error(f"Generator '{generator.name}' failed: {e.__class__.__name__}: {e}")
        raise GenerationUnavailable(f"Response generator failed: {e.__class__.__name__}") from e

    if result is None:
        raise GenerationUnavailable("Response generator returned no text")

    logger.debug(f"Generator '{generator.name}' answered {safe_log_content(instruction)}")
    return result
