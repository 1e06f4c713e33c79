"""
Assistant Service
=================

Prompt -> generator -> ledger. The exchange is built only after the generator
answers, so a timeout or cancellation records nothing.
"""

import logging
from typing import Dict, Optional

from .case_store import CaseStore
from .errors import InvalidInput
from .generator import CASE_TITLE, SHORT_FACTS, ResponseGenerator, call_generator, safe_log_content
from .ledger import ConversationLedger
from .models import GUEST_NAME, AssistantExchange, PrincipalView

logger = logging.getLogger(__name__)


class AssistantService:
    """Context-aware Q&A on top of the conversation ledger"""

    def __init__(
        self,
        store: CaseStore,
        ledger: ConversationLedger,
        generator: ResponseGenerator,
        timeout: Optional[float] = None,
        short_facts_chars: int = 120,
    ):
        self.store = store
        self.ledger = ledger
        self.generator = generator
        self.timeout = timeout
        self.short_facts_chars = short_facts_chars

    def _context(self, case_id: Optional[str]) -> Dict[str, str]:
        # Ledger ids may not exist in the store; those get no context
        if not case_id or case_id not in self.store:
            return {}
        case = self.store.get(case_id)
        return {
            CASE_TITLE: case.title,
            SHORT_FACTS: case.description[:self.short_facts_chars],
        }

    async def ask(
        self,
        prompt: str,
        asker: Optional[PrincipalView] = None,
        case_id: Optional[str] = None,
    ) -> AssistantExchange:
        """
        Ask the assistant.

        With a case_id the exchange is appended to that case's history;
        without one it is returned unrecorded.
        """
        prompt = (prompt or "").strip()
        if not prompt:
            raise InvalidInput("Prompt required")
        asker_name = asker.name if asker else GUEST_NAME

        response = await call_generator(
            self.generator, prompt, self._context(case_id), timeout=self.timeout
        )
        logger.info(f"Assistant answered {asker_name} on {case_id or '(no case)'}: {safe_log_content(prompt)}")

        if case_id:
            return self.ledger.append_exchange(case_id, asker_name, prompt, response)
        return self.ledger.build_exchange(None, asker_name, prompt, response)
