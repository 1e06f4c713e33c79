"""
Conversation Ledger
===================

Per-case assistant exchanges (user prompt + generated answer).

Independent of CaseStore: case ids are plain keys here and are never checked
against the store.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterator, List, Optional

from .errors import InvalidInput
from .models import ASSISTANT_NAME, AssistantExchange, Turn

logger = logging.getLogger(__name__)

# Assistant turns are stamped at least this far after the user turn
TURN_TICK = timedelta(microseconds=1)


class TurnHistory:
    """
    Restartable view over a case's turns in insertion order.

    Each iteration walks the exchanges recorded at the time iteration starts.
    """

    def __init__(self, ledger: "ConversationLedger", case_id: str):
        self._ledger = ledger
        self._case_id = case_id

    def __iter__(self) -> Iterator[Turn]:
        for exchange in self._ledger.exchanges(self._case_id):
            yield exchange.user_turn
            yield exchange.assistant_turn

    def __len__(self) -> int:
        return 2 * len(self._ledger.exchanges(self._case_id))


class ConversationLedger:
    """Append-only assistant exchanges keyed by case id"""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock
        self._exchanges: Dict[str, List[AssistantExchange]] = {}
        self._seq = 0
        self._lock = threading.RLock()

    def build_exchange(
        self,
        case_id: Optional[str],
        asker: str,
        prompt_text: str,
        response_text: str,
    ) -> AssistantExchange:
        """
        Make a user/assistant pair without recording it.

        Raises:
            InvalidInput: empty prompt
        """
        prompt_text = (prompt_text or "").strip()
        if not prompt_text:
            raise InvalidInput("Prompt required")

        with self._lock:
            self._seq += 1
            seq = self._seq
        asked_at = self._clock()
        answered_at = max(self._clock(), asked_at + TURN_TICK)

        return AssistantExchange(
            case_id=case_id,
            user_turn=Turn(id=f"EX-{seq:06d}-u", sender=asker, text=prompt_text, timestamp=asked_at),
            assistant_turn=Turn(
                id=f"EX-{seq:06d}-b", sender=ASSISTANT_NAME, text=response_text, timestamp=answered_at
            ),
        )

    def append_exchange(
        self,
        case_id: str,
        asker: str,
        prompt_text: str,
        response_text: str,
    ) -> AssistantExchange:
        """Record an exchange on a case (the sequence is created on first use)"""
        exchange = self.build_exchange(case_id, asker, prompt_text, response_text)
        with self._lock:
            self._exchanges.setdefault(case_id, []).append(exchange)
        logger.debug(f"Exchange {exchange.user_turn.id} recorded for {case_id}")
        return exchange

    def exchanges(self, case_id: str) -> List[AssistantExchange]:
        """Snapshot of exchange pairs for a case"""
        with self._lock:
            return list(self._exchanges.get(case_id, []))

    def history(self, case_id: str) -> TurnHistory:
        """All turns for a case in call order; empty when nothing was recorded"""
        return TurnHistory(self, case_id)
