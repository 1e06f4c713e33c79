"""
Case Store
==========

Authoritative in-memory collection of cases.

Operations:
- create / seed (id allocation: CASE-001, CASE-002, ...)
- get / list_cases
- append_message, set_ruling (each writes exactly one timeline entry)

Every mutation and its timeline entry happen under the store lock, so readers
never see one without the other.
"""

import logging
import re
import threading
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Union

from . import timeline
from .errors import InvalidInput, NotFound
from .models import Case, CaseStatus, Message, Ruling, TimelineEntry

logger = logging.getLogger(__name__)


def parse_tags(tags: Union[None, str, Iterable[str]]) -> List[str]:
    """
    Normalize tags: "contract, civil" or ["contract", " civil "] -> ["contract", "civil"]

    Blank tags are dropped and duplicates removed, keeping first-seen order.
    """
    if tags is None:
        return []
    if isinstance(tags, str):
        tags = tags.split(",")

    result: List[str] = []
    for tag in tags:
        tag = str(tag).strip()
        if tag and tag not in result:
            result.append(tag)
    return result


class CaseStore:
    """
    Owns Case records for the lifetime of the process.

    Usage:
        store = CaseStore()
        case = store.create("Breach of contract", "...", "contract, civil", "Lawyer:Ann")
        store.append_message(case.id, "Lawyer:Ann", "All", "Filed exhibits")
    """

    def __init__(
        self,
        id_prefix: str = "CASE-",
        id_width: int = 3,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.id_prefix = id_prefix
        self.id_width = id_width
        self._clock = clock
        self._cases: Dict[str, Case] = {}
        self._last_number = 0
        self._created_seq = 0
        self._message_seq = 0
        self._lock = threading.RLock()
        self._id_pattern = re.compile(rf"^{re.escape(id_prefix)}(\d+)$")

    def __len__(self) -> int:
        return len(self._cases)

    def __contains__(self, case_id) -> bool:
        return case_id in self._cases

    # -------------------------------------------------------------------------
    # CREATION
    # -------------------------------------------------------------------------

    def format_id(self, number: int) -> str:
        return f"{self.id_prefix}{number:0{self.id_width}d}"

    def _next_created_seq(self) -> int:
        self._created_seq += 1
        return self._created_seq

    def create(
        self,
        title: str,
        description: str = "",
        tags: Union[None, str, Iterable[str]] = None,
        author: str = "Anon",
    ) -> Case:
        """
        Submit a new case.

        Raises:
            InvalidInput: title is empty or whitespace
        """
        title = (title or "").strip()
        if not title:
            raise InvalidInput("Title required")
        tag_list = parse_tags(tags)

        with self._lock:
            self._last_number += 1
            case = Case(
                id=self.format_id(self._last_number),
                title=title,
                description=description or "",
                tags=tag_list,
                status=CaseStatus.SUBMITTED,
                created_seq=self._next_created_seq(),
            )
            timeline.record(case, author, timeline.ACTION_SUBMITTED, self._clock())
            self._cases[case.id] = case

        logger.info(f"Case created: {case.id} by {author}")
        return case

    def seed(self, case: Case) -> Case:
        """
        Preload an existing case (import).

        The case keeps its own timeline; the id must match the store format and
        be unused. The id counter moves past the seeded number so `create`
        never hands it out again.
        """
        match = self._id_pattern.match(case.id or "")
        if not match:
            raise InvalidInput(f"Malformed case id: {case.id!r}")
        if not (case.title or "").strip():
            raise InvalidInput("Title required")

        with self._lock:
            if case.id in self._cases:
                raise InvalidInput(f"Duplicate case id: {case.id}")
            self._last_number = max(self._last_number, int(match.group(1)))
            case.created_seq = self._next_created_seq()
            self._cases[case.id] = case

        logger.debug(f"Case seeded: {case.id}")
        return case

    # -------------------------------------------------------------------------
    # LOOKUP
    # -------------------------------------------------------------------------

    def get(self, case_id: str) -> Case:
        """Get case by ID or raise NotFound"""
        case = self._cases.get(case_id)
        if case is None:
            raise NotFound(f"Case not found: {case_id}")
        return case

    def list_cases(self) -> List[Case]:
        """All cases, most recently created first"""
        with self._lock:
            return sorted(self._cases.values(), key=lambda c: c.created_seq, reverse=True)

    def timeline(self, case_id: str) -> List[TimelineEntry]:
        """Case timeline, most recent first"""
        return timeline.entries(self.get(case_id))

    # -------------------------------------------------------------------------
    # MUTATION
    # -------------------------------------------------------------------------

    def append_message(self, case_id: str, sender: str, to: str, text: str) -> Message:
        """
        Post a message on a case.

        Raises:
            InvalidInput: empty text
            NotFound: unknown case
        """
        if not (text or "").strip():
            raise InvalidInput("Message text required")
        to = (to or "").strip() or "All"

        with self._lock:
            case = self.get(case_id)
            now = self._clock()
            self._message_seq += 1
            message = Message(
                id=f"MSG-{self._message_seq:06d}",
                sender=sender,
                to=to,
                text=text,
                timestamp=now,
            )
            case.messages.append(message)
            timeline.record(case, sender, timeline.message_action(to), now)

        return message

    def set_ruling(self, case_id: str, ruling: Ruling) -> Case:
        """
        Record a ruling and move the case to Ruled.

        The ruling is stamped with the store clock, the same instant as its
        timeline entry. Repeated calls overwrite the ruling and add another
        timeline entry.
        """
        with self._lock:
            case = self.get(case_id)
            ruling.timestamp = self._clock()
            case.ruling = ruling
            case.status = CaseStatus.RULED
            timeline.record(
                case, f"Judge:{ruling.judge_name}", timeline.ACTION_ISSUED_RULING, ruling.timestamp
            )

        logger.info(f"Ruling {ruling.id} recorded on {case_id} by {ruling.judge_name}")
        return case


def default_selection(store: CaseStore, selected_id: Optional[str] = None) -> Optional[str]:
    """
    Case a view should show when nothing else is chosen.

    An explicit, known selection wins; otherwise the most recently created case;
    None for an empty store.
    """
    if selected_id and selected_id in store:
        return selected_id
    cases = store.list_cases()
    return cases[0].id if cases else None
