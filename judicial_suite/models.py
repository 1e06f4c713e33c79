"""
Domain Models for the Case Lifecycle
====================================

Plain dataclasses for:
- Principals (signup records)
- Cases, Messages, Timeline entries, Rulings
- Assistant exchanges (user turn + assistant turn)

Stores own these objects; nothing here enforces invariants on its own.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional

from .errors import InvalidInput


ANONYMOUS_DESCRIPTOR = "Anon"
GUEST_NAME = "Guest"
ASSISTANT_NAME = "AI Assistant"


def _squash(value) -> str:
    return re.sub(r"[\s_]+", "", str(value or "")).lower()


# =============================================================================
# ENUMS
# =============================================================================

class Role(str, Enum):
    """Principal roles"""
    JUDGE = "Judge"
    LAWYER = "Lawyer"
    LEGAL_ASSISTANT = "Legal Assistant"
    PUBLIC = "Public"

    @classmethod
    def parse(cls, value) -> "Role":
        """Accept a Role or a spelling of it ("Judge", "legal assistant", "LegalAssistant", ...)"""
        if isinstance(value, cls):
            return value
        text = _squash(value)
        for role in cls:
            if _squash(role.value) == text:
                return role
        raise InvalidInput(f"Unknown role: {value!r}")


class CaseStatus(str, Enum):
    """Case lifecycle status. RULED is terminal."""
    SUBMITTED = "Submitted"
    UNDER_REVIEW = "Under Review"
    RULED = "Ruled"


class FavoredParty(str, Enum):
    """Which side a ruling favors"""
    PLAINTIFF = "plaintiff"
    DEFENDANT = "defendant"
    SPLIT = "split"

    @classmethod
    def parse(cls, value) -> "FavoredParty":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            raise InvalidInput(f"Unknown favored party: {value!r}") from None


# =============================================================================
# DATA CLASSES - IDENTITY
# =============================================================================

@dataclass(frozen=True)
class PrincipalView:
    """What callers get back about a principal (never the credential)"""
    name: str
    role: Role

    @property
    def descriptor(self) -> str:
        return f"{self.role.value}:{self.name}"


@dataclass(frozen=True)
class Principal:
    """Registered actor. Immutable once created."""
    name: str
    role: Role
    credential: str = field(repr=False)

    def view(self) -> PrincipalView:
        return PrincipalView(name=self.name, role=self.role)


def describe(principal: Optional[PrincipalView]) -> str:
    """Actor descriptor for messages and timeline entries"""
    if principal is None:
        return ANONYMOUS_DESCRIPTOR
    return principal.descriptor


# =============================================================================
# DATA CLASSES - CASE MANAGEMENT
# =============================================================================

@dataclass
class EvidenceRef:
    """Evidence attached to a case / exhibit"""
    id: str
    name: str


@dataclass
class TimelineEntry:
    """Audit trail entry"""
    timestamp: datetime
    actor: str
    action: str


@dataclass
class Message:
    """Party-to-party message on a case"""
    id: str
    sender: str
    text: str
    timestamp: datetime
    to: str = "All"


@dataclass
class Ruling:
    """Judge's ruling on a case"""
    id: str
    text: str
    judge_name: str
    timestamp: Optional[datetime] = None


@dataclass
class Case:
    """Dispute under management"""
    id: str
    title: str
    description: str = ""
    tags: List[str] = field(default_factory=list)
    evidence_refs: List[EvidenceRef] = field(default_factory=list)
    status: CaseStatus = CaseStatus.SUBMITTED
    timeline: List[TimelineEntry] = field(default_factory=list)
    messages: List[Message] = field(default_factory=list)
    ruling: Optional[Ruling] = None
    created_seq: int = 0

    @property
    def is_ruled(self) -> bool:
        return self.status == CaseStatus.RULED


# =============================================================================
# DATA CLASSES - ASSISTANT
# =============================================================================

@dataclass(frozen=True)
class Turn:
    """One side of an assistant exchange"""
    id: str
    sender: str
    text: str
    timestamp: datetime


@dataclass(frozen=True)
class AssistantExchange:
    """User prompt and the generated answer"""
    case_id: Optional[str]
    user_turn: Turn
    assistant_turn: Turn

    def turns(self) -> List[Turn]:
        return [self.user_turn, self.assistant_turn]
