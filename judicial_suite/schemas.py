"""
Pydantic Schemas for the Judicial Suite API
===========================================

Request bodies and response shapes for the HTTP layer. The core works on the
dataclasses in models.py; these schemas only translate at the boundary.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .models import AssistantExchange, Case, Message, PrincipalView, Ruling, TimelineEntry, Turn


# =============================================================================
# ENUMS
# =============================================================================

class GeneratorMode(str, Enum):
    """Response generator backend"""
    SCRIPTED = "scripted"       # Pattern-matched stub, no network
    OPENROUTER = "openrouter"


# =============================================================================
# REQUESTS
# =============================================================================

class RegisterRequest(BaseModel):
    name: str = Field(..., description="Display name (unique, case-insensitive)")
    role: str = Field("Lawyer", description="Judge / Lawyer / Legal Assistant / Public")
    password: str


class LoginRequest(BaseModel):
    name: str
    password: str


class CreateCaseRequest(BaseModel):
    """Request to submit a new case"""
    title: str = Field(..., description="Case title")
    description: str = Field("", description="Facts of the case")
    tags: Union[List[str], str, None] = Field(None, description="List of tags or comma-separated string")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "title": "Breach of Contract — Service Agreement",
            "description": "Plaintiff claims Defendant failed to deliver contracted services.",
            "tags": "contract, civil",
        }
    })


class PostMessageRequest(BaseModel):
    text: str
    to: str = Field("All", description="Recipient label")


class AskAssistantRequest(BaseModel):
    prompt: str
    case_id: Optional[str] = Field(None, description="Record the exchange on this case")


class EvaluateRequest(BaseModel):
    favored_party: str = Field("plaintiff", description="plaintiff / defendant / split")


# =============================================================================
# RESPONSES
# =============================================================================

class PrincipalResponse(BaseModel):
    name: str
    role: str

    @classmethod
    def from_model(cls, principal: PrincipalView) -> "PrincipalResponse":
        return cls(name=principal.name, role=principal.role.value)


class TimelineEntryResponse(BaseModel):
    timestamp: datetime
    actor: str
    action: str

    @classmethod
    def from_model(cls, entry: TimelineEntry) -> "TimelineEntryResponse":
        return cls(timestamp=entry.timestamp, actor=entry.actor, action=entry.action)


class MessageResponse(BaseModel):
    id: str
    sender: str
    to: str
    text: str
    timestamp: datetime

    @classmethod
    def from_model(cls, message: Message) -> "MessageResponse":
        return cls(
            id=message.id,
            sender=message.sender,
            to=message.to,
            text=message.text,
            timestamp=message.timestamp,
        )


class RulingResponse(BaseModel):
    id: str
    text: str
    timestamp: datetime
    judge_name: str

    @classmethod
    def from_model(cls, ruling: Ruling) -> "RulingResponse":
        return cls(id=ruling.id, text=ruling.text, timestamp=ruling.timestamp, judge_name=ruling.judge_name)


class EvidenceResponse(BaseModel):
    id: str
    name: str


class CaseSummary(BaseModel):
    id: str
    title: str
    status: str
    tags: List[str] = Field(default_factory=list)


class CaseResponse(CaseSummary):
    description: str = ""
    evidence: List[EvidenceResponse] = Field(default_factory=list)
    messages: List[MessageResponse] = Field(default_factory=list)
    timeline: List[TimelineEntryResponse] = Field(default_factory=list)
    ruling: Optional[RulingResponse] = None

    @classmethod
    def from_model(cls, case: Case) -> "CaseResponse":
        return cls(
            id=case.id,
            title=case.title,
            status=case.status.value,
            tags=list(case.tags),
            description=case.description,
            evidence=[EvidenceResponse(id=e.id, name=e.name) for e in case.evidence_refs],
            messages=[MessageResponse.from_model(m) for m in case.messages],
            timeline=[TimelineEntryResponse.from_model(t) for t in case.timeline],
            ruling=RulingResponse.from_model(case.ruling) if case.ruling else None,
        )


class CaseListResponse(BaseModel):
    cases: List[CaseSummary]
    default_case_id: Optional[str] = None


class TurnResponse(BaseModel):
    id: str
    sender: str
    text: str
    timestamp: datetime

    @classmethod
    def from_model(cls, turn: Turn) -> "TurnResponse":
        return cls(id=turn.id, sender=turn.sender, text=turn.text, timestamp=turn.timestamp)


class ExchangeResponse(BaseModel):
    case_id: Optional[str] = None
    user_turn: TurnResponse
    assistant_turn: TurnResponse

    @classmethod
    def from_model(cls, exchange: AssistantExchange) -> "ExchangeResponse":
        return cls(
            case_id=exchange.case_id,
            user_turn=TurnResponse.from_model(exchange.user_turn),
            assistant_turn=TurnResponse.from_model(exchange.assistant_turn),
        )


class HealthResponse(BaseModel):
    """Health check response"""
    status: str = "healthy"
    version: str
    generator_mode: str
    cases: int
    timestamp: datetime = Field(default_factory=datetime.now)
    warnings: List[str] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    error: ErrorDetail
