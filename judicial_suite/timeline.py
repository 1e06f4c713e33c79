"""
Timeline Recorder
=================

Audit trail helpers. The timeline lives on the Case record itself; the write
side is only called by CaseStore while it holds its lock.
"""

from datetime import datetime
from typing import List

from .models import Case, TimelineEntry


# Timeline action labels
ACTION_SUBMITTED = "Submitted case"
ACTION_ISSUED_RULING = "Issued ruling"


def message_action(to: str) -> str:
    return f"Message to {to}"


def record(case: Case, actor: str, action: str, timestamp: datetime) -> TimelineEntry:
    """Append one entry to the case timeline"""
    entry = TimelineEntry(timestamp=timestamp, actor=actor, action=action)
    case.timeline.append(entry)
    return entry


def entries(case: Case) -> List[TimelineEntry]:
    """Timeline for display, most recent first"""
    return list(reversed(case.timeline))
