"""
Demo Seed Data
==============

One Judge principal and two imported sample cases, loaded at startup when
SEED_DEMO_DATA is on. Cases go through CaseStore.seed so the id counter skips
past them.
"""

from datetime import datetime, timedelta
from typing import Callable, List

from .case_store import CaseStore
from .directory import IdentityDirectory
from .models import Case, CaseStatus, EvidenceRef, Role, TimelineEntry


DEMO_JUDGE_NAME = "Judge Judy"
DEMO_JUDGE_PASSWORD = "judgepass"


def sample_cases(now: datetime, make_id: Callable[[int], str] = "CASE-{:03d}".format) -> List[Case]:
    """The two sample cases, timestamps relative to `now`"""
    return [
        Case(
            id=make_id(1),
            title="Breach of Contract — Service Agreement",
            description=(
                "Plaintiff claims Defendant failed to deliver contracted services within the agreed "
                "timeline. Key witnesses: A, B. Exhibit A: signed contract. Exhibit B: emails showing "
                "missed deadlines."
            ),
            tags=["contract", "civil"],
            evidence_refs=[EvidenceRef(id="ev1", name="Exhibit A - Contract")],
            status=CaseStatus.UNDER_REVIEW,
            timeline=[TimelineEntry(timestamp=now - timedelta(days=1), actor="System", action="Imported")],
        ),
        Case(
            id=make_id(2),
            title="Neighbor Dispute — Noise Complaint",
            description=(
                "Defendant alleges plaintiff created excessive noise after 10 PM. "
                "Seeking injunction and damages."
            ),
            tags=["tort"],
            status=CaseStatus.SUBMITTED,
            timeline=[TimelineEntry(timestamp=now - timedelta(hours=12), actor="User:Anon", action="Submitted")],
        ),
    ]


def seed_directory(directory: IdentityDirectory) -> None:
    if DEMO_JUDGE_NAME not in directory:
        directory.register(DEMO_JUDGE_NAME, Role.JUDGE, DEMO_JUDGE_PASSWORD)


def seed_cases(store: CaseStore, clock: Callable[[], datetime] = datetime.now) -> None:
    for case in sample_cases(clock(), store.format_id):
        if case.id not in store:
            store.seed(case)
