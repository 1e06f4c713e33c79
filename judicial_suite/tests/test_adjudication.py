"""
Tests for the Adjudication Engine
=================================

Tests for:
- Role gating (only Judges rule; failures never touch the case)
- Ruling issuance and the Ruled terminal state
- Generator failure, timeout and cancellation leave the case untouched
"""

import asyncio

import pytest

from judicial_suite.adjudication import AdjudicationEngine, Permission, authorize
from judicial_suite.case_store import CaseStore
from judicial_suite.directory import IdentityDirectory
from judicial_suite.errors import GenerationUnavailable, InvalidInput, NotFound, Unauthorized
from judicial_suite.generator import ResponseGenerator, ScriptedGenerator
from judicial_suite.models import CaseStatus, PrincipalView, Role
from judicial_suite.seed import seed_cases, seed_directory


class BlockingGenerator(ResponseGenerator):
    """Never answers until released"""

    name = "blocking"

    def __init__(self):
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def generate(self, instruction, context):
        self.started.set()
        await self.release.wait()
        return "Ruling: In favor of plaintiff"


class FailingGenerator(ResponseGenerator):
    name = "failing"

    async def generate(self, instruction, context):
        raise GenerationUnavailable("backend down")


@pytest.fixture
def directory():
    d = IdentityDirectory()
    seed_directory(d)
    d.register("Ann", Role.LAWYER, "pw")
    return d


@pytest.fixture
def store():
    s = CaseStore()
    seed_cases(s)
    return s


@pytest.fixture
def engine(store):
    return AdjudicationEngine(store, ScriptedGenerator(), timeout=1)


@pytest.fixture
def judge(directory):
    return directory.authenticate("Judge Judy", "judgepass")


def snapshot(case):
    return case.status, case.ruling, len(case.timeline)


# =============================================================================
# Authorization
# =============================================================================

class TestAuthorize:
    def test_judge_allowed(self, judge):
        assert authorize(judge, Permission.CASE_EVALUATE) is judge

    @pytest.mark.parametrize("role", [Role.LAWYER, Role.LEGAL_ASSISTANT, Role.PUBLIC])
    def test_other_roles_denied(self, role):
        with pytest.raises(Unauthorized):
            authorize(PrincipalView(name="X", role=role), Permission.CASE_EVALUATE)

    def test_anonymous_denied(self):
        with pytest.raises(Unauthorized):
            authorize(None, Permission.CASE_EVALUATE)


# =============================================================================
# evaluate()
# =============================================================================

class TestEvaluate:
    @pytest.mark.asyncio
    async def test_judge_rules_on_seeded_case(self, engine, store, directory):
        case = store.get("CASE-001")
        assert case.status == CaseStatus.UNDER_REVIEW
        before = len(case.timeline)

        judge = directory.authenticate("Judge Judy", "judgepass")
        ruling = await engine.evaluate("CASE-001", judge, "plaintiff")

        assert ruling.judge_name == "Judge Judy"
        assert ruling.text.startswith("Ruling: In favor of plaintiff")
        assert case.status == CaseStatus.RULED
        assert case.ruling is ruling
        assert len(case.timeline) == before + 1
        assert case.timeline[-1].action == "Issued ruling"

    @pytest.mark.asyncio
    async def test_submitted_case_can_be_ruled(self, engine, store, judge):
        await engine.evaluate("CASE-002", judge, "defendant")
        assert store.get("CASE-002").status == CaseStatus.RULED
        assert "defendant" in store.get("CASE-002").ruling.text

    @pytest.mark.asyncio
    async def test_non_judge_never_mutates(self, engine, store, directory):
        lawyer = directory.authenticate("Ann", "pw")
        case = store.get("CASE-001")
        before = snapshot(case)

        with pytest.raises(Unauthorized):
            await engine.evaluate("CASE-001", lawyer, "plaintiff")
        with pytest.raises(Unauthorized):
            await engine.evaluate("CASE-001", None, "plaintiff")

        assert snapshot(case) == before

    @pytest.mark.asyncio
    async def test_authorization_checked_before_lookup(self, engine, directory):
        lawyer = directory.authenticate("Ann", "pw")
        with pytest.raises(Unauthorized):
            await engine.evaluate("CASE-404", lawyer, "plaintiff")

    @pytest.mark.asyncio
    async def test_unknown_case(self, engine, judge):
        with pytest.raises(NotFound):
            await engine.evaluate("CASE-404", judge, "plaintiff")

    @pytest.mark.asyncio
    async def test_unknown_favored_party(self, engine, store, judge):
        before = snapshot(store.get("CASE-001"))
        with pytest.raises(InvalidInput):
            await engine.evaluate("CASE-001", judge, "jury")
        assert snapshot(store.get("CASE-001")) == before

    @pytest.mark.asyncio
    async def test_re_evaluation_stays_ruled(self, engine, store, judge):
        first = await engine.evaluate("CASE-001", judge, "plaintiff")
        count_after_first = len(store.get("CASE-001").timeline)

        second = await engine.evaluate("CASE-001", judge, "split")

        case = store.get("CASE-001")
        assert case.status == CaseStatus.RULED
        assert case.ruling is second
        assert second.id != first.id
        assert len(case.timeline) == count_after_first + 1


class TestEvaluateFailures:
    @pytest.mark.asyncio
    async def test_generator_failure_leaves_case_untouched(self, store, judge):
        engine = AdjudicationEngine(store, FailingGenerator(), timeout=1)
        before = snapshot(store.get("CASE-001"))

        with pytest.raises(GenerationUnavailable):
            await engine.evaluate("CASE-001", judge, "plaintiff")

        assert snapshot(store.get("CASE-001")) == before

    @pytest.mark.asyncio
    async def test_timeout_leaves_case_untouched(self, store, judge):
        engine = AdjudicationEngine(store, BlockingGenerator(), timeout=0.01)
        before = snapshot(store.get("CASE-001"))

        with pytest.raises(GenerationUnavailable):
            await engine.evaluate("CASE-001", judge, "plaintiff")

        assert snapshot(store.get("CASE-001")) == before

    @pytest.mark.asyncio
    async def test_cancelled_call_never_mutates(self, store, judge):
        generator = BlockingGenerator()
        engine = AdjudicationEngine(store, generator, timeout=5)
        before = snapshot(store.get("CASE-001"))

        task = asyncio.create_task(engine.evaluate("CASE-001", judge, "plaintiff"))
        await generator.started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert snapshot(store.get("CASE-001")) == before
