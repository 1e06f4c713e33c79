"""
Adjudication Engine
===================

Ruling issuance, gated by role.

Flow for evaluate():
1. authorize() - the only role check, before anything else
2. resolve the case (NotFound)
3. ask the generator to "Evaluate and decide" (time-bounded)
4. wrap the text in a Ruling and hand it to CaseStore.set_ruling (which stamps it)

A failure at any step leaves status, ruling and timeline untouched.
"""

import logging
import uuid
from enum import Enum
from typing import Dict, Optional, Set

from .case_store import CaseStore
from .errors import Unauthorized
from .generator import FAVORED_PARTY, CASE_TITLE, ResponseGenerator, call_generator
from .models import FavoredParty, PrincipalView, Role, Ruling

logger = logging.getLogger(__name__)

EVALUATE_INSTRUCTION = "Evaluate and decide"


class Permission(str, Enum):
    """Actions that are gated by role"""
    CASE_EVALUATE = "case:evaluate"


# Role to permissions mapping
ROLE_PERMISSIONS: Dict[Role, Set[Permission]] = {
    Role.JUDGE: {Permission.CASE_EVALUATE},
    Role.LAWYER: set(),
    Role.LEGAL_ASSISTANT: set(),
    Role.PUBLIC: set(),
}


def authorize(principal: Optional[PrincipalView], permission: Permission) -> PrincipalView:
    """
    Single authorization check.

    Returns the principal when allowed, raises Unauthorized otherwise
    (anonymous callers are never allowed).
    """
    if principal is None:
        logger.warning(f"Anonymous caller denied {permission.value}")
        raise Unauthorized("Sign in as Judge to evaluate.")
    if permission not in ROLE_PERMISSIONS.get(principal.role, set()):
        logger.warning(f"{principal.descriptor} denied {permission.value}")
        raise Unauthorized(f"Role {principal.role.value} may not perform {permission.value}")
    return principal


class AdjudicationEngine:
    """
    Issues rulings through the response generator.

    Usage:
        engine = AdjudicationEngine(store, generator, timeout=10)
        ruling = await engine.evaluate("CASE-001", judge, "plaintiff")
    """

    def __init__(
        self,
        store: CaseStore,
        generator: ResponseGenerator,
        timeout: Optional[float] = None,
    ):
        self.store = store
        self.generator = generator
        self.timeout = timeout

    async def evaluate(
        self,
        case_id: str,
        principal: Optional[PrincipalView],
        favored_party="plaintiff",
    ) -> Ruling:
        """
        Rule on a case. Re-evaluating a Ruled case replaces the ruling.

        Raises:
            Unauthorized: caller is not a Judge
            InvalidInput: unknown favored party
            NotFound: unknown case
            GenerationUnavailable: generator failed or timed out
        """
        judge = authorize(principal, Permission.CASE_EVALUATE)
        favored = FavoredParty.parse(favored_party)
        case = self.store.get(case_id)

        text = await call_generator(
            self.generator,
            EVALUATE_INSTRUCTION,
            {FAVORED_PARTY: favored.value, CASE_TITLE: case.title},
            timeout=self.timeout,
        )

        ruling = Ruling(
            id=f"R-{uuid.uuid4().hex[:12]}",
            text=text,
            judge_name=judge.name,
        )
        self.store.set_ruling(case_id, ruling)
        return ruling
