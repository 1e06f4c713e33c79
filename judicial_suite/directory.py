"""
Identity Directory
==================

Role-tagged principals for the prototype login.

Credentials are compared as plain strings. There is no hashing, lockout or
token issuance here; anything production-facing has to wrap this module.
"""

import logging
import threading
from typing import Dict, Iterable, Optional

from .errors import DuplicatePrincipal, InvalidCredentials, InvalidInput
from .models import Principal, PrincipalView, Role

logger = logging.getLogger(__name__)


def _key(name: str) -> str:
    return name.strip().lower()


class IdentityDirectory:
    """
    Holds principals keyed by case-insensitive name.

    Usage:
        directory = IdentityDirectory()
        directory.register("Judge Judy", Role.JUDGE, "judgepass")
        judge = directory.authenticate("JUDGE JUDY", "judgepass")
    """

    def __init__(self, principals: Optional[Iterable[Principal]] = None):
        self._principals: Dict[str, Principal] = {}
        self._lock = threading.RLock()
        for principal in principals or []:
            self.register(principal.name, principal.role, principal.credential)

    def __len__(self) -> int:
        return len(self._principals)

    def __contains__(self, name) -> bool:
        return isinstance(name, str) and _key(name) in self._principals

    def register(self, name: str, role, credential: str) -> PrincipalView:
        """
        Sign up a new principal.

        Raises:
            InvalidInput: blank name/credential or unknown role
            DuplicatePrincipal: name already taken (case-insensitive)
        """
        name = (name or "").strip()
        if not name or not (credential or "").strip():
            raise InvalidInput("Please provide name and password")
        role = Role.parse(role)

        with self._lock:
            key = _key(name)
            if key in self._principals:
                raise DuplicatePrincipal(f"User already exists: {name}")
            principal = Principal(name=name, role=role, credential=credential)
            self._principals[key] = principal

        logger.info(f"Registered principal {principal.view().descriptor}")
        return principal.view()

    def authenticate(self, name: str, credential: str) -> PrincipalView:
        """
        Resolve a (name, credential) pair.

        The error never says whether the name or the credential was wrong.
        """
        principal = self._principals.get(_key(name or ""))
        if principal is None or not credential or principal.credential != credential:
            logger.warning("Authentication failed")
            raise InvalidCredentials("Invalid credentials")
        return principal.view()
