"""
Shared error types.

Every core operation reports failure by raising one of these. They live in a
separate module so the API layer (and tests) can map them without importing
the stores.
"""


class JudicialSuiteError(Exception):
    """Base class for recoverable core errors."""

    code = "error"
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__


class InvalidInput(JudicialSuiteError):
    """Caller-supplied data failed a precondition."""

    code = "invalid_input"
    status_code = 400


class NotFound(JudicialSuiteError):
    """Referenced record does not exist."""

    code = "not_found"
    status_code = 404


class Unauthorized(JudicialSuiteError):
    """Role does not permit the requested action."""

    code = "unauthorized"
    status_code = 403


class DuplicatePrincipal(JudicialSuiteError):
    """A principal with this name already exists."""

    code = "duplicate_principal"
    status_code = 409


class InvalidCredentials(JudicialSuiteError):
    """Invalid name or credential."""

    code = "invalid_credentials"
    status_code = 401


class GenerationUnavailable(JudicialSuiteError):
    """Response generator failed or timed out."""

    code = "generation_unavailable"
    status_code = 503
