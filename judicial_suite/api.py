"""
Judicial Suite API
==================

Thin FastAPI layer over the case lifecycle core. No business rules live here;
every endpoint calls exactly one core operation.

Endpoints:
- GET  /health                      - Health check
- POST /auth/register               - Sign up (name, role, password)
- POST /auth/login                  - Check credentials
- GET  /cases                       - List cases + default selection
- POST /cases                       - Submit a case
- GET  /cases/{case_id}             - Case details
- GET  /cases/{case_id}/timeline    - Audit trail, most recent first
- POST /cases/{case_id}/messages    - Message the other parties
- POST /assistant                   - Ask the assistant (optionally on a case)
- GET  /cases/{case_id}/assistant   - Assistant history for a case
- POST /cases/{case_id}/ruling      - Judge issues a ruling

Caller identity: X-Principal-Name / X-Principal-Credential headers, checked
against the directory on every request. No headers means anonymous.

Run with:
    uvicorn judicial_suite.api:app --host 0.0.0.0 --port 8000
    python -m judicial_suite.api
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .adjudication import AdjudicationEngine
from .assistant import AssistantService
from .case_store import CaseStore, default_selection
from .config import Settings, get_settings
from .directory import IdentityDirectory
from .errors import InvalidInput, JudicialSuiteError
from .generator import ResponseGenerator, get_generator
from .ledger import ConversationLedger
from .models import PrincipalView, describe
from .schemas import (
    AskAssistantRequest,
    CaseListResponse,
    CaseResponse,
    CaseSummary,
    CreateCaseRequest,
    ErrorDetail,
    ErrorResponse,
    EvaluateRequest,
    ExchangeResponse,
    HealthResponse,
    LoginRequest,
    MessageResponse,
    PostMessageRequest,
    PrincipalResponse,
    RegisterRequest,
    RulingResponse,
    TimelineEntryResponse,
    TurnResponse,
)
from .seed import seed_cases, seed_directory

logger = logging.getLogger(__name__)


@dataclass
class SuiteState:
    """Everything one app instance owns; tests build a fresh one per client"""
    settings: Settings
    directory: IdentityDirectory
    store: CaseStore
    ledger: ConversationLedger
    generator: ResponseGenerator
    adjudication: AdjudicationEngine
    assistant: AssistantService


def build_state(settings: Settings, generator: Optional[ResponseGenerator] = None) -> SuiteState:
    """Wire stores and services together (and seed demo data if enabled)"""
    generator = generator or get_generator(settings)
    directory = IdentityDirectory()
    store = CaseStore(id_prefix=settings.case_id_prefix, id_width=settings.case_id_width)
    ledger = ConversationLedger()

    if settings.seed_demo_data:
        seed_directory(directory)
        seed_cases(store)

    return SuiteState(
        settings=settings,
        directory=directory,
        store=store,
        ledger=ledger,
        generator=generator,
        adjudication=AdjudicationEngine(store, generator, timeout=settings.generator_timeout),
        assistant=AssistantService(
            store,
            ledger,
            generator,
            timeout=settings.generator_timeout,
            short_facts_chars=settings.short_facts_chars,
        ),
    )


# =============================================================================
# Dependencies
# =============================================================================

def get_state(request: Request) -> SuiteState:
    return request.app.state.suite


async def get_current_principal(
    x_principal_name: Optional[str] = Header(None, alias="X-Principal-Name"),
    x_principal_credential: Optional[str] = Header(None, alias="X-Principal-Credential"),
    state: SuiteState = Depends(get_state),
) -> Optional[PrincipalView]:
    """
    Resolve the caller from headers.

    Returns None for anonymous callers; wrong credentials raise
    InvalidCredentials (401) rather than silently downgrading to anonymous.
    """
    if not x_principal_name:
        return None
    return state.directory.authenticate(x_principal_name, x_principal_credential or "")


# =============================================================================
# FastAPI App
# =============================================================================

def create_app(settings: Optional[Settings] = None, generator: Optional[ResponseGenerator] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title="AI Judicial Suite",
        description="Case lifecycle, assistant exchanges and rulings for the Assistant / Lawyer / Judge views",
        version=settings.service_version,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.suite = build_state(settings, generator)

    cors_origins = settings.cors_origins()
    logger.info(f"CORS allow origins: {cors_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(JudicialSuiteError)
    async def suite_error_handler(request: Request, exc: JudicialSuiteError):
        """Typed core errors -> structured JSON with a matching status code"""
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}")
        payload = ErrorResponse(error=ErrorDetail(code=exc.code, message=exc.message))
        return JSONResponse(status_code=exc.status_code, content=payload.model_dump())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Malformed request bodies are InvalidInput too, without echoing the input back"""
        problems = []
        for err in exc.errors():
            field = ".".join(str(part) for part in err.get("loc", ()) if part != "body") or "body"
            problems.append(f"{field}: {err.get('msg')}")
        logger.info(f"{request.method} {request.url.path} -> 400 invalid_input {problems}")
        message = "Invalid request: " + "; ".join(problems)
        payload = ErrorResponse(error=ErrorDetail(code=InvalidInput.code, message=message))
        return JSONResponse(status_code=InvalidInput.status_code, content=payload.model_dump())

    @app.on_event("startup")
    async def startup_event():
        logger.info(f"Starting AI Judicial Suite v{settings.service_version}")
        logger.info(f"Generator mode: {settings.generator_mode.value}")
        for warning in settings.validate_generator_config():
            logger.warning(warning)

    @app.on_event("shutdown")
    async def shutdown_event():
        await app.state.suite.generator.close()

    app.include_router(_build_routes())
    return app


def _build_routes() -> APIRouter:
    router = APIRouter()

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------

    @router.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health(state: SuiteState = Depends(get_state)):
        return HealthResponse(
            version=state.settings.service_version,
            generator_mode=state.settings.generator_mode.value,
            cases=len(state.store),
            timestamp=datetime.now(),
            warnings=state.settings.validate_generator_config(),
        )

    # -------------------------------------------------------------------------
    # Auth (prototype placeholder)
    # -------------------------------------------------------------------------

    @router.post("/auth/register", tags=["Auth"], status_code=201, response_model=PrincipalResponse)
    async def register(request: RegisterRequest, state: SuiteState = Depends(get_state)):
        principal = state.directory.register(request.name, request.role, request.password)
        return PrincipalResponse.from_model(principal)

    @router.post("/auth/login", tags=["Auth"], response_model=PrincipalResponse)
    async def login(request: LoginRequest, state: SuiteState = Depends(get_state)):
        principal = state.directory.authenticate(request.name, request.password)
        return PrincipalResponse.from_model(principal)

    # -------------------------------------------------------------------------
    # Cases
    # -------------------------------------------------------------------------

    @router.get("/cases", tags=["Cases"], response_model=CaseListResponse)
    async def list_cases(selected: Optional[str] = None, state: SuiteState = Depends(get_state)):
        cases = state.store.list_cases()
        return CaseListResponse(
            cases=[CaseSummary(id=c.id, title=c.title, status=c.status.value, tags=list(c.tags)) for c in cases],
            default_case_id=default_selection(state.store, selected),
        )

    @router.post("/cases", tags=["Cases"], status_code=201, response_model=CaseResponse)
    async def create_case(
        request: CreateCaseRequest,
        principal: Optional[PrincipalView] = Depends(get_current_principal),
        state: SuiteState = Depends(get_state),
    ):
        case = state.store.create(request.title, request.description, request.tags, describe(principal))
        return CaseResponse.from_model(case)

    @router.get("/cases/{case_id}", tags=["Cases"], response_model=CaseResponse)
    async def get_case(case_id: str, state: SuiteState = Depends(get_state)):
        return CaseResponse.from_model(state.store.get(case_id))

    @router.get("/cases/{case_id}/timeline", tags=["Cases"], response_model=List[TimelineEntryResponse])
    async def get_timeline(case_id: str, state: SuiteState = Depends(get_state)):
        return [TimelineEntryResponse.from_model(e) for e in state.store.timeline(case_id)]

    @router.post("/cases/{case_id}/messages", tags=["Cases"], status_code=201, response_model=MessageResponse)
    async def post_message(
        case_id: str,
        request: PostMessageRequest,
        principal: Optional[PrincipalView] = Depends(get_current_principal),
        state: SuiteState = Depends(get_state),
    ):
        message = state.store.append_message(case_id, describe(principal), request.to, request.text)
        return MessageResponse.from_model(message)

    # -------------------------------------------------------------------------
    # Assistant
    # -------------------------------------------------------------------------

    @router.post("/assistant", tags=["Assistant"], response_model=ExchangeResponse)
    async def ask_assistant(
        request: AskAssistantRequest,
        principal: Optional[PrincipalView] = Depends(get_current_principal),
        state: SuiteState = Depends(get_state),
    ):
        exchange = await state.assistant.ask(request.prompt, principal, request.case_id)
        return ExchangeResponse.from_model(exchange)

    @router.get("/cases/{case_id}/assistant", tags=["Assistant"], response_model=List[TurnResponse])
    async def assistant_history(case_id: str, state: SuiteState = Depends(get_state)):
        return [TurnResponse.from_model(t) for t in state.ledger.history(case_id)]

    # -------------------------------------------------------------------------
    # Adjudication
    # -------------------------------------------------------------------------

    @router.post("/cases/{case_id}/ruling", tags=["Judge"], status_code=201, response_model=RulingResponse)
    async def evaluate_case(
        case_id: str,
        request: EvaluateRequest,
        principal: Optional[PrincipalView] = Depends(get_current_principal),
        state: SuiteState = Depends(get_state),
    ):
        ruling = await state.adjudication.evaluate(case_id, principal, request.favored_party)
        return RulingResponse.from_model(ruling)

    return router


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "judicial_suite.api:app",
        host="0.0.0.0",
        port=8000,
    )
