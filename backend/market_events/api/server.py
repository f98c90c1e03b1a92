"""FastAPI server for the market events service."""

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Any
from uuid import UUID

from fastapi import APIRouter, FastAPI, HTTPException, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from market_events import __version__
from market_events.config import Settings, get_settings
from market_events.events.models import CandidateEvent, GenerationResult, MarketEventUpdate
from market_events.events.weeks import current_week_start, week_start
from market_events.observability import instrument_app
from market_events.pipeline import EventGenerationService
from market_events.scheduler import shutdown_scheduler, start_scheduler
from market_events.services.providers import EventProvider, ProviderConfigError, create_provider
from market_events.storage import (
    DEFAULT_PAGE_SIZE,
    DuplicateEventError,
    MarketEventStore,
    StoreError,
    create_engine,
    sanitize_database_url,
)

logger = logging.getLogger(__name__)


class GenerateRequest(BaseModel):
    week_start: str | None = Field(default=None, alias="weekStart")


def _success(data: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "data": jsonable_encoder(data)},
    )


def _failure(error: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


def _parse_week_start(raw: str | None) -> date | None:
    if not raw:
        return None
    try:
        return week_start(date.fromisoformat(raw[:10]))
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid weekStart date format")


def _generation_summary(result: GenerationResult) -> dict[str, Any]:
    return {
        "weekStart": result.week_start,
        "provider": result.provider,
        "generated": result.generated,
        "created": result.created,
        "skipped": result.skipped,
        "events": result.events,
    }


router = APIRouter(prefix="/api/market-events", tags=["Market Events"])


@router.get("")
@router.get("/")
async def list_events(
    request: Request,
    event_type: str | None = Query(default=None, alias="type"),
    significance: str | None = None,
    date_contains: str | None = Query(default=None, alias="date"),
    limit: int | None = Query(default=None, ge=1),
    offset: int | None = Query(default=None, ge=0),
):
    """List stored events with optional filters."""
    store: MarketEventStore = request.app.state.store
    events, total = await store.list_events(
        event_type=event_type,
        significance=significance,
        date_contains=date_contains,
        limit=limit,
        offset=offset,
    )
    page_size = limit or DEFAULT_PAGE_SIZE
    return _success({
        "events": events,
        "total": total,
        "page": (offset or 0) // page_size + 1,
        "limit": page_size,
    })


@router.get("/current-week")
async def current_week_events(request: Request):
    """Events whose date falls in the current week."""
    settings: Settings = request.app.state.settings
    start = current_week_start(tz_name=settings.scheduler.timezone)
    return _success(await request.app.state.store.events_for_week(start))


@router.post("")
@router.post("/")
async def create_event(request: Request, candidate: CandidateEvent):
    try:
        created = await request.app.state.store.create_event(candidate)
    except DuplicateEventError:
        raise HTTPException(status_code=409, detail="Market event already exists")
    return _success(created, status_code=201)


@router.post("/generate")
async def generate_events(request: Request, body: GenerateRequest | None = None):
    """Run the pipeline now for the given (or current) week."""
    service: EventGenerationService = request.app.state.service
    if service is None:
        raise HTTPException(status_code=503, detail="AI provider is not configured")

    target = _parse_week_start(body.week_start if body else None)
    if target is None:
        result = await service.generate_current_week_events()
    else:
        result = await service.generate_for_week(target)

    if not result.success:
        return _failure(f"Failed to generate market events: {result.error_kind}: {result.error}", 502)
    return _success(_generation_summary(result), status_code=201)


@router.delete("/delete-all")
async def delete_all_events(request: Request):
    deleted = await request.app.state.store.delete_all()
    return _success({"deletedCount": deleted})


@router.delete("/clear-regenerate")
async def clear_and_regenerate(request: Request):
    """Delete every event, then generate the current week afresh."""
    service: EventGenerationService = request.app.state.service
    if service is None:
        raise HTTPException(status_code=503, detail="AI provider is not configured")

    deleted, result = await service.clear_and_regenerate()
    if not result.success:
        return _failure(f"Failed to regenerate market events: {result.error_kind}: {result.error}", 502)
    return _success({"deleted": deleted, **_generation_summary(result)})


@router.delete("/old/{days}")
async def delete_old_events(request: Request, days: int):
    if days < 0:
        raise HTTPException(status_code=400, detail="Days must be a non-negative number")
    deleted = await request.app.state.store.delete_older_than(days)
    return _success({"deletedCount": deleted})


@router.get("/{event_id}")
async def get_event(request: Request, event_id: UUID):
    event = await request.app.state.store.get_event(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Market event not found")
    return _success(event)


@router.put("/{event_id}")
async def update_event(request: Request, event_id: UUID, updates: MarketEventUpdate):
    try:
        event = await request.app.state.store.update_event(event_id, updates)
    except DuplicateEventError:
        raise HTTPException(status_code=409, detail="Market event already exists")
    if event is None:
        raise HTTPException(status_code=404, detail="Market event not found")
    return _success(event)


@router.delete("/{event_id}")
async def delete_event(request: Request, event_id: UUID):
    if not await request.app.state.store.delete_event(event_id):
        raise HTTPException(status_code=404, detail="Market event not found")
    return _success({"message": "Market event deleted successfully"})


def create_app(
    settings: Settings | None = None,
    store: MarketEventStore | None = None,
    provider: EventProvider | None = None,
    enable_scheduler: bool = True,
) -> FastAPI:
    """
    Build the FastAPI application.

    The lifespan wires whatever was not injected (the database store and the
    configured provider), builds the generation service, then starts the
    scheduler once the app is serving. A missing API key leaves the read
    routes working and makes the generation routes answer 503.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting Market Events API v{__version__}")
        owned_store = store is None
        app.state.store = store or MarketEventStore(create_engine(settings.database))
        if owned_store:
            await app.state.store.create_schema()
            logger.info(f"Database ready: {sanitize_database_url(settings.database.url)}")

        event_provider = provider
        if event_provider is None:
            try:
                event_provider = create_provider(settings.provider)
            except ProviderConfigError as e:
                logger.error(f"AI provider unavailable, generation disabled: {e}")

        scheduler = None
        if event_provider is not None:
            app.state.service = EventGenerationService(
                event_provider, app.state.store, tz_name=settings.scheduler.timezone
            )
            logger.info(f"AI provider: {event_provider.label}")
            if enable_scheduler:
                scheduler = start_scheduler(app.state.service, settings.scheduler)

        logger.info("Market Events API startup complete")
        yield

        logger.info("Shutting down Market Events API")
        shutdown_scheduler(scheduler)
        if event_provider is not None and provider is None:
            await event_provider.aclose()
        if owned_store:
            await app.state.store.close()

    app = FastAPI(
        title="Market Events API",
        description="Weekly market-moving events researched by an AI provider",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.service = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        return _failure(str(exc.detail), exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Rejected request to {request.url.path}: {exc.errors()}")
        return _failure("Invalid request", 400)

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.error(f"Store error on {request.method} {request.url.path}: {exc}")
        return _failure("Database operation failed", 500)

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check including a database ping."""
        db_connected = await app.state.store.ping()
        return _success({
            "status": "healthy" if db_connected else "degraded",
            "service": "market-events-api",
            "version": __version__,
            "database": "connected" if db_connected else "disconnected",
            "provider": app.state.service.provider.label if app.state.service else None,
        })

    app.include_router(router)

    if settings.logfire_token:
        instrument_app(app)

    return app
