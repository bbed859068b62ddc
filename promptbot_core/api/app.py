"""
Bot Hosting API - FastAPI Application.

Receives activities over HTTP, runs the bot turn and returns the replies.
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..bots import AgePromptBot, SimplePromptBot
from ..config import Settings, get_settings
from ..errors import BotError, RecognizerUnavailable, TransportError
from ..generation import LanguageGenerationResolver, create_resolver
from ..logging import configure_logging
from ..prompts import Recognizer, create_recognizer
from ..schema import Activity
from ..state import ConversationState, MemoryStorage, Storage
from .adapter import BufferedChannelAdapter
from .schemas import ErrorResponse, HealthResponse, TurnResponse

logger = structlog.get_logger()


def _status_for(exc: BotError) -> int:
    if isinstance(exc, TransportError):
        return 502
    if isinstance(exc, RecognizerUnavailable):
        return 503
    return 500


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[Storage] = None,
    recognizer: Optional[Recognizer] = None,
    resolver: Optional[LanguageGenerationResolver] = None,
) -> FastAPI:
    """
    Build the hosting application.

    Collaborators default to the providers selected in settings.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format)

    storage = storage or MemoryStorage(ttl_seconds=settings.state_ttl_seconds)
    recognizer = recognizer or create_recognizer(settings=settings)
    resolver = resolver or create_resolver(settings=settings)

    conversation_state = ConversationState(storage)
    adapter = BufferedChannelAdapter().use(conversation_state)

    simple_bot = SimplePromptBot(conversation_state, resolver)
    age_bot = AgePromptBot(
        conversation_state,
        culture=settings.default_culture,
        recognizer=recognizer,
        min_age=1,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("starting_promptbot", port=settings.port, env=settings.environment)
        yield
        logger.info("shutting_down_promptbot")
        for client in (recognizer, resolver):
            close = getattr(client, "close", None)
            if close is not None:
                await close()

    app = FastAPI(
        title="Prompt Bot Service",
        description="Turn-based prompt and dialog bots over HTTP",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.adapter = adapter
    app.state.conversation_state = conversation_state
    app.state.recognizer = recognizer

    cors_origins = (
        ["*"]
        if settings.cors_origins == "*"
        else [o.strip() for o in settings.cors_origins.split(",")]
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(BotError)
    async def bot_error_handler(request: Request, exc: BotError) -> JSONResponse:
        """Map framework errors onto HTTP responses."""
        status_code = _status_for(exc)
        logger.error("bot_error", path=request.url.path, code=exc.code, error=exc.message)
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=exc.message,
                code=exc.code,
                details=exc.details if settings.debug else None,
            ).model_dump(),
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            version=__version__,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    @app.get("/ready", response_model=HealthResponse, tags=["Health"])
    async def readiness_check() -> HealthResponse:
        """Readiness check endpoint."""
        if not await recognizer.is_available():
            raise HTTPException(status_code=503, detail="Recognizer not available")

        return HealthResponse(
            status="healthy",
            version=__version__,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    async def run_turn(activity: Activity, bot) -> TurnResponse:
        if activity.conversation is None or not activity.conversation.id:
            raise HTTPException(status_code=400, detail="activity.conversation.id is required")
        if not activity.channel_id:
            raise HTTPException(status_code=400, detail="activity.channel_id is required")

        replies = await adapter.handle(activity, bot.on_turn)
        return TurnResponse(conversation_id=activity.conversation.id, activities=replies)

    @app.post("/api/messages", response_model=TurnResponse, response_model_by_alias=True, tags=["Messages"])
    async def messages(activity: Activity) -> TurnResponse:
        """Deliver an activity to the name prompt bot."""
        return await run_turn(activity, simple_bot)

    @app.post("/api/age/messages", response_model=TurnResponse, response_model_by_alias=True, tags=["Messages"])
    async def age_messages(activity: Activity) -> TurnResponse:
        """Deliver an activity to the age prompt bot."""
        return await run_turn(activity, age_bot)

    return app


__all__ = ["create_app"]
