import inspect
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from openai import AsyncOpenAI

from configs.settings import Settings, load_settings
from routes.session_route import router as session_router
from services.openai.image_service import ThumbnailImageService, build_openai_client
from services.session_store import SessionStore
from services.submission import SubmissionHandler

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - the OpenAI async client (unless one was injected)
      - the in-memory session store and submission handler
    and attach them to `app.state`.
    """
    settings: Settings = app.state.settings

    # A missing credential is not fatal: submissions fail with a
    # configuration error until the key is provided.
    credential_error = settings.credential_error()
    if credential_error is not None:
        LOGGER.warning("Configuration error: %s", credential_error)

    if getattr(app.state, "openai_client", None) is None:
        app.state.openai_client = build_openai_client(settings)

    store = SessionStore()
    app.state.session_store = store
    app.state.submission_handler = SubmissionHandler(
        store,
        settings,
        ThumbnailImageService(settings, app.state.openai_client),
    )

    try:
        yield
    finally:
        # Gracefully close the OpenAI client if it exposes a close/aclose method.
        client = getattr(app.state, "openai_client", None)
        if client is not None:
            aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
            if aclose is not None:
                try:
                    if inspect.iscoroutinefunction(aclose):
                        await aclose()
                    else:
                        result = aclose()
                        if inspect.isawaitable(result):
                            await result
                except Exception:
                    LOGGER.warning("Failed to close the OpenAI client cleanly", exc_info=True)


def create_app(settings: Optional[Settings] = None, openai_client: Optional[AsyncOpenAI] = None) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    Args:
        settings: Explicit settings; read from the environment when omitted.
        openai_client: Optional preconfigured client, mainly for tests.
    """
    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings or load_settings()
    app.state.openai_client = openai_client

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that reports OpenAI client and credential presence.
        """
        has_openai = getattr(request.app.state, "openai_client", None) is not None
        return {
            "ok": True,
            "openai_available": has_openai,
            "api_key_configured": request.app.state.settings.has_api_key,
        }

    app.include_router(session_router)

    return app


app = create_app()
