"""Transcript Hub HTTP API server."""

import logging
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from transcript_hub import __version__, config
from transcript_hub.api import api_router
from transcript_hub.api.deps import RateLimiter
from transcript_hub.cache import VideoDetailsCache
from transcript_hub.config import Settings
from transcript_hub.db import Database
from transcript_hub.errors import TranscriptHubError
from transcript_hub.providers import AssistantClient, YouTubeCaptionProvider, YouTubeClient

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger("transcript-hub")


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    db = Database(settings.database_url)
    db.create_all()
    cache = VideoDetailsCache(
        max_size=settings.cache_max_size,
        ttl=settings.cache_ttl_seconds,
    )
    youtube = YouTubeClient(
        api_key=settings.youtube_api_key,
        base_url=settings.youtube_api_url,
        cache=cache,
    )
    captions = YouTubeCaptionProvider(fallback_language=settings.caption_fallback_language)
    assistant = AssistantClient(
        api_key=settings.gemini_api_key,
        base_url=settings.gemini_api_url,
    )

    app.state.db = db
    app.state.video_cache = cache
    app.state.youtube = youtube
    app.state.captions = captions
    app.state.assistant = assistant
    app.state.report_limiter = RateLimiter(settings.rate_limit_per_minute)

    if not settings.youtube_api_key:
        logger.warning("YouTube API key not configured; adding videos will fail")
    logger.info("Server started")
    yield

    await youtube.close()
    await captions.close()
    await assistant.close()
    db.dispose()
    logger.info("Server stopped")


async def _handle_app_error(request: Request, exc: TranscriptHubError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request data", "errors": jsonable_encoder(exc.errors())},
    )


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app(settings: Settings | None = None) -> FastAPI:
    app = FastAPI(
        title="Transcript Hub",
        description="Arabic transcripts and translations for YouTube videos",
        version=__version__,
        lifespan=app_lifespan,
    )
    app.state.settings = settings or config.settings

    app.add_exception_handler(TranscriptHubError, _handle_app_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)
    app.include_router(api_router)

    @app.get("/api/health")
    def health(request: Request) -> dict:
        return {
            "status": "ok",
            "version": __version__,
            "videoCache": request.app.state.video_cache.stats(),
        }

    return app


def main():
    uvicorn.run(create_app(), host=config.settings.host, port=config.settings.port)


if __name__ == "__main__":
    main()
