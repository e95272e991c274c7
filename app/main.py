"""
Main entry point for FastAPI application.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from app.routes import feed
from app.services.feed_errors import FeedError

from app.logging_config import setup_logging
from app.config import settings

import logging
logger = logging.getLogger(__name__)

setup_logging(
    level=settings.log_level,
    access_log=settings.access_log,
    feed_level=settings.feed_log_level,
)

# load in app details
app = FastAPI(title = "Podcast Feed JSON", debug=settings.debug)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)
app.include_router(feed.router)

@app.exception_handler(FeedError)
async def feed_error_handler(request: Request, exc: FeedError) -> PlainTextResponse:
    """Report a pipeline failure as plain text; flat 500 unless strict statuses are enabled."""
    status_code = exc.strict_status_code if settings.strict_error_status else 500
    logger.warning(f"{request.url.path} failed with {status_code}: {exc.message}")
    return PlainTextResponse(exc.message, status_code=status_code)

@app.get("/health")
async def health_check():
    """Health Check Endpoint"""
    return {"status": "ok"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
