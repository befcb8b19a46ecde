"""
FastAPI Application Entry Point for sixmax.

This module creates and configures the FastAPI application with:
- HTTP routes for hand management
- WebSocket endpoint for live hand entry
- Error mapping from engine errors to HTTP status codes
- CORS middleware for development
"""

import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sixmax import __version__
from sixmax.config import get_settings
from sixmax.core.exceptions import (
    HandError, IllegalActionError, InvalidAmountError, PhaseMismatchError, StateError,
)
from sixmax.server.routes import router
from sixmax.server.schemas import ErrorSchema
from sixmax.server.websocket import HandNotFoundError, websocket_endpoint

# Configure logging
logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    IllegalActionError: 422,
    InvalidAmountError: 422,
    PhaseMismatchError: 409,
    StateError: 409,
}


async def hand_error_handler(request: Request, exc: HandError) -> JSONResponse:
    status = ERROR_STATUS.get(type(exc), 400)
    logger.info(f"Rejected {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status,
        content=ErrorSchema(error=type(exc).__name__, detail=str(exc)).model_dump(),
    )


async def hand_not_found_handler(request: Request, exc: HandNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content=ErrorSchema(error="HandNotFound", detail=str(exc.args[0])).model_dump(),
    )


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="sixmax",
        description="6-max Hold'em hand recorder with WebSocket API",
        version=__version__,
    )

    # CORS middleware for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(HandError, hand_error_handler)
    app.add_exception_handler(HandNotFoundError, hand_not_found_handler)

    # Include HTTP routes
    app.include_router(router)

    # WebSocket endpoint
    app.websocket("/ws")(websocket_endpoint)

    return app


# Create the application instance
app = create_app()


def main():
    """Run the server (for use as entry point)."""
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "sixmax.server.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
