"""FastAPI application exposing route resolution.

The route service and its caches are created in the app lifespan, so
importing the app does not touch the network.
"""

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI

from launchroute import __version__
from launchroute.api.endpoints import router
from launchroute.service import create_service_from_env

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("LAUNCHROUTE_HOST", "127.0.0.1")
PORT = int(os.environ.get("LAUNCHROUTE_PORT", "8000"))
DEBUG = os.environ.get("LAUNCHROUTE_DEBUG", "false").lower() in ("true", "1", "yes")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    app.state.route_service = create_service_from_env()
    yield
    logger.info("route_service_stopped", stats=app.state.route_service.get_stats())


app = FastAPI(
    title="launchroute",
    description="Trading-channel resolution for BSC launchpad tokens",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the API server.

    Configuration via environment variables:
    - LAUNCHROUTE_HOST: Host to bind to (default: 127.0.0.1)
    - LAUNCHROUTE_PORT: Port to bind to (default: 8000)
    - LAUNCHROUTE_DEBUG: Enable reload mode (default: false)
    - LAUNCHROUTE_RPC_URL: BSC JSON-RPC endpoint
    """
    uvicorn.run(
        "launchroute.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
