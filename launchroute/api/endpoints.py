"""API endpoints for route lookup and cache control."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request

from launchroute.errors import ErrorKind, RouteError
from launchroute.models.route import RouteFetchResult, TokenPlatform
from launchroute.models.types import is_valid_address, normalize_address
from launchroute.service import RouteQueryService

logger = structlog.get_logger()

router = APIRouter()


def get_service(request: Request) -> RouteQueryService:
    """Dependency provider for the route service created at startup.

    Override this in tests to inject a service built on a mock client:
        app.dependency_overrides[get_service] = lambda: service
    """
    return request.app.state.route_service


def _validated_token(token: str) -> str:
    if not is_valid_address(token.strip()):
        raise HTTPException(status_code=422, detail=f"Invalid token address: {token}")
    return normalize_address(token)


@router.get("/route/{token}", response_model_exclude_none=True)
async def get_route(
    token: str,
    platform: TokenPlatform | None = None,
    service: RouteQueryService = Depends(get_service),
) -> RouteFetchResult:
    """Resolve the trading route for a token.

    Error Handling:
        - Malformed address or platform: 422
        - Every platform probe failed: 503, the caller should retry later
    """
    address = _validated_token(token)
    try:
        return await service.query_route(address, platform)
    except RouteError as e:
        if e.kind == ErrorKind.VALIDATION:
            raise HTTPException(status_code=422, detail=e.message) from e
        logger.warning("route_unavailable", token=address, kind=e.kind.value, error=e.message)
        raise HTTPException(status_code=503, detail="route temporarily unknown") from e


@router.get("/cache/stats")
async def cache_stats(service: RouteQueryService = Depends(get_service)) -> dict[str, object]:
    return service.get_stats()


@router.delete("/cache/{token}")
async def clear_token_cache(
    token: str,
    service: RouteQueryService = Depends(get_service),
) -> dict[str, str]:
    address = _validated_token(token)
    service.clear_route(address)
    return {"status": "cleared", "token": address}


@router.delete("/cache")
async def clear_cache(service: RouteQueryService = Depends(get_service)) -> dict[str, str]:
    service.clear_all()
    return {"status": "cleared"}
