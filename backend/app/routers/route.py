"""Route router - optimised stop order for a run."""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, status

from app.core.security import AuthenticatedUser, require_staff
from app.schemas.route import OptimizeRequest, OptimizeResponse
from app.services.route_optimizer import (
    RouteConfigurationError,
    RouteOptimizationError,
    RouteOptimizer,
    get_route_optimizer,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/route", tags=["route"])


@router.post("/optimize", response_model=OptimizeResponse)
async def optimize_route(
    data: OptimizeRequest,
    current_user: AuthenticatedUser = Depends(require_staff),
    optimizer: RouteOptimizer = Depends(get_route_optimizer),
):
    """Order waypoints between start and end via the Directions API."""
    try:
        result = await optimizer.optimize(
            start=data.start.model_dump(),
            end=data.end.model_dump(),
            waypoints=[point.model_dump() for point in data.waypoints],
        )
    except RouteConfigurationError as e:
        logger.error(f"[ROUTE] {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Route optimisation is not configured",
        )
    except RouteOptimizationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Directions API error: {e.status}",
        )
    except httpx.HTTPError as e:
        logger.error(f"[ROUTE] Directions request failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Could not reach the Directions API",
        )

    return OptimizeResponse(**result)
