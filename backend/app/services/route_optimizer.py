"""
Run route optimisation via the Google Directions API.

Staff start a run with their position, the depot to finish at and the day's
job coordinates; Directions returns the optimised waypoint order and legs.
"""

import logging
from typing import Any, Optional

import httpx

from app.core.config import get_settings

logger = logging.getLogger(__name__)

DIRECTIONS_URL = "https://maps.googleapis.com/maps/api/directions/json"


class RouteConfigurationError(Exception):
    """Raised when no Maps API key is configured."""


class RouteOptimizationError(Exception):
    """Raised when Directions does not return status OK."""

    def __init__(self, status: str, details: Optional[dict[str, Any]] = None):
        super().__init__(status)
        self.status = status
        self.details = details or {}


def format_duration_seconds(seconds: float) -> str:
    """Compact duration label, e.g. "1h 5m" or "<1m"."""
    try:
        clamped = max(0, round(float(seconds)))
    except (TypeError, ValueError, OverflowError):
        clamped = 0
    hours = clamped // 3600
    minutes = (clamped % 3600) // 60

    parts = []
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    return " ".join(parts) if parts else "<1m"


def _coord(point: dict[str, float]) -> str:
    return f"{point['lat']},{point['lng']}"


class RouteOptimizer:
    """Client for the Directions API."""

    def __init__(self, api_key: Optional[str], transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = api_key
        self.transport = transport

    async def optimize(
        self,
        start: dict[str, float],
        end: dict[str, float],
        waypoints: list[dict[str, float]],
    ) -> dict[str, Any]:
        """Return polyline, optimised waypoint order and per-leg distance/duration."""
        if not self.api_key:
            raise RouteConfigurationError("Missing Google Maps API key")

        params = {
            "origin": _coord(start),
            "destination": _coord(end),
            "key": self.api_key,
            "mode": "driving",
        }
        if waypoints:
            params["waypoints"] = "optimize:true|" + "|".join(_coord(w) for w in waypoints)

        async with httpx.AsyncClient(transport=self.transport) as client:
            response = await client.get(DIRECTIONS_URL, params=params, timeout=15.0)

        try:
            data = response.json()
        except ValueError:
            logger.warning(f"[ROUTE] Directions returned a non-JSON body ({response.status_code})")
            raise RouteOptimizationError("INVALID_RESPONSE")
        if not isinstance(data, dict):
            raise RouteOptimizationError("INVALID_RESPONSE")

        if data.get("status") != "OK":
            logger.warning(f"[ROUTE] Directions returned {data.get('status')}")
            raise RouteOptimizationError(data.get("status") or "UNKNOWN", data)

        routes = data.get("routes") or []
        if not routes:
            raise RouteOptimizationError("NO_ROUTES", data)
        route = routes[0]
        legs = [
            {
                "start_address": leg.get("start_address"),
                "end_address": leg.get("end_address"),
                "distance_m": leg["distance"]["value"],
                "duration_s": leg["duration"]["value"],
            }
            for leg in route.get("legs", [])
        ]
        total_duration = sum(leg["duration_s"] for leg in legs)

        return {
            "polyline": route["overview_polyline"]["points"],
            "order": route.get("waypoint_order", []),
            "legs": legs,
            "total_distance_m": sum(leg["distance_m"] for leg in legs),
            "total_duration_s": total_duration,
            "total_duration_label": format_duration_seconds(total_duration),
        }


def get_route_optimizer() -> RouteOptimizer:
    return RouteOptimizer(api_key=get_settings().google_maps_server_key)
