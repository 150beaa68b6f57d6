"""Typed payloads exchanged with the backend services."""

from .geometry import GridCoordinate, Vector3
from .service_payloads import (
    HarmonyResponse,
    HealthResponse,
    PayloadModel,
    Song,
    SongsResponse,
    SongweavingResponse,
    WorldDataResponse,
    WorldEntity,
)

__all__ = [
    "GridCoordinate",
    "HarmonyResponse",
    "HealthResponse",
    "PayloadModel",
    "Song",
    "SongsResponse",
    "SongweavingResponse",
    "Vector3",
    "WorldDataResponse",
    "WorldEntity",
]
