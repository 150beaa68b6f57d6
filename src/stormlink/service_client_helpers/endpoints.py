"""Request descriptions for the backend service APIs."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from ..data_models import GridCoordinate, Song, Vector3


def _format_float(value: float) -> str:
    return repr(float(value))


@dataclass(frozen=True)
class ServiceEndpoint:
    """Path, method and optional JSON body/query of one service call."""

    path: str
    method: str = "GET"
    body: Optional[Dict[str, Any]] = None
    params: Optional[Dict[str, str]] = None

    def __post_init__(self):
        if not self.path.startswith("/"):
            raise ValueError(f"Endpoint path must start with '/': {self.path!r}")

    @classmethod
    def health(cls) -> "ServiceEndpoint":
        return cls("/health")

    @classmethod
    def get_songs(cls) -> "ServiceEndpoint":
        return cls("/songs")

    @classmethod
    def get_world_data(cls, coordinate: GridCoordinate) -> "ServiceEndpoint":
        return cls(f"/world/{coordinate.x}/{coordinate.z}")

    @classmethod
    def perform_songweaving(cls, song: Union[Song, str], position: Vector3) -> "ServiceEndpoint":
        song_id = song.id if isinstance(song, Song) else song
        return cls(
            "/songweaving",
            method="POST",
            body={"songId": song_id, "position": position.to_payload()},
        )

    @classmethod
    def get_harmony(cls, position: Vector3) -> "ServiceEndpoint":
        return cls(
            "/harmony",
            params={
                "x": _format_float(position.x),
                "y": _format_float(position.y),
                "z": _format_float(position.z),
            },
        )
