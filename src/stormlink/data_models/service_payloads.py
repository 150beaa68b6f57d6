"""
Response payloads returned by the backend services.

Each model decodes itself from the JSON object produced by the service via
``from_payload``. Malformed payloads raise ``KeyError``, ``TypeError`` or
``ValueError``; the service client turns any of those into ``DecodingFailed``.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Protocol, Tuple, TypeVar

from .geometry import GridCoordinate, Vector3

M = TypeVar("M", bound="PayloadModel")


class PayloadModel(Protocol):
    @classmethod
    def from_payload(cls: type[M], payload: Any) -> M: ...


def _require_mapping(payload: Any, model: str) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise TypeError(f"{model} payload must be a JSON object, got {type(payload).__name__}")
    return payload


def _require_str(payload: Dict[str, Any], key: str) -> str:
    value = payload[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


def _require_float(payload: Dict[str, Any], key: str) -> float:
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{key} must be a number, got {type(value).__name__}")
    return float(value)


def _require_int(payload: Dict[str, Any], key: str) -> int:
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{key} must be an integer, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class HealthResponse:
    """Body of ``GET /health``."""

    status: str
    uptime: float
    version: str

    @classmethod
    def from_payload(cls, payload: Any) -> "HealthResponse":
        data = _require_mapping(payload, cls.__name__)
        return cls(
            status=_require_str(data, "status"),
            uptime=_require_float(data, "uptime"),
            version=_require_str(data, "version"),
        )


@dataclass(frozen=True)
class Song:
    """A song that can be woven into the world."""

    HARMONY_TYPES: ClassVar[Tuple[str, ...]] = (
        "restoration",
        "creation",
        "transformation",
        "protection",
        "purification",
    )

    id: str
    name: str
    category: str
    harmony_type: str
    duration: float
    difficulty: int

    def __post_init__(self):
        if self.harmony_type not in self.HARMONY_TYPES:
            raise ValueError(f"Unknown harmony type: {self.harmony_type!r}")

    @classmethod
    def from_payload(cls, payload: Any) -> "Song":
        data = _require_mapping(payload, cls.__name__)
        return cls(
            id=_require_str(data, "id"),
            name=_require_str(data, "name"),
            category=_require_str(data, "category"),
            harmony_type=_require_str(data, "harmonyType"),
            duration=_require_float(data, "duration"),
            difficulty=_require_int(data, "difficulty"),
        )


@dataclass(frozen=True)
class SongsResponse:
    songs: List[Song]
    total_count: int

    @classmethod
    def from_payload(cls, payload: Any) -> "SongsResponse":
        data = _require_mapping(payload, cls.__name__)
        songs = data["songs"]
        if not isinstance(songs, list):
            raise TypeError("songs must be a list")
        return cls(
            songs=[Song.from_payload(item) for item in songs],
            total_count=_require_int(data, "totalCount"),
        )


@dataclass(frozen=True)
class WorldEntity:
    id: str
    type: str
    position: Vector3
    properties: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> "WorldEntity":
        data = _require_mapping(payload, cls.__name__)
        properties = data.get("properties") or {}
        if not isinstance(properties, dict):
            raise TypeError("properties must be an object")
        return cls(
            id=_require_str(data, "id"),
            type=_require_str(data, "type"),
            position=Vector3.from_payload(data["position"]),
            properties={str(key): str(value) for key, value in properties.items()},
        )


@dataclass(frozen=True)
class WorldDataResponse:
    """Terrain and entity data for one grid cell."""

    coordinate: GridCoordinate
    biome: str
    harmony_level: float
    features: List[Dict[str, Any]]
    entities: List[WorldEntity]

    @classmethod
    def from_payload(cls, payload: Any) -> "WorldDataResponse":
        data = _require_mapping(payload, cls.__name__)
        features = data.get("features") or []
        entities = data.get("entities") or []
        if not isinstance(features, list) or not isinstance(entities, list):
            raise TypeError("features and entities must be lists")
        return cls(
            coordinate=GridCoordinate.from_payload(_require_mapping(data["coordinate"], "coordinate")),
            biome=_require_str(data, "biome"),
            harmony_level=_require_float(data, "harmonyLevel"),
            features=[_require_mapping(item, "feature") for item in features],
            entities=[WorldEntity.from_payload(item) for item in entities],
        )


@dataclass(frozen=True)
class SongweavingResponse:
    success: bool
    effect_radius: float
    harmony_delta: float
    message: str

    @classmethod
    def from_payload(cls, payload: Any) -> "SongweavingResponse":
        data = _require_mapping(payload, cls.__name__)
        success = data["success"]
        if not isinstance(success, bool):
            raise TypeError("success must be a boolean")
        return cls(
            success=success,
            effect_radius=_require_float(data, "effectRadius"),
            harmony_delta=_require_float(data, "harmonyDelta"),
            message=_require_str(data, "message"),
        )


@dataclass(frozen=True)
class HarmonyResponse:
    position: Vector3
    harmony_level: float
    dissonance_level: float
    stability_index: float

    @classmethod
    def from_payload(cls, payload: Any) -> "HarmonyResponse":
        data = _require_mapping(payload, cls.__name__)
        return cls(
            position=Vector3.from_payload(data["position"]),
            harmony_level=_require_float(data, "harmonyLevel"),
            dissonance_level=_require_float(data, "dissonanceLevel"),
            stability_index=_require_float(data, "stabilityIndex"),
        )
