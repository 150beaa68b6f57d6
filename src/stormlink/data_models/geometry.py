"""Coordinates used to address world data and positional requests."""

from dataclasses import dataclass
from typing import Any, Dict, Sequence


def _require_number(payload: Dict[str, Any], key: str) -> float:
    value = payload[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{key} must be a number, got {type(value).__name__}")
    return float(value)


@dataclass(frozen=True)
class GridCoordinate:
    """Integer ``(x, z)`` cell of the world grid."""

    x: int
    z: int

    def __post_init__(self):
        for name in ("x", "z"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"{name} must be an integer, got {type(value).__name__}")

    def to_payload(self) -> Dict[str, int]:
        return {"x": self.x, "z": self.z}

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "GridCoordinate":
        return cls(x=payload["x"], z=payload["z"])


@dataclass(frozen=True)
class Vector3:
    """Float position in world space."""

    x: float
    y: float
    z: float

    def to_payload(self) -> Dict[str, float]:
        return {"x": float(self.x), "y": float(self.y), "z": float(self.z)}

    @classmethod
    def from_payload(cls, payload: Any) -> "Vector3":
        # Positions arrive either as [x, y, z] or as {"x":..,"y":..,"z":..}.
        if isinstance(payload, dict):
            return cls(
                x=_require_number(payload, "x"),
                y=_require_number(payload, "y"),
                z=_require_number(payload, "z"),
            )
        if isinstance(payload, Sequence) and not isinstance(payload, str) and len(payload) == 3:
            return cls.from_payload(dict(zip("xyz", payload)))
        raise ValueError(f"Cannot decode position from {payload!r}")
