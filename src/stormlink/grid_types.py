"""Grid identity, login credentials and region data shared by the login layer."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .http_utils import ensure_http_url


@dataclass(frozen=True, eq=False)
class GridInfo:
    """
    A virtual-world deployment a user can log in to.

    Two grids are the same grid when their login URIs match, whatever their
    display names.
    """

    name: str
    login_uri: str
    grid_nick: str

    def __post_init__(self):
        if not self.name.strip():
            raise ValueError("Grid name must be non-empty")
        if not self.grid_nick.strip():
            raise ValueError("Grid nick must be non-empty")
        object.__setattr__(self, "login_uri", ensure_http_url(self.login_uri.strip()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GridInfo):
            return NotImplemented
        return self.login_uri == other.login_uri

    def __hash__(self) -> int:
        return hash(self.login_uri)

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "loginURI": self.login_uri, "gridNick": self.grid_nick}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "GridInfo":
        return cls(name=payload["name"], login_uri=payload["loginURI"], grid_nick=payload["gridNick"])


@dataclass(frozen=True)
class LoginCredentials:
    """Avatar name and password for one grid. The password is kept out of ``repr``."""

    first_name: str
    last_name: str
    password: str = field(repr=False)
    start_location: str = "last"

    @property
    def identifier(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> Dict[str, str]:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "password": self.password,
            "startLocation": self.start_location,
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "LoginCredentials":
        return cls(
            first_name=payload["firstName"],
            last_name=payload["lastName"],
            password=payload["password"],
            start_location=payload.get("startLocation", "last"),
        )


@dataclass(frozen=True)
class RegionInfo:
    """Simulator region the avatar arrived in after login."""

    name: str
    x: int
    z: int
    owner_name: Optional[str] = None


__all__ = ["GridInfo", "LoginCredentials", "RegionInfo"]
