"""Identity of the backend microservices reachable through the registry."""

from enum import Enum


class Service(Enum):
    """
    One independently addressable backend service.

    Each member carries its URL slug and TCP port; the set is fixed. World
    engine and story engine share a port because they are served by the same
    process.
    """

    SONG_ENGINE = ("song-engine", 3001)
    STORY_ENGINE = ("story-engine", 3002)
    WORLD_ENGINE = ("world-engine", 3002)
    ECHO_ENGINE = ("echo-engine", 3003)
    AI_ORCHESTRA = ("ai-orchestra", 3004)
    SYMPHONY_ENGINE = ("symphony-engine", 3005)
    HARMONY_SERVICE = ("harmony-service", 3006)
    SILENCE_SERVICE = ("silence-service", 3009)

    def __init__(self, slug: str, port: int):
        self.slug = slug
        self.port = port

    @property
    def display_name(self) -> str:
        return self.slug.replace("-", " ").title()

    def base_url(self, host_url: str) -> str:
        """Return ``<host_url>:<port>`` for this service."""
        return f"{host_url.rstrip('/')}:{self.port}"

    @classmethod
    def from_slug(cls, slug: str) -> "Service":
        for service in cls:
            if service.slug == slug:
                return service
        raise ValueError(f"Unknown service slug: {slug!r}")

    def __str__(self) -> str:
        return self.display_name


__all__ = ["Service"]
