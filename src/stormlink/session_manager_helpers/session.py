"""Active login session and its expiry rules."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Optional

from ..grid_types import GridInfo, LoginCredentials, RegionInfo

SESSION_INACTIVITY_TIMEOUT = timedelta(hours=1)
SESSION_MAX_AGE = timedelta(hours=24)


@dataclass
class Session:
    """
    State of a logged-in avatar on one grid.

    Attributes:
        grid: Grid the session belongs to
        credentials: Credentials used to open the session
        login_time: When the login completed
        last_activity: Last time activity was recorded on the session
        capabilities: Capability name to URL map handed out by the grid
        region: Region the avatar arrived in, when the grid reported one
    """

    grid: GridInfo
    credentials: LoginCredentials
    login_time: datetime
    last_activity: datetime
    capabilities: Dict[str, str] = field(default_factory=dict)
    region: Optional[RegionInfo] = None

    def is_expired(self, now: datetime) -> bool:
        return now - self.last_activity > SESSION_INACTIVITY_TIMEOUT

    def session_duration(self, now: datetime) -> timedelta:
        return now - self.login_time

    def needs_reauthentication(self, now: datetime) -> bool:
        return self.session_duration(now) > SESSION_MAX_AGE


__all__ = ["SESSION_INACTIVITY_TIMEOUT", "SESSION_MAX_AGE", "Session"]
