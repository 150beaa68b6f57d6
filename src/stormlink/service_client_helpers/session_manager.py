"""HTTP session management shared by all service clients."""

import asyncio
import logging
from typing import Optional

import aiohttp

from ..http_utils import is_aiohttp_session_open


class HTTPSessionManager:
    """
    Owns the single ``aiohttp.ClientSession`` used for service traffic.

    ``request_timeout`` bounds connecting and each socket read;
    ``resource_timeout`` bounds the whole request.
    """

    def __init__(
        self,
        owner_name: str,
        request_timeout: float,
        resource_timeout: float,
    ):
        self.owner_name = owner_name
        self.request_timeout = request_timeout
        self.resource_timeout = resource_timeout
        self.session: Optional[aiohttp.ClientSession] = None
        self.logger = logging.getLogger(f"{__name__}.{owner_name}")

    def build_timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(
            total=self.resource_timeout,
            sock_connect=self.request_timeout,
            sock_read=self.request_timeout,
        )

    def create_session(self) -> aiohttp.ClientSession:
        """Create HTTP session."""
        self.session = aiohttp.ClientSession(
            timeout=self.build_timeout(),
            headers={"User-Agent": f"{self.owner_name}/1.0"},
            connector=aiohttp.TCPConnector(
                limit=100,
                limit_per_host=30,
                ttl_dns_cache=300,
                use_dns_cache=True,
            ),
        )
        self.logger.info("HTTP session created")
        return self.session

    def get_or_create_session(self) -> aiohttp.ClientSession:
        """Return the open session, creating one if needed. Must run inside the event loop."""
        if is_aiohttp_session_open(self.session):
            return self.session
        return self.create_session()

    def get_session(self) -> Optional[aiohttp.ClientSession]:
        return self.session if is_aiohttp_session_open(self.session) else None

    async def close_session(self) -> None:
        """Close HTTP session."""
        if not self.session:
            return

        try:
            if not self.session.closed:
                self.logger.info("Closing HTTP session")
                await asyncio.wait_for(self.session.close(), timeout=5.0)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError):
            self.logger.warning("Error closing HTTP session", exc_info=True)
        finally:
            self.session = None
