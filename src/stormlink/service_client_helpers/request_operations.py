"""Service request operations with typed failure mapping."""

import asyncio
import logging
from typing import Any, Optional, Type, TypeVar

import aiohttp
import orjson

from ..data_models.service_payloads import PayloadModel
from ..http_utils import status_reason
from ..network_errors import describe_network_error, is_timeout_error
from ..service_errors import DecodingFailed, RequestFailed, ServiceTimeout
from ..service_types import Service
from .endpoints import ServiceEndpoint

HTTP_SUCCESS_MIN = 200
HTTP_SUCCESS_MAX = 300

M = TypeVar("M", bound=PayloadModel)


class ServiceRequestOperations:
    """Performs JSON requests against one service."""

    def __init__(
        self,
        service: Service,
        base_url: str,
        session_manager,
        health_monitor=None,
    ):
        self.service = service
        self.base_url = base_url
        self.session_manager = session_manager
        self.health_monitor = health_monitor
        self.logger = logging.getLogger(f"{__name__}.{service.slug}")

    async def make_json_request(self, endpoint: ServiceEndpoint) -> Any:
        """
        Perform ``endpoint`` and return the decoded JSON body.

        Raises:
            ServiceTimeout: The request exceeded its deadline
            RequestFailed: Transport failure or non-2xx status
            DecodingFailed: The body is not valid JSON
        """
        session = self.session_manager.get_or_create_session()
        url = f"{self.base_url}{endpoint.path}"
        self.logger.debug("Making %s request: %s", endpoint.method, url)

        try:
            async with session.request(
                endpoint.method,
                url,
                params=endpoint.params,
                json=endpoint.body,
            ) as response:
                self._record_response_health(response.status)
                if not HTTP_SUCCESS_MIN <= response.status < HTTP_SUCCESS_MAX:
                    self.logger.warning("%s %s returned HTTP %s", endpoint.method, url, response.status)
                    raise RequestFailed(self.service, status_reason(response.status))
                body = await response.read()

        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as exc:
            self._record_failure()
            if is_timeout_error(exc):
                self.logger.warning("%s %s timed out", endpoint.method, url)
                raise ServiceTimeout(self.service) from exc
            self.logger.warning("%s %s failed: %s", endpoint.method, url, exc)
            raise RequestFailed(self.service, describe_network_error(exc)) from exc

        try:
            return orjson.loads(body)
        except orjson.JSONDecodeError as exc:
            self.logger.warning("Invalid JSON from %s %s", endpoint.method, url)
            raise DecodingFailed(self.service, str(exc)) from exc

    async def request(self, endpoint: ServiceEndpoint, response_type: Optional[Type[M]] = None):
        """Perform ``endpoint`` and decode the body into ``response_type`` when given."""
        payload = await self.make_json_request(endpoint)
        if response_type is None:
            return payload
        try:
            return response_type.from_payload(payload)
        except (KeyError, TypeError, ValueError) as exc:
            self.logger.warning("Unexpected %s payload: %s", response_type.__name__, exc)
            raise DecodingFailed(self.service, f"{type(exc).__name__}: {exc}") from exc

    def _record_response_health(self, status: int) -> None:
        if not self.health_monitor:
            return
        if HTTP_SUCCESS_MIN <= status < HTTP_SUCCESS_MAX:
            self.health_monitor.record_success()
        else:
            self.health_monitor.record_failure()

    def _record_failure(self) -> None:
        if self.health_monitor:
            self.health_monitor.record_failure()
