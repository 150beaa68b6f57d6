"""
Concurrent per-service fan-out.

Runs one coroutine per service and joins them all, so a slow or failing
service never delays or aborts its siblings.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Iterable, TypeVar, Union

from ..service_types import Service

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def gather_per_service(
    services: Iterable[Service],
    operation: Callable[[Service], Awaitable[T]],
) -> Dict[Service, Union[T, Exception]]:
    """
    Run ``operation`` for every service concurrently.

    Args:
        services: Services to fan out over
        operation: Async callable invoked once per service

    Returns:
        Mapping of service to either the operation result or the exception it raised
    """
    targets = list(services)
    outcomes = await asyncio.gather(*(operation(service) for service in targets), return_exceptions=True)

    results: Dict[Service, Union[T, Exception]] = {}
    for service, outcome in zip(targets, outcomes):
        if isinstance(outcome, BaseException) and not isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, Exception):
            logger.debug("%s fan-out operation failed: %s", service.display_name, outcome)
        results[service] = outcome
    return results
