"""HTTP transport for dispatching built requests."""

import asyncio
import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Dict, Optional

import aiohttp
from tenacity import (
    AsyncRetrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from ..config.models import TransportConfig
from ..models.core import RequestSpec, ResponseRecord
from ..models.errors import TransportException


class TransportInterface(ABC):
    """Abstract base class for HTTP transports."""

    @abstractmethod
    async def send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[str] = None
    ) -> ResponseRecord:
        """Send a request and decode the JSON response.

        Args:
            method: HTTP method
            url: Full URL, query string included
            headers: Request headers
            body: Serialized request body, if any

        Returns:
            ResponseRecord with the status code and decoded payload

        Raises:
            TransportException: If the request fails or the response is not JSON
        """
        pass

    async def send_request(self, spec: RequestSpec) -> ResponseRecord:
        """Send a RequestSpec."""
        return await self.send(spec.method.value, spec.url, spec.headers, spec.body)


class AiohttpTransport(TransportInterface):
    """Transport backed by aiohttp with retries of connection failures."""

    def __init__(self, config: Optional[TransportConfig] = None):
        """Initialize the transport.

        Args:
            config: Transport configuration; defaults apply when omitted
        """
        self.config = config or TransportConfig()
        self.logger = logging.getLogger(__name__)

        self.headers = {"User-Agent": self.config.user_agent}
        if self.config.default_headers:
            self.headers.update(self.config.default_headers)

    async def send(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[str] = None
    ) -> ResponseRecord:
        request_headers = {**self.headers, **headers}
        start_time = time.time()

        try:
            async for attempt in AsyncRetrying(
                reraise=True,
                stop=stop_after_attempt(self.config.retry_attempts + 1),
                wait=wait_exponential(multiplier=self.config.retry_delay, max=10),
                retry=retry_if_exception_type(aiohttp.ClientConnectionError),
            ):
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        self.logger.warning(
                            f"Retrying {method} {url} (attempt {attempt.retry_state.attempt_number})"
                        )
                    record = await self._send_once(method, url, request_headers, body)
        except asyncio.TimeoutError:
            self.logger.error(f"{method} {url} timed out after {self.config.timeout}s")
            raise TransportException(
                "TIMEOUT",
                f"Request timed out after {self.config.timeout} seconds",
                {"url": url, "method": method}
            )
        except aiohttp.ClientError as e:
            self.logger.error(f"{method} {url} failed: {e}")
            raise TransportException(
                "CONNECTION_ERROR",
                f"Request failed: {e}",
                {"url": url, "method": method}
            )

        self.logger.info(
            f"{method} {url} -> {record.status_code} in {time.time() - start_time:.3f}s"
        )
        return record

    async def _send_once(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        body: Optional[str]
    ) -> ResponseRecord:
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)

        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.request(
                method,
                url,
                headers=headers,
                data=body.encode('utf-8') if body is not None else None,
                ssl=self.config.verify_ssl,
                allow_redirects=self.config.follow_redirects,
            ) as response:
                status = response.status
                raw = await response.read()

        try:
            payload = json.loads(raw)
        except ValueError as e:
            raise TransportException(
                "INVALID_RESPONSE",
                f"Response from {url} is not valid JSON (HTTP {status}): {e}",
                {"url": url, "status_code": status}
            )

        return ResponseRecord(status_code=status, payload=payload)
