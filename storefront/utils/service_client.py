"""
HTTP helper for outbound calls with correlation ID propagation
"""

from typing import Any, Dict, Optional

import httpx

from storefront.core.config import config
from storefront.utils.correlation_id import create_headers_with_correlation_id


class ServiceClient:
    """HTTP client for calls to upstream services"""

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 10.0,
        default_headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.default_headers = default_headers or {}
        self.transport = transport

    def _get_headers(self, additional_headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = dict(self.default_headers)
        if additional_headers:
            headers.update(additional_headers)
        return create_headers_with_correlation_id(headers, header_name=config.correlation_id_header)

    def _url(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def get(
        self, endpoint: str, headers: Optional[Dict[str, str]] = None, **kwargs
    ) -> httpx.Response:
        """Make a GET request with correlation ID"""
        async with self._client() as client:
            return await client.get(self._url(endpoint), headers=self._get_headers(headers), **kwargs)

    async def post(
        self,
        endpoint: str,
        data: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ) -> httpx.Response:
        """Make a POST request with a JSON body and correlation ID"""
        async with self._client() as client:
            return await client.post(
                self._url(endpoint),
                json=data,
                headers=self._get_headers(headers),
                **kwargs,
            )
