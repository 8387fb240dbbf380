"""Cube.js REST API client.

WHAT:
    Async wrapper for the two Cube.js endpoints the analytics API needs:
    - POST /cubejs-api/v1/load  (run a TechnicalQuery)
    - GET  /cubejs-api/v1/meta  (raw cube metadata)

WHY:
    The semantic layer only shapes queries; executing them is Cube.js's job.
    Keeping every HTTP detail here (auth header, payload envelope, error
    wrapping) lets routers and services stay transport-agnostic.

REFERENCES:
    - Cube.js REST API: https://cube.dev/docs/product/apis-integrations/rest-api/reference
    - reporting/semantic/query.py: TechnicalQuery.to_cube_query()
"""

import json
import logging
from typing import Any, Dict, Optional, Union

import httpx

from reporting.semantic.query import TechnicalQuery

logger = logging.getLogger(__name__)

LOAD_PATH = "/cubejs-api/v1/load"
META_PATH = "/cubejs-api/v1/meta"
DEFAULT_TIMEOUT = 30.0


class CubeAPIError(Exception):
    """Cube.js could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class CubeClient:
    """REST client for Cube.js.

    WHAT: Sends technical queries and metadata requests to Cube.js
    WHY: Single place for Cube.js transport and error handling

    Usage:
        client = CubeClient(base_url="http://localhost:4000", api_token="...")
        rows = await client.load(query)
        meta = await client.meta()
    """

    def __init__(
        self,
        base_url: str,
        api_token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            base_url: Cube.js API root (e.g., "http://localhost:4000")
            api_token: Cube.js token, sent verbatim as the Authorization header
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.api_token = api_token
        self.timeout = timeout
        self._transport = transport

        logger.info(f"[CUBE_CLIENT] Initialized for {self.base_url}")

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_token:
            headers["Authorization"] = self.api_token
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=self._headers(),
            transport=self._transport,
        )

    async def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        """Send one request and return the decoded JSON body.

        Raises:
            CubeAPIError: On transport errors, non-2xx responses or invalid JSON
        """
        try:
            async with self._client() as client:
                response = await client.request(method, path, json=payload)
        except httpx.RequestError as e:
            logger.error(f"[CUBE_CLIENT] Request to {path} failed: {e}")
            raise CubeAPIError(f"Cube.js request failed: {e}") from e

        logger.info(f"[CUBE_CLIENT] {method} {path} -> {response.status_code}")

        if response.is_error:
            logger.error(
                f"[CUBE_CLIENT] Cube.js returned {response.status_code} for {path}: {response.text[:500]}"
            )
            raise CubeAPIError(
                f"Cube.js returned HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"[CUBE_CLIENT] Invalid JSON from {path}")
            raise CubeAPIError(
                "Cube.js returned an invalid JSON body",
                status_code=response.status_code,
                body=response.text,
            ) from e

    async def load(self, query: Union[TechnicalQuery, Dict[str, Any]]) -> Any:
        """Execute a query.

        WHAT: POST {"query": ...} to /cubejs-api/v1/load
        WHY: Runs the translated report query

        Args:
            query: TechnicalQuery, or an already-serialized Cube.js query dict

        Returns:
            The response's ``data`` array, or the whole body if it has none
        """
        cube_query = query.to_cube_query() if isinstance(query, TechnicalQuery) else query
        logger.info(f"[CUBE_CLIENT] Sending query: {json.dumps(cube_query, default=str)}")

        body = await self._request("POST", LOAD_PATH, {"query": cube_query})
        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    async def meta(self) -> Any:
        """Fetch raw Cube.js metadata (cubes, measures, dimensions)."""
        return await self._request("GET", META_PATH)
