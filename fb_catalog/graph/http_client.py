"""
Graph API HTTP transport.

This module provides the single request helper every catalog operation goes
through: URL building against the versioned Graph API base, access token
injection, query/form encoding, JSON parsing and error mapping.
"""

import json
import logging
import time
from typing import Any, Dict, List, Literal, Optional, Tuple

import aiohttp
from aiohttp import ClientTimeout

from fb_catalog.core.config import get_settings
from fb_catalog.core.logging_config import log_api_call
from fb_catalog.utils.error_handler import GraphAPIException

logger = logging.getLogger(__name__)

HttpMethod = Literal["GET", "POST", "DELETE"]

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


def _form_value(value: Any) -> str:
    """Coerce a parameter to text the way URLSearchParams does (booleans lowercase)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class GraphAPIClient:
    """
    Thin async client for the Facebook Graph API.

    Holds no session state beyond the HTTP connection pool: the access token
    is passed on every call. There are no retries and, unless
    GRAPH_REQUEST_TIMEOUT is set, no timeout.
    """

    def __init__(self, session: Optional[aiohttp.ClientSession] = None):
        """
        Initialize the Graph API client.

        Args:
            session: Existing aiohttp session to reuse; when omitted the client
                creates and owns one on first use
        """
        self.settings = get_settings()
        self.base_url = self.settings.graph_api_base_url
        self.session = session
        self._owns_session = session is None

        logger.debug(f"Initialized Graph API client for {self.base_url}")

    async def __aenter__(self) -> "GraphAPIClient":
        self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            timeout = ClientTimeout(total=self.settings.GRAPH_REQUEST_TIMEOUT)
            self.session = aiohttp.ClientSession(
                timeout=timeout,
                headers={"User-Agent": f"{self.settings.APP_NAME}/{self.settings.APP_VERSION}"},
            )
            self._owns_session = True
        return self.session

    async def close(self):
        """Close the HTTP session if this client created it."""
        if self.session and self._owns_session:
            await self.session.close()
            logger.debug("Graph API client session closed")
        self.session = None

    def build_url(self, path: str) -> str:
        """Versioned base URL plus path, e.g. ``/123/products``."""
        return f"{self.base_url}{path}"

    async def api_call(
        self,
        path: str,
        method: HttpMethod,
        token: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Issue one Graph API request and return the parsed JSON body.

        GET params travel in the query string, POST/DELETE params as a
        form-encoded body. Values are coerced with ``str()`` (booleans as
        ``true``/``false``), so nested structures must already be
        JSON-encoded by the caller. An empty body counts as invalid JSON.

        Args:
            path: Path below the versioned base ("" for the API root)
            method: GET, POST or DELETE
            token: User access token, sent as the access_token query parameter
            params: Additional request parameters

        Returns:
            The decoded JSON body

        Raises:
            GraphAPIException: On a non-2xx status (message is the Graph
                error.message or the generic fallback) or a body that is
                not valid JSON
        """
        session = self._ensure_session()
        url = self.build_url(path)
        params = params or {}

        query: List[Tuple[str, str]] = [("access_token", token)]
        request_kwargs: Dict[str, Any] = {}

        if method == "GET":
            query.extend((key, _form_value(value)) for key, value in params.items())
        else:
            request_kwargs["data"] = {key: _form_value(value) for key, value in params.items()}
            request_kwargs["headers"] = FORM_HEADERS

        started = time.monotonic()
        async with session.request(method, url, params=query, **request_kwargs) as response:
            status = response.status
            try:
                body = json.loads(await response.text())
            except ValueError as e:
                raise GraphAPIException(
                    f"Invalid JSON in Graph API response: {e}",
                    api_response_code=status,
                    endpoint=path,
                ) from e

        log_api_call(method, str(response.url), status, time.monotonic() - started, endpoint=path)

        if not 200 <= status < 300:
            raise GraphAPIException.from_response_body(body, api_response_code=status, endpoint=path)

        return body

    def __repr__(self):
        return f"GraphAPIClient(base_url='{self.base_url}', initialized={self.session is not None})"
