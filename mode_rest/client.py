"""Async HTTP client for the Mode REST API."""
import time
from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx

from mode_rest.errors import UpstreamError, UpstreamStatusError
from shared.config import Settings
from shared.logger import get_logger

logger = get_logger(__name__)


def build_params(tracking_source: str, embeds: Iterable[str]) -> List[Tuple[str, str]]:
    """
    Build the query string for a Mode request.

    Args:
        tracking_source: Value of the ``trk_source`` parameter
        embeds: Embed directives, each sent as ``<directive>=1``

    Returns:
        Ordered list of query parameters
    """
    params = [("trk_source", tracking_source)]
    params.extend((directive, "1") for directive in embeds)
    return params


class ModeClient:
    """Fetches HAL resources from Mode with a single static credential."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize the client.

        Args:
            settings: Base URL, credential header and timeout
            transport: Optional transport override (tests use httpx.MockTransport)
        """
        self.settings = settings
        self.transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.settings.mode_token:
            headers[self.settings.auth_header] = self.settings.mode_token
        return headers

    async def connect(self) -> None:
        """Open the underlying connection pool."""
        if self.client is not None:
            return
        if not self.settings.mode_token:
            logger.warning("mode_token_missing", auth_header=self.settings.auth_header)
        self.client = httpx.AsyncClient(
            base_url=self.settings.base_url,
            headers=self._headers(),
            timeout=self.settings.request_timeout,
            follow_redirects=True,
            transport=self.transport,
        )
        logger.info("mode_client_connected", base_url=self.settings.base_url)

    async def disconnect(self) -> None:
        """Close the connection pool."""
        if self.client is not None:
            await self.client.aclose()
            self.client = None
            logger.info("mode_client_disconnected")

    async def __aenter__(self) -> "ModeClient":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.disconnect()

    async def fetch(
        self,
        path: str,
        embeds: Iterable[str] = (),
        tracking_source: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        GET a Mode resource.

        Args:
            path: Resource path (``/api/...``) or an absolute ``_links`` href
            embeds: Embed directives to request inline
            tracking_source: Overrides the configured ``trk_source``

        Returns:
            The decoded resource envelope

        Raises:
            UpstreamError: If the request fails or the body is not a JSON object
            UpstreamStatusError: If Mode answers with an error status
        """
        if self.client is None:
            await self.connect()

        params = build_params(tracking_source or self.settings.tracking_source, embeds)
        started = time.perf_counter()

        try:
            # a _links href may carry its own query string; keep it
            target = httpx.URL(path).copy_merge_params(params)
            response = await self.client.get(target)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("upstream_request_failed", path=path, error=str(e))
            raise UpstreamError(f"Mode API request failed: {e}", url=path) from e

        url = str(response.url)
        elapsed_ms = round((time.perf_counter() - started) * 1000, 1)
        logger.info("upstream_fetch", url=url, status=response.status_code, elapsed_ms=elapsed_ms)

        if response.is_error:
            logger.error("upstream_status_error", url=url, status=response.status_code)
            raise UpstreamStatusError(response.status_code, url, body=response.text)

        try:
            body = response.json()
        except ValueError as e:
            logger.error("upstream_invalid_json", url=url, error=str(e))
            raise UpstreamError(f"Mode API returned a non-JSON body for {url}", url=url) from e

        if not isinstance(body, dict):
            logger.error("upstream_invalid_json", url=url, error="body is not an object")
            raise UpstreamError(f"Mode API returned a non-object body for {url}", url=url)

        return body
