"""
HTTP Provider Base

Shared plumbing for vendor adapters that talk JSON over HTTP.
"""
import asyncio
import time
from typing import Any, Dict, Optional

import requests

from config.settings import settings
from src.leadenrich.models.enrichment import ProviderHealth
from src.leadenrich.providers.base import BaseProvider
from src.leadenrich.utils.logger import get_logger

logger = get_logger(__name__)


class HttpProvider(BaseProvider):
    """
    Base class for providers backed by a JSON HTTP API.

    Requests are blocking (requests.Session) and are pushed onto a worker
    thread so they do not stall the event loop. HTTP and transport errors
    propagate as requests.RequestException, which the pipeline treats as a
    provider failure.

    Subclasses set ``base_url`` (and optionally ``health_path``) and build
    their capability methods on top of ``get_json`` / ``post_json``.
    """

    base_url: str = ""
    health_path: str = ""

    def __init__(
        self,
        name: Optional[str] = None,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the provider.

        Args:
            name: Provider name used in sources and logs
            base_url: Override the default API URL (for testing)
            api_key: Sent as a bearer token when set
            timeout: Per-request timeout in seconds
        """
        super().__init__(name)
        self.base_url = (base_url or self.base_url).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.session = requests.Session()
        self.session.headers["User-Agent"] = settings.http_user_agent
        if api_key:
            self.session.headers["Authorization"] = f"Bearer {api_key}"
        logger.info("http_provider_initialized", provider=self.name, base_url=self.base_url)

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}" if path else self.base_url

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = self._url(path)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            logger.error(
                "api_request_failed",
                provider=self.name,
                method=method,
                url=url,
                error=str(e),
            )
            raise
        except ValueError as e:
            logger.error("api_response_not_json", provider=self.name, url=url, error=str(e))
            raise

        logger.debug(
            "api_request_successful",
            provider=self.name,
            method=method,
            status_code=response.status_code,
        )
        return payload

    async def get_json(self, path: str = "", params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET ``path`` and decode the JSON body."""
        return await asyncio.to_thread(self._request, "GET", path, params=params)

    async def post_json(self, path: str = "", body: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """POST a JSON body to ``path`` and decode the JSON response."""
        return await asyncio.to_thread(self._request, "POST", path, json=body)

    def quota_from(self, payload: Dict[str, Any]) -> Optional[int]:
        """
        Extract remaining quota from a health payload.

        Vendors that report quota override this.
        """
        return None

    async def health(self) -> ProviderHealth:
        """
        Probe ``health_path`` and report latency.

        Errors are returned as ok=False instead of raised.
        """
        started = time.perf_counter()
        try:
            payload = await self.get_json(self.health_path)
        except (requests.RequestException, ValueError) as e:
            return ProviderHealth(
                name=self.name,
                ok=False,
                latency_ms=round((time.perf_counter() - started) * 1000, 2),
                error=str(e),
            )

        return ProviderHealth(
            name=self.name,
            ok=True,
            latency_ms=round((time.perf_counter() - started) * 1000, 2),
            quota=self.quota_from(payload),
        )
