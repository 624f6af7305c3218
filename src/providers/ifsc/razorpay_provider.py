"""Razorpay IFSC API provider.

Implements IIFSCProvider against the public Razorpay IFSC registry
(``GET https://ifsc.razorpay.com/<IFSC>``), which answers with a flat JSON
object keyed by uppercase field names, or ``404 Not Found`` for unknown
codes. An empty body also means the code is unknown; an empty
object is a known code with no published details.
"""

from __future__ import annotations

import asyncio

import httpx
import structlog

from src.interfaces.ifsc_provider import IIFSCProvider
from src.models.ifsc import IFSCDetails
from src.providers.ifsc.normalization import normalize_payload
from src.utils.errors import IFSCNotFoundError, ProviderUnavailableError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_BASE_URL = "https://ifsc.razorpay.com"
_DEFAULT_TIMEOUT = 10.0
_DEFAULT_HEADERS = {
    "User-Agent": "IFSC-Service/1.0",
    "Accept": "application/json",
}


class RazorpayIFSCProvider(IIFSCProvider):
    """IFSC lookups against the Razorpay registry.

    The whole request (connect, send, read) is capped by *timeout*; the
    same value is also passed to the owned ``httpx`` client so individual
    socket operations cannot exceed it either.

    Parameters
    ----------
    base_url:
        Registry root without trailing slash.
    http_client:
        Shared ``httpx.AsyncClient``.  When omitted the provider creates
        and owns one, and closes it in :meth:`aclose`.
    timeout:
        Hard cap in seconds on one fetch.
    """

    def __init__(
        self,
        base_url: str = _DEFAULT_BASE_URL,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = _DEFAULT_TIMEOUT,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            headers=_DEFAULT_HEADERS,
            follow_redirects=True,
        )

    async def fetch_ifsc_details(self, ifsc_code: str) -> IFSCDetails:
        """Fetch *ifsc_code* from Razorpay and normalize the payload."""
        url = f"{self._base_url}/{ifsc_code}"
        logger.info("razorpay_fetch_started", ifsc=ifsc_code)

        try:
            response = await asyncio.wait_for(self._client.get(url), timeout=self._timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.error("razorpay_fetch_timeout", ifsc=ifsc_code, timeout=self._timeout)
            raise ProviderUnavailableError(
                message=f"Timed out after {self._timeout}s fetching {ifsc_code}",
                provider_name=self.get_provider_name(),
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("razorpay_fetch_failed", ifsc=ifsc_code, error=str(exc))
            raise ProviderUnavailableError(
                message=f"Failed to fetch data for {ifsc_code}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if response.status_code == 404:
            logger.warning("razorpay_ifsc_not_found", ifsc=ifsc_code)
            raise IFSCNotFoundError(ifsc_code, provider_name=self.get_provider_name())

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "razorpay_fetch_failed",
                ifsc=ifsc_code,
                status=response.status_code,
            )
            raise ProviderUnavailableError(
                message=f"HTTP {response.status_code} fetching {ifsc_code}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if not response.content.strip():
            logger.warning("razorpay_empty_body", ifsc=ifsc_code)
            raise IFSCNotFoundError(ifsc_code, provider_name=self.get_provider_name())

        try:
            data = response.json()
        except ValueError as exc:
            logger.error("razorpay_payload_undecodable", ifsc=ifsc_code, error=str(exc))
            raise ProviderUnavailableError(
                message=f"Undecodable response for {ifsc_code}: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if not isinstance(data, dict):
            raise ProviderUnavailableError(
                message=f"Unexpected payload type {type(data).__name__} for {ifsc_code}",
                provider_name=self.get_provider_name(),
            )

        details = normalize_payload(data, ifsc_code)
        logger.info("razorpay_fetch_complete", ifsc=ifsc_code, bank=details.bank)
        return details

    def get_provider_name(self) -> str:
        return "razorpay"

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
