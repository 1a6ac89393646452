# core/utils/http.py
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import urljoin

import httpx

from core.exceptions import FetchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """
    How requests to the external site are retried.

    Attributes:
        retries: Retries after the first attempt when a response has a retryable status
        no_response_retries: Retries after the first attempt when no response arrived at all
        delay: Fixed pause between attempts, in seconds
        status_ranges: Inclusive status code ranges that trigger a retry
        methods: HTTP methods that may be retried

    Both kinds of failure draw on one count of retries per request.
    """
    retries: int = 5
    no_response_retries: int = 5
    delay: float = 0.1
    status_ranges: Tuple[Tuple[int, int], ...] = ((100, 199), (400, 429), (500, 599))
    methods: Tuple[str, ...] = ("GET", "POST", "DELETE", "PUT", "PATCH")

    def should_retry_status(self, status_code: int) -> bool:
        return any(low <= status_code <= high for low, high in self.status_ranges)

    def should_retry_method(self, method: str) -> bool:
        return method.upper() in self.methods


class MolyDownloader:
    """Async HTML downloader for moly.hu with fixed-delay retries.

    One instance is meant to be shared by every scraper of a sync run. The
    semaphore caps how many requests are in flight at once.
    """

    def __init__(self,
                 base_url: str = "https://moly.hu",
                 retry_policy: Optional[RetryPolicy] = None,
                 max_concurrency: int = 5,
                 timeout: float = 10.0,
                 client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip('/')
        self.retry_policy = retry_policy or RetryPolicy()
        self.max_concurrency = max_concurrency
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def __aenter__(self) -> "MolyDownloader":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client if this downloader created it."""
        if self._owns_client:
            await self.client.aclose()

    def absolute_url(self, url: str) -> str:
        """Resolve a site-relative link (e.g. '/konyvek/x') against the base URL."""
        return urljoin(self.base_url + '/', url)

    async def download_url(self, url: str, method: str = "GET") -> str:
        """
        Download a URL, retrying on retryable statuses and network errors.

        Args:
            url: Absolute or site-relative URL
            method: HTTP method

        Returns:
            The response body as text

        Raises:
            FetchError: If the request failed and no retries are left
        """
        url = self.absolute_url(url)
        policy = self.retry_policy
        can_retry = policy.should_retry_method(method)
        # Retries made so far, shared by network errors and retryable statuses
        attempts = 0

        async with self._semaphore:
            while True:
                try:
                    response = await self.client.request(method, url)
                except httpx.TransportError as e:
                    if not can_retry or attempts >= policy.no_response_retries:
                        logger.error(f"Failed to download {url} after {attempts + 1} attempts: {e}")
                        raise FetchError(f"Failed to download {url}: {e}", url) from e
                    attempts += 1
                    logger.warning(f"Download attempt {attempts} failed for {url} ({e}). "
                                   f"Retrying in {policy.delay} seconds.")
                    await asyncio.sleep(policy.delay)
                    continue

                if response.is_success:
                    return response.text

                retryable = can_retry and policy.should_retry_status(response.status_code)
                if not retryable or attempts >= policy.retries:
                    logger.error(f"Failed to download {url}: HTTP {response.status_code}")
                    raise FetchError(
                        f"Failed to download {url}: HTTP {response.status_code}",
                        url,
                        status_code=response.status_code,
                    )
                attempts += 1
                logger.warning(f"Download attempt {attempts} for {url} returned "
                               f"HTTP {response.status_code}. Retrying in {policy.delay} seconds.")
                await asyncio.sleep(policy.delay)
