import asyncio
import base64
import logging
import httpx
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

from app.core.config import Settings, MIN_REQUEST_DELAY_SECONDS
from app.core.exceptions import WholeCellAPIError, WholeCellConfigError

logger = logging.getLogger(__name__)


@dataclass
class WholeCellPage:
    records: List[Dict[str, Any]] = field(default_factory=list)
    page: int = 1
    total_pages: int = 1


class WholeCellClient:
    """
    Asynchronous client for the WholeCell inventory API (v1).

    Handles HTTP Basic authentication from the app key/secret and provides:
        - Paged inventory fetches (fetch_page) with optional status and
          updated-since filters.
        - Full fetches across all pages (fetch_all), paced to stay under the
          WholeCell limit of 2 requests per second.
        - Per-item photo lookups (fetch_photos).

    Credentials are checked lazily, on the first request, so a missing key
    surfaces as WholeCellConfigError rather than a generic HTTP failure.
    """

    DEFAULT_BASE_URL = "https://api.wholecell.io/api/v1"
    UPDATED_SINCE_PARAM = "updated_since"

    def __init__(
        self,
        app_key: Optional[str],
        app_secret: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        request_delay: float = MIN_REQUEST_DELAY_SECONDS,
        timeout: float = 30.0,
    ):
        self.app_key = app_key
        self.app_secret = app_secret
        self.base_url = base_url.rstrip('/')
        self.request_delay = max(request_delay, MIN_REQUEST_DELAY_SECONDS)
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "WholeCellClient":
        return cls(
            app_key=settings.WHOLECELL_APP_KEY,
            app_secret=settings.WHOLECELL_APP_SECRET,
            base_url=settings.WHOLECELL_BASE_URL,
            request_delay=settings.WHOLECELL_REQUEST_DELAY_SECONDS,
            timeout=settings.WHOLECELL_TIMEOUT,
        )

    def check_credentials(self) -> None:
        """Raise WholeCellConfigError naming every missing credential setting."""
        missing = []
        if not self.app_key:
            missing.append("WHOLECELL_APP_KEY")
        if not self.app_secret:
            missing.append("WHOLECELL_APP_SECRET")
        if missing:
            raise WholeCellConfigError(missing)

    def _get_headers(self) -> Dict[str, str]:
        """Get headers for API requests"""
        self.check_credentials()
        credentials = base64.b64encode(f"{self.app_key}:{self.app_secret}".encode()).decode()
        return {
            "Authorization": f"Basic {credentials}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _make_request(self, endpoint: str, params: Optional[Dict] = None) -> httpx.Response:
        """
        Make a GET request to the WholeCell API.

        Args:
            endpoint: API endpoint (without base URL)
            params: Query parameters

        Returns:
            httpx.Response: the raw response, status not yet checked

        Raises:
            WholeCellConfigError: If credentials are missing
            WholeCellAPIError: On network errors or timeouts
        """
        headers = self._get_headers()
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        logger.debug(f"GET {url} params={params}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await client.get(url, headers=headers, params=params)
        except httpx.TimeoutException as e:
            logger.error(f"WholeCell timeout: {str(e)}")
            raise WholeCellAPIError(f"WholeCell request timed out: {str(e)}") from e
        except httpx.RequestError as e:
            logger.error(f"WholeCell network error: {str(e)}")
            raise WholeCellAPIError(f"WholeCell network error: {str(e)}") from e

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.status_code < 200 or response.status_code >= 300:
            text = response.text
            logger.error(f"WholeCell API error {response.status_code}: {text[:500]}")
            raise WholeCellAPIError(
                f"WholeCell API error: {response.status_code} - {text}",
                status_code=response.status_code,
                body=text,
            )

    async def fetch_page(
        self,
        page: int = 1,
        status: Optional[str] = None,
        updated_since: Optional[str] = None,
    ) -> WholeCellPage:
        """
        Fetch one page of inventories.

        Args:
            page: 1-based page number
            status: WholeCell status filter, e.g. "Needs eBay Draft"
            updated_since: Only return records modified at or after this instant

        Returns:
            WholeCellPage with the page's records and the total page count
        """
        params: Dict[str, Any] = {"page": str(page)}
        if status:
            params["status"] = status
        if updated_since:
            params[self.UPDATED_SINCE_PARAM] = updated_since

        response = await self._make_request("/inventories", params=params)
        self._raise_for_status(response)

        payload = response.json()
        return WholeCellPage(
            records=payload.get("data") or [],
            page=int(payload.get("page") or page),
            total_pages=int(payload.get("pages") or 1),
        )

    async def fetch_all(
        self,
        status: Optional[str] = None,
        updated_since: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Fetch every page of inventories, in order.

        Sleeps request_delay seconds between page requests. A failure on any
        page propagates; a partial list is never returned.
        """
        all_records: List[Dict[str, Any]] = []
        current_page = 1
        total_pages = 1

        while True:
            result = await self.fetch_page(current_page, status=status, updated_since=updated_since)
            all_records.extend(result.records)
            total_pages = result.total_pages
            logger.debug(f"WholeCell page {current_page}/{total_pages}: {len(result.records)} records")

            current_page += 1
            if current_page > total_pages:
                break
            await asyncio.sleep(self.request_delay)

        logger.info(f"Fetched {len(all_records)} WholeCell records across {total_pages} page(s)")
        return all_records

    async def fetch_photos(self, inventory_id: int) -> List[Dict[str, Any]]:
        """Photos WholeCell holds for one inventory record. Unknown records have none."""
        response = await self._make_request(f"/inventories/{inventory_id}/photos")
        if response.status_code == 404:
            return []
        self._raise_for_status(response)
        return response.json().get("photos") or []
