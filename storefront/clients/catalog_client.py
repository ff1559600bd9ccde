"""
Catalog Source Client
Reads raw rows from the spreadsheet-backed record API.

Fetch failures never propagate: the storefront shows an empty catalog
rather than an error, so every failure is logged and the rows collected so
far are returned.
"""

from typing import Any, Dict, List, Optional, Set

import httpx

from storefront.core.config import config
from storefront.core.logger import logger
from storefront.utils.service_client import ServiceClient


class CatalogClient:
    """
    Client for the paginated record API.

    Each table is read page by page (`offset`/`limit`) until the API reports
    the last page, a short page comes back, or `max_pages` is reached.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_token: Optional[str] = None,
        page_size: Optional[int] = None,
        max_pages: Optional[int] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        token = api_token if api_token is not None else config.catalog_api_token
        self.page_size = page_size or config.catalog_page_size
        self.max_pages = max_pages or config.catalog_max_pages
        # tables whose last read stopped early on an error or the page limit
        self.incomplete_tables: Set[str] = set()
        self.http = ServiceClient(
            base_url=base_url or config.catalog_base_url,
            timeout=timeout or config.catalog_timeout_seconds,
            default_headers={"xc-token": token} if token else {},
            transport=transport,
        )

    async def fetch_records(self, table: str, view: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return every row of a table, or what was read before a failure."""
        records: List[Dict[str, Any]] = []
        endpoint = f"/api/v2/tables/{table}/records"

        for page in range(self.max_pages):
            params = {"offset": page * self.page_size, "limit": self.page_size}
            if view:
                params["viewId"] = view

            try:
                response = await self.http.get(endpoint, params=params)
                response.raise_for_status()
                body = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.error(
                    f"Catalog fetch failed for table {table}",
                    error=e,
                    metadata={"event": "catalog_fetch_error", "table": table, "page": page},
                )
                self.incomplete_tables.add(table)
                return records

            rows = body.get("list") if isinstance(body, dict) else None
            if not isinstance(rows, list):
                logger.error(
                    f"Catalog response for table {table} has no record list",
                    metadata={"event": "catalog_fetch_malformed", "table": table, "page": page},
                )
                self.incomplete_tables.add(table)
                return records

            records.extend(rows)
            if self._is_last_page(body, len(rows)):
                break
        else:
            logger.warning(
                f"Stopped reading table {table} after {self.max_pages} pages",
                metadata={"event": "catalog_fetch_truncated", "table": table},
            )
            self.incomplete_tables.add(table)
            return records

        self.incomplete_tables.discard(table)

        logger.debug(
            f"Fetched {len(records)} records from table {table}",
            metadata={"event": "catalog_fetch_complete", "table": table, "records": len(records)},
        )
        return records

    def _is_last_page(self, body: Dict[str, Any], row_count: int) -> bool:
        page_info = body.get("pageInfo")
        if isinstance(page_info, dict) and "isLastPage" in page_info:
            return bool(page_info["isLastPage"])
        return row_count < self.page_size

    async def fetch_garments(self) -> List[Dict[str, Any]]:
        return await self.fetch_records(config.catalog_garments_table, config.catalog_garments_view)

    async def fetch_accessories(self) -> List[Dict[str, Any]]:
        return await self.fetch_records(
            config.catalog_accessories_table, config.catalog_accessories_view
        )

    async def fetch_addons(self) -> List[Dict[str, Any]]:
        return await self.fetch_records(config.catalog_addons_table, config.catalog_addons_view)

    async def fetch_media(self, path: str) -> httpx.Response:
        """Fetch one stored asset by its attachment path."""
        return await self.http.get(f"/{path.lstrip('/')}")
