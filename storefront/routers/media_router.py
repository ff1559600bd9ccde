"""
Media Router
Forwards attachment paths to the media store so the catalog never exposes
store credentials.
"""

from typing import Optional
from urllib.parse import unquote

import httpx
from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse, Response

from storefront.clients.catalog_client import CatalogClient
from storefront.core.config import config
from storefront.core.logger import logger

router = APIRouter()


def get_media_client() -> CatalogClient:
    return CatalogClient()


def is_media_path(path: str) -> bool:
    """Only attachment downloads may be fetched with the store token"""
    if "\\" in path or "?" in path or "#" in path:
        return False
    segments = [unquote(segment) for segment in path.split("/")]
    if any(segment in (".", "..") for segment in segments):
        return False
    return any(path.lstrip("/").startswith(prefix) for prefix in config.media_allowed_prefixes)


@router.get("/images")
async def proxy_image(
    path: Optional[str] = Query(None),
    client: CatalogClient = Depends(get_media_client),
):
    if not path:
        return PlainTextResponse("Missing path parameter", status_code=400)

    if not is_media_path(path):
        logger.warning(
            "Rejected media path outside attachment downloads",
            metadata={"event": "media_proxy_path_rejected", "path": path},
        )
        return PlainTextResponse("Invalid path parameter", status_code=400)

    try:
        upstream = await client.fetch_media(path)
    except httpx.HTTPError as e:
        logger.error(
            "Media proxy failed",
            error=e,
            metadata={"event": "media_proxy_error", "path": path},
        )
        return PlainTextResponse("Internal Server Error", status_code=500)

    if upstream.is_error:
        logger.warning(
            f"Media store responded {upstream.status_code}",
            metadata={"event": "media_proxy_upstream_error", "path": path, "status_code": upstream.status_code},
        )
        return PlainTextResponse(
            f"Error fetching image: {upstream.reason_phrase}",
            status_code=upstream.status_code,
        )

    return Response(
        content=upstream.content,
        media_type=upstream.headers.get("content-type", "image/jpeg"),
        headers={"Cache-Control": config.media_cache_control},
    )
