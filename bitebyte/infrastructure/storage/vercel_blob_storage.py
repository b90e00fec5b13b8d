import asyncio
import logging
from typing import Callable, Optional
from urllib.parse import quote, unquote, urlparse

import aiohttp

from ...application.ports.storage_repo import ObjectStorage
from ...exceptions import RemoteDeleteFailed, StorageDegraded, StorageFailed

logger = logging.getLogger(__name__)


class VercelBlobStorage(ObjectStorage):
    """Vercel Blob over its REST API. Write/delete only, reads go to the public URL."""

    def __init__(
        self,
        token: str,
        api_url: str = "https://blob.vercel-storage.com",
        api_version: str = "7",
        host_suffix: str = "blob.vercel-storage.com",
        session_factory: Callable[[], aiohttp.ClientSession] = aiohttp.ClientSession,
    ) -> None:
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.api_version = api_version
        self.host_suffix = host_suffix
        self._session_factory = session_factory

    @property
    def configured(self) -> bool:
        return bool(self.token)

    def _headers(self) -> dict:
        return {
            "authorization": f"Bearer {self.token}",
            "x-api-version": self.api_version,
        }

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        if not self.configured:
            raise StorageDegraded("BLOB_READ_WRITE_TOKEN is not available")

        headers = self._headers()
        headers["x-content-type"] = content_type
        headers["x-add-random-suffix"] = "0"
        url = f"{self.api_url}/{quote(key)}"
        logger.info(f"Attempting to store file: {key}")
        try:
            async with self._session_factory() as session:
                async with session.put(url, data=data, headers=headers) as response:
                    if response.status != 200:
                        body = await response.text()
                        raise StorageFailed(f"Failed to store image ({response.status}): {body}")
                    payload = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise StorageFailed(f"Failed to store image: {e}") from e

        blob_url = payload.get("url") if isinstance(payload, dict) else None
        if not blob_url:
            raise StorageFailed("Blob storage response did not include a URL")
        logger.info(f"File stored successfully: {blob_url}")
        return blob_url

    def key_for(self, url: str) -> Optional[str]:
        parsed = urlparse(url)
        host = parsed.hostname or ""
        if parsed.scheme not in ("http", "https") or not host.endswith(self.host_suffix):
            return None
        key = unquote(parsed.path.lstrip("/"))
        return key or None

    async def delete(self, key: str) -> None:
        if not self.configured:
            raise RemoteDeleteFailed("BLOB_READ_WRITE_TOKEN is not available")
        try:
            async with self._session_factory() as session:
                async with session.post(f"{self.api_url}/delete", json={"urls": [key]}, headers=self._headers()) as response:
                    if response.status != 200:
                        body = await response.text()
                        raise RemoteDeleteFailed(f"Could not delete {key} ({response.status}): {body}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RemoteDeleteFailed(f"Could not delete {key}: {e}") from e
