"""
StorageClient - bucket administration for the storage service
"""

import logging
from typing import List, Optional

import httpx

from ._http import HttpClient
from .config import ClientConfig
from .error import BucketNotFoundException
from .files import StorageFileApi
from .models import Bucket, BucketMessage, BucketOptions

_JSON_HEADERS = {"Content-Type": "application/json"}


class StorageClient:
    """
    Client for the storage REST API.

    Example:
        config = ClientConfig(
            base_url="https://project.supabase.co",
            api_key="service-role-key",
        )

        async with StorageClient(config) as client:
            await client.create_bucket(BucketOptions(id="photos", name="photos"))
            files = client.from_("photos")
            await files.upload("2024/cat.jpg", b"...")
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize StorageClient.

        Args:
            config: Connection settings. Read from the environment when omitted.
            transport: Transport for the internal httpx client (tests, proxies)
            http_client: A ready httpx.AsyncClient to use instead of creating one.
                It is not closed by ``close()`` and cannot be combined with ``transport``.
        """
        self.config = config or ClientConfig.from_env()
        self._http = HttpClient(self.config, transport=transport, client=http_client)
        self._logger = logging.getLogger(__name__)

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def from_(self, bucket_id: str) -> StorageFileApi:
        """Return a handle for object operations in ``bucket_id``."""
        return StorageFileApi(bucket_id, self._http)

    # Bucket operations

    async def create_bucket(self, options: BucketOptions, timeout: Optional[float] = None) -> Bucket:
        """Create a new bucket."""
        body = await self._http.send(
            "POST",
            "/bucket",
            expected=dict,
            not_found=BucketNotFoundException,
            headers=_JSON_HEADERS,
            json=options.to_dict(),
            timeout=timeout,
        )
        self._logger.info("[Storage][Bucket] created id=%s public=%s", options.id, options.public)
        return Bucket.from_dict(body)

    async def get_bucket(self, bucket_id: str, timeout: Optional[float] = None) -> Bucket:
        """Get a bucket by id."""
        body = await self._http.send(
            "GET",
            f"/bucket/{bucket_id}",
            expected=dict,
            not_found=BucketNotFoundException,
            headers=_JSON_HEADERS,
            timeout=timeout,
        )
        return Bucket.from_dict(body)

    async def list_buckets(self, timeout: Optional[float] = None) -> List[Bucket]:
        """List all buckets."""
        body = await self._http.send(
            "GET",
            "/bucket/",
            expected=list,
            not_found=BucketNotFoundException,
            headers=_JSON_HEADERS,
            timeout=timeout,
        )
        return [Bucket.from_dict(item) for item in body]

    async def empty_bucket(self, bucket_id: str, timeout: Optional[float] = None) -> BucketMessage:
        """Remove every object in a bucket."""
        body = await self._http.send(
            "POST",
            f"/bucket/{bucket_id}/empty",
            expected=dict,
            not_found=BucketNotFoundException,
            headers=_JSON_HEADERS,
            timeout=timeout,
        )
        return BucketMessage.from_dict(body)

    async def update_bucket(
        self,
        bucket_id: str,
        options: BucketOptions,
        timeout: Optional[float] = None,
    ) -> BucketMessage:
        """Update a bucket's name or visibility."""
        body = await self._http.send(
            "PUT",
            f"/bucket/{bucket_id}",
            expected=dict,
            not_found=BucketNotFoundException,
            headers=_JSON_HEADERS,
            json=options.to_dict(),
            timeout=timeout,
        )
        return BucketMessage.from_dict(body)

    async def delete_bucket(self, bucket_id: str, timeout: Optional[float] = None) -> Bucket:
        """Delete a bucket. The service refuses buckets that still hold objects."""
        body = await self._http.send(
            "DELETE",
            f"/bucket/{bucket_id}",
            expected=dict,
            not_found=BucketNotFoundException,
            headers=_JSON_HEADERS,
            timeout=timeout,
        )
        self._logger.info("[Storage][Bucket] deleted id=%s", bucket_id)
        return Bucket.from_dict(body)

    async def close(self) -> None:
        """Close the client and cleanup resources."""
        await self._http.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
