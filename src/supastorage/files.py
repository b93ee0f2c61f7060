"""
Object operations scoped to a single bucket
"""

import logging
import re
from typing import AsyncIterable, AsyncIterator, BinaryIO, List, Optional, Union

from ._http import HttpClient, RequestContent, decode_json, error_from_response
from .error import ObjectNotFoundException, StorageDecodeException
from .models import (
    FileMetadata,
    FileObject,
    FileResponse,
    FileSearchOptions,
    FileUploadOptions,
    SignedDownloadURL,
    SignedUploadURL,
)

UploadData = Union[bytes, str, BinaryIO, AsyncIterable[bytes]]

_DOUBLED_SEPARATOR = re.compile(r"/{2,}")


def remove_empty_folder(file_path: str) -> str:
    """Collapse runs of ``/`` left behind by joining a bucket id and a path."""
    return _DOUBLED_SEPARATOR.sub("/", file_path)


def _signed_path(body: dict, key: str) -> str:
    value = body.get(key)
    if not isinstance(value, str) or not value:
        raise StorageDecodeException(f"Response is missing a '{key}' string", http_status=200, body=body)
    return value


async def _iter_chunks(data: BinaryIO, chunk_size: int) -> AsyncIterator[bytes]:
    while True:
        chunk = data.read(chunk_size)
        if not chunk:
            break
        yield chunk


class StorageFileApi:
    """
    Object operations for one bucket.

    Obtained from ``StorageClient.from_``:

        files = client.from_("avatars")
        with open("me.png", "rb") as f:
            await files.upload("users/me.png", f, FileUploadOptions(content_type="image/png"))
        data = await files.download("users/me.png")
    """

    def __init__(self, bucket_id: str, http: HttpClient):
        self.bucket_id = bucket_id
        self._http = http
        self._logger = logging.getLogger(__name__)

    def __repr__(self) -> str:
        return f"StorageFileApi(bucket_id='{self.bucket_id}')"

    def _object_path(self, route: str, path: str) -> str:
        return f"/object/{route}/{self.bucket_id}/{path}"

    def _absolute_url(self, relative: str) -> str:
        # The service answers with a path relative to the storage root that
        # already starts with a slash.
        return f"{self._http.config.storage_url}{relative}"

    def _request_content(self, data: UploadData) -> RequestContent:
        if isinstance(data, (bytes, str)):
            return data
        if hasattr(data, "read"):
            return _iter_chunks(data, self._http.config.chunk_size)
        return data

    # Upload

    async def upload_or_update(
        self,
        path: str,
        data: UploadData,
        update: bool = False,
        options: Optional[FileUploadOptions] = None,
        timeout: Optional[float] = None,
    ) -> FileResponse:
        """
        Send ``data`` to ``path``, creating the object (POST) or replacing it (PUT).

        File-like inputs are streamed in ``chunk_size`` pieces.
        """
        headers = (options or FileUploadOptions()).to_headers()
        object_path = remove_empty_folder(f"{self.bucket_id}/{path}")
        body = await self._http.send(
            "PUT" if update else "POST",
            f"/object/{object_path}",
            expected=dict,
            not_found=ObjectNotFoundException,
            headers=headers,
            content=self._request_content(data),
            timeout=timeout,
        )
        return FileResponse.from_dict(body)

    async def upload(
        self,
        path: str,
        data: UploadData,
        options: Optional[FileUploadOptions] = None,
        timeout: Optional[float] = None,
    ) -> FileResponse:
        """Upload a new object."""
        return await self.upload_or_update(path, data, False, options, timeout=timeout)

    async def update(
        self,
        path: str,
        data: UploadData,
        options: Optional[FileUploadOptions] = None,
        timeout: Optional[float] = None,
    ) -> FileResponse:
        """Replace an existing object."""
        return await self.upload_or_update(path, data, True, options, timeout=timeout)

    # Move / copy

    def _transfer_body(self, from_path: str, to_path: str) -> dict:
        return {
            "bucketId": self.bucket_id,
            "sourceKey": from_path,
            "destinationKey": to_path,
        }

    async def move(self, from_path: str, to_path: str, timeout: Optional[float] = None) -> FileResponse:
        """Move an object within the bucket."""
        body = await self._http.send(
            "POST",
            "/object/move",
            expected=dict,
            not_found=ObjectNotFoundException,
            json=self._transfer_body(from_path, to_path),
            timeout=timeout,
        )
        return FileResponse.from_dict(body)

    async def copy(self, from_path: str, to_path: str, timeout: Optional[float] = None) -> FileResponse:
        """Copy an object within the bucket."""
        body = await self._http.send(
            "POST",
            f"/object/copy/{self.bucket_id}",
            expected=dict,
            not_found=ObjectNotFoundException,
            json=self._transfer_body(from_path, to_path),
            timeout=timeout,
        )
        return FileResponse.from_dict(body)

    # Listing / removal

    async def list(
        self,
        prefix: str = "",
        options: Optional[FileSearchOptions] = None,
        timeout: Optional[float] = None,
    ) -> List[FileObject]:
        """List objects under ``prefix`` in the order the service returns them."""
        body = await self._http.send(
            "POST",
            f"/object/list/{self.bucket_id}",
            expected=list,
            not_found=ObjectNotFoundException,
            headers={"Content-Type": "application/json"},
            json=(options or FileSearchOptions()).to_request(prefix),
            timeout=timeout,
        )
        return [FileObject.from_dict(item) for item in body]

    async def remove(self, path: str, timeout: Optional[float] = None) -> None:
        """Delete a single object."""
        await self._http.send(
            "DELETE",
            f"/object/{self.bucket_id}/{path}",
            not_found=ObjectNotFoundException,
            timeout=timeout,
        )

    async def bulk_remove(self, paths: List[str], timeout: Optional[float] = None) -> FileResponse:
        """
        Delete several objects at once.

        Returns an empty ``FileResponse`` when the service answers 200. Any
        other status is not raised, the ``{key, message}`` body is returned.
        """
        response = await self._http.request(
            "DELETE",
            f"/object/{self.bucket_id}",
            headers={"Content-Type": "application/json"},
            json={"prefixes": list(paths)},
            timeout=timeout,
        )
        if response.status_code == 200:
            return FileResponse()

        body = decode_json(response, expected=dict)
        self._logger.warning(
            "[Storage][BulkRemove] bucket=%s status=%s message=%s",
            self.bucket_id,
            response.status_code,
            body.get("message"),
        )
        return FileResponse.from_dict(body)

    # URLs

    async def create_signed_url_for_upload(
        self,
        path: str,
        expires_in: int,
        timeout: Optional[float] = None,
    ) -> SignedUploadURL:
        """Create a time-limited URL that accepts an upload to ``path``."""
        body = await self._http.send(
            "POST",
            self._object_path("upload/sign", path),
            expected=dict,
            not_found=ObjectNotFoundException,
            headers={"Content-Type": "application/json"},
            json={"expiresIn": expires_in},
            timeout=timeout,
        )
        signed_url = self._absolute_url(_signed_path(body, "url"))
        self._logger.info(
            "[Storage][SignedUrl] kind=upload expirySeconds=%s bucket=%s object=%s",
            expires_in,
            self.bucket_id,
            path,
        )
        return SignedUploadURL(signed_url=signed_url, token=body.get("token"))

    async def create_signed_url_for_download(
        self,
        path: str,
        expires_in: int,
        timeout: Optional[float] = None,
    ) -> SignedDownloadURL:
        """Create a time-limited URL that serves ``path`` without credentials."""
        body = await self._http.send(
            "POST",
            self._object_path("sign", path),
            expected=dict,
            not_found=ObjectNotFoundException,
            headers={"Content-Type": "application/json"},
            json={"expiresIn": expires_in},
            timeout=timeout,
        )
        signed_url = self._absolute_url(_signed_path(body, "signedURL"))
        self._logger.info(
            "[Storage][SignedUrl] kind=download expirySeconds=%s bucket=%s object=%s",
            expires_in,
            self.bucket_id,
            path,
        )
        return SignedDownloadURL(signed_url=signed_url)

    def get_public_url(self, path: str) -> str:
        """URL of an object in a public bucket. No request is made."""
        return self._absolute_url(self._object_path("public", path))

    # Download / metadata

    async def download(self, path: str, timeout: Optional[float] = None) -> bytes:
        """Download an object's content."""
        response = await self._http.request(
            "GET",
            self._object_path("authenticated", path),
            timeout=timeout,
        )
        if response.status_code != 200:
            raise error_from_response(response, ObjectNotFoundException)
        return response.content

    async def get_file_metadata(self, path: str, timeout: Optional[float] = None) -> FileMetadata:
        """Media type of an object, read from the response headers."""
        response = await self._http.request(
            "GET",
            self._object_path("info/authenticated", path),
            timeout=timeout,
        )
        if response.status_code != 200:
            raise error_from_response(response, ObjectNotFoundException)
        return FileMetadata(media_type=response.headers.get("Content-Type"))
