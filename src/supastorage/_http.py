"""
HTTP client utilities for the storage SDK
"""

import logging
from typing import Any, AsyncIterable, Dict, Optional, Type, Union

import httpx

from .config import ClientConfig
from .error import (
    NotFoundException,
    StorageApiException,
    StorageDecodeException,
    StorageTimeoutException,
    StorageTransportException,
)

logger = logging.getLogger(__name__)

RequestContent = Union[bytes, str, AsyncIterable[bytes]]


def decode_json(response: httpx.Response, expected: Optional[type] = None) -> Any:
    """Decode a JSON body. An empty body decodes to ``None``."""
    if not response.content:
        body = None
    else:
        try:
            body = response.json()
        except ValueError as ex:
            raise StorageDecodeException(
                f"Response body is not valid JSON: {ex}",
                http_status=response.status_code,
                body=response.text,
            ) from ex

    if expected is not None and not isinstance(body, expected):
        raise StorageDecodeException(
            f"Expected a JSON {expected.__name__}, got {type(body).__name__}",
            http_status=response.status_code,
            body=body,
        )
    return body


def error_from_response(
    response: httpx.Response,
    not_found: Type[NotFoundException] = NotFoundException,
) -> StorageApiException:
    """
    Build the exception for a failed response from its ``{statusCode, error, message}`` body.

    The service may embed a status code that differs from the HTTP one, the
    embedded value wins. Bodies that are not JSON objects fall back to the
    HTTP status and raw text.
    """
    try:
        body = response.json() if response.content else None
    except ValueError:
        body = None

    if isinstance(body, dict):
        embedded = body.get("statusCode")
        status_code = str(embedded) if embedded is not None else str(response.status_code)
        error = body.get("error") or response.reason_phrase
        message = body.get("message") or ""
    else:
        status_code = str(response.status_code)
        error = response.reason_phrase
        message = response.text

    exc_type = not_found if status_code == "404" else StorageApiException
    return exc_type(status_code, error, message, http_status=response.status_code)


class HttpClient:
    """
    HTTP client wrapper with connection pooling and bearer authentication.

    One ``httpx.AsyncClient`` is shared by every call. Nothing here changes
    after construction, so concurrent callers may share an instance.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        if transport is not None and client is not None:
            raise ValueError("Pass either transport or client, not both")
        self.config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=config.request_timeout,
            limits=httpx.Limits(
                max_connections=config.max_connections,
                max_keepalive_connections=config.max_keepalive_connections,
            ),
            transport=transport,
        )

    def url(self, path: str) -> str:
        """Resolve a route such as ``/bucket/photos`` against the storage root."""
        return f"{self.config.storage_url}{path}"

    def _headers(self, headers: Optional[Dict[str, str]]) -> Dict[str, str]:
        merged = dict(headers or {})
        merged["Authorization"] = f"Bearer {self.config.api_key}"
        return merged

    async def request(
        self,
        method: str,
        path: str,
        headers: Optional[Dict[str, str]] = None,
        json: Any = None,
        content: Optional[RequestContent] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """Make an authenticated request and return the raw response."""
        url = self.url(path)
        try:
            response = await self._client.request(
                method,
                url,
                headers=self._headers(headers),
                json=json,
                content=content,
                timeout=httpx.USE_CLIENT_DEFAULT if timeout is None else timeout,
            )
        except httpx.TimeoutException as ex:
            raise StorageTimeoutException(method, url, str(ex) or "timed out") from ex
        except (httpx.RequestError, httpx.InvalidURL) as ex:
            raise StorageTransportException(method, url, str(ex) or type(ex).__name__) from ex

        logger.debug(
            "[Storage][Http] method=%s url=%s status=%s",
            method,
            url,
            response.status_code,
        )
        return response

    async def send(
        self,
        method: str,
        path: str,
        expected: Optional[type] = None,
        not_found: Type[NotFoundException] = NotFoundException,
        **kwargs,
    ) -> Any:
        """Make a request, raise on a failure status, otherwise decode the JSON body."""
        response = await self.request(method, path, **kwargs)
        if not response.is_success:
            raise error_from_response(response, not_found)
        return decode_json(response, expected)

    async def close(self):
        """Close the HTTP client unless it was supplied by the caller."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
