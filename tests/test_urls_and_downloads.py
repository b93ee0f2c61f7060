import httpx
import pytest

from supastorage.error import (
    NotFoundException,
    ObjectNotFoundException,
    StorageApiException,
    StorageDecodeException,
)

from conftest import STORAGE_URL


@pytest.mark.asyncio
async def test_signed_upload_url_is_made_absolute(make_client):
    body = {"url": "/upload/sign/abc", "token": "tok"}
    client, transport = make_client(lambda request: httpx.Response(200, json=body))

    async with client:
        signed = await client.from_("docs").create_signed_url_for_upload("a/b.txt", 60)

    assert transport.last.method == "POST"
    assert str(transport.last.url) == f"{STORAGE_URL}/object/upload/sign/docs/a/b.txt"
    assert transport.last_json() == {"expiresIn": 60}
    assert signed.signed_url == f"{STORAGE_URL}/upload/sign/abc"
    assert signed.token == "tok"


@pytest.mark.asyncio
async def test_signed_download_url_is_made_absolute(make_client):
    body = {"signedURL": "/object/sign/docs/a.txt?token=xyz"}
    client, transport = make_client(lambda request: httpx.Response(200, json=body))

    async with client:
        signed = await client.from_("docs").create_signed_url_for_download("a.txt", 3600)

    assert str(transport.last.url) == f"{STORAGE_URL}/object/sign/docs/a.txt"
    assert transport.last_json() == {"expiresIn": 3600}
    assert signed.signed_url == f"{STORAGE_URL}/object/sign/docs/a.txt?token=xyz"


@pytest.mark.asyncio
async def test_signed_url_error_raises_service_error(make_client):
    body = {"statusCode": "400", "error": "invalid_expiry", "message": "expiresIn must be positive"}
    client, _ = make_client(lambda request: httpx.Response(400, json=body))

    async with client:
        with pytest.raises(StorageApiException) as info:
            await client.from_("docs").create_signed_url_for_download("a.txt", -1)

    assert info.value.status == 400


@pytest.mark.asyncio
async def test_public_url_makes_no_request(make_client):
    client, transport = make_client(lambda request: httpx.Response(500))

    async with client:
        url = client.from_("bucket1").get_public_url("a/b.png")

    assert url == f"{STORAGE_URL}/object/public/bucket1/a/b.png"
    assert len(transport.requests) == 0


@pytest.mark.asyncio
async def test_download_returns_raw_bytes(make_client):
    client, transport = make_client(lambda request: httpx.Response(200, content=b"\x00\x01binary"))

    async with client:
        data = await client.from_("docs").download("a.bin")

    assert transport.last.method == "GET"
    assert str(transport.last.url) == f"{STORAGE_URL}/object/authenticated/docs/a.bin"
    assert data == b"\x00\x01binary"


@pytest.mark.asyncio
async def test_download_missing_object_raises_not_found(make_client):
    body = {"statusCode": "404", "error": "not_found", "message": "Object not found"}
    client, _ = make_client(lambda request: httpx.Response(404, json=body))

    async with client:
        with pytest.raises(ObjectNotFoundException) as info:
            await client.from_("docs").download("missing.txt")

    assert info.value.message == "Object not found"


@pytest.mark.asyncio
async def test_download_forbidden_raises_generic_service_error(make_client):
    body = {"statusCode": "403", "error": "Unauthorized", "message": "new row violates row-level security policy"}
    client, _ = make_client(lambda request: httpx.Response(403, json=body))

    async with client:
        with pytest.raises(StorageApiException) as info:
            await client.from_("docs").download("secret.txt")

    assert not isinstance(info.value, NotFoundException)
    assert info.value.status_code == "403"
    assert info.value.to_dict() == body


@pytest.mark.asyncio
async def test_download_non_json_error_keeps_http_status(make_client):
    client, _ = make_client(lambda request: httpx.Response(502, text="Bad Gateway"))

    async with client:
        with pytest.raises(StorageApiException) as info:
            await client.from_("docs").download("a.txt")

    assert info.value.status_code == "502"
    assert info.value.message == "Bad Gateway"


@pytest.mark.asyncio
async def test_file_metadata_reads_content_type_header(make_client):
    client, transport = make_client(
        lambda request: httpx.Response(200, headers={"Content-Type": "image/png"}, content=b"not json")
    )

    async with client:
        metadata = await client.from_("img").get_file_metadata("a.png")

    assert str(transport.last.url) == f"{STORAGE_URL}/object/info/authenticated/img/a.png"
    assert metadata.media_type == "image/png"


@pytest.mark.asyncio
async def test_file_metadata_missing_object_raises_not_found(make_client):
    body = {"statusCode": "404", "error": "not_found", "message": "Object not found"}
    client, _ = make_client(lambda request: httpx.Response(400, json=body))

    async with client:
        with pytest.raises(ObjectNotFoundException):
            await client.from_("img").get_file_metadata("missing.png")


@pytest.mark.asyncio
async def test_signed_url_with_unexpected_body_raises_decode_error(make_client):
    client, _ = make_client(lambda request: httpx.Response(200, content=b"<html></html>"))

    async with client:
        with pytest.raises(StorageDecodeException):
            await client.from_("docs").create_signed_url_for_upload("a.txt", 60)


@pytest.mark.asyncio
async def test_signed_upload_url_missing_url_raises_decode_error(make_client):
    client, _ = make_client(lambda request: httpx.Response(200, json={"token": "tok"}))

    async with client:
        with pytest.raises(StorageDecodeException) as info:
            await client.from_("docs").create_signed_url_for_upload("a.txt", 60)

    assert info.value.status_code == "200"
    assert info.value.body == {"token": "tok"}


@pytest.mark.asyncio
async def test_signed_download_url_missing_signed_url_raises_decode_error(make_client):
    client, _ = make_client(lambda request: httpx.Response(200, json={"unexpected": "x"}))

    async with client:
        with pytest.raises(StorageDecodeException, match="signedURL"):
            await client.from_("docs").create_signed_url_for_download("a.txt", 60)


@pytest.mark.asyncio
async def test_signed_download_url_non_string_raises_decode_error(make_client):
    client, _ = make_client(lambda request: httpx.Response(200, json={"signedURL": 42}))

    async with client:
        with pytest.raises(StorageDecodeException):
            await client.from_("docs").create_signed_url_for_download("a.txt", 60)
