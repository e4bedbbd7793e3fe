from __future__ import annotations
import logging
import httpx
import pytest
from modgate.errors import NotFoundError, UpstreamError
from modgate.services.photos import ResolvedPhoto

JPEG = b"\xff\xd8\xff\xe0" + bytes(range(256)) * 64 + b"\xff\xd9"


@pytest.mark.asyncio
async def test_photo_passthrough(client, telegram):
    telegram.add_file("AgAD-photo", JPEG, content_type="image/jpeg")
    r = await client.get("/photo/AgAD-photo")
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/jpeg"
    assert r.content == JPEG


@pytest.mark.asyncio
async def test_photo_content_type_is_not_rewritten(client, telegram):
    telegram.add_file("AgAD-doc", b"RIFF....WEBP", content_type="image/webp")
    r = await client.get("/photo/AgAD-doc")
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/webp"
    assert r.content == b"RIFF....WEBP"


@pytest.mark.asyncio
async def test_unknown_reference_is_404(client, telegram):
    r = await client.get("/photo/never-uploaded")
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"
    assert telegram.get_file_calls == ["never-uploaded"]


@pytest.mark.asyncio
async def test_every_fetch_resolves_again(client, telegram):
    telegram.add_file("AgAD-photo", JPEG)
    assert (await client.get("/photo/AgAD-photo")).status_code == 200

    # the first path has expired; a cached path would now 404
    telegram.rotate_path("AgAD-photo")
    r = await client.get("/photo/AgAD-photo")
    assert r.status_code == 200
    assert r.content == JPEG
    assert telegram.get_file_calls == ["AgAD-photo", "AgAD-photo"]


@pytest.mark.asyncio
async def test_lookup_server_error_is_500(client, telegram):
    telegram.add_file("AgAD-photo", JPEG)
    telegram.get_file_status = 502
    r = await client.get("/photo/AgAD-photo")
    assert r.status_code == 500
    assert r.json()["error"] == "upstream_error"


@pytest.mark.asyncio
async def test_download_errors(app, telegram):
    resolver = app.state.gateway.resolver
    telegram.add_file("AgAD-photo", JPEG)

    telegram.download_status = 404
    with pytest.raises(NotFoundError):
        await resolver.resolve("AgAD-photo")

    telegram.download_status = 503
    with pytest.raises(UpstreamError):
        await resolver.resolve("AgAD-photo")


@pytest.mark.asyncio
async def test_error_detail_does_not_leak_token(client, telegram):
    telegram.get_file_status = 500
    r = await client.get("/photo/whatever")
    assert "test-bot-token" not in r.text


@pytest.mark.asyncio
async def test_bot_token_stays_out_of_logs(client, auth, telegram, listing, caplog):
    telegram.add_file("abc123", JPEG)
    with caplog.at_level(logging.DEBUG):
        assert (await client.get("/photo/abc123")).status_code == 200
        sid = (await client.post("/submissions", headers=auth, json=listing())).json()["id"]
        assert (await client.post(f"/submissions/{sid}/approve")).status_code == 200
    assert telegram.sent
    for record in caplog.records:
        assert "test-bot-token" not in record.getMessage()


class DroppedConnection(httpx.AsyncByteStream):
    def __init__(self):
        self.closed = False

    async def __aiter__(self):
        yield b"\xff\xd8"
        raise httpx.ReadError("connection reset")

    async def aclose(self):
        self.closed = True


@pytest.mark.asyncio
async def test_stream_is_closed_when_upstream_drops_mid_body():
    stream = DroppedConnection()
    response = httpx.Response(
        200,
        headers={"content-type": "image/jpeg"},
        stream=stream,
        request=httpx.Request("GET", "https://api.telegram.org/file/photos/file_1.jpg"),
    )
    photo = ResolvedPhoto(content_type="image/jpeg", response=response)

    chunks = []
    with pytest.raises(httpx.ReadError):
        async for chunk in photo.iter_bytes():
            chunks.append(chunk)
    assert chunks == [b"\xff\xd8"]
    assert stream.closed
    assert response.is_closed
