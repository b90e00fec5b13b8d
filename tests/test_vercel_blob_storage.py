import aiohttp
import pytest

from bitebyte.exceptions import RemoteDeleteFailed, StorageDegraded, StorageFailed
from bitebyte.infrastructure.storage.vercel_blob_storage import VercelBlobStorage


class FakeResponse:
    def __init__(self, status=200, payload=None, body=""):
        self.status = status
        self.payload = payload or {}
        self.body = body

    async def json(self):
        return self.payload

    async def text(self):
        return self.body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse()
        self.error = error
        self.requests = []

    def _request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response

    def put(self, url, **kwargs):
        return self._request("PUT", url, **kwargs)

    def post(self, url, **kwargs):
        return self._request("POST", url, **kwargs)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


def make_storage(session, token="vercel_blob_rw_token"):
    return VercelBlobStorage(token=token, session_factory=lambda: session)


@pytest.mark.asyncio
async def test_put_uploads_and_returns_url():
    url = "https://abc.public.blob.vercel-storage.com/screenshots/r1-1-a.jpg"
    session = FakeSession(FakeResponse(payload={"url": url}))
    storage = make_storage(session)

    result = await storage.put("screenshots/r1-1-a.jpg", b"bytes", "image/jpeg")

    assert result == url
    method, request_url, kwargs = session.requests[0]
    assert method == "PUT"
    assert request_url == "https://blob.vercel-storage.com/screenshots/r1-1-a.jpg"
    assert kwargs["data"] == b"bytes"
    assert kwargs["headers"]["authorization"] == "Bearer vercel_blob_rw_token"
    assert kwargs["headers"]["x-content-type"] == "image/jpeg"


@pytest.mark.asyncio
async def test_put_without_token_is_degraded():
    session = FakeSession()
    storage = make_storage(session, token="")
    assert storage.configured is False
    with pytest.raises(StorageDegraded):
        await storage.put("k", b"bytes", "image/jpeg")
    assert session.requests == []


@pytest.mark.asyncio
async def test_put_rejected_by_service():
    storage = make_storage(FakeSession(FakeResponse(status=403, body="forbidden")))
    with pytest.raises(StorageFailed, match="403"):
        await storage.put("k", b"bytes", "image/jpeg")


@pytest.mark.asyncio
async def test_put_transport_error():
    storage = make_storage(FakeSession(error=aiohttp.ClientConnectionError("reset")))
    with pytest.raises(StorageFailed):
        await storage.put("k", b"bytes", "image/jpeg")


@pytest.mark.asyncio
async def test_delete_posts_key():
    session = FakeSession()
    storage = make_storage(session)
    await storage.delete("screenshots/r1-1-a.jpg")
    method, request_url, kwargs = session.requests[0]
    assert (method, request_url) == ("POST", "https://blob.vercel-storage.com/delete")
    assert kwargs["json"] == {"urls": ["screenshots/r1-1-a.jpg"]}


@pytest.mark.asyncio
async def test_delete_failures_raise_remote_delete_failed():
    with pytest.raises(RemoteDeleteFailed):
        await make_storage(FakeSession(FakeResponse(status=500))).delete("k")
    with pytest.raises(RemoteDeleteFailed):
        await make_storage(FakeSession(error=aiohttp.ClientConnectionError("reset"))).delete("k")


def test_key_for_only_matches_blob_urls():
    storage = make_storage(FakeSession())
    assert storage.key_for("https://abc.public.blob.vercel-storage.com/screenshots/a%20b.jpg") == "screenshots/a b.jpg"
    assert storage.key_for("data:image/jpeg;base64,AAAA") is None
    assert storage.key_for("https://example.com/screenshots/a.jpg") is None
