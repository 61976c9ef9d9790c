from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from attraction_cms.attractions import NOT_FOUND, Found, NotFound
from attraction_cms.config.settings import Settings
from attraction_cms.services import CmsClient
from attraction_cms.services.cms_client import fetch_attraction_by_slug, list_known_slugs

BASE_URL = "https://cms.example.test"


class _RecordingHandler:
    """Serves canned CMS responses and keeps the requests it saw."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]) -> None:
        self._respond = respond
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)


def _json_handler(payload: Any, status_code: int = 200) -> _RecordingHandler:
    return _RecordingHandler(lambda request: httpx.Response(status_code, json=payload))


def _client(handler: Callable[[httpx.Request], httpx.Response], **kwargs: Any) -> CmsClient:
    return CmsClient(
        Settings(cms_base_url=BASE_URL, collection="atrakcjes"),
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


NESTED_PAYLOAD = {
    "data": [
        {
            "id": 12,
            "attributes": {
                "title": "Northern Lights Safari",
                "slug": "northern-lights",
                "priceSEK": 1495,
                "imageCover": {"data": {"id": 31, "attributes": {"url": "/uploads/aurora.jpg"}}},
            },
        }
    ],
    "meta": {"pagination": {"page": 1, "pageSize": 25, "pageCount": 1, "total": 1}},
}

FLAT_PAYLOAD = {
    "data": [
        {
            "id": 12,
            "title": "Northern Lights Safari",
            "slug": "northern-lights",
            "priceSEK": 1495,
            "imageCover": {"id": 31, "url": "/uploads/aurora.jpg"},
        }
    ],
}


@pytest.mark.asyncio
async def test_fetch_attraction_nested_shape() -> None:
    handler = _json_handler(NESTED_PAYLOAD)
    async with _client(handler) as client:
        lookup = await client.fetch_attraction_by_slug("northern-lights")

    assert isinstance(lookup, Found)
    assert lookup.record.title == "Northern Lights Safari"
    assert lookup.record.image_cover.url == "/uploads/aurora.jpg"

    request = handler.requests[0]
    assert request.method == "GET"
    assert request.url.path == "/api/atrakcjes"
    assert request.url.params["filters[slug][$eq]"] == "northern-lights"
    assert request.url.params["populate"] == "*"


@pytest.mark.asyncio
async def test_fetch_attraction_flat_and_nested_agree() -> None:
    async with _client(_json_handler(NESTED_PAYLOAD)) as client:
        nested = await client.fetch_attraction_by_slug("northern-lights")
    async with _client(_json_handler(FLAT_PAYLOAD)) as client:
        flat = await client.fetch_attraction_by_slug("northern-lights")

    assert nested == flat


@pytest.mark.asyncio
async def test_fetch_attraction_encodes_reserved_characters() -> None:
    handler = _json_handler({"data": []})
    slug = "å&b=c?d#e/f"
    async with _client(handler) as client:
        await client.fetch_attraction_by_slug(slug)

    request = handler.requests[0]
    assert request.url.params["filters[slug][$eq]"] == slug
    assert request.url.params["populate"] == "*"
    raw_query = request.url.query.decode("ascii")
    assert "&b=c" not in raw_query
    assert "#" not in raw_query


@pytest.mark.asyncio
async def test_requests_carry_revalidation_hint() -> None:
    handler = _json_handler({"data": []})
    async with _client(handler) as client:
        await client.fetch_attraction_by_slug("northern-lights")
    async with _client(handler, revalidate_seconds=60) as client:
        await client.list_known_slugs()

    assert handler.requests[0].headers["Cache-Control"] == "max-age=3600"
    assert handler.requests[1].headers["Cache-Control"] == "max-age=60"
    assert handler.requests[0].headers["Accept"] == "application/json"


@pytest.mark.asyncio
async def test_empty_result_is_not_found() -> None:
    async with _client(_json_handler({"data": []})) as client:
        lookup = await client.fetch_attraction_by_slug("missing")
    assert lookup is NOT_FOUND


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [404, 500, 503])
async def test_error_status_is_not_found(status_code: int) -> None:
    async with _client(_json_handler({"error": {"status": status_code}}, status_code=status_code)) as client:
        lookup = await client.fetch_attraction_by_slug("northern-lights")
    assert isinstance(lookup, NotFound)


@pytest.mark.asyncio
async def test_transport_failure_is_not_found() -> None:
    def _fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(_fail) as client:
        lookup = await client.fetch_attraction_by_slug("northern-lights")
    assert lookup is NOT_FOUND


@pytest.mark.asyncio
async def test_invalid_json_is_not_found() -> None:
    handler = _RecordingHandler(lambda request: httpx.Response(200, content=b"<html>Bad gateway</html>"))
    async with _client(handler) as client:
        lookup = await client.fetch_attraction_by_slug("northern-lights")
    assert lookup is NOT_FOUND


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"data": [{"id": 12, "attributes": "corrupted"}]},
        {"data": [{"attributes": {"title": "No id"}}]},
        {"data": [None]},
        {"data": {"id": 12, "title": "Single object"}},
        ["unexpected"],
    ],
)
async def test_malformed_payload_is_not_found(payload: Any) -> None:
    async with _client(_json_handler(payload)) as client:
        lookup = await client.fetch_attraction_by_slug("northern-lights")
    assert lookup is NOT_FOUND


@pytest.mark.asyncio
async def test_blank_slug_skips_request() -> None:
    handler = _json_handler(NESTED_PAYLOAD)
    async with _client(handler) as client:
        lookup = await client.fetch_attraction_by_slug("   ")
    assert lookup is NOT_FOUND
    assert handler.requests == []


@pytest.mark.asyncio
async def test_list_known_slugs_mixed_shapes() -> None:
    handler = _json_handler(
        {"data": [{"id": 1, "attributes": {"slug": "northern-lights"}}, {"id": 2, "slug": "ice-hotel"}]}
    )
    async with _client(handler) as client:
        slugs = await client.list_known_slugs()

    assert slugs == ["northern-lights", "ice-hotel"]
    assert handler.requests[0].url.params["fields[0]"] == "slug"


@pytest.mark.asyncio
async def test_list_known_slugs_degrades_to_empty() -> None:
    def _fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async with _client(_fail) as client:
        assert await client.list_known_slugs() == []
    async with _client(_json_handler({"error": "boom"}, status_code=502)) as client:
        assert await client.list_known_slugs() == []
    not_json = _RecordingHandler(lambda request: httpx.Response(200, content=b"not json"))
    async with _client(not_json) as client:
        assert await client.list_known_slugs() == []


@pytest.mark.asyncio
async def test_module_level_helpers_open_their_own_client(monkeypatch: pytest.MonkeyPatch) -> None:
    handler = _json_handler(FLAT_PAYLOAD)
    original_init = CmsClient.__init__

    def _init(self, settings=None, **kwargs):
        kwargs.setdefault("transport", httpx.MockTransport(handler))
        original_init(self, settings, **kwargs)

    monkeypatch.setattr(CmsClient, "__init__", _init)
    settings = Settings(cms_base_url=BASE_URL + "/")

    lookup = await fetch_attraction_by_slug("northern-lights", settings=settings)
    slugs = await list_known_slugs(settings=settings)

    assert isinstance(lookup, Found)
    assert slugs == ["northern-lights"]
    assert str(handler.requests[0].url).startswith(f"{BASE_URL}/api/atrakcjes?")
    assert json.loads(json.dumps(lookup.record.to_dict()))["imageCover"]["url"] == "/uploads/aurora.jpg"


@pytest.mark.asyncio
async def test_deeply_nested_body_never_escapes() -> None:
    handler = _RecordingHandler(lambda request: httpx.Response(200, content=b"[" * 200000))
    async with _client(handler) as client:
        assert await client.fetch_attraction_by_slug("northern-lights") is NOT_FOUND
        assert await client.list_known_slugs() == []
    assert len(handler.requests) == 2


@pytest.mark.asyncio
async def test_unexpected_transport_error_never_escapes() -> None:
    def _explode(request: httpx.Request) -> httpx.Response:
        raise RuntimeError("transport blew up")

    async with _client(_explode) as client:
        assert await client.fetch_attraction_by_slug("northern-lights") is NOT_FOUND
        assert await client.list_known_slugs() == []
