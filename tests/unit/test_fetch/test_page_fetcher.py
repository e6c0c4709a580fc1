"""Unit tests for the page fetcher."""

import gzip
import json
from collections.abc import Callable

import httpx
import pytest

from topquestions.errors import DecodeError, ErrorClass, TransportError
from topquestions.fetch.client import PageFetcher
from topquestions.fetch.config import FetchConfig
from topquestions.fetch.models import SearchParameters
from tests.helpers.items import item_json
from tests.helpers.time import FIXED_NOW


def _response_body(
    has_more: bool = False,
    items: list[dict[str, object]] | None = None,
) -> dict[str, object]:
    """Create a search response body."""
    return {
        "items": items if items is not None else [item_json(1, 10), item_json(2, 20)],
        "has_more": has_more,
        "quota_max": 300,
        "quota_remaining": 298,
    }


def _fetcher(
    handler: Callable[[httpx.Request], httpx.Response],
    config: FetchConfig | None = None,
) -> PageFetcher:
    """Create a fetcher backed by a mock transport."""
    return PageFetcher(
        config=config,
        run_id="test",
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def params() -> SearchParameters:
    """Create standard search parameters."""
    return SearchParameters.for_window("git", "go", FIXED_NOW)


class TestPageFetcherSuccess:
    """Tests for successful fetches."""

    def test_decodes_plain_json(self, params: SearchParameters) -> None:
        """Test decoding an uncompressed JSON body."""
        fetcher = _fetcher(
            lambda request: httpx.Response(200, json=_response_body(has_more=True))
        )

        page = fetcher.fetch(params, 1)

        assert [item.question_id for item in page.items] == [1, 2]
        assert page.has_more is True
        assert page.quota_remaining == 298

    def test_sends_query_and_headers(self, params: SearchParameters) -> None:
        """Test request URL, query parameters and headers."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_response_body())

        _fetcher(handler).fetch(params, 4)

        request = seen[0]
        assert request.method == "GET"
        assert request.url.host == "api.stackexchange.com"
        assert request.url.path == "/2.3/search"
        assert request.url.params["page"] == "4"
        assert request.url.params["intitle"] == "git"
        assert request.url.params["tagged"] == "go"
        assert request.url.params["pagesize"] == "100"
        assert request.url.params["site"] == "stackoverflow"
        assert request.headers["accept-encoding"] == "gzip"

    def test_decodes_content_encoding_gzip(self, params: SearchParameters) -> None:
        """Test a body declared as gzip by Content-Encoding."""
        body = gzip.compress(json.dumps(_response_body()).encode())
        fetcher = _fetcher(
            lambda request: httpx.Response(
                200, content=body, headers={"Content-Encoding": "gzip"}
            )
        )

        page = fetcher.fetch(params, 1)

        assert len(page.items) == 2

    def test_decodes_raw_gzip_payload(self, params: SearchParameters) -> None:
        """Test a gzip payload sent without Content-Encoding."""
        body = gzip.compress(json.dumps(_response_body()).encode())
        fetcher = _fetcher(lambda request: httpx.Response(200, content=body))

        page = fetcher.fetch(params, 1)

        assert len(page.items) == 2

    def test_uses_configured_base_url(self, params: SearchParameters) -> None:
        """Test that the base URL comes from config."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=_response_body())

        config = FetchConfig(base_url="https://example.test/search")
        _fetcher(handler, config).fetch(params, 1)

        assert seen[0].url.host == "example.test"


class TestPageFetcherTransportErrors:
    """Tests for transport failures."""

    @pytest.mark.parametrize("status_code", [400, 404, 500, 502])
    def test_non_2xx_raises_transport_error(
        self, params: SearchParameters, status_code: int
    ) -> None:
        """Test that non-success statuses fail without retry."""
        calls: list[int] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(1)
            return httpx.Response(status_code, json={"error_id": 1})

        with pytest.raises(TransportError) as exc_info:
            _fetcher(handler).fetch(params, 2)

        assert exc_info.value.status_code == status_code
        assert exc_info.value.page == 2
        assert exc_info.value.error_class == ErrorClass.TRANSPORT
        assert len(calls) == 1

    def test_connect_error(self, params: SearchParameters) -> None:
        """Test that connection failures raise TransportError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        with pytest.raises(TransportError, match="Connection refused"):
            _fetcher(handler).fetch(params, 1)

    def test_timeout(self, params: SearchParameters) -> None:
        """Test that timeouts raise TransportError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(TransportError, match="timed out"):
            _fetcher(handler).fetch(params, 1)

    def test_response_size_limit(self, params: SearchParameters) -> None:
        """Test that oversize responses are rejected."""
        body = json.dumps(_response_body()).encode() + b" " * 2048
        config = FetchConfig(max_response_size_bytes=1024)
        fetcher = _fetcher(lambda request: httpx.Response(200, content=body), config)

        with pytest.raises(TransportError, match="exceeds limit"):
            fetcher.fetch(params, 1)

    @pytest.mark.parametrize("content_length", ["abc", "-5", "12.5"])
    def test_malformed_content_length(
        self, params: SearchParameters, content_length: str
    ) -> None:
        """Test that an unparsable Content-Length raises TransportError."""
        fetcher = _fetcher(
            lambda request: httpx.Response(
                200,
                content=json.dumps(_response_body()).encode(),
                headers={"Content-Length": content_length},
            )
        )

        with pytest.raises(TransportError, match="Malformed Content-Length"):
            fetcher.fetch(params, 1)


class TestPageFetcherDecodeErrors:
    """Tests for undecodable bodies."""

    def test_invalid_json(self, params: SearchParameters) -> None:
        """Test that a non-JSON body raises DecodeError."""
        fetcher = _fetcher(lambda request: httpx.Response(200, content=b"<html>"))

        with pytest.raises(DecodeError) as exc_info:
            fetcher.fetch(params, 1)

        assert exc_info.value.error_class == ErrorClass.DECODE
        assert exc_info.value.context == "<html>"

    def test_json_not_an_object(self, params: SearchParameters) -> None:
        """Test that a JSON array body raises DecodeError."""
        fetcher = _fetcher(lambda request: httpx.Response(200, json=[1, 2]))

        with pytest.raises(DecodeError, match="Expected JSON object"):
            fetcher.fetch(params, 1)

    def test_schema_mismatch(self, params: SearchParameters) -> None:
        """Test that an item missing required fields raises DecodeError."""
        body = _response_body(items=[{"question_id": 1, "is_answered": False}])
        fetcher = _fetcher(lambda request: httpx.Response(200, json=body))

        with pytest.raises(DecodeError) as exc_info:
            fetcher.fetch(params, 1)

        assert exc_info.value.field is not None
        assert exc_info.value.field.startswith("items.0.")

    @pytest.mark.parametrize(
        "body",
        [
            {"error_id": 502, "error_name": "throttle_violation"},
            {},
            {"items": []},
            {"has_more": False},
        ],
    )
    def test_missing_page_fields(
        self, params: SearchParameters, body: dict[str, object]
    ) -> None:
        """Test that a 2xx body without items or has_more raises DecodeError."""
        fetcher = _fetcher(lambda request: httpx.Response(200, json=body))

        with pytest.raises(DecodeError) as exc_info:
            fetcher.fetch(params, 1)

        assert exc_info.value.field in {"items", "has_more"}

    def test_corrupt_gzip_payload(self, params: SearchParameters) -> None:
        """Test that a truncated gzip payload raises DecodeError."""
        body = gzip.compress(json.dumps(_response_body()).encode())[:20]
        fetcher = _fetcher(lambda request: httpx.Response(200, content=body))

        with pytest.raises(DecodeError, match="decompress"):
            fetcher.fetch(params, 1)

    def test_corrupt_content_encoding(self, params: SearchParameters) -> None:
        """Test that a body failing Content-Encoding decoding raises DecodeError."""
        fetcher = _fetcher(
            lambda request: httpx.Response(
                200, content=b"not gzip at all", headers={"Content-Encoding": "gzip"}
            )
        )

        with pytest.raises(DecodeError, match="decompress"):
            fetcher.fetch(params, 1)
