"""HTTP page fetcher for the search API."""

import gzip
import json
import time
import zlib
from io import BytesIO
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from topquestions.errors import DecodeError, TransportError
from topquestions.fetch.config import FetchConfig
from topquestions.fetch.constants import (
    ERROR_CONTEXT_MAX_LENGTH,
    GZIP_MAGIC,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
)
from topquestions.fetch.models import Page, SearchParameters


logger = structlog.get_logger()


class PageFetcher:
    """Fetches and decodes one page of search results per call.

    Each call performs a single GET with no retry:
    - Non-2xx status, connection, timeout and stream failures raise TransportError
    - Decompression, JSON and schema failures raise DecodeError
    """

    def __init__(
        self,
        config: FetchConfig | None = None,
        run_id: str = "",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the page fetcher.

        Args:
            config: Fetch configuration.
            run_id: Run identifier for logging.
            transport: Optional httpx transport for dependency injection.
        """
        self._config = config or FetchConfig()
        self._transport = transport
        self._log = logger.bind(component="fetch", run_id=run_id)

    def fetch(self, params: SearchParameters, page: int) -> Page:
        """Fetch and decode one page.

        Args:
            params: Search parameters shared by every page of the run.
            page: 1-based page number.

        Returns:
            Decoded Page.

        Raises:
            TransportError: If the request failed or returned non-2xx.
            DecodeError: If the body could not be decompressed or parsed.
        """
        log = self._log.bind(page=page)
        start_time_ns = time.perf_counter_ns()

        body = self._get(params.to_query(page), page)
        result = self._decode(body, page)

        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        log.info(
            "page_fetched",
            items=len(result.items),
            has_more=result.has_more,
            quota_remaining=result.quota_remaining,
            bytes=len(body),
            duration_ms=round(duration_ms, 2),
        )
        return result

    def _build_headers(self) -> dict[str, str]:
        """Build request headers.

        Returns:
            Headers dictionary.
        """
        return {
            "User-Agent": self._config.user_agent,
            "Accept": "application/json",
            "Accept-Encoding": "gzip",
        }

    def _get(self, query: dict[str, str], page: int) -> bytes:
        """Execute the GET and return the (transport-decoded) body.

        Args:
            query: Query parameters for this page.
            page: Page number, for error reporting.

        Returns:
            Response body bytes.
        """
        url = self._config.base_url
        try:
            with httpx.Client(
                timeout=self._config.timeout_seconds,
                transport=self._transport,
                follow_redirects=True,
            ) as client, client.stream(
                "GET", url, params=query, headers=self._build_headers()
            ) as response:
                status_code = response.status_code
                if not HTTP_STATUS_OK_MIN <= status_code < HTTP_STATUS_OK_MAX:
                    msg = f"Search request failed with HTTP {status_code}"
                    raise TransportError(
                        msg, page=page, status_code=status_code, url=url
                    )

                content_length = self._parse_content_length(response, page)
                if content_length is not None and content_length > (
                    self._config.max_response_size_bytes
                ):
                    msg = (
                        f"Response size {content_length} exceeds limit "
                        f"{self._config.max_response_size_bytes}"
                    )
                    raise TransportError(
                        msg, page=page, status_code=status_code, url=url
                    )

                return self._read_body_with_limit(response, page)

        except httpx.DecodingError as e:
            msg = f"Failed to decompress response body: {e}"
            raise DecodeError(msg, page=page) from e

        except httpx.TimeoutException as e:
            msg = f"Request timed out: {e}"
            raise TransportError(msg, page=page, url=url) from e

        except httpx.HTTPError as e:
            msg = f"Request failed: {e}"
            raise TransportError(msg, page=page, url=url) from e

    def _parse_content_length(self, response: httpx.Response, page: int) -> int | None:
        """Parse the Content-Length header.

        Args:
            response: Streaming HTTP response.
            page: Page number, for error reporting.

        Returns:
            Declared body length, or None when the header is absent.

        Raises:
            TransportError: If the header is not a non-negative integer.
        """
        value = response.headers.get("content-length")
        if value is None:
            return None
        try:
            length = int(value)
        except ValueError:
            length = -1
        if length < 0:
            msg = f"Malformed Content-Length header: {value!r}"
            raise TransportError(msg, page=page, status_code=response.status_code)
        return length

    def _read_body_with_limit(self, response: httpx.Response, page: int) -> bytes:
        """Read response body with size limit.

        Args:
            response: Streaming HTTP response.
            page: Page number, for error reporting.

        Returns:
            Response body bytes.

        Raises:
            TransportError: If the size limit was exceeded.
        """
        buffer = BytesIO()
        total_read = 0
        max_size = self._config.max_response_size_bytes

        for chunk in response.iter_bytes():
            total_read += len(chunk)
            if total_read > max_size:
                msg = (
                    f"Response size exceeded limit of {max_size} bytes "
                    f"(read {total_read} bytes)"
                )
                raise TransportError(
                    msg, page=page, status_code=response.status_code
                )
            buffer.write(chunk)

        return buffer.getvalue()

    def _decode(self, body: bytes, page: int) -> Page:
        """Decompress, parse and validate a page body.

        Args:
            body: Body bytes, possibly still gzip-compressed.
            page: Page number, for error reporting.

        Returns:
            Validated Page.

        Raises:
            DecodeError: If any decoding step fails.
        """
        # Some proxies strip Content-Encoding but keep the gzip payload
        if body.startswith(GZIP_MAGIC):
            try:
                body = gzip.decompress(body)
            except (OSError, EOFError, zlib.error) as e:
                msg = f"Failed to decompress gzip body: {e}"
                raise DecodeError(msg, page=page) from e

        try:
            data: Any = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            msg = f"Response body is not valid JSON: {e}"
            raise DecodeError(
                msg,
                page=page,
                context=body[:ERROR_CONTEXT_MAX_LENGTH].decode(
                    "utf-8", errors="replace"
                ),
            ) from e

        if not isinstance(data, dict):
            msg = f"Expected JSON object, got {type(data).__name__}"
            raise DecodeError(msg, page=page)

        try:
            return Page.model_validate(data)
        except ValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            msg = f"Response does not match page schema: {first['msg']}"
            raise DecodeError(msg, page=page, field=field) from e
