"""Unit tests for run error types."""

from topquestions.errors import (
    DecodeError,
    ErrorClass,
    RateLimitCancelled,
    TopQuestionsError,
    TransportError,
)


class TestErrors:
    """Tests for the error hierarchy."""

    def test_all_errors_share_base(self) -> None:
        """Test every run error derives from TopQuestionsError."""
        for error in (
            RateLimitCancelled(),
            TransportError("boom"),
            DecodeError("bad body"),
        ):
            assert isinstance(error, TopQuestionsError)

    def test_rate_limit_cancelled(self) -> None:
        """Test cancellation error defaults."""
        error = RateLimitCancelled()
        assert error.error_class == ErrorClass.RATE_LIMIT_CANCELLED
        assert str(error) == "Rate limiter wait cancelled"
        assert error.page is None

    def test_transport_error_details(self) -> None:
        """Test transport error keeps status and URL."""
        error = TransportError(
            "Search request failed with HTTP 503",
            page=3,
            status_code=503,
            url="https://api.stackexchange.com/2.3/search",
        )

        assert error.to_dict() == {
            "error_class": "TRANSPORT",
            "message": "Search request failed with HTTP 503",
            "page": 3,
            "details": {
                "status_code": 503,
                "url": "https://api.stackexchange.com/2.3/search",
            },
        }

    def test_decode_error_details(self) -> None:
        """Test decode error keeps field and context."""
        error = DecodeError("schema", page=1, field="items.0.link", context="{}")

        assert error.error_class == ErrorClass.DECODE
        assert error.details == {"field": "items.0.link", "context": "{}"}

    def test_optional_details_omitted(self) -> None:
        """Test unset optional details are not recorded."""
        assert TransportError("boom").details == {}
        assert DecodeError("bad").details == {}
