"""Error types for a top-questions run."""

from enum import Enum


class ErrorClass(str, Enum):
    """Classification of run errors.

    - RATE_LIMIT_CANCELLED: Wait for a call slot was cancelled
    - TRANSPORT: Network call failed or returned a non-success status
    - DECODE: Response body could not be decompressed or parsed
    """

    RATE_LIMIT_CANCELLED = "RATE_LIMIT_CANCELLED"
    TRANSPORT = "TRANSPORT"
    DECODE = "DECODE"


class TopQuestionsError(Exception):
    """Base exception for run errors.

    Every subclass is fatal to the run that raised it.
    """

    def __init__(
        self,
        error_class: ErrorClass,
        message: str,
        page: int | None = None,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            error_class: Classification of the error.
            message: Human-readable error message.
            page: Page number being processed when the error occurred.
            details: Additional structured error details.
        """
        super().__init__(message)
        self.error_class = error_class
        self.message = message
        self.page = page
        self.details = details or {}

    def to_dict(
        self,
    ) -> dict[str, str | int | None | dict[str, str | int | bool | None]]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_class": self.error_class.value,
            "message": self.message,
            "page": self.page,
            "details": self.details,
        }


class RateLimitCancelled(TopQuestionsError):
    """The wait for a call slot was cancelled before a token was available.

    No network call was made and no token was consumed.
    """

    def __init__(self, message: str = "Rate limiter wait cancelled") -> None:
        """Initialize the cancellation error.

        Args:
            message: Human-readable error message.
        """
        super().__init__(
            error_class=ErrorClass.RATE_LIMIT_CANCELLED,
            message=message,
        )


class TransportError(TopQuestionsError):
    """The network call failed, returned non-2xx, or the stream broke."""

    def __init__(
        self,
        message: str,
        page: int | None = None,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        """Initialize the transport error.

        Args:
            message: Human-readable error message.
            page: Page number that was being fetched.
            status_code: HTTP status code if a response was received.
            url: Request URL.
        """
        details: dict[str, str | int | bool | None] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if url is not None:
            details["url"] = url

        super().__init__(
            error_class=ErrorClass.TRANSPORT,
            message=message,
            page=page,
            details=details,
        )
        self.status_code = status_code
        self.url = url


class DecodeError(TopQuestionsError):
    """The response body could not be decompressed or parsed."""

    def __init__(
        self,
        message: str,
        page: int | None = None,
        field: str | None = None,
        context: str | None = None,
    ) -> None:
        """Initialize the decode error.

        Args:
            message: Human-readable error message.
            page: Page number whose body failed to decode.
            field: Name of the offending field, for schema errors.
            context: Snippet of the body around the error.
        """
        details: dict[str, str | int | bool | None] = {}
        if field is not None:
            details["field"] = field
        if context is not None:
            details["context"] = context

        super().__init__(
            error_class=ErrorClass.DECODE,
            message=message,
            page=page,
            details=details,
        )
        self.field = field
        self.context = context
