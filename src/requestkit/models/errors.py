from typing import Any, Optional


class BaseUrlMissingError(Exception):
    def __init__(
        self,
        message="Base URL is required. Pass base_url or set the REQUESTKIT_BASE_URL environment variable.",
    ):
        self.message = message
        super().__init__(self.message)


class RequestError(Exception):
    """Base class for every failure a request can be classified into.

    Instances are delivered inside a ``Failure`` result rather than raised.
    """


class ServiceError(RequestError):
    """The transport failed before an HTTP response was obtained."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Service error: {cause!r}")


class HttpError(RequestError):
    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"HTTP error: {status_code}")


class DecodingError(RequestError):
    """The payload was present but did not match the expected shape.

    ``data`` holds the raw bytes for diagnostics.
    """

    def __init__(self, cause: BaseException, data: bytes):
        self.cause = cause
        self.data = data
        super().__init__(f"Decoding error: {cause}")


class EmptyDataError(RequestError):
    def __init__(self, message: str = "Response carried no data"):
        self.message = message
        super().__init__(self.message)


class EncodingError(Exception):
    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Encoding error: {cause}")


class CertificatePinningError(Exception):
    """Raised by the transport when a server fails trust evaluation."""

    def __init__(self, host: Optional[str]):
        self.host = host
        super().__init__(f"Server trust evaluation cancelled for host '{host}'")


class TaskAlreadyStartedError(Exception):
    def __init__(self, message: str = "Data task has already been started"):
        self.message = message
        super().__init__(self.message)


class BlockingResultError(Exception):
    """Raised when ``Request.result`` is called on its own delivery context."""

    def __init__(
        self,
        message: str = "result() would wait on the delivery context it is called from; use start() instead",
    ):
        self.message = message
        super().__init__(self.message)


class ApiErrorResponse(Exception):
    """Raised by ``ApiError.unwrap`` to surface a structured API error body."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"API error: {value!r}")
