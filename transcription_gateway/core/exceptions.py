"""Custom exceptions for the transcription gateway core library.

Every exception carries the HTTP status and the OpenAI-style error type it
maps to, so the web layer can render any of them without a lookup table.
"""


class GatewayError(Exception):
    """Base exception for all gateway errors."""

    status_code: int = 500
    error_type: str = "internal_error"

    def __init__(self, message: str, param: str | None = None, code: str | None = None):
        self.message = message
        self.param = param
        self.code = code
        super().__init__(message)


class InvalidRequestError(GatewayError):
    """Raised when a request is malformed, incomplete or unsupported."""

    status_code = 400
    error_type = "invalid_request_error"


class AuthenticationError(GatewayError):
    """Raised when the bearer token is missing or does not match."""

    status_code = 401
    error_type = "invalid_api_key"

    def __init__(self, message: str = "Invalid API key"):
        super().__init__(message)


class ConfigurationError(GatewayError):
    """Raised when there is a configuration problem."""

    error_type = "configuration_error"


class UpstreamError(GatewayError):
    """Base class for upstream-related errors."""

    status_code = 502
    error_type = "upstream_error"

    def __init__(self, message: str, upstream: str | None = None):
        self.upstream = upstream
        super().__init__(message)


class UpstreamUnreachableError(UpstreamError):
    """Raised when the upstream server is unreachable."""

    error_type = "upstream_unreachable"


class UpstreamTimeoutError(UpstreamError):
    """Raised when a request to the upstream server times out."""

    status_code = 504
    error_type = "upstream_timeout"


class UpstreamResponseError(UpstreamError):
    """Raised when the upstream answers with an error status or an unusable body."""

    error_type = "upstream_invalid_response"
