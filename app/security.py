"""API key authentication, request size limits, and request ID middleware."""

import logging
import re
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.schemas import error_body
from transcription_gateway import AuthenticationError
from transcription_gateway.core.logging import request_id_scope

logger = logging.getLogger(__name__)

TRANSCRIPTIONS_PATH = "/v1/audio/transcriptions"
MODELS_PATH = "/v1/models"

_BEARER_RE = re.compile(r"^Bearer\s+(.+)$", re.IGNORECASE)


def extract_bearer_token(header: str | None) -> str | None:
    """Return the token of a ``Bearer <token>`` header, or None."""
    match = _BEARER_RE.match(header or "")
    return match.group(1) if match else None


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a unique request ID to every request and log request lifecycle."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        with request_id_scope() as rid:
            request.state.request_id = rid
            start = time.perf_counter()
            logger.info("%s %s", request.method, request.url.path)
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.info(
                "%s %s -> %s (%.0f ms)",
                request.method,
                request.url.path,
                response.status_code,
                elapsed_ms,
            )
            response.headers["X-Request-ID"] = rid
            return response


class APIKeyMiddleware(BaseHTTPMiddleware):
    """Enforce Bearer token authentication on the OpenAI endpoints.

    Only those endpoints are protected, and only for the method they serve,
    so ``/health`` stays public and a wrong verb still gets a 405. Without a
    configured API_KEY no token matches and every protected call gets a 401.
    """

    def __init__(self, app, api_key: str | None) -> None:  # noqa: ANN001
        super().__init__(app)
        self.api_key = api_key
        self._protected = {
            (MODELS_PATH, "GET"),
            (TRANSCRIPTIONS_PATH, "POST"),
        }

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if (request.url.path, request.method) not in self._protected:
            return await call_next(request)

        token = extract_bearer_token(request.headers.get("authorization"))
        if self.api_key is None or token != self.api_key:
            logger.warning("Rejected %s %s: invalid API key", request.method, request.url.path)
            err = AuthenticationError()
            return JSONResponse(
                status_code=err.status_code,
                content=error_body(err.message, err.error_type),
            )

        return await call_next(request)


class MaxBodySizeMiddleware(BaseHTTPMiddleware):
    """Reject transcription uploads whose Content-Length exceeds a configured limit."""

    def __init__(self, app, max_bytes: int) -> None:  # noqa: ANN001
        super().__init__(app)
        self.max_bytes = max_bytes
        self._guarded_paths = {TRANSCRIPTIONS_PATH}

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method == "POST" and request.url.path in self._guarded_paths:
            content_length = request.headers.get("content-length")
            if content_length is not None and content_length.isdigit():
                if int(content_length) > self.max_bytes:
                    return JSONResponse(
                        status_code=413,
                        content=error_body(
                            f"Request body exceeds maximum allowed size ({self.max_bytes} bytes)",
                            "request_too_large",
                        ),
                    )

        return await call_next(request)
