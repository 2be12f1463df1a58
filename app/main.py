"""FastAPI application entry point for the Transcription Gateway."""

import logging

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from app import __version__
from app.config import get_settings
from app.schemas import error_body
from app.security import (
    MODELS_PATH,
    TRANSCRIPTIONS_PATH,
    APIKeyMiddleware,
    MaxBodySizeMiddleware,
    RequestIDMiddleware,
)
from transcription_gateway import GatewayError, InvalidRequestError, list_models
from transcription_gateway.core.dispatch import GRANULARITIES_PARAM, OBJECT_KEY_PARAM, parse_transcription_request, transcribe
from transcription_gateway.core.logging import setup_logging
from transcription_gateway.core.providers import build_provider
from transcription_gateway.core.storage import build_audio_store

logger = logging.getLogger(__name__)


def _load_settings_safe():
    """Load settings, returning None when the environment holds invalid configuration."""
    try:
        return get_settings()
    except ValueError:
        return None


def create_app() -> FastAPI:
    """Build and return the FastAPI application with all middleware configured."""
    settings = _load_settings_safe()

    if settings is not None:
        setup_logging(settings.log_level)
        if settings.api_key is None:
            logger.warning("API_KEY is not set; /v1 endpoints will reject every request with 401")

    application = FastAPI(
        title="Transcription Gateway",
        description="OpenAI-compatible audio transcription API backed by a whisper model",
        version=__version__,
    )

    # Middleware stack (order matters: the last one added runs first)
    application.add_middleware(
        MaxBodySizeMiddleware,
        max_bytes=settings.audio_max_upload_bytes if settings else 25_000_000,
    )
    application.add_middleware(
        APIKeyMiddleware,
        api_key=settings.api_key if settings else None,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origins_list if settings else [],
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    application.add_middleware(RequestIDMiddleware)

    application.add_exception_handler(GatewayError, gateway_error_handler)
    application.add_exception_handler(StarletteHTTPException, http_error_handler)
    application.add_exception_handler(RequestValidationError, validation_error_handler)
    application.add_exception_handler(Exception, unexpected_error_handler)

    return application


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    """Render library errors in the OpenAI error shape."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.error_type, exc.param, exc.code),
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render routing errors (404, 405, malformed multipart) in the OpenAI error shape."""
    message = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message, "invalid_request_error"),
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report the first invalid request field as a 400."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "header")]
    return JSONResponse(
        status_code=400,
        content=error_body(first.get("msg", "Invalid request"), "invalid_request_error", ".".join(loc) or None),
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort for exceptions no other handler claimed."""
    logger.exception("Unhandled error in %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=error_body("An unexpected error occurred", "internal_error"),
    )


app = create_app()


@app.get("/health")
async def health() -> PlainTextResponse:
    """Health check endpoint."""
    return PlainTextResponse("ok")


@app.get(MODELS_PATH)
async def models() -> dict:
    """
    OpenAI-compatible models list endpoint.

    Static; SDKs probe it before sending transcription requests.
    """
    try:
        return list_models(get_settings().to_gateway_config())
    except GatewayError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error in models: {e}")
        raise GatewayError("An unexpected error occurred") from e


def _form_text(form: FormData, name: str) -> str | None:
    value = form.get(name)
    return value if isinstance(value, str) else None


@app.post(TRANSCRIPTIONS_PATH)
async def create_transcription(request: Request) -> Response:
    """
    OpenAI-compatible audio transcription endpoint.

    Accepts a multipart form with either an uploaded ``file`` or an
    ``r2_key`` naming an object in the configured store, runs the whisper
    model and returns the transcript in the requested ``response_format``.
    """
    content_type = request.headers.get("content-type", "")
    if "multipart/form-data" not in content_type.lower():
        raise InvalidRequestError("Content-Type must be multipart/form-data", param="Content-Type")

    try:
        settings = get_settings()

        async with request.form() as form:
            upload = form.get("file")
            audio = await upload.read() if isinstance(upload, UploadFile) else None

            transcription_request = parse_transcription_request(
                model=_form_text(form, "model"),
                response_format=_form_text(form, "response_format"),
                timestamp_granularities=[v for v in form.getlist(GRANULARITIES_PARAM) if isinstance(v, str)],
                language=_form_text(form, "language"),
                prompt=_form_text(form, "prompt"),
                file=audio,
                object_key=_form_text(form, OBJECT_KEY_PARAM),
            )

        config = settings.to_gateway_config()
        output = await transcribe(
            transcription_request,
            store=build_audio_store(config),
            provider=build_provider(config),
        )

        if output.is_json:
            return JSONResponse(content=output.body, media_type=output.media_type)
        return Response(content=output.body, media_type=output.media_type)

    except (GatewayError, StarletteHTTPException):
        raise
    except Exception as e:
        logger.exception(f"Unexpected error in create_transcription: {e}")
        raise GatewayError("An unexpected error occurred") from e
