"""Tests for the /health and /v1/models endpoints."""

from unittest.mock import patch

from fastapi.testclient import TestClient

from app.config import Settings, get_settings
from app.main import app
from tests.fakes import AUTH_HEADERS

client = TestClient(app, headers=AUTH_HEADERS)


def test_health_endpoint():
    """Test that /health returns the literal liveness body."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.text == "ok"
    assert response.headers["content-type"].startswith("text/plain")


@patch("app.main.get_settings")
def test_models_endpoint(mock_get_settings):
    """GET /v1/models lists the single served model."""
    mock_get_settings.return_value = Settings(served_model_id="whisper-1")

    response = client.get("/v1/models")

    assert response.status_code == 200
    assert response.json() == {"object": "list", "data": [{"id": "whisper-1", "object": "model"}]}


def test_unknown_path_uses_error_shape():
    response = client.get("/v1/unknown")

    assert response.status_code == 404
    assert response.json()["error"]["type"] == "invalid_request_error"


def test_validation_errors_use_error_shape():
    from fastapi import FastAPI
    from fastapi.exceptions import RequestValidationError

    from app.main import validation_error_handler

    test_app = FastAPI()
    test_app.add_exception_handler(RequestValidationError, validation_error_handler)

    @test_app.get("/items")
    async def items(limit: int):
        return {"limit": limit}

    response = TestClient(test_app).get("/items", params={"limit": "many"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["type"] == "invalid_request_error"
    assert error["param"] == "limit"


def test_models_with_invalid_settings(monkeypatch):
    """A broken environment still answers in the OpenAI error shape."""
    monkeypatch.setenv("GATEWAY_PORT", "0")
    get_settings.cache_clear()
    try:
        response = client.get("/v1/models")
    finally:
        get_settings.cache_clear()

    assert response.status_code == 500
    assert response.headers["content-type"] == "application/json"
    assert response.json() == {
        "error": {"message": "An unexpected error occurred", "type": "internal_error", "param": None, "code": None}
    }


def test_unhandled_exceptions_use_error_shape():
    from fastapi import FastAPI

    from app.main import unexpected_error_handler

    test_app = FastAPI()
    test_app.add_exception_handler(Exception, unexpected_error_handler)

    @test_app.get("/boom")
    async def boom():
        raise RuntimeError("secret detail")

    response = TestClient(test_app, raise_server_exceptions=False).get("/boom")

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["type"] == "internal_error"
    assert "secret detail" not in error["message"]
