"""HTTP response schemas shared by routes and middleware."""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """OpenAI-style error detail."""

    message: str = Field(description="Human-readable error message")
    type: str = Field(description="Error type identifier")
    param: str | None = Field(default=None, description="Request parameter the error refers to")
    code: str | None = Field(default=None, description="Machine-readable error code")


class ErrorResponse(BaseModel):
    """Structured error response format used on every error path."""

    error: ErrorDetail = Field(description="Error details")


def error_body(message: str, type: str, param: str | None = None, code: str | None = None) -> dict:
    """Build a serialized ErrorResponse."""
    return ErrorResponse(error=ErrorDetail(message=message, type=type, param=param, code=code)).model_dump()

