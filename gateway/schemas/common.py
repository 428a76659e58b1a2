"""Common schemas used across multiple endpoints."""

from pydantic import BaseModel

from common.constants import CODE_OK


class ErrorResponse(BaseModel):
    """Response model for errors."""
    code: int
    message: str


class Envelope(BaseModel):
    """Base for success responses: code 0 plus a data payload."""
    code: int = CODE_OK
