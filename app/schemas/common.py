"""Error body shared by every endpoint."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    message: str = Field(..., description="Human-readable error summary")
    errors: list[str] | None = Field(default=None, description="Field-level messages, if any")
