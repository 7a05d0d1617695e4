from typing import Literal, Optional

from pydantic import BaseModel, Field, StrictStr


class SubmissionRequest(BaseModel):
    """Body of `POST /`. Both fields are optional here; the service decides."""
    url: Optional[StrictStr] = Field(None, description="The URL to shorten")
    id: Optional[StrictStr] = Field(None, description="Requested identifier")


class SubmissionResponse(BaseModel):
    status: Literal["success"] = "success"
    url: str
    id: str


class StatsResponse(BaseModel):
    """Returned by `GET /<id>+`"""
    status: Literal["success"] = "success"
    visits: int
    url: str
    id: str


class RedirectTarget(BaseModel):
    """Returned by the service for `GET /<id>`; the route turns it into a 302."""
    url: str


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    error: str
