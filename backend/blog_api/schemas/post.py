"""
Blog API - Pydantic Request/Response Schemas
==============================================

What:  The API contract for post routes, errors and the health check.
How:   FastAPI validates request bodies against PostFields and serializes
       responses through the response models below.

Schemas are kept apart from the ORM model so the in-memory store and the SQL
store return the same shape (PostResponse) to the service layer.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

_TIMESTAMP = TypeAdapter(datetime)


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class PostFields(BaseModel):
    """
    Every caller-supplied post field.

    Used as the body of both POST /blog/post and PUT /blog/edit. All fields are
    required, so an edit always replaces the whole post.
    """
    title: str = Field(description="Post title")
    description: str = Field(description="Short summary shown in listings")
    body: str = Field(description="Full post content")
    author: str = Field(description="Author display name")
    date_posted: str = Field(
        max_length=64,
        description="Publication timestamp, e.g. 2024-01-01 or 2024-01-01T09:30:00+02:00"
    )

    @field_validator("date_posted")
    @classmethod
    def validate_date_posted(cls, v: str) -> str:
        """
        Accepts YYYY-MM-DD or an ISO 8601 timestamp.

        The caller's text is returned unchanged: stores keep it verbatim, so
        a post reads back exactly as submitted, offset included.
        """
        try:
            _TIMESTAMP.validate_python(v)
        except PydanticValidationError as e:
            raise ValueError(
                "date_posted must be YYYY-MM-DD or an ISO 8601 timestamp"
            ) from e
        return v


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class PostResponse(PostFields):
    """A stored post: the caller's fields plus the store-assigned id."""
    id: uuid.UUID = Field(description="Store-assigned post identifier")

    model_config = {"from_attributes": True}


class PostMutationResponse(BaseModel):
    """Wrapper returned by the add, edit and delete routes."""
    message: str = Field(description="Human-readable outcome")
    post: PostResponse = Field(description="The post as it was created, updated or removed")


class ErrorResponse(BaseModel):
    """
    Standardized error body for every API error.

    Example:
        {
            "error": "bad_request",
            "message": "Invalid ID!",
            "details": {"field": "postID"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Post store connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
