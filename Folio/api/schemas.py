"""Request/response schemas for the Folio API."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..remote.client import UploadCategory


class LoginRequest(BaseModel):
    """Admin login request."""
    password: str = Field(..., min_length=1, description="Admin password")

    model_config = ConfigDict(json_schema_extra={"example": {"password": "correct-horse-battery"}})


class ContactRequest(BaseModel):
    """Contact form submission.

    Field presence and email shape are checked by the notifier, so the
    endpoint can answer with the same messages the form expects.
    """
    name: str = ""
    email: str = ""
    message: str = ""
    recipient_email: str = Field("", alias="recipientEmail")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "Ada",
                "email": "ada@example.com",
                "message": "Hello!",
                "recipientEmail": "owner@example.com",
            }
        },
    )

    @field_validator("name", "email", "message", "recipient_email", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return "" if v is None else v


class UploadForm(BaseModel):
    """Multipart fields sent alongside an uploaded file."""
    category: Optional[UploadCategory] = Field(default=None, description="avatar, project or gallery")
    kind: Optional[str] = Field(default=None, description="Folder for local-disk uploads")
    storage: Optional[str] = Field(default=None, description="'local' forces the local-disk uploader")

    @field_validator("storage")
    @classmethod
    def known_storage(cls, v):
        if v is not None and v not in ("local", "remote"):
            raise ValueError("storage must be 'local' or 'remote'")
        return v


class LoginResponse(BaseModel):
    """Token response."""
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="Bearer", description="Token type")
    expires_in: int = Field(..., description="Token expiration in seconds")
