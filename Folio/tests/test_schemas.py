"""Tests for API request/response schemas."""

import pytest
from Folio.api.schemas import ContactRequest, LoginRequest, LoginResponse, UploadForm
from Folio.remote.client import UploadCategory


class TestLoginRequest:

    def test_valid(self):
        assert LoginRequest(password="secret").password == "secret"

    def test_empty_password(self):
        with pytest.raises(ValueError):
            LoginRequest(password="")

    def test_response_defaults(self):
        response = LoginResponse(access_token="abc", expires_in=3600)
        assert response.model_dump() == {"access_token": "abc", "token_type": "Bearer", "expires_in": 3600}


class TestContactRequest:
    """Test contact form parsing."""

    def test_camel_case_recipient(self):
        data = {"name": "Ada", "email": "ada@example.com", "message": "Hi", "recipientEmail": "me@example.com"}
        form = ContactRequest(**data)
        assert form.recipient_email == "me@example.com"

    def test_missing_fields_become_empty(self):
        form = ContactRequest(name=None)  # type: ignore[arg-type]
        assert form.name == ""
        assert form.recipient_email == ""


class TestUploadForm:
    """Test multipart upload fields."""

    def test_category(self):
        assert UploadForm(category="gallery").category == UploadCategory.GALLERY  # type: ignore[arg-type]

    def test_unknown_category(self):
        with pytest.raises(ValueError):
            UploadForm(category="banner")  # type: ignore[arg-type]

    def test_storage_choice(self):
        assert UploadForm(storage="local").storage == "local"
        with pytest.raises(ValueError):
            UploadForm(storage="s3")

    def test_all_optional(self):
        form = UploadForm()
        assert form.category is None
        assert form.kind is None
        assert form.storage is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
