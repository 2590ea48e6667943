"""REST API for the portfolio site and its admin editor."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import pydantic
from flask import Flask, jsonify, request
from flask_cors import CORS

from ..config.settings import Settings, get_settings
from ..content.merge import merge
from ..content.schema import coerce_partial
from ..notify.contact import ContactMessage, ContactNotifier
from ..remote.results import Fail
from ..sync.repository import PortfolioRepository, build_repository
from ..uploads.local_disk import LocalDiskUploader
from .auth import AuthService, create_auth_service
from .errors import AuthenticationError, DeliveryFailedError, UploadFailedError, ValidationError, setup_error_handlers
from .logging_config import setup_logging
from .schemas import ContactRequest, LoginRequest, LoginResponse, UploadForm

logger = logging.getLogger("FOLIO.API")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def add_security_headers(response):
    """Add security headers to response."""
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    return response


@dataclass
class APIResponse:
    """Standardized API response."""
    success: bool
    data: Any
    error: Optional[str] = None
    request_id: Optional[str] = None
    timestamp: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "data": self.data,
            "error": self.error,
            "request_id": self.request_id,
            "timestamp": self.timestamp or _now(),
        }


def _respond(data: Any, status: int = 200):
    return jsonify(APIResponse(
        success=True,
        data=data,
        request_id=getattr(request, "request_id", None),
    ).to_dict()), status


def _validation_details(error: pydantic.ValidationError) -> list:
    return [
        {"field": ".".join(str(p) for p in e["loc"]), "message": e["msg"]}
        for e in error.errors()
    ]


def _json_body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


class FolioAPIServer:
    """Builds the Flask application around a portfolio repository."""

    def __init__(
        self,
        repository: PortfolioRepository,
        settings: Settings,
        notifier: Optional[ContactNotifier] = None,
        uploader: Optional[LocalDiskUploader] = None,
        auth: Optional[AuthService] = None,
    ):
        self.repository = repository
        self.settings = settings
        self.notifier = notifier or ContactNotifier()
        self.uploader = uploader or LocalDiskUploader(settings.uploads.directory, settings.uploads.url_prefix)
        self.auth = auth or AuthService()
        self.app: Optional[Flask] = None

    def create_flask_app(self) -> Flask:
        """Create the Flask application."""
        app = Flask(__name__)

        app.json.sort_keys = False  # type: ignore[attr-defined]
        # Leave headroom for the multipart envelope around the file.
        app.config["MAX_CONTENT_LENGTH"] = self.settings.remote.max_upload_bytes + 1024 * 1024

        CORS(app, resources={r"/api/*": {"origins": self.settings.api.cors_origins}})

        setup_error_handlers(app)
        self._register_middleware(app)
        self._register_routes(app)

        self.app = app
        return app

    def _register_middleware(self, app: Flask) -> None:

        @app.before_request
        def before_request():
            request.request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))  # type: ignore[attr-defined]

        @app.after_request
        def after_request(response):
            response = add_security_headers(response)
            if hasattr(request, "request_id"):
                response.headers["X-Request-ID"] = request.request_id  # type: ignore[attr-defined]
            return response

    def _register_routes(self, app: Flask) -> None:
        require_admin = self.auth.require_auth()

        @app.route("/health", methods=["GET"])
        def health():
            """Service health check."""
            return _respond({
                "status": "healthy",
                "version": self.settings.version,
                "remote_configured": self.repository.remote.is_configured,
                "email_configured": self.notifier.is_configured,
            })

        @app.route("/api/portfolio", methods=["GET"])
        def get_portfolio():
            """Public read: remote first, then local cache, then defaults."""
            loaded = self.repository.load_with_source()
            return _respond({
                "portfolio": loaded.document.to_dict(),
                "source": loaded.source.value,
            })

        @app.route("/api/portfolio", methods=["PUT"])
        @require_admin
        def put_portfolio():
            """Replace the whole document; partial bodies are completed from defaults."""
            partial = coerce_partial(_json_body())
            document = merge(partial)
            result = self.repository.save(document)
            return _respond({"portfolio": document.to_dict(), **result.to_dict()})

        @app.route("/api/portfolio/reset", methods=["POST"])
        @require_admin
        def reset_portfolio():
            document = self.repository.reset()
            return _respond({"portfolio": document.to_dict()})

        @app.route("/api/upload", methods=["POST"])
        @require_admin
        def upload():
            """Store an image and return its URL for the editor to attach."""
            file = request.files.get("file")
            if file is None or not file.filename:
                raise ValidationError("Missing file")

            try:
                form = UploadForm(**request.form.to_dict())
            except pydantic.ValidationError as e:
                raise ValidationError("Invalid upload form", details=_validation_details(e))

            data = file.read()
            backend = form.storage or self.settings.uploads.backend
            if backend == "local":
                kind = form.kind or (form.category.value if form.category else "generic")
                url = self.uploader.save(data, file.filename, kind)
                return _respond({"url": url, "storage": "local"})

            if form.category is None:
                raise ValidationError("category is required (avatar, project or gallery)")

            result = self.repository.upload_and_attach(data, file.filename, form.category, file.mimetype)
            if isinstance(result, Fail):
                raise UploadFailedError(f"Upload failed: {result.error.message}", details=result.error.to_dict())
            return _respond({"url": result.value, "storage": "remote"})

        @app.route("/api/contact", methods=["POST"])
        def contact():
            try:
                form = ContactRequest(**_json_body())
            except pydantic.ValidationError as e:
                raise ValidationError("Invalid contact form", details=_validation_details(e))

            message = ContactMessage(
                name=form.name,
                email=form.email,
                message=form.message,
                recipient_email=form.recipient_email,
            )
            problem = message.validate()
            if problem:
                raise ValidationError(problem)

            result = self.notifier.send(message)
            if not result.success:
                raise DeliveryFailedError(result.error or "Failed to send email", details=result.details)
            return _respond(result.to_dict())

        @app.route("/api/auth/login", methods=["POST"])
        def login():
            try:
                form = LoginRequest(**_json_body())
            except pydantic.ValidationError as e:
                raise ValidationError("Password is required", details=_validation_details(e))

            token = self.auth.login(form.password)
            if token is None:
                raise AuthenticationError("Invalid password", error_code="AUTH_ERROR")
            return _respond(LoginResponse(
                access_token=token,
                expires_in=self.auth.config.token_expiry_hours * 3600,
            ).model_dump())

    def run(self, host: Optional[str] = None, port: Optional[int] = None, debug: bool = False) -> None:
        app = self.app or self.create_flask_app()
        app.run(
            host=host or self.settings.api.host,
            port=port or self.settings.api.port,
            debug=debug,
            use_reloader=False,
        )


def create_app(settings: Optional[Settings] = None) -> Flask:
    """Build the Flask app from environment settings."""
    settings = settings or get_settings()
    settings.validate()
    setup_logging(settings.logging.level, settings.logging.format)

    repository = build_repository(settings)
    server = FolioAPIServer(
        repository,
        settings,
        notifier=ContactNotifier(settings.mail.resend_api_key, settings.mail.sender),
        uploader=LocalDiskUploader(settings.uploads.directory, settings.uploads.url_prefix),
        auth=create_auth_service(settings.security),
    )
    logger.info(f"Folio API ready (remote configured: {repository.remote.is_configured})")
    return server.create_flask_app()
