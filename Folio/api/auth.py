"""Admin authentication for the Folio API.

The editor logs in with ``ADMIN_PASSWORD`` and receives a signed bearer
token; write routes are wrapped with ``AuthService.require_auth()``.
"""

from __future__ import annotations

import hmac
import logging
from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Any, Callable, Dict, Optional

import jwt
from flask import g, request

from ..config.settings import SecurityConfig
from .errors import AuthenticationError, ForbiddenError

logger = logging.getLogger("FOLIO.Auth")

ADMIN_ROLE = "admin"
DEV_SECRET = "folio-development-secret"


class AuthConfig:
    """Signing key, token lifetime and the admin password."""

    def __init__(self, security: Optional[SecurityConfig] = None):
        security = security or SecurityConfig()
        self.environment = security.environment
        self.secret_key = security.jwt_secret or self._development_secret(self.environment)
        self.algorithm = security.jwt_algorithm
        self.token_expiry_hours = security.jwt_expiry_hours
        self.admin_password = security.admin_password

    @staticmethod
    def _development_secret(environment: str) -> str:
        if environment == "production":
            raise ValueError("JWT_SECRET_KEY must be set when ENVIRONMENT=production")
        logger.warning("JWT_SECRET_KEY not set; admin tokens are signed with a development key")
        return DEV_SECRET


class TokenManager:
    """Issues and checks admin tokens with PyJWT."""

    def __init__(self, config: AuthConfig):
        self.config = config

    def generate_token(self, subject: str = ADMIN_ROLE, role: str = ADMIN_ROLE, expires_in_hours: Optional[int] = None) -> str:
        issued = datetime.now(timezone.utc)
        lifetime = timedelta(hours=expires_in_hours or self.config.token_expiry_hours)
        claims = {"sub": subject, "role": role, "iat": issued, "exp": issued + lifetime}
        return jwt.encode(claims, self.config.secret_key, algorithm=self.config.algorithm)

    def verify_token(self, token: str) -> Optional[Dict[str, Any]]:
        """Claims of a valid token, None for anything expired or forged."""
        try:
            return jwt.decode(token, self.config.secret_key, algorithms=[self.config.algorithm])
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected token ({type(e).__name__}): {e}")
            return None


class AuthService:
    """Password login and bearer-token checks for the admin editor."""

    def __init__(self, config: Optional[AuthConfig] = None):
        self.config = config or AuthConfig()
        self.token_manager = TokenManager(self.config)

    def check_password(self, password: str) -> bool:
        expected = self.config.admin_password
        if not expected:
            logger.warning("Login attempted but ADMIN_PASSWORD is not set")
            return False
        return hmac.compare_digest(password.encode("utf-8"), expected.encode("utf-8"))

    def login(self, password: str) -> Optional[str]:
        """Return a token for the right password, None otherwise."""
        if not self.check_password(password):
            logger.info("Failed admin login")
            return None
        return self.token_manager.generate_token()

    @staticmethod
    def bearer_token() -> Optional[str]:
        scheme, _, token = request.headers.get("Authorization", "").partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return token.strip()

    def current_claims(self) -> Optional[Dict[str, Any]]:
        token = self.bearer_token()
        return self.token_manager.verify_token(token) if token else None

    def require_auth(self) -> Callable:
        """Decorator for admin-only routes; claims end up in ``flask.g.claims``."""
        def decorator(fn: Callable) -> Callable:
            @wraps(fn)
            def wrapper(*args, **kwargs):
                claims = self.current_claims()
                if not claims:
                    raise AuthenticationError("Missing or invalid authentication credentials")
                if claims.get("role") != ADMIN_ROLE:
                    raise ForbiddenError("Insufficient permissions")
                g.claims = claims
                return fn(*args, **kwargs)
            return wrapper
        return decorator


def create_auth_service(security: Optional[SecurityConfig] = None) -> AuthService:
    return AuthService(AuthConfig(security))
