"""Contact form delivery through the Resend email API."""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger("FOLIO.Contact")

RESEND_ENDPOINT = "https://api.resend.com/emails"
DEFAULT_SENDER = "Portfolio Contact <onboarding@resend.dev>"

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_email(value: str) -> bool:
    """Loose ``local@domain.tld`` check."""
    return bool(value) and EMAIL_PATTERN.match(value) is not None


@dataclass
class ContactMessage:
    name: str
    email: str
    message: str
    recipient_email: str

    def validate(self) -> Optional[str]:
        """Return a validation error message, or None when valid."""
        if not all(v and v.strip() for v in (self.name, self.email, self.message, self.recipient_email)):
            return "Missing required fields"
        if not is_valid_email(self.email) or not is_valid_email(self.recipient_email):
            return "Invalid email format"
        return None


@dataclass
class DeliveryResult:
    success: bool
    note: Optional[str] = None
    error: Optional[str] = None
    details: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"success": self.success}
        for key in ("note", "error", "details"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        return result


def render_html(msg: ContactMessage) -> str:
    name = html.escape(msg.name)
    email = html.escape(msg.email)
    body = html.escape(msg.message).replace("\n", "<br>")
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h2 style="color: #333; border-bottom: 2px solid #5bc0be; padding-bottom: 10px;">New Contact Form Submission</h2>
  <div style="background: #f9f9f9; padding: 20px; border-radius: 8px; margin: 20px 0;">
    <p style="margin: 0 0 10px 0;"><strong style="color: #555;">From:</strong> {name}</p>
    <p style="margin: 0 0 10px 0;"><strong style="color: #555;">Email:</strong>
      <a href="mailto:{email}" style="color: #5bc0be;">{email}</a></p>
  </div>
  <div style="margin: 20px 0;">
    <h3 style="color: #333; margin-bottom: 10px;">Message:</h3>
    <div style="background: #fff; padding: 15px; border-left: 4px solid #5bc0be; color: #444; line-height: 1.6;">{body}</div>
  </div>
  <hr style="border: none; border-top: 1px solid #eee; margin: 30px 0;">
  <p style="color: #888; font-size: 12px;">This message was sent from your portfolio contact form.<br>
    Reply directly to this email to respond to {name}.</p>
</div>
"""


class ContactNotifier:
    """Sends contact form messages, or logs them when email is not configured."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        sender: str = DEFAULT_SENDER,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        self.api_key = api_key
        self.sender = sender
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def send(self, msg: ContactMessage) -> DeliveryResult:
        problem = msg.validate()
        if problem:
            return DeliveryResult(success=False, error=problem)

        if not self.is_configured:
            # Keeps the form usable in development.
            logger.info(
                "Contact form submission (email not configured): "
                f"from={msg.name} <{msg.email}> to={msg.recipient_email} message={msg.message!r}"
            )
            return DeliveryResult(success=True, note="Email service not configured - message logged")

        try:
            response = self.session.post(
                RESEND_ENDPOINT,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "from": self.sender,
                    "to": msg.recipient_email,
                    "reply_to": msg.email,
                    "subject": f"New Contact Form Message from {msg.name}",
                    "html": render_html(msg),
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Contact email delivery failed: {e}")
            return DeliveryResult(success=False, error="Failed to send email", details=str(e))

        if response.ok:
            logger.info(f"Contact email sent to {msg.recipient_email}")
            return DeliveryResult(success=True)

        details = self._provider_message(response)
        logger.error(f"Resend error: status={response.status_code} body={details}")
        return DeliveryResult(success=False, error=self._friendly_error(details), details=details)

    @staticmethod
    def _provider_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return str(body)

    @staticmethod
    def _friendly_error(details: str) -> str:
        if "verify" in details:
            return "Email recipient not verified. With Resend free tier, you can only send to your own email."
        if "API key" in details:
            return "Invalid Resend API key"
        return "Failed to send email"
