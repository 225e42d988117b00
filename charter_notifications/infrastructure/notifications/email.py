"""Email channel sender backed by SendGrid."""

from __future__ import annotations

import html
import json
import logging
from typing import Any

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from charter_notifications.config import Settings
from charter_notifications.domain.entities import ChannelPayload

logger = logging.getLogger(__name__)


def _extract_sendgrid_error_details(body: Any) -> str | None:
    """Return a human readable description for a SendGrid error payload."""

    if body in (None, ""):
        return None

    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None

    if isinstance(body, str):
        body = body.strip()
        if not body:
            return None
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError:
            return body
    else:
        parsed = body

    if isinstance(parsed, dict):
        errors = parsed.get("errors")
        if isinstance(errors, list):
            messages: list[str] = []
            for item in errors:
                if not isinstance(item, dict):
                    continue
                message = item.get("message")
                if message:
                    messages.append(str(message))
            if messages:
                return "; ".join(messages)
        try:
            return json.dumps(parsed)
        except (TypeError, ValueError):
            return None

    return None


def render_email_html(payload: ChannelPayload) -> str:
    """Render the email body for ``payload``."""

    body = html.escape(payload.body).replace("\n", "<br>")
    return f"<h2>{html.escape(payload.title)}</h2><p>{body}</p>"


class SendGridEmailSender:
    """Deliver notification payloads to an email address through SendGrid."""

    def __init__(self, api_key: str, sender: str) -> None:
        self._api_key = api_key
        self._sender = sender

    def send(self, address: str, payload: ChannelPayload) -> bool:
        message = Mail(
            from_email=self._sender,
            to_emails=address,
            subject=payload.title,
            html_content=render_email_html(payload),
        )

        try:
            client = SendGridAPIClient(self._api_key)
            response = client.send(message)
        except Exception as exc:  # pragma: no cover - network failures depend on environment
            status_code = getattr(exc, "status_code", None)
            details = _extract_sendgrid_error_details(getattr(exc, "body", None))
            logger.error(
                "SendGrid API request failed with status %s: %s",
                status_code,
                details or exc,
            )
            return False

        status_code = getattr(response, "status_code", None)
        if not isinstance(status_code, int) or not 200 <= status_code < 300:
            details = _extract_sendgrid_error_details(getattr(response, "body", None))
            logger.error("SendGrid API responded with status %s: %s", status_code, details)
            return False

        return True


def build_email_sender(settings: Settings) -> SendGridEmailSender | None:
    """Return the SendGrid sender, or ``None`` when email is not configured."""

    if not settings.email_enabled:
        logger.info("SendGrid configuration incomplete; email delivery disabled")
        return None
    return SendGridEmailSender(settings.sendgrid_api_key, settings.sendgrid_sender)


__all__ = ["SendGridEmailSender", "build_email_sender", "render_email_html"]
