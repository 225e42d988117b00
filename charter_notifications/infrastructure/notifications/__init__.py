"""Delivery transports used by the notification dispatcher."""

from .email import SendGridEmailSender, build_email_sender
from .push import FirebasePushGateway, build_fcm_message, build_push_gateway

__all__ = [
    "SendGridEmailSender",
    "build_email_sender",
    "FirebasePushGateway",
    "build_fcm_message",
    "build_push_gateway",
]
