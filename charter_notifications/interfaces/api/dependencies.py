"""FastAPI dependency utilities."""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from charter_notifications.application.use_cases.notifications import NotificationDispatcher
from charter_notifications.infrastructure.database import get_db


def get_dispatcher(request: Request, db: Session = Depends(get_db)) -> NotificationDispatcher:
    """Return a dispatcher bound to the request session and the app's transports."""

    state = request.app.state
    return NotificationDispatcher(
        db,
        push_gateway=getattr(state, "push_gateway", None),
        email_sender=getattr(state, "email_sender", None),
        sms_sender=getattr(state, "sms_sender", None),
    )
