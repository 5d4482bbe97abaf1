"""Best-effort email delivery.

Notifications never fail the business operation that triggered them: a
failed or raising send is logged as a warning and dropped.
"""

import structlog

from storefront.notification.channel import get_email_channel

logger = structlog.get_logger(__name__)


def send_email(to, template, context: dict) -> bool:
    """Render ``template`` with ``context`` and send it to ``to``. Returns True when sent."""
    if not to:
        logger.warning("notification_skipped_no_recipient", template=template.__name__)
        return False

    content = template.render(context)
    try:
        result = get_email_channel().send(to=to, subject=content["subject"], body=content["body"])
    except Exception as exc:
        logger.warning("notification_send_error", to=to, template=template.__name__, error=str(exc))
        return False

    if result.get("status") != "sent":
        logger.warning(
            "notification_send_failed",
            to=to,
            template=template.__name__,
            error=result.get("error"),
        )
        return False

    logger.info("notification_sent", to=to, template=template.__name__, message_id=result.get("message_id"))
    return True
