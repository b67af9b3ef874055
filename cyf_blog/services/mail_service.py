import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from fastapi.concurrency import run_in_threadpool

from cyf_blog import schemas
from cyf_blog.utils import mail_templates
from cyf_blog.utils.email import send_email

logger = logging.getLogger(__name__)

EMAIL_VERIFICATION_SENT = "email_verification_sent"


class MailService:
    """Renders a named template and hands it to the mail transport."""

    async def create(self, user_id: str, options: schemas.MailOptions) -> schemas.StatusMessage:
        try:
            html_content = mail_templates.render(options.template, options.context)
        except mail_templates.UnknownTemplate:
            logger.warning(f"Unknown mail template '{options.template}' requested for user {user_id}")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown mail template '{options.template}'.",
            )

        message_id = await run_in_threadpool(
            send_email, to=options.to, subject=options.subject, html_content=html_content
        )
        logger.info(f"Mail '{options.template}' for user {user_id} handed to transport (id={message_id}).")
        return schemas.StatusMessage(status=EMAIL_VERIFICATION_SENT, message_id=message_id)


mail_service = MailService()


def current_year() -> int:
    return datetime.now(timezone.utc).year
