import resend
import logging
from typing import Optional

from cyf_blog.core.config import settings

logger = logging.getLogger(__name__)

def send_email(to: str, subject: str, html_content: str) -> Optional[str]:
    """Sends an email using the Resend service. Returns the provider message id."""
    if not settings.RESEND_API_KEY or not settings.RESEND_API_KEY.get_secret_value():
        logger.error("RESEND_API_KEY is not configured or is empty. Cannot send email.")
        return None

    logger.info(f"Attempting to send email to: {to} with subject: '{subject}' from: {settings.EMAIL_FROM_ADDRESS}")
    try:
        resend.api_key = settings.RESEND_API_KEY.get_secret_value()
        params = {
            "from": settings.EMAIL_FROM_ADDRESS,
            "to": [to],
            "subject": subject,
            "html": html_content,
        }
        email = resend.Emails.send(params)
        logger.info(f"Email sent successfully to {to}. Message ID: {email['id']}")
        return email["id"]
    except Exception as e:
        logger.error(f"Failed to send email to {to}. Error: {e}")
        raise # Re-raise the exception so the caller can handle it
