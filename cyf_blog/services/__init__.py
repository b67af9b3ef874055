from . import mail_service
from . import notification_service
from . import user_service
from . import auth_service
from . import verification_service

__all__ = [
    "mail_service",
    "notification_service",
    "user_service",
    "auth_service",
    "verification_service",
]
