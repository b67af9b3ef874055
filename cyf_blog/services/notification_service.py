import logging
from typing import Any, Dict

from cyf_blog import models, schemas
from cyf_blog.socket_instance import sio

logger = logging.getLogger(__name__)

VERIFICATION_EVENT = "hello2"

def verification_state(user: models.User | None, pending: bool = False) -> Dict[str, Any]:
    state = schemas.VerificationState(
        user_id=user.id if user else None,
        email_verified=user.email_verified if user else None,
        verification_pending=pending,
    )
    return state.model_dump(mode="json")

async def push_email_verified(user: models.User) -> None:
    """Tell every socket of `user` that their email is now verified."""
    payload = {"event": "email_verified", **verification_state(user)}
    logger.info(f"Emitting '{VERIFICATION_EVENT}' email_verified to room {user.id}")
    await sio.emit(VERIFICATION_EVENT, payload, room=str(user.id))
