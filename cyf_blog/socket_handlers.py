import socketio
import logging
from http.cookies import SimpleCookie

from cyf_blog import crud
from cyf_blog.core.config import COOKIE_TOKEN_KEY
from cyf_blog.db.session import AsyncSessionLocal
from cyf_blog.dependencies import resolve_session
from cyf_blog.services.notification_service import verification_state, VERIFICATION_EVENT
from cyf_blog.utils.cache import cache, email_verify_key

logger = logging.getLogger(__name__)

# {sid: user_id} for authenticated sockets. Single process only.
sid_user_map = {}

def _token_from_environ(environ) -> str | None:
    raw_cookie = (environ or {}).get('HTTP_COOKIE')
    if not raw_cookie:
        return None
    cookie = SimpleCookie()
    cookie.load(raw_cookie)
    morsel = cookie.get(COOKIE_TOKEN_KEY)
    return morsel.value if morsel else None

def register_socketio_handlers(sio: socketio.AsyncServer):
    @sio.event
    async def connect(sid, environ, auth):
        """Anonymous sockets are accepted; a presented token must be valid."""
        token = (auth or {}).get('token') if isinstance(auth, dict) else None
        token = token or _token_from_environ(environ)

        if not token:
            logger.info(f"Anonymous connection from {sid}.")
            return True

        async with AsyncSessionLocal() as db:
            session_obj = await resolve_session(db, token)

        if session_obj is None:
            logger.warning(f"Connection refused for {sid}: Token is invalid or session expired.")
            return False

        sid_user_map[sid] = session_obj.user_id
        await sio.enter_room(sid, str(session_obj.user_id))
        logger.info(f"Sid {sid} joined room '{session_obj.user_id}'")
        return True

    @sio.event
    async def disconnect(sid, *args):
        user_id = sid_user_map.pop(sid, None)
        logger.info(f"Disconnecting: {sid} (User: {user_id})")

    @sio.on('hello')
    async def handle_hello(sid, data=None):
        """Reply on 'hello2' with the caller's email verification state."""
        if data is not None and not isinstance(data, (dict, str)):
            await sio.emit('exception', {'status': 'error', 'message': 'Invalid payload'}, room=sid)
            return

        user_id = sid_user_map.get(sid)
        try:
            if user_id is None:
                await sio.emit(VERIFICATION_EVENT, verification_state(None), room=sid)
                return

            async with AsyncSessionLocal() as db:
                user = await crud.crud_user.get_user_by_id(db, user_id=user_id)
            if user is None:
                await sio.emit('exception', {'status': 'error', 'message': 'User not found'}, room=sid)
                return

            pending = bool(await cache.get(email_verify_key(user.id)))
            await sio.emit(VERIFICATION_EVENT, verification_state(user, pending=pending), room=sid)
        except Exception as e:
            logger.error(f"Failed to handle 'hello' from {sid} (User: {user_id}): {e}", exc_info=True)
            await sio.emit('error', {'status': 'error', 'message': 'Internal server error'}, room=sid)
