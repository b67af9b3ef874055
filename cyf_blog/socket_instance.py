import socketio
from cyf_blog.core.config import settings

# Same origins as the HTTP CORS settings
sio = socketio.AsyncServer(
    async_mode='asgi',
    cors_allowed_origins=settings.ALLOWED_ORIGINS
)
