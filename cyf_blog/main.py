import logging

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware
import socketio

from cyf_blog.routers import auth, users, verification_tokens, sessions, accounts
from cyf_blog.core.config import settings
from cyf_blog.exception_handlers import setup_exception_handlers
from cyf_blog.socket_handlers import register_socketio_handlers
from cyf_blog.socket_instance import sio

logging.basicConfig(level=settings.LOG_LEVEL)

# Named 'fastapi_app' so 'app' can be the Socket.IO wrapper
fastapi_app = FastAPI(title=settings.PROJECT_NAME)

fastapi_app.state.sio = sio

if settings.ALLOWED_ORIGINS:
    fastapi_app.add_middleware(
        CORSMiddleware,
        allow_origins=[str(origin).strip() for origin in settings.ALLOWED_ORIGINS],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

setup_exception_handlers(fastapi_app)

fastapi_app.include_router(auth.router, prefix="/auth", tags=["auth"])
fastapi_app.include_router(users.router, prefix="/user", tags=["user"])
fastapi_app.include_router(verification_tokens.router, prefix="/verification-token", tags=["verification-token"])
fastapi_app.include_router(sessions.router, prefix="/session", tags=["session"])
fastapi_app.include_router(accounts.router, prefix="/account", tags=["account"])

@fastapi_app.get("/health", tags=["health"])
def read_root():
    return {"status": "ok"}

# The ASGI entry point serving both FastAPI and Socket.IO
app = socketio.ASGIApp(sio, other_asgi_app=fastapi_app)
register_socketio_handlers(sio)
