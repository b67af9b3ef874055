from unittest.mock import AsyncMock

import pytest
import socketio

from cyf_blog.core.config import COOKIE_TOKEN_KEY
from cyf_blog.socket_handlers import register_socketio_handlers, sid_user_map
from cyf_blog.utils.cache import cache, email_verify_key


@pytest.fixture()
def server() -> socketio.AsyncServer:
    sio = socketio.AsyncServer(async_mode="asgi")
    sio.emit = AsyncMock()
    sio.enter_room = AsyncMock()
    register_socketio_handlers(sio)
    return sio


def _handler(server: socketio.AsyncServer, event: str):
    return server.handlers["/"][event]


@pytest.mark.asyncio
async def test_anonymous_connection_is_accepted(server):
    assert await _handler(server, "connect")("sid-1", {}, None) is True
    assert "sid-1" not in sid_user_map
    server.enter_room.assert_not_awaited()


@pytest.mark.asyncio
async def test_connection_with_token_joins_user_room(server, make_user, login_as):
    user = await make_user()
    _, token = await login_as(user)

    accepted = await _handler(server, "connect")("sid-1", {}, {"token": token})

    assert accepted is True
    assert sid_user_map["sid-1"] == user.id
    server.enter_room.assert_awaited_once_with("sid-1", user.id)


@pytest.mark.asyncio
async def test_connection_reads_token_cookie(server, make_user, login_as):
    user = await make_user()
    _, token = await login_as(user)
    environ = {"HTTP_COOKIE": f"{COOKIE_TOKEN_KEY}={token}; __cyf_blog_lng__=zh"}

    assert await _handler(server, "connect")("sid-1", environ, None) is True
    assert sid_user_map["sid-1"] == user.id


@pytest.mark.asyncio
async def test_connection_with_bad_token_is_refused(server):
    assert await _handler(server, "connect")("sid-1", {}, {"token": "garbage"}) is False
    assert "sid-1" not in sid_user_map


@pytest.mark.asyncio
async def test_disconnect_forgets_sid(server):
    sid_user_map["sid-1"] = "someone"

    await _handler(server, "disconnect")("sid-1")

    assert "sid-1" not in sid_user_map


@pytest.mark.asyncio
async def test_hello_reports_verification_state(server, make_user, login_as):
    user = await make_user()
    _, token = await login_as(user)
    await _handler(server, "connect")("sid-1", {}, {"token": token})
    await cache.set(email_verify_key(user.id), "true", 300)

    await _handler(server, "hello")("sid-1", {"hi": True})

    server.emit.assert_awaited_once_with(
        "hello2",
        {"user_id": user.id, "email_verified": None, "verification_pending": True},
        room="sid-1",
    )


@pytest.mark.asyncio
async def test_hello_from_anonymous_socket(server):
    await _handler(server, "hello")("sid-2", "hi")

    server.emit.assert_awaited_once_with(
        "hello2",
        {"user_id": None, "email_verified": None, "verification_pending": False},
        room="sid-2",
    )


@pytest.mark.asyncio
async def test_hello_rejects_bad_payload(server):
    await _handler(server, "hello")("sid-1", 42)

    event, payload = server.emit.await_args.args
    assert event == "exception"
    assert payload["status"] == "error"


@pytest.mark.asyncio
async def test_hello_for_deleted_user(server):
    sid_user_map["sid-1"] = "gone"

    await _handler(server, "hello")("sid-1")

    event, payload = server.emit.await_args.args
    assert event == "exception"
    assert payload["message"] == "User not found"
