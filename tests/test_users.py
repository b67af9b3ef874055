import pytest
from httpx import AsyncClient
from sqlalchemy.exc import SQLAlchemyError

from cyf_blog.crud import crud_user
from cyf_blog.models.enums import UserRole
from cyf_blog.utils.cache import cache

from .conftest import PNG_BYTES


@pytest.mark.asyncio
async def test_hello_is_public_and_cached(async_client: AsyncClient):
    response = await async_client.get("/user/hello")

    assert response.status_code == 200
    assert response.json() == {"code": 0, "message": "success", "data": "Hello World!"}
    assert await cache.get("user-hello:en") == "Hello World!"


@pytest.mark.asyncio
async def test_hello_serves_cached_value(async_client: AsyncClient):
    await cache.set("user-hello:en", "cached hello", 30)

    response = await async_client.get("/user/hello")

    assert response.json()["data"] == "cached hello"


@pytest.mark.asyncio
async def test_hello_follows_accept_language(async_client: AsyncClient):
    response = await async_client.get("/user/hello", headers={"Accept-Language": "zh-CN,zh;q=0.9"})

    assert response.json()["data"] == "你好，世界！"


@pytest.mark.asyncio
async def test_hello2_requires_new_enough_client(async_client: AsyncClient, make_user, login_as):
    headers, _ = await login_as(await make_user())

    response = await async_client.get("/user/hello2", headers={**headers, "x-version": "1.2.0"})
    assert response.status_code == 200
    assert response.json()["data"] == "Hello, Kimmy! Welcome to the new version."

    response = await async_client.get("/user/hello2", headers={**headers, "x-version": "0.9.3"})
    assert response.status_code == 403

    response = await async_client.get("/user/hello2", headers=headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_hello2_requires_authentication(async_client: AsyncClient):
    response = await async_client.get("/user/hello2", headers={"x-version": "1.0.0"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_has_username(async_client: AsyncClient, make_user):
    await make_user(username="chenyifaer")

    taken = await async_client.post("/user/has-username", json={"username": "chenyifaer"})
    free = await async_client.post("/user/has-username", json={"username": "somebody"})

    assert taken.json()["data"] is False
    assert free.json()["data"] is True


@pytest.mark.asyncio
async def test_has_email(async_client: AsyncClient, make_user):
    await make_user(email="yifaer@example.com")

    taken = await async_client.post("/user/has-email", json={"email": "Yifaer@Example.com"})
    free = await async_client.post("/user/has-email", json={"email": "nobody@example.com"})

    assert taken.json()["data"] is False
    assert free.json()["data"] is True


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/user/has-username", "/user/has-email"])
async def test_availability_checks_require_a_value(async_client: AsyncClient, path):
    response = await async_client.post(path, json={})

    assert response.status_code == 400
    assert response.json()["code"] == 400


@pytest.mark.asyncio
async def test_list_users_paginates(async_client: AsyncClient, make_user, login_as):
    first = await make_user(username="member01")
    await make_user(username="member02")
    await make_user(username="member03")
    headers, _ = await login_as(first)

    response = await async_client.get("/user", params={"page": 1, "page_size": 2}, headers=headers)

    assert response.status_code == 200
    page = response.json()["data"]
    assert page["total"] == 3
    assert page["page"] == 1
    assert page["page_size"] == 2
    assert len(page["items"]) == 2

    response = await async_client.get("/user", params={"page": 2, "page_size": 2}, headers=headers)
    assert len(response.json()["data"]["items"]) == 1


@pytest.mark.asyncio
async def test_read_user(async_client: AsyncClient, make_user, login_as):
    me = await make_user()
    other = await make_user(username="member02")
    headers, _ = await login_as(me)

    response = await async_client.get(f"/user/{other.id}", headers=headers)
    assert response.status_code == 200
    assert response.json()["data"]["username"] == "member02"

    response = await async_client.get("/user/0000000000", headers=headers)
    assert response.status_code == 404
    assert response.json()["message"] == "User not found"


@pytest.mark.asyncio
async def test_update_own_profile(async_client: AsyncClient, make_user, login_as):
    me = await make_user()
    headers, _ = await login_as(me)

    response = await async_client.patch(f"/user/{me.id}", data={"nickname": "Kimmy"}, headers=headers)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["nickname"] == "Kimmy"
    assert data["username"] == "yifaer01"


@pytest.mark.asyncio
async def test_changing_email_clears_verification(async_client: AsyncClient, make_user, login_as):
    me = await make_user(verified=True)
    headers, _ = await login_as(me)

    response = await async_client.patch(
        f"/user/{me.id}", data={"email": "fresh@example.com"}, headers=headers
    )

    data = response.json()["data"]
    assert data["email"] == "fresh@example.com"
    assert data["email_verified"] is None


@pytest.mark.asyncio
async def test_update_replaces_avatar(async_client: AsyncClient, make_user, login_as, storage):
    me = await make_user()
    headers, _ = await login_as(me)
    files = {"file": ("face.png", PNG_BYTES, "image/png")}

    first = await async_client.patch(f"/user/{me.id}", files=files, headers=headers)
    old_image = first.json()["data"]["image"]
    second = await async_client.patch(f"/user/{me.id}", files=files, headers=headers)

    assert second.status_code == 200
    assert second.json()["data"]["image"] != old_image
    assert storage.upload.await_count == 2
    storage.delete.assert_called_once_with(old_image.split("/cyf-blog-test/", 1)[1])


@pytest.mark.asyncio
async def test_update_rejects_taken_username(async_client: AsyncClient, make_user, login_as):
    me = await make_user()
    await make_user(username="member02")
    headers, _ = await login_as(me)

    response = await async_client.patch(f"/user/{me.id}", data={"username": "member02"}, headers=headers)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_cannot_update_someone_else(async_client: AsyncClient, make_user, login_as):
    me = await make_user()
    other = await make_user(username="member02")
    headers, _ = await login_as(me)

    response = await async_client.patch(f"/user/{other.id}", data={"nickname": "Hacked"}, headers=headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_can_update_anyone(async_client: AsyncClient, make_user, login_as):
    admin = await make_user(username="admin001", role=UserRole.ADMIN)
    other = await make_user(username="member02")
    headers, _ = await login_as(admin)

    response = await async_client.patch(f"/user/{other.id}", data={"nickname": "Renamed"}, headers=headers)

    assert response.status_code == 200
    assert response.json()["data"]["nickname"] == "Renamed"


@pytest.mark.asyncio
async def test_delete_own_account(async_client: AsyncClient, make_user, login_as):
    me = await make_user()
    headers, _ = await login_as(me)

    response = await async_client.delete(f"/user/{me.id}", headers=headers)

    assert response.status_code == 200
    assert response.json()["data"]["id"] == me.id
    # the session went with the user
    response = await async_client.get("/auth/profile", headers=headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_cannot_delete_someone_else(async_client: AsyncClient, make_user, login_as):
    me = await make_user()
    other = await make_user(username="member02")
    headers, _ = await login_as(me)

    response = await async_client.delete(f"/user/{other.id}", headers=headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_failed_update_discards_new_avatar(async_client: AsyncClient, make_user, login_as, storage, monkeypatch):
    me = await make_user()
    headers, _ = await login_as(me)

    async def _fail(*args, **kwargs):
        raise SQLAlchemyError("write failed")

    monkeypatch.setattr(crud_user, "update_user_internal", _fail)
    files = {"file": ("face.png", PNG_BYTES, "image/png")}

    response = await async_client.patch(f"/user/{me.id}", files=files, headers=headers)

    assert response.status_code == 500
    assert response.json()["message"] == "An error occurred while updating the user."
    storage.upload.assert_awaited_once()
    uploaded_blob = storage.upload.await_args.kwargs["blob_name"]
    storage.delete.assert_called_once_with(uploaded_blob)
