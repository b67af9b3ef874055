"""
HTTP client for the blog API.

Reproduces what the web signup/verify pages do against the backend: form
validation, username/email availability checks, registration with an avatar,
and keeping the session in cookies so later calls are authenticated.
"""

import logging
from typing import Any, BinaryIO, Dict, Optional, Tuple

import requests
from pydantic import BaseModel, EmailStr, Field, model_validator

from cyf_blog.core.config import COOKIE_ID_KEY, COOKIE_TOKEN_KEY, COOKIE_LANG_KEY
from cyf_blog.schemas.user import USERNAME_MIN_LENGTH, PASSWORD_MIN_LENGTH

logger = logging.getLogger(__name__)

AVATAR_MAX_BYTES = 5 * 1000 * 1000


class ApiError(Exception):
    def __init__(self, status_code: int, message: str, payload: Optional[Dict[str, Any]] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.payload = payload or {}


class Avatar(BaseModel):
    filename: str
    content_type: str
    content: bytes


class SignupForm(BaseModel):
    username: str = Field(..., min_length=USERNAME_MIN_LENGTH)
    nickname: str = ""
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)
    repeat_password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)
    avatar: Optional[Avatar] = None

    @model_validator(mode="after")
    def check_avatar_and_passwords(self) -> "SignupForm":
        if self.avatar is None:
            raise ValueError("file-validator")
        if len(self.avatar.content) >= AVATAR_MAX_BYTES:
            raise ValueError("file-size-validator")
        if self.password != self.repeat_password:
            raise ValueError("repeat-password-validator")
        return self


class BlogClient:
    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    # --- plumbing ---
    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self.session.request(method, f"{self.base_url}{path}", timeout=self.timeout, **kwargs)
        try:
            body = response.json()
        except ValueError:
            raise ApiError(response.status_code, response.text or "Invalid response")
        if response.status_code >= 400 or body.get("code", 0) != 0:
            raise ApiError(response.status_code, body.get("message", "Request failed"), body)
        return body.get("data")

    @property
    def token(self) -> Optional[str]:
        return self.session.cookies.get(COOKIE_TOKEN_KEY)

    @property
    def user_id(self) -> Optional[str]:
        return self.session.cookies.get(COOKIE_ID_KEY)

    def set_language(self, lang: str) -> None:
        self.session.cookies.set(COOKIE_LANG_KEY, lang)

    def _store_session(self, data: Dict[str, Any]) -> None:
        user_id = (data.get("user") or {}).get("id")
        if user_id:
            self.session.cookies.set(COOKIE_ID_KEY, user_id)
        self.session.cookies.set(COOKIE_TOKEN_KEY, data.get("access_token"))
        self.session.headers["Authorization"] = f"Bearer {data.get('access_token')}"

    def clear_session(self) -> None:
        for key in (COOKIE_ID_KEY, COOKIE_TOKEN_KEY):
            self.session.cookies.pop(key, None)
        self.session.headers.pop("Authorization", None)

    # --- availability checks ---
    def has_username(self, username: str) -> bool:
        """True when the username is free. Errors never block the form."""
        try:
            return bool(self._request("POST", "/user/has-username", json={"username": username}))
        except (requests.RequestException, ApiError) as e:
            logger.error(f"Username availability check failed: {e}")
            return True

    def has_email(self, email: str) -> bool:
        try:
            return bool(self._request("POST", "/user/has-email", json={"email": email}))
        except (requests.RequestException, ApiError) as e:
            logger.error(f"Email availability check failed: {e}")
            return True

    def check_availability(self, form: SignupForm) -> Dict[str, str]:
        """Field name -> error key for taken username/email."""
        errors = {}
        if not self.has_username(form.username):
            errors["username"] = "username-existed-validator"
        if not self.has_email(form.email):
            errors["email"] = "email-existed-validator"
        return errors

    # --- auth ---
    def register(self, form: SignupForm) -> Dict[str, Any]:
        files: Dict[str, Tuple[str, BinaryIO | bytes, str]] = {
            "file": (form.avatar.filename, form.avatar.content, form.avatar.content_type)
        }
        data = self._request(
            "POST",
            "/auth/register",
            data={
                "username": form.username,
                "nickname": form.nickname,
                "email": form.email,
                "password": form.password,
            },
            files=files,
        )
        self._store_session(data)
        return data

    def login(self, username: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/auth/login", json={"username": username, "password": password})
        self._store_session(data)
        return data

    def logout(self) -> None:
        try:
            self._request("POST", "/auth/logout")
        finally:
            self.clear_session()

    def profile(self) -> Dict[str, Any]:
        return self._request("GET", "/auth/profile")

    # --- verification ---
    def request_email_verification(self, locale: str = "en") -> Dict[str, Any]:
        return self._request("POST", "/user/email-verify", headers={"x-locale": locale})

    def verify_email(self, token: str) -> Dict[str, Any]:
        return self._request("GET", "/verification-token/verify", params={"token": token})
