"""Client-side auth session.

Talks to the ``/auth`` endpoints over HTTP and keeps the bearer token and the
cached user record in client-local storage. When the API cannot be reached
the call fails with :class:`AuthServiceUnavailable`; credentials are never
stored or checked locally.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import requests

from .. import config
from .auth import User
from .errors import (
    AuthenticationFailed,
    AuthServiceUnavailable,
    RateLimited,
    StorefrontError,
    UserNotFound,
    ValidationFailed,
)
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

MSG_UNAVAILABLE = "Servis za prijavu trenutno nije dostupan. Pokušajte ponovo."

_ERRORS_BY_STATUS = {
    400: ValidationFailed,
    401: AuthenticationFailed,
    404: UserNotFound,
}


class AuthSession:
    TOKEN_KEY = config.STORAGE_KEYS["auth_token"]
    USER_KEY = config.STORAGE_KEYS["user"]

    def __init__(
        self,
        storage: KeyValueStorage,
        base_url: str = "",
        http: Any = None,
        timeout: float = 10,
    ):
        self.storage = storage
        self.base_url = base_url.rstrip("/")
        self.http = http or requests.Session()
        self.timeout = timeout
        self.user: Optional[User] = None
        self.token: Optional[str] = None
        self._channel = storage.channel(self.TOKEN_KEY)
        self._unsubscribe = self._channel.subscribe(self._on_broadcast)
        self.reload()

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and bool(self.token)

    def reload(self) -> None:
        token = self.storage.get(self.TOKEN_KEY)
        raw_user = self.storage.get(self.USER_KEY)
        self.token, self.user = None, None
        if not token or not raw_user:
            return
        try:
            self.user = User.model_validate(json.loads(raw_user))
            self.token = token
        except ValueError as exc:
            logger.debug("Discarding malformed cached user: %s", exc)

    def close(self) -> None:
        self._unsubscribe()

    # -- HTTP -----------------------------------------------------------

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            resp = self.http.request(
                method,
                f"{self.base_url}{path}",
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Auth API %s %s unreachable: %s", method, path, exc)
            raise AuthServiceUnavailable(MSG_UNAVAILABLE) from exc

        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        if 200 <= resp.status_code < 300 and body.get("success"):
            return body

        message = body.get("error") or MSG_UNAVAILABLE
        if resp.status_code == 429:
            raise RateLimited(message, retry_after=int(resp.headers.get("Retry-After", "0")))
        error_cls = _ERRORS_BY_STATUS.get(resp.status_code)
        if error_cls is not None:
            raise error_cls(message)
        raise StorefrontError(message, status_code=resp.status_code)

    def _store(self, user: User, token: Optional[str] = None) -> User:
        if token is not None:
            self.token = token
            self.storage.set(self.TOKEN_KEY, token)
        self.user = user
        self.storage.set(self.USER_KEY, user.model_dump_json(by_alias=True, exclude_none=True))
        self._channel.publish(self)
        return user

    # -- operations -----------------------------------------------------

    def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        phone: Optional[str] = None,
    ) -> User:
        payload = {
            "firstName": first_name,
            "lastName": last_name,
            "email": email,
            "password": password,
        }
        if phone:
            payload["phone"] = phone
        body = self._request("POST", "/auth/register", payload)
        return self._store(User.model_validate(body["user"]), body["token"])

    def login(self, email: str, password: str) -> User:
        body = self._request("POST", "/auth/login", {"email": email, "password": password})
        return self._store(User.model_validate(body["user"]), body["token"])

    def refresh(self) -> Optional[User]:
        """Re-fetch the current user; an expired session is logged out."""
        if not self.token:
            return None
        try:
            body = self._request("GET", "/auth/user")
        except (AuthenticationFailed, UserNotFound):
            self.logout()
            return None
        return self._store(User.model_validate(body["user"]))

    def update_profile(self, **fields: Any) -> User:
        body = self._request("PUT", "/auth/user", fields)
        return self._store(User.model_validate(body["user"]))

    def logout(self) -> None:
        self.token, self.user = None, None
        self.storage.remove(self.TOKEN_KEY)
        self.storage.remove(self.USER_KEY)
        self._channel.publish(self)

    def _on_broadcast(self, sender: object) -> None:
        if sender is not self:
            self.reload()
