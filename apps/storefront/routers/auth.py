"""Account endpoints backed by the flat-file user store.

Register and login share a per-IP rate limit. Known failures are raised as
``StorefrontError`` and rendered by the app-level handler; anything else is
logged and reported with the route's generic message.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .. import config
from ..core.auth import AuthService, UserStore
from ..core.errors import StorefrontError
from ..core.rate_limit import auth_rate_limiter
from ..schemas import AuthResponse, LoginRequest, RegisterRequest, UserResponse

router = APIRouter()

bearer_scheme = HTTPBearer(auto_error=False)

_user_store: Optional[UserStore] = None


def get_user_store() -> UserStore:
    global _user_store
    if _user_store is None:
        _user_store = UserStore(config.USERS_FILE)
    return _user_store


def get_auth_service(store: UserStore = Depends(get_user_store)) -> AuthService:
    return AuthService(store)


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def rate_limit(request: Request) -> None:
    auth_rate_limiter.hit(client_ip(request))


def bearer_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> Optional[str]:
    return credentials.credentials if credentials else None


def _unexpected(message: str, exc: Exception) -> StorefrontError:
    logging.getLogger(__name__).exception("%s: %s", message, exc)
    return StorefrontError(message, status_code=500)


@router.post(
    "/register",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    status_code=201,
    dependencies=[Depends(rate_limit)],
)
def register(payload: RegisterRequest, auth: AuthService = Depends(get_auth_service)):
    try:
        result = auth.register(
            payload.first_name,
            payload.last_name,
            payload.email,
            payload.password,
            phone=payload.phone,
        )
    except StorefrontError:
        raise
    except Exception as exc:
        raise _unexpected("Greška pri registraciji", exc) from exc
    return {"success": True, "user": result.user, "token": result.token}


@router.post(
    "/login",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(rate_limit)],
)
def login(payload: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    try:
        result = auth.login(payload.email, payload.password)
    except StorefrontError:
        raise
    except Exception as exc:
        raise _unexpected("Greška pri prijavljivanju", exc) from exc
    return {"success": True, "user": result.user, "token": result.token}


@router.get("/user", response_model=UserResponse, response_model_exclude_none=True)
def current_user(
    token: Optional[str] = Depends(bearer_token),
    auth: AuthService = Depends(get_auth_service),
):
    try:
        user = auth.require_user(token)
    except StorefrontError:
        raise
    except Exception as exc:
        raise _unexpected("Greška pri dobavljanju korisnika", exc) from exc
    return {"success": True, "user": user}


@router.put("/user", response_model=UserResponse, response_model_exclude_none=True)
def update_user(
    updates: Optional[Dict[str, Any]] = Body(default=None),
    token: Optional[str] = Depends(bearer_token),
    auth: AuthService = Depends(get_auth_service),
):
    try:
        user = auth.update_user(token, updates)
    except StorefrontError:
        raise
    except Exception as exc:
        raise _unexpected("Greška pri ažuriranju korisnika", exc) from exc
    return {"success": True, "user": user}
