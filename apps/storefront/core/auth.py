"""Flat-file account store and the auth operations built on it.

Accounts live in one JSON document::

    {"users": [{...user record...}], "passwords": {"<lowercased email>": "<hash>"}}

Passwords are always stored as passlib hashes. Rows still holding plaintext
from older deployments never authenticate until
:func:`migrate_plaintext_passwords` has been run over the file.
"""

from __future__ import annotations

import json
import logging
import re
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from threading import RLock
from typing import Any, Dict, List, Mapping, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ConfigDict, ValidationError

from .. import config
from .dataset import CamelModel
from .errors import AuthenticationFailed, UserNotFound, ValidationFailed

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated=["bcrypt"])

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6

MSG_REQUIRED_FIELDS = "Sva obavezna polja moraju biti popunjena"
MSG_PASSWORD_TOO_SHORT = f"Lozinka mora imati najmanje {MIN_PASSWORD_LENGTH} karaktera"
MSG_INVALID_EMAIL = "Nevažeća email adresa"
MSG_EMAIL_TAKEN = "Korisnik sa ovom email adresom već postoji"
MSG_LOGIN_REQUIRED = "Email i lozinka su obavezni"
MSG_BAD_CREDENTIALS = "Pogrešna email adresa ili lozinka"
MSG_UNAUTHORIZED = "Nije autorizovano"
MSG_USER_NOT_FOUND = "Korisnik nije pronađen"
MSG_UPDATES_REQUIRED = "Ažuriranja su obavezna"
MSG_INVALID_UPDATE = "Nevažeći podaci za ažuriranje"

# Never writable through a profile update; credentials only live hashed in "passwords".
_PROTECTED_FIELDS = {"id", "email", "createdAt", "created_at", "password", "passwords"}


class User(CamelModel):
    model_config = ConfigDict(extra="allow")

    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    avatar: Optional[str] = None
    created_at: str


@dataclass
class AuthResult:
    user: User
    token: str


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def is_password_hash(value: str) -> bool:
    return bool(value) and pwd_context.identify(value) is not None


class UserStore:
    """Read-modify-write access to the users JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.lock = RLock()

    def read(self) -> Dict[str, Any]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {"users": [], "passwords": {}}
        except (OSError, ValueError) as exc:
            logger.warning("Error reading users file %s: %s", self.path, exc)
            return {"users": [], "passwords": {}}
        data.setdefault("users", [])
        data.setdefault("passwords", {})
        return data

    def write(self, data: Mapping[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp_path.replace(self.path)


def _find_by_email(users: List[dict], email: str) -> Optional[dict]:
    email = email.lower()
    return next((u for u in users if str(u.get("email", "")).lower() == email), None)


def _find_by_id(users: List[dict], user_id: int) -> Optional[dict]:
    return next((u for u in users if u.get("id") == user_id), None)


def _clean(value: Optional[str]) -> str:
    return value.strip() if isinstance(value, str) else ""


class AuthService:
    def __init__(
        self,
        store: UserStore,
        secret_key: str = config.SECRET_KEY,
        algorithm: str = config.JWT_ALGORITHM,
        expire_minutes: int = config.ACCESS_TOKEN_EXPIRE_MINUTES,
    ):
        self.store = store
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    # -- tokens ---------------------------------------------------------

    def create_token(self, user: User) -> str:
        expire = datetime.now(timezone.utc) + timedelta(minutes=self.expire_minutes)
        claims = {"sub": str(user.id), "email": user.email, "exp": expire}
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: str) -> Optional[int]:
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
            return int(payload["sub"])
        except (JWTError, KeyError, TypeError, ValueError):
            return None

    # -- operations -----------------------------------------------------

    def register(
        self,
        first_name: Optional[str],
        last_name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        phone: Optional[str] = None,
    ) -> AuthResult:
        if not (_clean(first_name) and _clean(last_name) and _clean(email) and password):
            raise ValidationFailed(MSG_REQUIRED_FIELDS)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationFailed(MSG_PASSWORD_TOO_SHORT)
        email = _clean(email).lower()
        if not EMAIL_PATTERN.match(email):
            raise ValidationFailed(MSG_INVALID_EMAIL)

        hashed = hash_password(password)
        with self.store.lock:
            data = self.store.read()
            if _find_by_email(data["users"], email):
                raise ValidationFailed(MSG_EMAIL_TAKEN)
            user_id = int(time.time() * 1000)
            existing_ids = [u.get("id", 0) for u in data["users"]]
            if existing_ids and user_id <= max(existing_ids):
                user_id = max(existing_ids) + 1
            user = User(
                id=user_id,
                first_name=_clean(first_name),
                last_name=_clean(last_name),
                email=email,
                phone=_clean(phone) or None,
                created_at=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            )
            data["users"].append(user.model_dump(by_alias=True, exclude_none=True))
            data["passwords"][email] = hashed
            self.store.write(data)
        logger.info("Registered user %s", user.id)
        return AuthResult(user=user, token=self.create_token(user))

    def login(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        if not _clean(email) or not password:
            raise ValidationFailed(MSG_LOGIN_REQUIRED)
        email = _clean(email).lower()
        with self.store.lock:
            data = self.store.read()
            record = _find_by_email(data["users"], email)
            stored = data["passwords"].get(email, "")
            if record is None or not is_password_hash(stored):
                raise AuthenticationFailed(MSG_BAD_CREDENTIALS)
            valid, new_hash = pwd_context.verify_and_update(password, stored)
            if not valid:
                raise AuthenticationFailed(MSG_BAD_CREDENTIALS)
            if new_hash:
                data["passwords"][email] = new_hash
                self.store.write(data)
        user = User.model_validate(record)
        return AuthResult(user=user, token=self.create_token(user))

    def get_current_user(self, token: Optional[str]) -> Optional[User]:
        if not token:
            return None
        user_id = self.decode_token(token)
        if user_id is None:
            return None
        record = _find_by_id(self.store.read()["users"], user_id)
        return User.model_validate(record) if record else None

    def authenticate(self, token: Optional[str]) -> int:
        user_id = self.decode_token(token) if token else None
        if user_id is None:
            raise AuthenticationFailed(MSG_UNAUTHORIZED)
        return user_id

    def require_user(self, token: Optional[str]) -> User:
        user_id = self.authenticate(token)
        record = _find_by_id(self.store.read()["users"], user_id)
        if record is None:
            raise UserNotFound(MSG_USER_NOT_FOUND)
        return User.model_validate(record)

    def update_user(self, token: Optional[str], fields: Optional[Mapping[str, Any]]) -> User:
        user_id = self.authenticate(token)
        if not fields:
            raise ValidationFailed(MSG_UPDATES_REQUIRED)
        aliases = {name: field.alias or name for name, field in User.model_fields.items()}
        updates = {aliases.get(k, k): v for k, v in fields.items() if k not in _PROTECTED_FIELDS}
        with self.store.lock:
            data = self.store.read()
            record = _find_by_id(data["users"], user_id)
            if record is None:
                raise UserNotFound(MSG_USER_NOT_FOUND)
            merged = {**record, **updates}
            try:
                user = User.model_validate(merged)
            except ValidationError as exc:
                raise ValidationFailed(MSG_INVALID_UPDATE) from exc
            record.update(updates)
            self.store.write(data)
        return user


def migrate_plaintext_passwords(store: UserStore) -> int:
    """Hash every stored credential that is not already a recognised hash.

    Returns the number of rows rewritten. Safe to run more than once.
    """
    with store.lock:
        data = store.read()
        migrated = 0
        for email, value in list(data["passwords"].items()):
            if not value or is_password_hash(value):
                continue
            data["passwords"][email] = hash_password(value)
            migrated += 1
        if migrated:
            store.write(data)
    return migrated
