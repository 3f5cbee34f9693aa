"""
Authentication services
Core authentication functionality for the application
"""
import logging
from datetime import datetime, timedelta
from typing import Optional, Dict, Any, List

import bcrypt
from jose import JWTError, jwt

from app.core.config import settings
from app.core.errors import AuthError, BadRequestError, ConflictError, NotFoundError
from app.repositories.base import to_object_id
from app.repositories.users_repo import UsersRepository

logger = logging.getLogger(__name__)

USER_ROLES = ("user", "staff", "admin")


def hash_password(password: str) -> str:
    """Hash password using bcrypt"""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode(), salt).decode()


def verify_password(password: str, hash_: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), str(hash_).encode())
    except ValueError:
        # malformed stored hash
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(
        to_encode,
        settings.SECRET_KEY.get_secret_value(),
        algorithm=settings.ALGORITHM
    )


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Return the token claims, or None when the token is invalid or expired"""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY.get_secret_value(),
            algorithms=[settings.ALGORITHM]
        )
    except JWTError:
        return None
    if payload.get("sub") is None:
        return None
    return payload


def _public(user: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in user.items() if k != "password_hash"}


def create_user(email: str, password: str, name: Optional[str] = None,
                role: str = "user") -> Dict[str, Any]:
    """Create a new user; the email must be unused"""
    repo = UsersRepository()
    email = email.strip().lower()
    if repo.find_by_email(email):
        raise ConflictError(f"Email {email} is already registered")
    if role not in USER_ROLES:
        raise BadRequestError(f"Unknown role {role}")
    user = repo.create({
        "email": email,
        "name": name or email.split("@")[0],
        "password_hash": hash_password(password),
        "role": role,
        "is_active": True,
    })
    logger.info(f"Created user {email} with role {role}")
    return _public(user)


def login_user(email: str, password: str) -> Dict[str, Any]:
    repo = UsersRepository()
    user = repo.find_by_email(email)
    if not user or not verify_password(password, user.get("password_hash", "")):
        raise AuthError("Invalid email or password")
    if not user.get("is_active", True):
        raise AuthError("Account is disabled")

    token = create_access_token({
        "sub": str(user["_id"]),
        "email": user["email"],
        "role": user.get("role", "user"),
    })
    return {"access_token": token, "token_type": "bearer", "user": _public(user)}


def get_user_by_token(token: str) -> Optional[Dict[str, Any]]:
    """Resolve an active user from a bearer token"""
    raw = (token or "").strip()
    if raw.lower().startswith("bearer "):
        raw = raw[7:].strip()
    claims = decode_access_token(raw)
    if not claims:
        return None
    user = UsersRepository().find_active_by_id(claims["sub"])
    return _public(user) if user else None


def ensure_admin_user() -> Optional[Dict[str, Any]]:
    """Create the bootstrap admin configured through STOREFRONT_ADMIN_* if missing"""
    if not settings.ADMIN_EMAIL or not settings.ADMIN_PASSWORD:
        return None
    repo = UsersRepository()
    existing = repo.find_by_email(settings.ADMIN_EMAIL)
    if existing:
        return _public(existing)
    return create_user(
        settings.ADMIN_EMAIL,
        settings.ADMIN_PASSWORD.get_secret_value(),
        name="Administrator",
        role="admin",
    )


def list_users() -> List[Dict[str, Any]]:
    return UsersRepository().list_public()


def _get_user_or_404(repo: UsersRepository, user_id: str) -> Dict[str, Any]:
    user = repo.find_by_id(to_object_id(user_id, "user id"))
    if not user:
        raise NotFoundError("User", f"User with ID {user_id} not found")
    return user


def set_user_active(user_id: str, is_active: bool) -> Dict[str, Any]:
    repo = UsersRepository()
    user = _get_user_or_404(repo, user_id)
    return _public(repo.update_by_id(user["_id"], {"is_active": is_active}))


def change_role(user_id: str, role: str) -> Dict[str, Any]:
    if role not in USER_ROLES:
        raise BadRequestError(f"Unknown role {role}")
    repo = UsersRepository()
    user = _get_user_or_404(repo, user_id)
    return _public(repo.update_by_id(user["_id"], {"role": role}))
