from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError

from wheelapi.config import settings as default_settings, Settings
from wheelapi.core.exceptions import AuthenticationError
from wheelapi.models.account import AccountRole
from wheelapi.schemas.account import Identity


def create_identity_token(
    identity: Identity,
    settings: Settings = default_settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """identity provider 와 같은 형식의 토큰 발급 (로컬 개발/테스트용)"""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=12))
    to_encode = {
        "sub": identity.account_id,
        "name": identity.display_name,
        "email": identity.email,
        "picture": identity.avatar_url,
        "role": identity.role.value,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_identity_token(token: str, settings: Settings = default_settings) -> Identity:
    """토큰을 검증하고 Identity 를 반환"""
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError as e:
        raise AuthenticationError("Invalid or expired token") from e

    account_id = payload.get("sub")
    if not account_id:
        raise AuthenticationError("Token has no subject")

    role = payload.get("role") or AccountRole.USER.value
    try:
        role = AccountRole(role)
    except ValueError:
        raise AuthenticationError(f"Unknown role: {role}")

    return Identity(
        account_id=str(account_id),
        display_name=payload.get("name") or "",
        email=payload.get("email"),
        avatar_url=payload.get("picture"),
        role=role,
    )
