from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from wheelapi.config import settings
from wheelapi.core.exceptions import AuthenticationError, AuthorizationError
from wheelapi.core.security import decode_identity_token
from wheelapi.schemas.account import Identity

# JWT Bearer 토큰 스킴
security = HTTPBearer(auto_error=False)


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Identity:
    """필수 사용자 인증 - 유효한 토큰이 필요함"""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return decode_identity_token(credentials.credentials, settings)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


def require_staff(
    identity: Identity = Depends(get_current_identity),
) -> Identity:
    """경품 교환 담당 이상 권한"""
    if not identity.is_staff:
        raise AuthorizationError("Staff access required")
    return identity


def require_admin(
    identity: Identity = Depends(get_current_identity),
) -> Identity:
    """관리자 권한이 필요한 엔드포인트용 의존성"""
    if not identity.is_admin:
        raise AuthorizationError("Admin access required")
    return identity
