"""FastAPI 의존성 주입 모듈 — 인증 및 호출자 컨텍스트.

FastAPI dependency injection module — Authentication and access context.
Tokens are issued by the external auth service; this module only verifies
them and resolves the caller's profiles and relationships.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. decode_token()이 JWT를 검증하고 페이로드를 반환
       (decode_token verifies JWT and returns payload)
    3. 페이로드의 "sub" 필드로 DB에서 사용자를 조회, 활성 상태 확인
       (User is fetched by "sub" and checked for active status)
    4. 역할에 따라 대상자/제공자 프로필과 활성 관계를 조회
       (Client or caregiver profile and active relationships are loaded)
"""

from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.database import get_db
from care_scheduler.models.enums import UserRole
from care_scheduler.models.user import User
from care_scheduler.repositories.user_repository import user_repository
from care_scheduler.services.permission_service import AccessContext
from care_scheduler.utils.jwt import decode_token

# HTTP Bearer 토큰 추출기 — Authorization 헤더에서 JWT 토큰 추출
# (Extracts JWT token from Authorization: Bearer <token> header)
security: HTTPBearer = HTTPBearer()


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """JWT 토큰에서 현재 인증된 사용자를 추출합니다.

    Decode JWT from the Authorization header and return the authenticated user.

    Raises:
        HTTPException(401): 토큰이 유효하지 않거나 만료됨 (Invalid or expired token)
        HTTPException(401): 사용자를 찾을 수 없거나 비활성 (User not found or inactive)
    """
    try:
        payload: dict = decode_token(credentials.credentials)
        # 토큰 타입 검증 — Reject refresh tokens used as access tokens
        if payload.get("type") != "access":
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token type")
        user_id: str | None = payload.get("sub")
        if user_id is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
        parsed_id: UUID = UUID(user_id)
    except HTTPException:
        raise
    except (jwt.ExpiredSignatureError, jwt.InvalidTokenError, KeyError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

    user: User | None = await user_repository.get_by_id(db, parsed_id)
    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")

    return user


async def get_access_context(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AccessContext:
    """인증된 사용자로 호출자 권한 컨텍스트를 구성합니다.

    Build the AccessContext for the authenticated user: the owned client
    profile for CLIENT, the caregiver profile and its ACTIVE client
    relationships for CAREGIVER.

    Returns:
        AccessContext: 호출자 컨텍스트 (Caller context)

    Raises:
        HTTPException(403): 역할에 맞는 프로필이 없을 때 (Role without its profile)
    """
    role: UserRole = UserRole(current_user.role)

    if role == UserRole.CLIENT:
        client = await user_repository.get_client_profile_by_user(db, current_user.id)
        if client is None:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Client profile not found")
        return AccessContext(user_id=current_user.id, role=role, client_id=client.id)

    if role == UserRole.CAREGIVER:
        caregiver = await user_repository.get_caregiver_profile_by_user(db, current_user.id)
        if caregiver is None:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Caregiver profile not found")
        active: list[UUID] = await user_repository.get_active_client_ids(db, caregiver.id)
        return AccessContext(
            user_id=current_user.id,
            role=role,
            caregiver_id=caregiver.id,
            active_client_ids=frozenset(active),
        )

    return AccessContext(user_id=current_user.id, role=role)
