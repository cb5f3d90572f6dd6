"""사용자 레포지토리 — 사용자, 프로필, 관계 조회.

User Repository — Lookups over users, client/caregiver profiles and
caregiver ↔ client relationships. Used to build the caller's access
context and to resolve display names and notification recipients.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.models.enums import RelationshipStatus
from care_scheduler.models.user import CaregiverClientRelationship, CaregiverProfile, ClientProfile, User
from care_scheduler.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for users and their profiles.
    """

    def __init__(self) -> None:
        """UserRepository를 초기화합니다.

        Initialize the UserRepository with the User model.
        """
        super().__init__(User)

    async def get_client_profile_by_user(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> ClientProfile | None:
        """사용자 ID로 대상자 프로필을 조회합니다 (Client profile owned by a user)."""
        result = await db.execute(select(ClientProfile).where(ClientProfile.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_caregiver_profile_by_user(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> CaregiverProfile | None:
        """사용자 ID로 제공자 프로필을 조회합니다 (Caregiver profile owned by a user)."""
        result = await db.execute(select(CaregiverProfile).where(CaregiverProfile.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_client_profile(self, db: AsyncSession, client_id: UUID) -> ClientProfile | None:
        result = await db.execute(select(ClientProfile).where(ClientProfile.id == client_id))
        return result.scalar_one_or_none()

    async def get_caregiver_profile(self, db: AsyncSession, caregiver_id: UUID) -> CaregiverProfile | None:
        result = await db.execute(select(CaregiverProfile).where(CaregiverProfile.id == caregiver_id))
        return result.scalar_one_or_none()

    async def get_active_client_ids(
        self,
        db: AsyncSession,
        caregiver_id: UUID,
    ) -> list[UUID]:
        """제공자와 활성 관계인 대상자 ID 목록을 조회합니다.

        Retrieve the client IDs the caregiver has an ACTIVE relationship with.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            caregiver_id: 제공자 프로필 UUID (Caregiver profile UUID)

        Returns:
            list[UUID]: 대상자 ID 목록 (Client profile UUIDs)
        """
        result = await db.execute(
            select(CaregiverClientRelationship.client_id).where(
                CaregiverClientRelationship.caregiver_id == caregiver_id,
                CaregiverClientRelationship.status == RelationshipStatus.ACTIVE.value,
            )
        )
        return list(result.scalars().all())

    async def has_active_relationship(
        self,
        db: AsyncSession,
        caregiver_id: UUID,
        client_id: UUID,
    ) -> bool:
        """제공자-대상자 활성 관계 여부를 확인합니다.

        Check whether an ACTIVE relationship exists for the pair.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            caregiver_id: 제공자 프로필 UUID (Caregiver profile UUID)
            client_id: 대상자 프로필 UUID (Client profile UUID)

        Returns:
            bool: 활성 관계 존재 여부 (Whether the relationship is active)
        """
        query: Select = (
            select(func.count())
            .select_from(CaregiverClientRelationship)
            .where(
                CaregiverClientRelationship.caregiver_id == caregiver_id,
                CaregiverClientRelationship.client_id == client_id,
                CaregiverClientRelationship.status == RelationshipStatus.ACTIVE.value,
            )
        )
        count: int = (await db.execute(query)).scalar() or 0
        return count > 0

    async def get_client_names(
        self,
        db: AsyncSession,
        client_ids: Sequence[UUID],
    ) -> dict[UUID, str]:
        """대상자 ID → 이름 매핑을 조회합니다 (Resolve client names in one query)."""
        if not client_ids:
            return {}
        result = await db.execute(
            select(ClientProfile.id, ClientProfile.name).where(ClientProfile.id.in_(list(set(client_ids))))
        )
        return {row.id: row.name for row in result.all()}

    async def get_caregiver_names(
        self,
        db: AsyncSession,
        caregiver_ids: Sequence[UUID],
    ) -> dict[UUID, str]:
        """제공자 ID → 이름 매핑을 조회합니다 (Resolve caregiver names in one query)."""
        if not caregiver_ids:
            return {}
        result = await db.execute(
            select(CaregiverProfile.id, CaregiverProfile.name).where(CaregiverProfile.id.in_(list(set(caregiver_ids))))
        )
        return {row.id: row.name for row in result.all()}

    async def get_client_user(self, db: AsyncSession, client_id: UUID) -> User | None:
        """대상자 프로필의 소유 사용자를 조회합니다 (User owning a client profile)."""
        result = await db.execute(
            select(User).join(ClientProfile, ClientProfile.user_id == User.id).where(ClientProfile.id == client_id)
        )
        return result.scalar_one_or_none()

    async def get_caregiver_user(self, db: AsyncSession, caregiver_id: UUID) -> User | None:
        """제공자 프로필의 소유 사용자를 조회합니다 (User owning a caregiver profile)."""
        result = await db.execute(
            select(User).join(CaregiverProfile, CaregiverProfile.user_id == User.id).where(CaregiverProfile.id == caregiver_id)
        )
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
