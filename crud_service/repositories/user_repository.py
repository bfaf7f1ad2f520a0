"""사용자 레포지토리: 사용자 CRUD 쿼리.

User Repository: CRUD queries for user accounts.
Extends BaseRepository with User-specific lookups.
"""

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from crud_service.models.user import User
from crud_service.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        """UserRepository를 초기화합니다.

        Initialize the UserRepository with the User model.
        """
        super().__init__(User)

    async def get_by_account(
        self,
        db: AsyncSession,
        account: str,
    ) -> User | None:
        """로그인 계정으로 사용자를 조회합니다.

        Retrieve a user by login handle.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            account: 로그인 계정 (Login handle)

        Returns:
            User | None: 사용자 또는 None (User, or None if absent)
        """
        query: Select = select(User).where(User.account == account)
        result = await db.execute(query)
        return result.scalar_one_or_none()


# 싱글턴 인스턴스: Singleton instance
user_repository: UserRepository = UserRepository()
