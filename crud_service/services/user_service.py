"""사용자 서비스: 사용자 계정 CRUD 및 비밀번호 관리 비즈니스 로직.

User Service: Business logic for user account CRUD and password lifecycle.
Composes a ``BaseService[User]`` for the generic contract and adds:

- a non-empty password is required on creation,
- updates may only name the whitelisted profile fields, never with a null,
- a new password is bcrypt-hashed before it is written.
"""

import logging
from collections.abc import Mapping
from typing import Any, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from crud_service.models.user import User
from crud_service.repositories.user_repository import UserRepository, user_repository
from crud_service.schemas.pagination import ListParams, PaginatedResult
from crud_service.schemas.user import UserUpdate
from crud_service.services.base_service import (
    STORAGE_ERRORS,
    BaseService,
    UpdateData,
    to_update_data,
    validate_actor,
)
from crud_service.utils.exceptions import (
    CredentialHashError,
    BadRequestError,
    DuplicateError,
    EmptyCredentialError,
    RepositoryReadError,
)
from crud_service.utils.password import hash_password, verify_password

logger = logging.getLogger(__name__)

# 수정 가능한 필드: 비밀번호와 id는 절대 포함하지 않음
# Fields an update may change; password and id are never listed
_MUTABLE_FIELDS: tuple[str, ...] = ("name", "account", "status", "type")

# 비밀번호 해시가 저장되는 컬럼: Column holding the password hash
_CREDENTIAL_FIELD: str = "password"


class UserService:
    """사용자 관련 비즈니스 로직을 처리하는 서비스.

    Service handling user account business logic.
    """

    def __init__(self, repository: UserRepository = user_repository) -> None:
        self.repository: UserRepository = repository
        self._base: BaseService[User] = BaseService(
            repository, entity_name="User", entity_plural="users"
        )

    def _hash(self, password: str) -> str:
        """비밀번호를 해싱합니다: Hash a password, hiding bcrypt errors from callers."""
        try:
            return hash_password(password)
        except (TypeError, ValueError) as exc:
            logger.error("Failed to hash password: %s", exc)
            raise CredentialHashError() from None

    def _build_update_data(
        self,
        data: UpdateData,
        new_password: str = "",
    ) -> dict[str, Any]:
        """화이트리스트 필드만으로 변경 데이터를 구성합니다.

        Build the field changes for a user update.
        ``data`` may only name ``_MUTABLE_FIELDS`` and none of them may be
        ``None`` (every profile column is NOT NULL). A non-empty
        ``new_password`` adds its hash under the credential field.

        Args:
            data: 사용자 패치 (User patch schema or mapping)
            new_password: 새 비밀번호, 빈 문자열이면 변경 없음
                          (New password; empty leaves it unchanged)

        Returns:
            dict[str, Any]: 레포지토리에 전달할 변경 데이터 (Changes for the repository)

        Raises:
            BadRequestError: 수정 불가 필드, null 값, 또는 변경 사항이 없을 때
                             (Non-whitelisted field, null value, or nothing to change)
            CredentialHashError: 해싱 실패 시 (Hashing failed)
        """
        patch: dict[str, Any] = to_update_data(data)

        rejected: list[str] = sorted(str(field) for field in patch if field not in _MUTABLE_FIELDS)
        if rejected:
            raise BadRequestError(f"Fields cannot be updated: {', '.join(rejected)}")

        nulls: list[str] = [field for field, value in patch.items() if value is None]
        if nulls:
            raise BadRequestError(f"Fields must not be null: {', '.join(nulls)}")

        update_data: dict[str, Any] = dict(patch)
        if new_password:
            update_data[_CREDENTIAL_FIELD] = self._hash(new_password)

        if not update_data:
            raise BadRequestError("No updatable fields were provided")
        return update_data

    async def get_all_users(
        self,
        db: AsyncSession,
        params: ListParams,
    ) -> PaginatedResult:
        """사용자 목록을 페이지 단위로 조회합니다: Page through users."""
        return await self._base.get_all(db, params)

    async def get_user_by_id(self, db: AsyncSession, user_id: int) -> User:
        """사용자를 조회합니다: Retrieve one user; raises NotFoundError."""
        return await self._base.get_by_id(db, user_id)

    async def create_user(self, db: AsyncSession, user: User) -> User:
        """사용자를 생성합니다.

        Create a user whose ``password`` already holds a hash.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 생성할 사용자 (Transient user with hashed password)

        Returns:
            User: 생성된 사용자 (Created user with its id)

        Raises:
            EmptyCredentialError: 비밀번호가 비어 있을 때 (Password is empty)
            DuplicateError: 같은 계정이 이미 존재할 때 (Account already taken)
        """
        if not user.password:
            raise EmptyCredentialError()

        # 계정 중복 확인: Check account uniqueness
        try:
            existing: User | None = await self.repository.get_by_account(db, user.account)
        except STORAGE_ERRORS:
            logger.exception("Failed to look up account %r", user.account)
            raise RepositoryReadError("An error occurred while retrieving users") from None
        if existing is not None:
            raise DuplicateError("Account already exists")

        return await self._base.create(db, user)

    async def bulk_create_users(
        self,
        db: AsyncSession,
        users: Sequence[User],
    ) -> list[User]:
        """여러 사용자를 생성합니다.

        Create several users; each must already carry a password hash.

        Raises:
            EmptyCredentialError: 비밀번호가 빈 사용자가 있을 때 (Any password empty)
        """
        if any(not user.password for user in users):
            raise EmptyCredentialError()
        return await self._base.bulk_create(db, users)

    async def update_user(
        self,
        db: AsyncSession,
        user_id: int,
        data: UserUpdate,
        actor_id: int | None,
    ) -> User:
        """사용자 정보를 수정합니다.

        Update a user's profile fields (name, account, status, type).
        The password and id are never changed through this path.

        Raises:
            BadRequestError: null 값이거나 변경 사항이 없을 때 (Null value or empty patch)
            InvalidActorError: actor_id가 유효하지 않을 때 (Invalid actor)
            NotFoundError: 사용자를 찾을 수 없을 때 (User not found)
        """
        actor: int = validate_actor(actor_id)
        update_data: dict[str, Any] = self._build_update_data(data)
        return await self._base.update(db, user_id, update_data, actor)

    async def update_user_with_password(
        self,
        db: AsyncSession,
        user_id: int,
        data: UserUpdate,
        new_password: str,
        actor_id: int | None,
    ) -> User:
        """사용자 정보와 비밀번호를 함께 수정합니다.

        Update a user's profile fields and, when ``new_password`` is not
        empty, replace the password hash.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 ID (User id)
            data: 사용자 패치 (User patch)
            new_password: 새 비밀번호, 빈 문자열이면 유지
                          (New password; empty keeps the current one)
            actor_id: 수정 요청자 ID (Acting user id)

        Raises:
            InvalidActorError: actor_id가 유효하지 않을 때 (Invalid actor)
            CredentialHashError: 해싱 실패 시 (Hashing failed)
            NotFoundError: 사용자를 찾을 수 없을 때 (User not found)
        """
        actor: int = validate_actor(actor_id)
        update_data: dict[str, Any] = self._build_update_data(data, new_password)
        return await self._base.update(db, user_id, update_data, actor)

    async def bulk_update_users(
        self,
        db: AsyncSession,
        condition: Mapping[str, Any],
        data: UpdateData,
        actor_id: int | None,
    ) -> int:
        """조건에 맞는 사용자를 일괄 수정합니다.

        Update every matching user. The same field whitelist as
        ``update_user`` applies: naming ``password`` or any other field
        outside it raises ``BadRequestError`` instead of being dropped.
        """
        actor: int = validate_actor(actor_id)
        update_data: dict[str, Any] = self._build_update_data(data)
        return await self._base.bulk_update(db, condition, update_data, actor)

    async def delete_user(self, db: AsyncSession, user_id: int) -> bool:
        return await self._base.delete(db, user_id)

    async def bulk_delete_users(self, db: AsyncSession, condition: Mapping[str, Any]) -> int:
        return await self._base.bulk_delete(db, condition)

    async def get_user_count(self, db: AsyncSession) -> int:
        return await self._base.get_count(db)

    async def create_user_with_password(
        self,
        db: AsyncSession,
        user: User,
        password: str,
    ) -> User:
        """평문 비밀번호를 해싱하여 사용자를 생성합니다.

        Hash ``password`` into the user, then create it.

        Raises:
            EmptyCredentialError: 비밀번호가 비어 있을 때 (Password is empty)
            CredentialHashError: 해싱 실패 시 (Hashing failed)
        """
        if not password:
            raise EmptyCredentialError()
        user.password = self._hash(password)
        return await self.create_user(db, user)

    def verify_user_password(self, user: User, password: str) -> bool:
        """사용자 비밀번호를 검증합니다.

        Check ``password`` against the user's stored hash.
        A missing or malformed hash never matches.
        """
        if not user.password or not password:
            return False
        try:
            return verify_password(password, user.password)
        except ValueError:
            logger.warning("Stored password hash is malformed (user_id=%s)", user.id)
            return False


# 싱글턴 인스턴스: Singleton instance
user_service: UserService = UserService()
