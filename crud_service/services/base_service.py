"""기본 서비스: 엔티티 타입에 독립적인 CRUD 비즈니스 로직.

Base Service: Entity-agnostic CRUD business logic.
Wraps a ``CrudRepository`` and adds the rules shared by every entity:

- Updates (single and bulk) require a positive ``actor_id``; the id is
  recorded by the repository as ``updated_by``.
- Create, delete, and read paths do not require an actor. Creation has no
  prior owner to attribute against, and deletion leaves no row to attribute.
- Repository failures (``SQLAlchemyError`` or ``RepositoryError``) are
  logged with the operation and its parameters and re-raised as user-safe
  errors. Driver detail never reaches ``detail``.

Specialized services compose a ``BaseService`` instead of subclassing it.
"""

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, Generic, Sequence

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from crud_service.repositories.base import CrudRepository, ModelType
from crud_service.schemas.pagination import ListParams, PaginatedResult, PaginationMeta
from crud_service.utils.exceptions import (
    BadRequestError,
    DuplicateError,
    InvalidActorError,
    NotFoundError,
    RepositoryError,
    RepositoryReadError,
    RepositoryWriteError,
)
from crud_service.utils.pagination import calculate_total_pages

logger = logging.getLogger(__name__)

# 레포지토리가 저장소 실패를 알리는 예외: Exceptions a repository raises for storage failures
STORAGE_ERRORS: tuple[type[Exception], ...] = (SQLAlchemyError, RepositoryError)

# PostgreSQL unique_violation SQLSTATE
_UNIQUE_VIOLATION_SQLSTATE: str = "23505"

# 부분 업데이트 데이터: 스키마(설정된 필드만) 또는 필드 매핑
# Patch data: a schema (only set fields are used) or a field mapping
UpdateData = BaseModel | Mapping[str, Any]


def validate_actor(actor_id: int | None) -> int:
    """수정 요청자 ID를 검증합니다.

    Validate the acting user's id for attributed mutations.

    Args:
        actor_id: 수정 요청자 ID (Acting user id)

    Returns:
        int: 검증된 ID (The validated id)

    Raises:
        InvalidActorError: ID가 없거나 0 이하일 때 (Missing, zero, or negative id)
    """
    if actor_id is None or isinstance(actor_id, bool) or actor_id <= 0:
        raise InvalidActorError()
    return actor_id


def to_update_data(data: UpdateData) -> dict[str, Any]:
    """패치를 필드 딕셔너리로 변환: Convert a patch to a field dict."""
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=True)
    return dict(data)


def is_unique_violation(exc: IntegrityError) -> bool:
    """유니크 제약 위반 여부: True when the integrity error is a uniqueness conflict."""
    orig = exc.orig
    if getattr(orig, "sqlstate", None) == _UNIQUE_VIOLATION_SQLSTATE:
        return True
    return "unique" in str(orig).lower()


class BaseService(Generic[ModelType]):
    """제네릭 CRUD 서비스.

    Generic CRUD service bound to one repository.

    Attributes:
        repository: 레포지토리 (Repository the service delegates to)
        entity_name: 메시지용 단수 이름 (Singular name used in messages)
        entity_plural: 메시지용 복수 이름 (Plural name used in messages)
    """

    def __init__(
        self,
        repository: CrudRepository[ModelType],
        entity_name: str = "Record",
        entity_plural: str = "records",
    ) -> None:
        self.repository: CrudRepository[ModelType] = repository
        self.entity_name: str = entity_name
        self.entity_plural: str = entity_plural

    @contextmanager
    def _write_errors(self, operation: str, **context: Any) -> Iterator[None]:
        """쓰기 실패를 로깅하고 사용자용 예외로 변환합니다.

        Log a failed write and convert it to a user-safe exception:
        a uniqueness conflict becomes ``DuplicateError``, any other integrity
        violation (NOT NULL, foreign key, check) becomes ``BadRequestError``,
        and remaining storage failures become ``RepositoryWriteError``.
        """
        try:
            yield
        except IntegrityError as exc:
            logger.warning(
                "%s %s violated a constraint %s: %s",
                self.entity_name, operation, context, exc.orig,
            )
            if is_unique_violation(exc):
                raise DuplicateError(
                    f"{self.entity_name} conflicts with an existing record"
                ) from None
            raise BadRequestError(
                f"{self.entity_name} data violates a required constraint"
            ) from None
        except STORAGE_ERRORS:
            logger.exception("%s %s failed %s", self.entity_name, operation, context)
            raise RepositoryWriteError(
                f"An error occurred while saving {self.entity_plural}"
            ) from None

    async def get_all(
        self,
        db: AsyncSession,
        params: ListParams,
    ) -> PaginatedResult:
        """페이지네이션이 적용된 목록을 조회합니다.

        Retrieve a page of entities with pagination metadata.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            params: 목록 조회 파라미터 (List parameters)

        Returns:
            PaginatedResult: 항목 및 메타데이터 (Items and pagination metadata)

        Raises:
            RepositoryReadError: 조회 실패 시 (Repository read failed)
        """
        try:
            entities, total_count = await self.repository.get_page(db, params)
        except STORAGE_ERRORS:
            logger.exception(
                "Failed to fetch %s (page=%d, per_page=%d)",
                self.entity_plural, params.page, params.per_page,
            )
            raise RepositoryReadError(
                f"An error occurred while retrieving {self.entity_plural}"
            ) from None

        return PaginatedResult(
            data=list(entities),
            meta=PaginationMeta(
                current_page=params.page,
                per_page=params.per_page,
                total_items=total_count,
                total_pages=calculate_total_pages(total_count, params.per_page),
            ),
        )

    async def get_by_id(self, db: AsyncSession, record_id: int) -> ModelType:
        """ID로 단일 엔티티를 조회합니다.

        Retrieve one entity by id.

        Raises:
            NotFoundError: 없거나 조회에 실패했을 때 (Absent, or the read failed)
        """
        try:
            entity: ModelType | None = await self.repository.get_by_id(db, record_id)
        except STORAGE_ERRORS as exc:
            logger.warning("%s not found (id=%s): %s", self.entity_name, record_id, exc)
            raise NotFoundError(f"{self.entity_name} not found") from None

        if entity is None:
            logger.warning("%s not found (id=%s)", self.entity_name, record_id)
            raise NotFoundError(f"{self.entity_name} not found")
        return entity

    async def create(self, db: AsyncSession, entity: ModelType) -> ModelType:
        """엔티티를 생성합니다: Create an entity. No actor is required."""
        with self._write_errors("create"):
            return await self.repository.create(db, entity)

    async def bulk_create(
        self,
        db: AsyncSession,
        entities: Sequence[ModelType],
    ) -> list[ModelType]:
        """여러 엔티티를 생성합니다: Create several entities. No actor is required."""
        with self._write_errors("bulk create", count=len(entities)):
            return await self.repository.bulk_create(db, entities)

    async def update(
        self,
        db: AsyncSession,
        record_id: int,
        data: UpdateData,
        actor_id: int | None,
    ) -> ModelType:
        """엔티티를 부분 업데이트합니다.

        Partially update an entity on behalf of ``actor_id``.
        The existence check and the write are separate repository calls; a
        row deleted in between is reported by the repository and also raised
        as ``NotFoundError``.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 대상 ID (Target id)
            data: 변경할 필드 (Patch schema or field mapping)
            actor_id: 수정 요청자 ID (Acting user id)

        Returns:
            ModelType: 업데이트된 엔티티 (The updated entity)

        Raises:
            InvalidActorError: actor_id가 유효하지 않을 때 (Invalid actor)
            NotFoundError: 대상이 없을 때 (Target absent)
        """
        actor: int = validate_actor(actor_id)

        # 존재 여부 사전 확인: Existence pre-check
        await self.get_by_id(db, record_id)

        update_data: dict[str, Any] = to_update_data(data)
        with self._write_errors("update", id=record_id, actor_id=actor):
            updated: ModelType | None = await self.repository.update(
                db, record_id, update_data, actor
            )

        if updated is None:
            logger.warning(
                "%s disappeared before update (id=%s)", self.entity_name, record_id
            )
            raise NotFoundError(f"{self.entity_name} not found")
        return updated

    async def bulk_update(
        self,
        db: AsyncSession,
        condition: Mapping[str, Any],
        data: UpdateData,
        actor_id: int | None,
    ) -> int:
        """조건에 맞는 엔티티를 일괄 업데이트합니다.

        Update every entity matching ``condition`` on behalf of ``actor_id``.
        Matching zero rows is not an error.

        Returns:
            int: 변경된 행 수 (Number of matched rows)
        """
        actor: int = validate_actor(actor_id)
        update_data: dict[str, Any] = to_update_data(data)
        with self._write_errors("bulk update", condition=dict(condition), actor_id=actor):
            return await self.repository.bulk_update(db, condition, update_data, actor)

    async def delete(self, db: AsyncSession, record_id: int) -> bool:
        """엔티티를 삭제합니다: Delete an entity. Returns False when absent."""
        with self._write_errors("delete", id=record_id):
            return await self.repository.delete(db, record_id)

    async def bulk_delete(self, db: AsyncSession, condition: Mapping[str, Any]) -> int:
        """조건에 맞는 엔티티를 일괄 삭제합니다: Returns the deleted row count."""
        with self._write_errors("bulk delete", condition=dict(condition)):
            return await self.repository.bulk_delete(db, condition)

    async def get_count(self, db: AsyncSession) -> int:
        """전체 엔티티 수를 조회합니다: Total number of entities."""
        try:
            return await self.repository.count(db)
        except STORAGE_ERRORS:
            logger.exception("Failed to count %s", self.entity_plural)
            raise RepositoryReadError(
                f"An error occurred while retrieving {self.entity_plural}"
            ) from None
