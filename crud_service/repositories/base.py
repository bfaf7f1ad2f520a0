"""기본 CRUD 레포지토리: 모든 레포지토리의 부모 클래스.

Base CRUD Repository: Parent class for all domain repositories.
``CrudRepository`` is the interface services depend on; ``BaseRepository``
implements it with SQLAlchemy async sessions. Repositories perform storage
I/O only and leave business rules to the services. Writes are flushed,
never committed; the session owner decides the transaction boundary.

Usage:
    class UserRepository(BaseRepository[User]):
        def __init__(self) -> None:
            super().__init__(User)
"""

from collections.abc import Mapping
from typing import Any, Generic, Protocol, Sequence, TypeVar

from sqlalchemy import ColumnElement, Select, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from crud_service.database import Base
from crud_service.schemas.pagination import ListParams
from crud_service.utils.exceptions import BadRequestError
from crud_service.utils.pagination import paginate

# 제네릭 타입 변수: SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)

# 업데이트로 변경할 수 없는 컬럼: Columns never written from update data
_PROTECTED_COLUMNS: frozenset[str] = frozenset({"id", "created_at", "updated_at", "updated_by"})


class CrudRepository(Protocol[ModelType]):
    """서비스가 의존하는 레포지토리 인터페이스.

    Persistence contract consumed by ``BaseService``.
    Implementations signal storage failures with ``SQLAlchemyError`` or
    ``RepositoryError``; anything else is treated as a programming error
    and propagates unchanged.
    """

    async def get_page(
        self, db: AsyncSession, params: ListParams
    ) -> tuple[Sequence[ModelType], int]: ...

    async def get_by_id(self, db: AsyncSession, record_id: int) -> ModelType | None: ...

    async def create(self, db: AsyncSession, entity: ModelType) -> ModelType: ...

    async def bulk_create(
        self, db: AsyncSession, entities: Sequence[ModelType]
    ) -> list[ModelType]: ...

    async def update(
        self,
        db: AsyncSession,
        record_id: int,
        update_data: Mapping[str, Any],
        actor_id: int,
    ) -> ModelType | None: ...

    async def bulk_update(
        self,
        db: AsyncSession,
        condition: Mapping[str, Any],
        update_data: Mapping[str, Any],
        actor_id: int,
    ) -> int: ...

    async def delete(self, db: AsyncSession, record_id: int) -> bool: ...

    async def bulk_delete(self, db: AsyncSession, condition: Mapping[str, Any]) -> int: ...

    async def count(self, db: AsyncSession) -> int: ...


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Generic CRUD repository providing common database operations.

    Attributes:
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        """레포지토리를 초기화합니다.

        Initialize the repository with a model class.

        Args:
            model: 이 레포지토리가 관리할 SQLAlchemy 모델 클래스
                   (SQLAlchemy model class this repository manages)
        """
        self.model: type[ModelType] = model

    def _has_column(self, name: Any) -> bool:
        return isinstance(name, str) and name in self.model.__table__.c

    def _clause(self, column_name: str, value: Any) -> ColumnElement[bool]:
        """컬럼 비교식: List/tuple/set values become ``IN``, others ``==``."""
        column = getattr(self.model, column_name)
        if isinstance(value, (list, tuple, set, frozenset)):
            return column.in_(list(value))
        return column == value

    def _where(self, condition: Mapping[str, Any]) -> list[ColumnElement[bool]]:
        """일괄 작업 조건을 WHERE 절로 변환합니다.

        Build WHERE clauses for a bulk predicate.
        List/tuple/set values become ``IN`` clauses.

        Raises:
            BadRequestError: 조건이 비었거나 존재하지 않는 컬럼일 때
                             (Empty condition or unknown column)
        """
        # 빈 조건은 테이블 전체에 적용되므로 거부: An empty predicate would match every row
        if not condition:
            raise BadRequestError("Bulk operations require a non-empty condition")

        clauses: list[ColumnElement[bool]] = []
        for column_name, value in condition.items():
            if not self._has_column(column_name):
                raise BadRequestError(f"Unknown condition field: {column_name}")
            clauses.append(self._clause(column_name, value))
        return clauses

    def _writable(self, update_data: Mapping[str, Any]) -> dict[str, Any]:
        """모델 컬럼에 해당하는 변경 필드만 남깁니다.

        Keep only keys that are writable columns of the model.

        Raises:
            BadRequestError: 변경할 필드가 하나도 없을 때 (Nothing writable left)
        """
        writable: dict[str, Any] = {
            field: value
            for field, value in update_data.items()
            if self._has_column(field) and field not in _PROTECTED_COLUMNS
        }
        if not writable:
            raise BadRequestError("No updatable fields were provided")
        return writable

    async def get_page(
        self,
        db: AsyncSession,
        params: ListParams,
    ) -> tuple[Sequence[ModelType], int]:
        """페이지네이션이 적용된 레코드 목록을 조회합니다.

        Retrieve a page of records with optional filters and sorting.
        Filter values follow the bulk predicate rules (sequences match with
        ``IN``).
        Unknown filter keys and ``None`` values are ignored; an unknown
        ``sort_by`` falls back to ordering by id.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            params: 목록 조회 파라미터 (List parameters)

        Returns:
            tuple[Sequence[ModelType], int]: (레코드 목록, 전체 개수)
                                             (List of records, total count)
        """
        query: Select = select(self.model)

        # 동적 필터 적용: Dynamic filter application
        for column_name, value in params.filters.items():
            if self._has_column(column_name) and value is not None:
                query = query.where(self._clause(column_name, value))

        sort_column = (
            getattr(self.model, params.sort_by)
            if self._has_column(params.sort_by)
            else self.model.id
        )
        query = query.order_by(
            sort_column.desc() if params.order == "desc" else sort_column.asc()
        )

        return await paginate(db, query, params.page, params.per_page)

    async def get_by_id(
        self,
        db: AsyncSession,
        record_id: int,
    ) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다.

        Retrieve a single record by its id.

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        query: Select = select(self.model).where(self.model.id == record_id)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def create(
        self,
        db: AsyncSession,
        entity: ModelType,
    ) -> ModelType:
        """새 레코드를 생성합니다.

        Persist a new record; the database assigns its id.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            entity: 저장할 모델 인스턴스 (Transient model instance to persist)

        Returns:
            ModelType: id가 할당된 레코드 (The created record with its id)
        """
        db.add(entity)
        await db.flush()
        await db.refresh(entity)
        return entity

    async def bulk_create(
        self,
        db: AsyncSession,
        entities: Sequence[ModelType],
    ) -> list[ModelType]:
        """여러 레코드를 한 번에 생성합니다.

        Persist several new records in one flush.
        """
        db.add_all(entities)
        await db.flush()
        return list(entities)

    async def update(
        self,
        db: AsyncSession,
        record_id: int,
        update_data: Mapping[str, Any],
        actor_id: int,
    ) -> ModelType | None:
        """기존 레코드를 업데이트합니다.

        Update an existing record by its id and record the acting user.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 업데이트할 레코드 ID (Id of the record to update)
            update_data: 업데이트할 필드와 값 (Fields and values to update)
            actor_id: 수정자 ID (Acting user id, stored in updated_by)

        Returns:
            ModelType | None: 업데이트된 레코드 또는 None (Updated record, or None if absent)

        Raises:
            BadRequestError: 변경 가능한 필드가 없을 때 (No writable field in update_data)
        """
        changes: dict[str, Any] = self._writable(update_data)
        db_obj: ModelType | None = await self.get_by_id(db, record_id)
        if db_obj is None:
            return None

        for field, value in changes.items():
            setattr(db_obj, field, value)
        db_obj.updated_by = actor_id

        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def bulk_update(
        self,
        db: AsyncSession,
        condition: Mapping[str, Any],
        update_data: Mapping[str, Any],
        actor_id: int,
    ) -> int:
        """조건에 맞는 레코드를 일괄 업데이트합니다.

        Update every record matching ``condition``.

        Returns:
            int: 변경된 행 수 (Number of matched rows, may be 0)

        Raises:
            BadRequestError: 조건이 잘못되었거나 변경할 필드가 없을 때
                             (Bad condition, or no writable field in update_data)
        """
        statement = (
            update(self.model)
            .where(*self._where(condition))
            .values(**self._writable(update_data), updated_by=actor_id)
        )
        result = await db.execute(statement)
        await db.flush()
        return result.rowcount or 0

    async def delete(
        self,
        db: AsyncSession,
        record_id: int,
    ) -> bool:
        """레코드를 삭제합니다.

        Delete a record by its id.

        Returns:
            bool: 삭제 성공 여부 (Whether a record was deleted)
        """
        db_obj: ModelType | None = await self.get_by_id(db, record_id)
        if db_obj is None:
            return False

        await db.delete(db_obj)
        await db.flush()
        return True

    async def bulk_delete(
        self,
        db: AsyncSession,
        condition: Mapping[str, Any],
    ) -> int:
        """조건에 맞는 레코드를 일괄 삭제합니다.

        Delete every record matching ``condition``.

        Returns:
            int: 삭제된 행 수 (Number of deleted rows)
        """
        result = await db.execute(delete(self.model).where(*self._where(condition)))
        await db.flush()
        return result.rowcount or 0

    async def count(self, db: AsyncSession) -> int:
        """전체 레코드 수: Total number of records."""
        query: Select = select(func.count()).select_from(self.model)
        return (await db.execute(query)).scalar() or 0

