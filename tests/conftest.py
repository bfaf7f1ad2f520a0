"""테스트 인프라: 임시 SQLite DB, 세션, 인메모리 레포지토리 픽스처.

Test infrastructure: Temporary SQLite database, session, and in-memory
repository fixtures. Repository tests run against a per-test aiosqlite file;
service tests use ``FakeUserRepository`` so every repository call can be
inspected.
"""

from collections.abc import AsyncGenerator, Mapping
from pathlib import Path
from typing import Any, Sequence
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from crud_service.config import settings
from crud_service.database import Base
from crud_service.models import User  # noqa: F401: register models with metadata
from crud_service.schemas.pagination import ListParams

# bcrypt 최소 비용: Cheapest bcrypt cost keeps hashing tests fast
settings.BCRYPT_ROUNDS = 4


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 테스트마다 새 SQLite 파일에 스키마를 생성합니다."""
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def session() -> MagicMock:
    """서비스 테스트용 세션 자리표시자: Stand-in session for fake repositories."""
    return MagicMock(spec=AsyncSession)


# ---------------------------------------------------------------------------
# 인메모리 레포지토리: In-memory repository
# ---------------------------------------------------------------------------
class FakeUserRepository:
    """UserRepository와 같은 인터페이스의 인메모리 구현.

    In-memory stand-in for ``UserRepository`` that records every call.
    """

    def __init__(self) -> None:
        self.rows: dict[int, User] = {}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self._next_id: int = 1

    def called(self, name: str) -> list[tuple[Any, ...]]:
        return [args for call, args in self.calls if call == name]

    def _matches(self, user: User, condition: Mapping[str, Any]) -> bool:
        return all(getattr(user, k) == v for k, v in condition.items())

    async def get_page(self, db: Any, params: ListParams) -> tuple[list[User], int]:
        self.calls.append(("get_page", (params,)))
        ordered = [self.rows[k] for k in sorted(self.rows)]
        start = (params.page - 1) * params.per_page
        return ordered[start:start + params.per_page], len(ordered)

    async def get_by_id(self, db: Any, record_id: int) -> User | None:
        self.calls.append(("get_by_id", (record_id,)))
        return self.rows.get(record_id)

    async def get_by_account(self, db: Any, account: str) -> User | None:
        self.calls.append(("get_by_account", (account,)))
        return next((u for u in self.rows.values() if u.account == account), None)

    async def create(self, db: Any, entity: User) -> User:
        self.calls.append(("create", (entity,)))
        entity.id = self._next_id
        self._next_id += 1
        self.rows[entity.id] = entity
        return entity

    async def bulk_create(self, db: Any, entities: Sequence[User]) -> list[User]:
        self.calls.append(("bulk_create", (list(entities),)))
        for entity in entities:
            entity.id = self._next_id
            self._next_id += 1
            self.rows[entity.id] = entity
        return list(entities)

    async def update(
        self, db: Any, record_id: int, update_data: Mapping[str, Any], actor_id: int
    ) -> User | None:
        self.calls.append(("update", (record_id, dict(update_data), actor_id)))
        user = self.rows.get(record_id)
        if user is None:
            return None
        for field, value in update_data.items():
            setattr(user, field, value)
        user.updated_by = actor_id
        return user

    async def bulk_update(
        self,
        db: Any,
        condition: Mapping[str, Any],
        update_data: Mapping[str, Any],
        actor_id: int,
    ) -> int:
        self.calls.append(("bulk_update", (dict(condition), dict(update_data), actor_id)))
        matched = [u for u in self.rows.values() if self._matches(u, condition)]
        for user in matched:
            for field, value in update_data.items():
                setattr(user, field, value)
            user.updated_by = actor_id
        return len(matched)

    async def delete(self, db: Any, record_id: int) -> bool:
        self.calls.append(("delete", (record_id,)))
        return self.rows.pop(record_id, None) is not None

    async def bulk_delete(self, db: Any, condition: Mapping[str, Any]) -> int:
        self.calls.append(("bulk_delete", (dict(condition),)))
        doomed = [k for k, u in self.rows.items() if self._matches(u, condition)]
        for key in doomed:
            del self.rows[key]
        return len(doomed)

    async def count(self, db: Any) -> int:
        self.calls.append(("count", ()))
        return len(self.rows)


@pytest.fixture
def fake_repo() -> FakeUserRepository:
    return FakeUserRepository()


def make_user(account: str = "jdoe", **overrides: Any) -> User:
    """테스트 사용자 인스턴스 생성: Build a transient User."""
    fields: dict[str, Any] = {
        "name": "Jane Doe",
        "account": account,
        "password": "",
        "status": True,
        "type": "user",
    }
    fields.update(overrides)
    return User(**fields)
