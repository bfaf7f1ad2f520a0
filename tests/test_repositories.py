"""레포지토리 테스트: SQLite(aiosqlite) 위에서 SQLAlchemy 구현 검증.

Repository tests: the SQLAlchemy implementation against aiosqlite,
plus the UserService wired to the real UserRepository.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from crud_service.repositories.user_repository import UserRepository
from crud_service.schemas.pagination import ListParams
from crud_service.schemas.user import UserUpdate
from crud_service.services.user_service import UserService
from crud_service.utils.exceptions import BadRequestError, DuplicateError
from crud_service.utils.password import verify_password

from tests.conftest import make_user


@pytest.fixture
def repo() -> UserRepository:
    return UserRepository()


async def _seed(db: AsyncSession, repo: UserRepository, *accounts: str, **fields):
    users = [make_user(a, password="hash", **fields) for a in accounts]
    return await repo.bulk_create(db, users)


class TestCreateAndFetch:
    """생성 및 조회 테스트."""

    async def test_create_assigns_id(self, db, repo):
        user = await repo.create(db, make_user("alice", name="Alice", password="hash"))

        assert user.id is not None
        assert user.status is True
        assert user.created_at is not None

    async def test_round_trip(self, db, repo):
        created = await repo.create(
            db, make_user("bob", name="Bob", password="hash", status=False, type="admin")
        )
        db.expunge_all()

        fetched = await repo.get_by_id(db, created.id)
        assert fetched is not None
        assert (fetched.name, fetched.account, fetched.password, fetched.status, fetched.type) == (
            "Bob", "bob", "hash", False, "admin",
        )

    async def test_missing(self, db, repo):
        assert await repo.get_by_id(db, 12345) is None

    async def test_get_by_account(self, db, repo):
        await _seed(db, repo, "carol", "dave")

        found = await repo.get_by_account(db, "dave")
        assert found is not None and found.account == "dave"
        assert await repo.get_by_account(db, "nobody") is None

    async def test_count(self, db, repo):
        assert await repo.count(db) == 0
        await _seed(db, repo, "a", "b", "c")
        assert await repo.count(db) == 3


class TestGetPage:
    """페이지 조회 테스트."""

    async def test_pages_by_id(self, db, repo):
        await _seed(db, repo, *[f"user{i:02d}" for i in range(25)])

        items, total = await repo.get_page(db, ListParams(page=2, per_page=10))

        assert total == 25
        assert [u.account for u in items] == [f"user{i:02d}" for i in range(10, 20)]

    async def test_filters_and_sorting(self, db, repo):
        await _seed(db, repo, "b-admin", "a-admin", type="admin")
        await _seed(db, repo, "c-user")

        params = ListParams(
            sort_by="account",
            order="desc",
            filters={"type": "admin", "unknown": 1, "name": None},
        )
        items, total = await repo.get_page(db, params)

        assert total == 2
        assert [u.account for u in items] == ["b-admin", "a-admin"]

    async def test_unknown_sort_falls_back_to_id(self, db, repo):
        await _seed(db, repo, "z", "a")

        items, _ = await repo.get_page(db, ListParams(sort_by="__table__"))
        assert [u.account for u in items] == ["z", "a"]

    async def test_list_filter_matches_any(self, db, repo):
        await _seed(db, repo, "m1", "m2", "m3")

        items, total = await repo.get_page(
            db, ListParams(filters={"account": ["m1", "m3"]}, sort_by="account")
        )

        assert total == 2
        assert [u.account for u in items] == ["m1", "m3"]


class TestUpdate:
    """업데이트 테스트."""

    async def test_records_actor_and_ignores_identity(self, db, repo):
        (user,) = await _seed(db, repo, "erin")
        original_id = user.id

        updated = await repo.update(
            db, user.id, {"name": "Erin", "id": 999, "updated_by": 1, "nope": "x"}, actor_id=42
        )

        assert updated is not None
        assert updated.id == original_id
        assert updated.name == "Erin"
        assert updated.updated_by == 42

    async def test_missing_returns_none(self, db, repo):
        assert await repo.update(db, 404, {"name": "x"}, actor_id=1) is None

    async def test_bulk_update(self, db, repo):
        await _seed(db, repo, "f1", "f2", type="admin")
        await _seed(db, repo, "g1")

        count = await repo.bulk_update(db, {"type": "admin"}, {"status": False}, actor_id=7)
        db.expunge_all()

        assert count == 2
        items, _ = await repo.get_page(db, ListParams(filters={"status": False}))
        assert sorted(u.account for u in items) == ["f1", "f2"]
        assert all(u.updated_by == 7 for u in items)

    async def test_bulk_update_in_clause(self, db, repo):
        await _seed(db, repo, "h1", "h2", "h3")

        count = await repo.bulk_update(
            db, {"account": ["h1", "h3"]}, {"name": "picked"}, actor_id=1
        )
        assert count == 2

    async def test_bulk_update_matching_nothing(self, db, repo):
        await _seed(db, repo, "i1")
        assert await repo.bulk_update(db, {"account": "none"}, {"name": "x"}, actor_id=1) == 0

    @pytest.mark.parametrize("condition", [{}, {"no_such_column": 1}])
    async def test_bulk_update_rejects_bad_condition(self, db, repo, condition):
        with pytest.raises(BadRequestError):
            await repo.bulk_update(db, condition, {"name": "x"}, actor_id=1)

    @pytest.mark.parametrize("update_data", [{}, {"id": 5, "updated_by": 2}, {"nope": "x"}])
    async def test_nothing_writable_is_rejected(self, db, repo, update_data):
        (user,) = await _seed(db, repo, "n1")

        with pytest.raises(BadRequestError):
            await repo.update(db, user.id, update_data, actor_id=3)
        with pytest.raises(BadRequestError):
            await repo.bulk_update(db, {"account": "n1"}, update_data, actor_id=3)

        db.expunge_all()
        fetched = await repo.get_by_id(db, user.id)
        assert fetched.updated_by is None


class TestDelete:
    """삭제 테스트."""

    async def test_delete(self, db, repo):
        (user,) = await _seed(db, repo, "j1")

        assert await repo.delete(db, user.id) is True
        assert await repo.delete(db, user.id) is False
        assert await repo.get_by_id(db, user.id) is None

    async def test_bulk_delete(self, db, repo):
        await _seed(db, repo, "k1", "k2", status=False)
        await _seed(db, repo, "k3")

        assert await repo.bulk_delete(db, {"status": False}) == 2
        assert await repo.count(db) == 1

    async def test_bulk_delete_requires_condition(self, db, repo):
        await _seed(db, repo, "l1")

        with pytest.raises(BadRequestError):
            await repo.bulk_delete(db, {})
        assert await repo.count(db) == 1


class TestUserServiceWithDatabase:
    """실제 레포지토리와 연결된 사용자 서비스 테스트."""

    async def test_create_update_fetch(self, db, repo):
        service = UserService(repo)

        created = await service.create_user_with_password(
            db, make_user("mallory", name="Mallory"), "first-pass"
        )
        await service.update_user_with_password(
            db, created.id, UserUpdate(name="Mal"), "second-pass", actor_id=1
        )
        db.expunge_all()

        fetched = await service.get_user_by_id(db, created.id)
        assert fetched.name == "Mal"
        assert fetched.account == "mallory"
        assert fetched.updated_by == 1
        assert verify_password("second-pass", fetched.password)

    async def test_unique_account_violation(self, db, repo):
        service = UserService(repo)
        await _seed(db, repo, "oscar")

        with pytest.raises(DuplicateError):
            await service.bulk_create_users(db, [make_user("oscar", password="hash")])

    async def test_null_field_is_bad_request(self, db, repo):
        service = UserService(repo)
        created = await service.create_user_with_password(
            db, make_user("nina", name="Nina"), "pw"
        )

        with pytest.raises(BadRequestError):
            await service.update_user(db, created.id, UserUpdate(name=None), actor_id=1)

        db.expunge_all()
        assert (await service.get_user_by_id(db, created.id)).name == "Nina"

    async def test_bulk_password_write_is_rejected(self, db, repo):
        service = UserService(repo)
        await _seed(db, repo, "paul")

        with pytest.raises(BadRequestError):
            await service.bulk_update_users(
                db, {"account": "paul"}, {"password": "plain"}, actor_id=3
            )

        db.expunge_all()
        user = await repo.get_by_account(db, "paul")
        assert user.password == "hash"
        assert user.updated_by is None

    async def test_not_null_violation_is_bad_request(self, db, repo):
        """NOT NULL 위반은 중복 오류가 아닌 400으로 보고됨."""
        service = UserService(repo)

        with pytest.raises(BadRequestError) as exc_info:
            await service.bulk_create_users(db, [make_user("quinn", name=None, password="hash")])
        assert exc_info.value.status_code == 400
