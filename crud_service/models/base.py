"""공통 모델 믹스인: 식별자 및 감사(audit) 컬럼.

Shared model mixin: identity and audit columns.
Every entity managed by ``BaseRepository`` carries an integer primary key
assigned by the database, creation/modification timestamps, and the id of
the actor that last updated the row.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditMixin:
    """식별자 및 감사 컬럼 믹스인.

    Attributes:
        id: 고유 식별자, DB가 생성 시 할당 (Unique id assigned by the database on insert)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
        updated_by: 마지막 수정자 ID (Id of the actor that last updated the row)
    """

    # 레코드 고유 식별자: 생성 후 변경 불가 (Immutable once created)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)
    # 수정자: update/bulk_update 시 actor_id로 기록 (Set from actor_id on updates)
    updated_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
