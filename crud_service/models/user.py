"""사용자 계정 SQLAlchemy ORM 모델 정의.

User account SQLAlchemy ORM model definition.

Tables:
    - users: 사용자 계정 (User accounts with hashed credentials)
"""

import enum

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from crud_service.database import Base
from crud_service.models.base import AuditMixin


class UserType(str, enum.Enum):
    """사용자 유형: User account type."""

    ADMIN = "admin"
    USER = "user"


class User(AuditMixin, Base):
    """사용자 모델: 시스템 사용자 계정 정보.

    User model: System user account information.
    The ``password`` column only ever holds a bcrypt hash.

    Attributes:
        name: 표시 이름 (Display name)
        account: 로그인 계정, 전역 고유 (Login handle, globally unique)
        password: bcrypt 해시 (bcrypt hash of the credential)
        status: 활성 상태 (Active flag)
        type: 사용자 유형 (Account type, see UserType)
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 로그인 계정: Login handle (unique)
    account: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    # 비밀번호 해시: Hashed password (bcrypt, ~60 chars)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default=UserType.USER.value)

    def __repr__(self) -> str:
        return f"<User id={self.id} account={self.account!r}>"
