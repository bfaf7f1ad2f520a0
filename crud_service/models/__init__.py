"""SQLAlchemy ORM 모델 패키지: 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package: Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata.

Modules:
    base: 식별자 및 감사 컬럼 믹스인 (Identity and audit column mixin)
    user: 사용자 계정 (User accounts)
"""

from crud_service.models.base import AuditMixin
from crud_service.models.user import User, UserType

__all__ = ["AuditMixin", "User", "UserType"]
