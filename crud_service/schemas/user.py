"""사용자 관련 Pydantic 스키마 정의.

User Pydantic schema definitions.
``UserUpdate`` is the structured patch for partial updates: only fields
that were explicitly set are written.
"""

from pydantic import BaseModel, ConfigDict

from crud_service.models.user import UserType


class UserUpdate(BaseModel):
    """사용자 수정 요청 스키마 (부분 업데이트).

    User update patch (partial update).
    Only provided fields are updated; omitted fields remain unchanged.
    Every field is optional but not nullable: the service rejects an
    explicit ``None`` with ``BadRequestError``.
    Credentials are changed through the dedicated password argument,
    never through this schema.

    Attributes:
        name: 표시 이름 (New display name, optional)
        account: 로그인 계정 (New login handle, optional)
        status: 활성 상태 (Active flag, optional)
        type: 사용자 유형 (Account type, optional)
    """

    model_config = ConfigDict(use_enum_values=True)

    name: str | None = None
    account: str | None = None
    status: bool | None = None
    type: UserType | None = None
