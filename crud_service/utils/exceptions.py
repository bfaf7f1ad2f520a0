"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for the error kinds raised
by services and repositories. Every default message is generic; storage
detail is written to the log only and never placed in ``detail``.

Usage:
    from crud_service.utils.exceptions import NotFoundError, InvalidActorError
    raise NotFoundError("User not found")
    raise InvalidActorError()
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외: 요청한 레코드를 찾을 수 없을 때 사용.

    404 Not Found exception.
    Raised when a record does not exist, including the existence check
    performed before an update.

    Args:
        detail: 오류 메시지 (Error message, default: "Record not found")
    """

    def __init__(self, detail: str = "Record not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외: 중복 레코드 생성 시도 시 사용.

    409 Conflict exception.
    Raised when a write violates a uniqueness constraint
    (e.g. duplicate account handle).

    Args:
        detail: 오류 메시지 (Error message, default: "Record already exists")
    """

    def __init__(self, detail: str = "Record already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class InvalidActorError(HTTPException):
    """401 Unauthorized 예외: 수정 요청자의 식별자가 없거나 0일 때 사용.

    401 Unauthorized exception.
    Raised by actor-checked mutations (update, bulk update) when the
    acting user's id is missing, zero, or negative.

    Args:
        detail: 오류 메시지 (Error message)
    """

    def __init__(self, detail: str = "Updating user identity is invalid") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class BadRequestError(HTTPException):
    """400 Bad Request 예외: 잘못된 요청 데이터 시 사용.

    400 Bad Request exception.
    Raised when input is invalid beyond what Pydantic validation catches
    (e.g. an empty bulk predicate or a predicate on an unknown column).

    Args:
        detail: 오류 메시지 (Error message, default: "Bad request")
    """

    def __init__(self, detail: str = "Bad request") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class EmptyCredentialError(BadRequestError):
    """비밀번호가 비어 있을 때: Raised when a required password is empty."""

    def __init__(self, detail: str = "Password must not be empty") -> None:
        super().__init__(detail=detail)


class CredentialHashError(HTTPException):
    """500 예외: 비밀번호 해싱 실패.

    500 Internal Server Error raised when password hashing fails.
    """

    def __init__(self, detail: str = "An error occurred while creating the password") -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class RepositoryReadError(HTTPException):
    """500 예외: 조회 실패 (원인은 로그에만 기록).

    500 Internal Server Error raised when a read against the repository fails.
    """

    def __init__(self, detail: str = "An error occurred while retrieving records") -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class RepositoryWriteError(HTTPException):
    """500 예외: 쓰기 실패 (원인은 로그에만 기록).

    500 Internal Server Error raised when a create, update, or delete fails.
    """

    def __init__(self, detail: str = "An error occurred while saving records") -> None:
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class RepositoryError(Exception):
    """레포지토리 저장소 오류의 기반 클래스.

    Base class for storage failures raised by ``CrudRepository``
    implementations that are not backed by SQLAlchemy. Services translate it
    the same way as ``SQLAlchemyError``; it never reaches API callers.
    """
