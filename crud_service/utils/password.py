"""비밀번호 해시 유틸리티.

bcrypt helpers used by ``UserService``. The work factor comes from
``settings.BCRYPT_ROUNDS`` so tests can run at the minimum cost while
production keeps the default of 12.
"""

import bcrypt

from crud_service.config import settings


def hash_password(password: str) -> str:
    """평문을 bcrypt 해시 문자열로 변환합니다.

    Returns a ``$2b$`` hash carrying its own salt and cost factor.

    Raises:
        ValueError: bcrypt가 입력을 거부할 때 (e.g. input longer than 72 bytes)
    """
    salt: bytes = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    # 저장된 해시의 솔트와 비용으로 다시 계산해 비교 (checkpw reads both from the hash)
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
