"""페이지네이션 요청/응답 스키마 정의.

Pagination request/response schemas.
``ListParams`` carries the requested page plus repository-specific sort and
filter options; ``PaginatedResult`` is what every ``get_all`` returns.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

from crud_service.config import settings


class ListParams(BaseModel):
    """목록 조회 파라미터.

    List query parameters.

    Attributes:
        page: 요청 페이지 번호, 1부터 시작 (Requested page, 1-indexed)
        per_page: 페이지당 항목 수 (Requested page size)
        sort_by: 정렬 컬럼 이름 (Column to sort by; unknown columns fall back to id)
        order: 정렬 방향 (Sort direction)
        filters: 컬럼 필터 {'컬럼명': 값} (Column filters; a list value matches with IN)
    """

    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=settings.DEFAULT_PER_PAGE, ge=1, le=settings.MAX_PER_PAGE)
    sort_by: str | None = None
    order: Literal["asc", "desc"] = "asc"
    filters: dict[str, Any] = Field(default_factory=dict)


class PaginationMeta(BaseModel):
    """페이지네이션 메타데이터.

    Attributes:
        current_page: 현재 페이지 번호 (Current page number)
        per_page: 페이지당 항목 수 (Items per page)
        total_items: 전체 항목 수 (Total item count across all pages)
        total_pages: 전체 페이지 수 (Total pages, computed: ceil(total_items/per_page))
    """

    current_page: int
    per_page: int
    total_items: int
    total_pages: int


class PaginatedResult(BaseModel):
    """페이지네이션 결과 모델.

    Pagination result: the returned page of entities plus metadata.
    ``data`` holds ORM instances as returned by the repository.
    """

    data: list[Any]
    meta: PaginationMeta
