"""Query / QueryResult - Standardized Request and Result Format

엔진의 입력(Query)과 모든 경로(캐시/네트워크/오류)에서 쓰는 통일된 결과 형식입니다.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from src.utils.text import build_cache_key


@dataclass(frozen=True)
class Query:
    """영화 가용성 조회 요청 (생성 후 불변)"""

    title: str
    year: Optional[str] = None

    def __post_init__(self) -> None:
        # 빈 연도는 연도 없음과 같음
        if self.year is not None and not self.year.strip():
            object.__setattr__(self, "year", None)

    @property
    def cache_key(self) -> str:
        return build_cache_key(self.title, self.year)

    @property
    def search_string(self) -> str:
        """카탈로그 검색어 - 연도가 있으면 붙여서 결과를 좁힘"""
        title = (self.title or "").strip()
        return f"{title} {self.year}".strip() if self.year else title


class QueryStatus(str, Enum):
    """조회 상태 (호출자 응답에는 직렬화되지 않음)"""

    MATCHED = "matched"  # 임계값 이상 후보 발견
    NO_MATCH = "no_match"  # 결과는 있으나 제목 불일치 (부정 캐시)
    NO_RESULTS = "no_results"  # 후보 없음 (부정 캐시)
    CACHE_HIT = "cache_hit"
    SESSION_FAILURE = "session_failure"
    SESSION_EXPIRED = "session_expired"
    BACKEND_ERROR = "backend_error"
    TRANSPORT_ERROR = "transport_error"
    TIMEOUT = "timeout"
    INVALID_QUERY = "invalid_query"


# 이 상태들은 캐시에 저장됨 (일시적 실패는 저장하지 않음)
CACHEABLE_STATUSES = frozenset({QueryStatus.MATCHED, QueryStatus.NO_MATCH, QueryStatus.NO_RESULTS})

NO_MATCH_NOTE = "Found results but titles did not match closely enough"


@dataclass(frozen=True)
class QueryResult:
    """조회 결과 표준 포맷

    Attributes:
        available: 대출 가능 여부
        link: 카탈로그 딥링크 (매칭 시)
        title: 매칭된 카탈로그 제목
        match_score: 매칭 점수 (0~100)
        note: 부정 결과 설명
        error: 진단 메시지 (실패 시)
        status: 내부 상태 (캐시 여부 판단, 로깅용)
    """

    available: bool
    link: Optional[str] = None
    title: Optional[str] = None
    match_score: Optional[float] = None
    note: Optional[str] = None
    error: Optional[str] = None
    status: QueryStatus = field(default=QueryStatus.NO_RESULTS, compare=False)

    def __post_init__(self) -> None:
        if self.available and not (self.link and self.title):
            raise ValueError("available result requires link and title")

    @property
    def is_cacheable(self) -> bool:
        return self.status in CACHEABLE_STATUSES

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        """호출자용 dict (None 필드 제외, matchScore는 camelCase)"""
        data: Dict[str, Any] = {"available": self.available}
        if self.link is not None:
            data["link"] = self.link
        if self.title is not None:
            data["title"] = self.title
        if self.match_score is not None:
            data["matchScore"] = self.match_score
        if self.note is not None:
            data["note"] = self.note
        if self.error is not None:
            data["error"] = self.error
        return data

    @classmethod
    def matched(cls, available: bool, link: str, title: str, match_score: float) -> "QueryResult":
        return cls(
            available=available,
            link=link,
            title=title,
            match_score=match_score,
            status=QueryStatus.MATCHED,
        )

    @classmethod
    def no_match(cls) -> "QueryResult":
        return cls(available=False, note=NO_MATCH_NOTE, status=QueryStatus.NO_MATCH)

    @classmethod
    def no_results(cls) -> "QueryResult":
        return cls(available=False, status=QueryStatus.NO_RESULTS)

    @classmethod
    def failure(cls, status: QueryStatus, error: str) -> "QueryResult":
        """일시적/진단용 실패 결과 (캐시되지 않음)"""
        return cls(available=False, error=error, status=status)
