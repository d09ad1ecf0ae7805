"""Response Triage - 검색 응답 판별

검색 응답을 재시도/오류/정상 중 하나로 분류합니다. 오케스트레이터의 재시도
결정은 이 분류에만 의존하므로 테스트에서 판별 결과를 주입할 수 있습니다.
"""

from enum import Enum
from typing import Callable

from src.crawlers.opac import parsing


class TriageVerdict(str, Enum):
    OK = "ok"
    SESSION_EXPIRED = "session_expired"
    ERROR_PAGE = "error_page"


def triage_response(html: str) -> TriageVerdict:
    """세션 만료 → 오류 페이지 → 정상 순서로 판별"""
    if parsing.is_session_expired(html):
        return TriageVerdict.SESSION_EXPIRED
    if parsing.is_error_page(html):
        return TriageVerdict.ERROR_PAGE
    return TriageVerdict.OK


Triage = Callable[[str], TriageVerdict]
