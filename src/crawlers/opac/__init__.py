"""HFF WebOPAC catalog access (session + throttled HTTP search + HTML parsing).

구조:
- session.py : SessionManager (쿠키 세션 핸드셰이크/만료)
- throttle.py : RequestThrottler (FIFO 동시성 제한 + 요청 간격)
- http_search.py : OpacHttpSearch (스로틀링된 검색 fetch)
- parsing.py : 후보 추출 + 응답 판별 (세션 만료, 오류 페이지, 결과 수, 대출 가능)
"""

from .http_search import OpacHttpSearch
from .session import CatalogSession, SessionManager
from .throttle import RequestThrottler

__all__ = [
    "CatalogSession",
    "OpacHttpSearch",
    "RequestThrottler",
    "SessionManager",
]
