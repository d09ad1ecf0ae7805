"""Engine Layer - Core Orchestration

- AvailabilityEngine: 조회 진입점 (캐시 → 세션 → 스로틀링된 fetch → 판별 → 매칭 → 캐시)
- Query / QueryResult / QueryStatus: 표준 요청/결과 형식
- TriageVerdict: 응답 판별 결과
"""

from .orchestrator import AvailabilityEngine, QueryState
from .result import Query, QueryResult, QueryStatus
from .triage import TriageVerdict, triage_response

__all__ = [
    "AvailabilityEngine",
    "QueryState",
    "Query",
    "QueryResult",
    "QueryStatus",
    "TriageVerdict",
    "triage_response",
]
