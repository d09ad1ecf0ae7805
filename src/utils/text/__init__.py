"""Text utilities.

- core/: 정규화, 토큰화, 캐시 키
- matching/: 제목 유사도 점수 + 최적 후보 선택
"""

from .core.cleaning import build_cache_key, normalize_title, significant_words
from .matching import MATCH_THRESHOLD, MatchResult, score_title, select_best

__all__ = [
    # core
    "build_cache_key",
    "normalize_title",
    "significant_words",
    # matching
    "MATCH_THRESHOLD",
    "MatchResult",
    "score_title",
    "select_best",
]
