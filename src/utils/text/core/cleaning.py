"""Text cleaning helpers."""

from __future__ import annotations

import re
from typing import Optional


# Words this short ("a", "o", "le", "of") carry no identity in a film title
MIN_SIGNIFICANT_WORD_LENGTH = 3

_NON_WORD = re.compile(r"[^\w\s]|_")
_SPACES = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    """제목 비교용 정규화

    - 소문자화
    - 문장부호 제거 (문자/숫자는 스크립트와 무관하게 유지, 발음 구별 기호도 유지)
    - 다중 공백을 단일 공백으로

    예시:
    - "Paris, Texas" -> "paris texas"
    - "Amélie (2001)" -> "amélie 2001"
    """
    if not title:
        return ""
    cleaned = _NON_WORD.sub("", title.lower())
    return _SPACES.sub(" ", cleaned).strip()


def significant_words(normalized: str) -> list[str]:
    """정규화된 제목에서 의미 있는 단어(3글자 이상)만 순서대로 반환"""
    return [w for w in normalized.split(" ") if len(w) >= MIN_SIGNIFICANT_WORD_LENGTH]


def build_cache_key(title: str, year: Optional[str] = None) -> str:
    """검색 결과 캐시 키

    Examples:
        >>> build_cache_key("  Blade Runner ", "1982")
        'blade runner_1982'
        >>> build_cache_key("Blade Runner")
        'blade runner_no-year'
    """
    return f"{(title or '').strip().lower()}_{year or 'no-year'}"
