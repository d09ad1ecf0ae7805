"""Title similarity scoring.

카탈로그 결과 제목은 부제, 감독 표기, 연도 등이 붙어 검색어와 거의 일치하지 않습니다.
검색어의 의미 있는 단어 수에 따라 엄격도를 달리해 0~100 점수를 매깁니다.
"""

from __future__ import annotations

import re

from src.core.logging import logger

from ..core.cleaning import normalize_title, significant_words


def _starts_as_standalone_title(query: str, normalized_query: str, candidate: str, normalized_candidate: str) -> bool:
    """후보가 검색어로 시작하고 바로 뒤가 경계(괄호, 숫자, 끝)인지

    "Lucky" -> "Lucky (2017)", "Lucky 2017", "Lucky" 는 True
    "Lucky" -> "Lucky Luke", "O Lucky Man!" 은 False
    """
    if re.match(rf"^{re.escape(query)}\s*(?:[(\[\d]|$)", candidate):
        return True
    return bool(re.match(rf"^{re.escape(normalized_query)}\s*(?:\d|$)", normalized_candidate))


def _score_single_word(query: str, n1: str, candidate: str, n2: str, word: str, result_words: list[str]) -> float:
    if len(result_words) == 1 and result_words[0] == word:
        return 90.0

    if _starts_as_standalone_title(query, n1, candidate, n2):
        if len(result_words) <= 2:
            return 80.0
        # 첫 단어만 같은 다른 영화
        logger.debug(
            f"[MATCH] Rejecting '{query}' vs '{candidate}': "
            f"single word search but result has {len(result_words)} significant words"
        )
        return 25.0

    if word in result_words:
        # "Lucky" inside "Get Lucky" / "O Lucky Man!"
        logger.debug(f"[MATCH] Rejecting '{query}' found within '{candidate}' but not at start")
        return 20.0

    return 10.0


def _score_two_words(search_words: list[str], result_words: list[str]) -> float:
    if len(result_words) >= 2 and result_words[:2] == search_words:
        return 85.0 if len(result_words) <= 3 else 75.0

    common = [w for w in search_words if w in result_words]
    if len(common) == 2:
        return 75.0 if len(result_words) <= 3 else 50.0

    return 15.0


def _score_many_words(search_words: list[str], result_words: list[str]) -> float:
    common = [w for w in search_words if w in result_words]
    overlap = len(common) / max(len(search_words), len(result_words))
    coverage = len(common) / len(search_words)

    prefix = 0
    for s, r in zip(search_words, result_words):
        if s != r:
            break
        prefix += 1
    prefix_bonus = (prefix / len(search_words)) * 20

    if coverage >= 0.8 and overlap >= 0.5:
        return min(95.0, 85 + prefix_bonus)
    if coverage >= 0.6 and overlap >= 0.4:
        return min(85.0, 70 + prefix_bonus)
    if coverage >= 0.5:
        return 50 + prefix_bonus / 2
    return overlap * 40


def score_title(query: str, candidate: str) -> float:
    """검색 제목과 후보 제목의 유사도 점수(0~100).

    우선순위:
    1. 대소문자 무시 완전 일치 -> 100
    2. 문장부호/공백 정규화 후 일치 -> 95
    3. 의미 있는 단어 수(1개 / 2개 / 3개 이상)별 규칙

    Args:
        query: 검색한 영화 제목
        candidate: 카탈로그 결과 제목

    Returns:
        0~100 점수 (순수 함수, 상태 없음)
    """
    if not query or not candidate:
        return 0.0

    t1 = query.lower().strip()
    t2 = candidate.lower().strip()
    if t1 == t2:
        return 100.0

    n1 = normalize_title(t1)
    n2 = normalize_title(t2)
    if n1 and n1 == n2:
        return 95.0

    search_words = significant_words(n1)
    result_words = significant_words(n2)

    if not search_words:
        # "Up", "M": 정규화 일치 외에는 비교할 단어가 없음
        return 0.0
    if len(search_words) == 1:
        return _score_single_word(t1, n1, t2, n2, search_words[0], result_words)
    if len(search_words) == 2:
        return _score_two_words(search_words, result_words)
    return _score_many_words(search_words, result_words)
