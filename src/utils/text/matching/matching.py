"""Best-candidate selection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from src.core.logging import logger, sanitize_for_log
from src.crawlers.result import Candidate

from .similarity import score_title


# 이 점수 미만은 다른 영화일 확률이 높음
MATCH_THRESHOLD = 70.0


@dataclass(frozen=True)
class MatchResult:
    matched: bool
    score: float = 0.0
    candidate: Optional[Candidate] = None


def select_best(query: str, candidates: Sequence[Candidate], threshold: float = MATCH_THRESHOLD) -> MatchResult:
    """임계값 이상 후보 중 최고 점수 후보를 선택.

    동점이면 먼저 나온 후보(패턴 우선순위 순서)를 유지합니다.
    임계값을 넘는 후보가 없으면 matched=False, score는 관찰된 최고 점수.
    """
    best: Optional[Candidate] = None
    best_score = 0.0
    highest_seen = 0.0

    for cand in candidates:
        score = score_title(query, cand.text)
        logger.debug(
            f"[MATCH] '{sanitize_for_log(query, 60)}' vs '{sanitize_for_log(cand.text, 60)}': {score:.1f}"
        )
        highest_seen = max(highest_seen, score)
        if score >= threshold and score > best_score:
            best = cand
            best_score = score

    if best is None:
        return MatchResult(matched=False, score=highest_seen)
    return MatchResult(matched=True, score=best_score, candidate=best)
