"""Availability Engine - Main Engine Entry Point

Coordinates the catalog query pipeline as an explicit state machine:

    CACHE_CHECK → SESSION_ENSURE → FETCH → TRIAGE → {RETRY, EXTRACT_MATCH}
                → CACHE_STORE → DONE

- Cache hit returns immediately.
- A session-expired response is retried exactly once (invalidate → ensure → fetch).
- Error pages, transport failures, session failures and timeouts are returned as
  negative QueryResults and never cached.
- find_availability() never raises.
"""

import asyncio
from dataclasses import replace
from enum import Enum
from typing import List, Optional, Sequence

from src.core.exceptions import (
    BackendErrorException,
    CatalogException,
    InvalidQueryException,
    QueryTimeoutException,
    SessionExpiredException,
    SessionFailureException,
    TransportException,
)
from src.core.logging import logger, sanitize_for_log
from src.crawlers.opac import parsing
from src.utils.text import MATCH_THRESHOLD, select_best
from src.utils.url import build_deep_link

from .result import Query, QueryResult, QueryStatus
from .triage import Triage, TriageVerdict, triage_response


class QueryState(str, Enum):
    CACHE_CHECK = "cache_check"
    SESSION_ENSURE = "session_ensure"
    FETCH = "fetch"
    TRIAGE = "triage"
    RETRY = "retry"
    EXTRACT_MATCH = "extract_match"
    CACHE_STORE = "cache_store"
    DONE = "done"


_EXCEPTION_STATUS = {
    SessionFailureException: QueryStatus.SESSION_FAILURE,
    SessionExpiredException: QueryStatus.SESSION_EXPIRED,
    BackendErrorException: QueryStatus.BACKEND_ERROR,
    TransportException: QueryStatus.TRANSPORT_ERROR,
    QueryTimeoutException: QueryStatus.TIMEOUT,
}


class AvailabilityEngine:
    """카탈로그 조회 엔진

    세션/캐시 상태는 이 인스턴스가 소유합니다. 테스트마다 새 인스턴스를 만들면
    상태가 격리됩니다.
    """

    def __init__(
        self,
        cache,
        session_manager,
        searcher,
        base_url: str,
        query_timeout_s: float = 90.0,
        max_session_retries: int = 1,
        match_threshold: float = MATCH_THRESHOLD,
        triage: Triage = triage_response,
    ):
        """
        Args:
            cache: 결과 캐시 (get/set 구현)
            session_manager: 세션 관리자 (ensure/invalidate/current/cookie_header 구현)
            searcher: 검색 페이지 fetch (async fetch(search_string, cookie_header) 구현)
            base_url: 딥링크 생성용 WebOPAC 베이스 URL
            query_timeout_s: 호출자 데드라인 (초)
            max_session_retries: 세션 만료 시 재시도 예산
            match_threshold: 매칭 인정 최소 점수
            triage: 응답 판별 함수 (테스트 주입용)
        """
        if cache is None:
            raise ValueError("cache must not be None")
        if session_manager is None:
            raise ValueError("session_manager must not be None")
        if searcher is None:
            raise ValueError("searcher must not be None")

        self.cache = cache
        self.session = session_manager
        self.searcher = searcher
        self.base_url = base_url
        self.query_timeout_s = query_timeout_s
        self.max_session_retries = max_session_retries
        self.match_threshold = match_threshold
        self.triage = triage

    async def find_availability(self, query: Query) -> QueryResult:
        """영화 가용성 조회 (절대 예외를 던지지 않음)

        Args:
            query: 제목 + 선택적 연도

        Returns:
            QueryResult: 가용성 또는 부재를 설명하는 결과
        """
        label = sanitize_for_log(f"{query.title} ({query.year or 'no-year'})", 120)
        try:
            self._validate(query)
            result = await asyncio.wait_for(self._resolve(query), timeout=self.query_timeout_s)
        except asyncio.TimeoutError:
            logger.warning(f"[ENGINE] Timeout after {self.query_timeout_s:.1f}s: {label}")
            result = QueryResult.failure(QueryStatus.TIMEOUT, QueryTimeoutException(self.query_timeout_s).message)
        except InvalidQueryException as e:
            logger.warning(f"[ENGINE] Invalid query: {e}")
            result = QueryResult.failure(QueryStatus.INVALID_QUERY, e.message)
        except CatalogException as e:
            status = _EXCEPTION_STATUS.get(type(e), QueryStatus.BACKEND_ERROR)
            logger.warning(f"[ENGINE] {status.value}: {label}: {e}")
            result = QueryResult.failure(status, e.message)
        except Exception as e:
            logger.error(f"[ENGINE] Unexpected failure: {label}: {type(e).__name__}", exc_info=True)
            result = QueryResult.failure(QueryStatus.BACKEND_ERROR, str(e) or type(e).__name__)

        logger.info(f"[ENGINE] Final result for {label}: {result.to_dict()}")
        return result

    async def find_many(self, queries: Sequence[Query]) -> List[QueryResult]:
        """여러 조회를 동시에 실행 (결과는 입력 순서, 동시 fetch 수는 스로틀러가 제한)"""
        return list(await asyncio.gather(*(self.find_availability(q) for q in queries)))

    @staticmethod
    def _validate(query: Query) -> None:
        if not query.title or not query.title.strip():
            raise InvalidQueryException("title must not be blank")

    async def _resolve(self, query: Query) -> QueryResult:
        key = query.cache_key
        retries_left = self.max_session_retries
        attempts = 0
        state = QueryState.CACHE_CHECK
        html = ""
        fetched_with = None
        result: Optional[QueryResult] = None

        while state is not QueryState.DONE:
            logger.debug(f"[ENGINE] {key}: {state.value}")

            if state is QueryState.CACHE_CHECK:
                cached = self.cache.get(key)
                if cached is not None:
                    return replace(cached, status=QueryStatus.CACHE_HIT)
                state = QueryState.SESSION_ENSURE

            elif state is QueryState.SESSION_ENSURE:
                if not await self.session.ensure():
                    raise SessionFailureException("handshake failed")
                state = QueryState.FETCH

            elif state is QueryState.FETCH:
                attempts += 1
                fetched_with = self.session.current
                resp = await self.searcher.fetch(query.search_string, self.session.cookie_header)
                if not resp.ok:
                    raise BackendErrorException(
                        f"Search request failed with status {resp.status_code}",
                        status_code=resp.status_code,
                    )
                html = resp.text
                state = QueryState.TRIAGE

            elif state is QueryState.TRIAGE:
                verdict = self.triage(html)
                if verdict is TriageVerdict.SESSION_EXPIRED:
                    if retries_left <= 0:
                        raise SessionExpiredException(attempts)
                    retries_left -= 1
                    state = QueryState.RETRY
                elif verdict is TriageVerdict.ERROR_PAGE:
                    raise BackendErrorException("Catalog returned error page")
                else:
                    state = QueryState.EXTRACT_MATCH

            elif state is QueryState.RETRY:
                logger.info(f"[ENGINE] Session expired, reinitializing and retrying: {key}")
                self.session.invalidate(fetched_with)
                state = QueryState.SESSION_ENSURE

            elif state is QueryState.EXTRACT_MATCH:
                result = self._evaluate(query, html)
                state = QueryState.CACHE_STORE

            elif state is QueryState.CACHE_STORE:
                self.cache.set(key, result)
                state = QueryState.DONE

        return result

    def _evaluate(self, query: Query, html: str) -> QueryResult:
        count = parsing.result_count(html)
        if count is not None:
            logger.info(f"[ENGINE] Catalog reports {count} results")

        candidates = parsing.extract_candidates(html)
        match = select_best(query.title, candidates, threshold=self.match_threshold)

        if match.matched and match.candidate is not None:
            title = match.candidate.text
            available = parsing.is_available(html)
            logger.info(
                f"[ENGINE] Best match '{sanitize_for_log(title, 80)}' ({match.score:.1f}), "
                f"{'AVAILABLE' if available else 'NOT AVAILABLE'}"
            )
            return QueryResult.matched(
                available=available,
                link=build_deep_link(self.base_url, title),
                title=title,
                match_score=match.score,
            )

        if candidates or parsing.has_any_results(html):
            logger.info(f"[ENGINE] Found results but no title matched (best={match.score:.1f})")
            return QueryResult.no_match()

        logger.info("[ENGINE] No results found")
        return QueryResult.no_results()
