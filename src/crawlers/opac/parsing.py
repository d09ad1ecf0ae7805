"""WebOPAC 검색 결과 - HTML 파싱/검증 유틸.

이 모듈은 네트워크(fetch)와 분리된 순수 파싱/검증 로직을 담습니다.

카탈로그 템플릿은 결과 유형(단행본, 영상자료, 연속간행물 ...)에 따라 링크를
다르게 렌더링하므로 여러 구조 패턴을 우선순위대로 적용한 뒤 합칩니다.
"""

from __future__ import annotations

import re
from typing import Callable, List, Optional

from selectolax.lexbor import LexborHTMLParser, LexborNode

from src.core.logging import logger, sanitize_for_log
from src.crawlers.result import Candidate


_SESSION_EXPIRED_PHRASES = (
    "Diese Sitzung ist nicht mehr gültig",
    "session is no longer valid",
)
# 만료 안내 페이지는 작음. 정상 결과 페이지에도 같은 문구가 템플릿에 숨어 있을 수 있음
_SESSION_EXPIRED_MAX_LENGTH = 6000

_ERROR_PHRASE = "Fehler"
_ERROR_PAGE_MAX_LENGTH = 1000

# "ausleihbar" / "verfügbar" / "available"
_AVAILABILITY_KEYWORDS = ("ausleihbar", "verfügbar", "available")

_RESULT_COUNT_PATTERN = re.compile(r"lokale Datenbank\s*\((\d+)\)", re.IGNORECASE)

# DVD, DVD-Video, Blu-ray, Blu-Ray, BluRay
_MEDIA_PATTERN = re.compile(r"DVD(?:-Video)?|Blu-?ray", re.IGNORECASE)

# Characters inspected around a result link for its media type. The format icon
# sits well before the title link in the result row.
_MEDIA_WINDOW_BEFORE = 1500
_MEDIA_WINDOW_AFTER = 500


def _anchors(selector: str) -> Callable[[LexborHTMLParser], List[LexborNode]]:
    def _select(parser: LexborHTMLParser) -> List[LexborNode]:
        return list(parser.css(selector))
    return _select


def _result_title_cells(parser: LexborHTMLParser) -> List[LexborNode]:
    nodes: List[LexborNode] = []
    for cell in parser.css('td[class*="resultTitle"]'):
        link = cell.css_first("a[href]")
        if link is not None:
            nodes.append(link)
    return nodes


# 우선순위 순서: 앞선 패턴에서 나온 후보가 중복 제거 시 살아남음
_CANDIDATE_PATTERNS = (
    ("full_display", _anchors('a[title="zur Vollanzeige"]')),
    ("single_hit", _anchors('a[href*="singleHit.do"]')),
    ("show_hit", _anchors('a[href*="showHit"]')),
    ("result_title_cell", _result_title_cells),
)


def is_session_expired(html: str) -> bool:
    if not html or len(html) >= _SESSION_EXPIRED_MAX_LENGTH:
        return False
    return any(p in html for p in _SESSION_EXPIRED_PHRASES)


def is_error_page(html: str) -> bool:
    if not html or len(html) >= _ERROR_PAGE_MAX_LENGTH:
        return False
    return _ERROR_PHRASE in html


def result_count(html: str) -> Optional[int]:
    """'lokale Datenbank (N)' 표기에서 N 추출"""
    if not html:
        return None
    m = _RESULT_COUNT_PATTERN.search(html)
    return int(m.group(1)) if m else None


def has_any_results(html: str) -> bool:
    """결과 수 표기가 있고 0보다 큰지"""
    return (result_count(html) or 0) > 0


def is_available(html: str) -> bool:
    if not html:
        return False
    return any(k in html for k in _AVAILABILITY_KEYWORDS)


def _link_text(node: LexborNode) -> str:
    return re.sub(r"\s+", " ", node.text(deep=True) or "").strip()


def _collect_candidates(parser: LexborHTMLParser) -> List[Candidate]:
    pooled: List[Candidate] = []
    for name, select in _CANDIDATE_PATTERNS:
        found = 0
        for node in select(parser):
            text = _link_text(node)
            if not text:
                continue
            href = node.attributes.get("href") or ""
            pooled.append(Candidate(text=text, href=href))
            found += 1
        if found:
            logger.debug(f"[OPAC_PARSE] Pattern '{name}' found {found} links")
    return pooled


def _dedupe_by_text(candidates: List[Candidate]) -> List[Candidate]:
    seen: set[str] = set()
    unique: List[Candidate] = []
    for cand in candidates:
        key = cand.text.lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(cand)
    return unique


def _find_href(html: str, href: str) -> int:
    idx = html.find(href)
    if idx == -1 and "&" in href:
        # 파서가 &amp; 를 풀어서 돌려준 경우 원문 표기로 다시 찾기
        idx = html.find(href.replace("&", "&amp;"))
    return idx


def media_type_near(html: str, href: str) -> Optional[str]:
    """href 주변 HTML 창에서 물리 매체 표기(DVD/Blu-ray)를 찾아 반환"""
    idx = _find_href(html, href)
    if idx == -1:
        return None
    window = html[max(0, idx - _MEDIA_WINDOW_BEFORE): idx + _MEDIA_WINDOW_AFTER]
    m = _MEDIA_PATTERN.search(window)
    return m.group(0) if m else None


def extract_candidates(html: str) -> List[Candidate]:
    """검색 결과 HTML에서 DVD/Blu-ray 후보 목록을 추출.

    1. 구조 패턴을 우선순위대로 적용해 후보를 모음
    2. 텍스트(대소문자 무시) 기준 중복 제거, 먼저 나온 후보 유지
    3. 매체 필터: 주변 HTML에 DVD/Blu-ray 표기가 없는 후보 제거

    매체 필터가 모든 후보를 제거하면 필터 없는 결과로 되돌리지 않고 빈 목록을 반환합니다.
    """
    if not html:
        return []

    parser = LexborHTMLParser(html)
    unique = _dedupe_by_text(_collect_candidates(parser))
    if not unique:
        return []

    logger.debug(
        f"[OPAC_PARSE] {len(unique)} unique links: "
        f"{[sanitize_for_log(c.text, 40) for c in unique[:5]]}"
    )

    filtered: List[Candidate] = []
    for cand in unique:
        hint = media_type_near(html, cand.href)
        if hint is None:
            logger.debug(f"[OPAC_PARSE] Filtering out '{sanitize_for_log(cand.text, 60)}' (not DVD/Blu-ray)")
            continue
        filtered.append(Candidate(text=cand.text, href=cand.href, media_type_hint=hint))

    if not filtered:
        logger.info(f"[OPAC_PARSE] Media filter removed all {len(unique)} results, returning none")
        return []

    logger.debug(f"[OPAC_PARSE] After media filter: {len(filtered)} of {len(unique)} results")
    return filtered
