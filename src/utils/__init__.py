"""Utilities package

- url.py: WebOPAC URL 빌더 (encodeURIComponent 호환)
- text/: 제목 정규화 + 유사도 점수
"""

from .url import build_deep_link, build_login_url, build_search_url, encode_uri_component
from .text import MATCH_THRESHOLD, build_cache_key, normalize_title, score_title, select_best

__all__ = [
    # url
    "build_deep_link",
    "build_login_url",
    "build_search_url",
    "encode_uri_component",
    # text
    "MATCH_THRESHOLD",
    "build_cache_key",
    "normalize_title",
    "score_title",
    "select_best",
]
