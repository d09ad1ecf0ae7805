"""Catalog Candidate Standard Format

검색 결과 페이지에서 추출한 후보 항목의 표준 형식을 정의합니다.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Candidate:
    """검색 응답 하나에서 나온 카탈로그 항목 (점수화 이전)

    Attributes:
        text: 링크 텍스트 (카탈로그 제목)
        href: 상세 페이지 href (원본 그대로)
        media_type_hint: 주변 HTML에서 찾은 매체 표기 (예: "DVD-Video")
    """

    text: str
    href: str
    media_type_hint: Optional[str] = None
