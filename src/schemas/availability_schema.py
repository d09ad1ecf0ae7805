"""Pydantic 스키마 정의 (Validation Enhanced)"""
import re
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime

from src.engine.result import Query, QueryResult


_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


class AvailabilityRequest(BaseModel):
    """영화 가용성 조회 요청 (입력 검증 강화)"""
    title: str = Field(..., min_length=1, max_length=300, description="영화 제목")
    year: Optional[str] = Field(None, description="개봉 연도 (4자리)")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("title must not be blank")
        if _CONTROL_CHARS.search(v):
            raise ValueError("title must not contain control characters")
        return v.strip()

    @field_validator("year")
    @classmethod
    def validate_year(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        v = v.strip()
        if not re.fullmatch(r"\d{4}", v):
            raise ValueError("year must be four digits")
        return v

    def to_query(self) -> Query:
        return Query(title=self.title, year=self.year)


class AvailabilityResponse(BaseModel):
    """가용성 조회 응답 (None 필드는 응답에서 제외)"""
    model_config = ConfigDict(populate_by_name=True)

    available: bool = Field(..., description="대출 가능 여부")
    link: Optional[str] = Field(None, description="카탈로그 딥링크")
    title: Optional[str] = Field(None, description="매칭된 카탈로그 제목")
    match_score: Optional[float] = Field(None, alias="matchScore", ge=0, le=100, description="매칭 점수")
    note: Optional[str] = Field(None, description="부정 결과 설명")
    error: Optional[str] = Field(None, description="진단 메시지")

    @classmethod
    def from_result(cls, result: QueryResult) -> "AvailabilityResponse":
        return cls(
            available=result.available,
            link=result.link,
            title=result.title,
            match_score=result.match_score,
            note=result.note,
            error=result.error,
        )


class BatchAvailabilityRequest(BaseModel):
    """일괄 조회 요청 (페이지 하나의 영화 목록)"""
    queries: List[AvailabilityRequest] = Field(..., min_length=1, max_length=50)


class BatchAvailabilityResponse(BaseModel):
    """일괄 조회 응답 (요청 순서 유지)"""
    results: List[AvailabilityResponse]


class CacheClearResponse(BaseModel):
    cleared: int


class HealthResponse(BaseModel):
    """헬스 체크 응답"""
    status: str
    timestamp: datetime
    version: str
    session_active: bool
    cache_entries: int
    in_flight: int
