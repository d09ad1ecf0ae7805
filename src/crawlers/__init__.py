"""Catalog crawler modules (curl_cffi HTTP + selectolax parsing).

공개 API는 이 파일에서만 export합니다.
"""

from .http_client import HttpResponse, SharedHttpClient, get_shared_http_client
from .result import Candidate

__all__ = [
        "Candidate",
        "HttpResponse",
        "SharedHttpClient",
        "get_shared_http_client",
]
