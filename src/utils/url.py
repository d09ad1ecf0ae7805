"""WebOPAC URL 빌더

카탈로그는 JavaScript의 encodeURIComponent와 같은 방식으로 인코딩된 값을 기대합니다.
"""
from urllib.parse import quote


# encodeURIComponent leaves these unescaped in addition to quote()'s defaults
_URI_COMPONENT_SAFE = "!~*'()"


def encode_uri_component(value: str) -> str:
    """encodeURIComponent 호환 퍼센트 인코딩

    Examples:
        >>> encode_uri_component("Paris, Texas")
        'Paris%2C%20Texas'
    """
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_login_url(base_url: str, login_id: str) -> str:
    """세션 핸드셰이크 URL"""
    return f"{base_url.rstrip('/')}/start.do?Login={encode_uri_component(login_id)}"


def build_search_url(base_url: str, search_string: str) -> str:
    """전체 카테고리(-1) 단순 검색 URL"""
    encoded = encode_uri_component(search_string.strip())
    return (
        f"{base_url.rstrip('/')}/search.do?methodToCall=submit"
        f"&methodToCallParameter=submitSearch"
        f"&searchCategories%5B0%5D=-1"
        f"&searchString%5B0%5D={encoded}"
    )


def build_deep_link(base_url: str, title: str) -> str:
    """매칭된 제목으로 카탈로그를 다시 여는 딥링크

    Examples:
        >>> build_deep_link("https://opac.example/web", "Paris, Texas")
        'https://opac.example/web/start.do?Branch=00&Query=-1=%22Paris%2C%20Texas%22'
    """
    return f"{base_url.rstrip('/')}/start.do?Branch=00&Query=-1=%22{encode_uri_component(title)}%22"
