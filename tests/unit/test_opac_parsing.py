"""WebOPAC 결과 페이지 파싱 테스트"""

from src.crawlers.opac import parsing
from tests.fixtures import OPAC_PAGES


class TestExtractCandidates:
    def test_single_dvd_result(self):
        candidates = parsing.extract_candidates(OPAC_PAGES["paris_texas"])
        assert len(candidates) == 1
        assert candidates[0].text == "Paris, Texas"
        assert candidates[0].media_type_hint == "DVD-Video"

    def test_same_title_from_two_patterns_is_deduplicated(self):
        candidates = parsing.extract_candidates(OPAC_PAGES["duplicate_patterns"])
        assert [c.text for c in candidates] == ["Stalker"]
        assert candidates[0].media_type_hint == "Blu-ray"

    def test_first_pattern_wins_on_duplicates(self):
        candidates = parsing.extract_candidates(OPAC_PAGES["duplicate_patterns"])
        assert candidates[0].href == "singleHit.do?curPos=1"

    def test_media_filter_drops_non_disc_results(self):
        candidates = parsing.extract_candidates(OPAC_PAGES["mixed_media"])
        assert [c.text for c in candidates] == ["Lucky (2017)"]
        assert candidates[0].media_type_hint == "DVD"

    def test_no_fallback_when_media_filter_removes_everything(self):
        assert parsing.extract_candidates(OPAC_PAGES["books_only"]) == []

    def test_zero_results_page(self):
        assert parsing.extract_candidates(OPAC_PAGES["zero_results"]) == []

    def test_empty_html(self):
        assert parsing.extract_candidates("") == []

    def test_result_title_cell_pattern(self):
        html = (
            '<table><tr><td><img alt="BluRay"></td>'
            '<td class="resultTitle x"><a href="detail?id=7">Der Himmel über Berlin</a></td></tr></table>'
        )
        candidates = parsing.extract_candidates(html)
        assert [c.text for c in candidates] == ["Der Himmel über Berlin"]
        assert candidates[0].media_type_hint == "BluRay"

    def test_link_text_whitespace_collapsed(self):
        html = '<img alt="DVD"><a href="showHit?curPos=3">  Paris,\n   Texas </a>'
        assert parsing.extract_candidates(html)[0].text == "Paris, Texas"

    def test_parses_with_lexbor_backend(self):
        from selectolax.lexbor import LexborHTMLParser

        assert parsing.LexborHTMLParser is LexborHTMLParser

    def test_nested_markup_inside_link(self):
        html = '<img alt="DVD"><a href="showHit?curPos=4"><b>Paris</b>, <i>Texas</i></a>'
        candidates = parsing.extract_candidates(html)
        assert candidates[0].text == "Paris, Texas"
        assert candidates[0].href == "showHit?curPos=4"


class TestMediaTypeNear:
    def test_marker_before_link(self):
        html = '<img alt="DVD"><a href="x.do?id=1">Film</a>'
        assert parsing.media_type_near(html, "x.do?id=1") == "DVD"

    def test_marker_after_link_within_window(self):
        html = '<a href="x.do?id=1">Film</a><span>Blu-Ray</span>'
        assert parsing.media_type_near(html, "x.do?id=1") == "Blu-Ray"

    def test_marker_outside_window(self):
        html = '<img alt="DVD">' + (" " * 1600) + '<a href="x.do?id=1">Film</a>'
        assert parsing.media_type_near(html, "x.do?id=1") is None

    def test_escaped_ampersand_in_source(self):
        html = '<img alt="DVD"><a href="x.do?a=1&amp;b=2">Film</a>'
        assert parsing.media_type_near(html, "x.do?a=1&b=2") == "DVD"

    def test_missing_href(self):
        assert parsing.media_type_near("<p>DVD</p>", "nope") is None


class TestTriageSignals:
    def test_session_expired_short_page(self):
        assert parsing.is_session_expired(OPAC_PAGES["session_expired"]) is True

    def test_session_expired_english(self):
        assert parsing.is_session_expired("<p>Your session is no longer valid.</p>") is True

    def test_long_page_with_expiry_text_is_not_expired(self):
        assert parsing.is_session_expired(OPAC_PAGES["long_page_with_expiry_text"]) is False

    def test_results_page_is_not_expired(self):
        assert parsing.is_session_expired(OPAC_PAGES["paris_texas"]) is False

    def test_error_page(self):
        assert parsing.is_error_page(OPAC_PAGES["error_page"]) is True

    def test_long_page_with_error_word_is_not_error(self):
        html = OPAC_PAGES["paris_texas"] + "<!-- Fehler -->" + ("x" * 1000)
        assert parsing.is_error_page(html) is False

    def test_empty_is_neither(self):
        assert parsing.is_session_expired("") is False
        assert parsing.is_error_page("") is False

    def test_result_count(self):
        assert parsing.result_count(OPAC_PAGES["paris_texas"]) == 1
        assert parsing.result_count(OPAC_PAGES["zero_results"]) == 0
        assert parsing.result_count("<p>nothing</p>") is None

    def test_has_any_results(self):
        assert parsing.has_any_results(OPAC_PAGES["unrelated_dvd"]) is True
        assert parsing.has_any_results(OPAC_PAGES["zero_results"]) is False
        assert parsing.has_any_results("") is False

    def test_availability_keywords(self):
        assert parsing.is_available(OPAC_PAGES["paris_texas"]) is True
        assert parsing.is_available("<td>Exemplar verfügbar</td>") is True
        assert parsing.is_available("<td>available</td>") is True
        assert parsing.is_available(OPAC_PAGES["duplicate_patterns"]) is False
