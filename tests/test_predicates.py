"""
Tests for content predicates.
"""

import re

import pytest

from restockwatch.errors import ParseError
from restockwatch.predicates import (
    build_predicate, contains_term, matches_pattern, selector_contains,
)

from .conftest import PAGE_WITH, PAGE_WITHOUT


class TestContainsTerm:

    def test_finds_term(self):
        p = contains_term("iPhone 8")
        assert p(PAGE_WITH) is True
        assert p(PAGE_WITHOUT) is False

    def test_is_deterministic(self):
        p = contains_term("iPhone 8")
        assert [p(PAGE_WITH) for _ in range(3)] == [True, True, True]
        assert [p(PAGE_WITHOUT) for _ in range(3)] == [False, False, False]

    def test_case_insensitive_by_default(self):
        assert contains_term("IPHONE 8")(PAGE_WITH) is True
        assert contains_term("IPHONE 8", case_sensitive=True)(PAGE_WITH) is False

    def test_html_mode_matches_across_tags(self):
        page = "<p>New: iPhone <b>8</b> in stock</p>"
        assert contains_term("iPhone 8")(page) is False
        assert contains_term("iPhone 8", html=True)(page) is True

    def test_html_mode_ignores_scripts(self):
        page = "<html><script>var t = 'iPhone 8';</script><p>Sold out</p></html>"
        assert contains_term("iPhone 8", html=True)(page) is False

    @pytest.mark.parametrize("content", ["", "   \n"])
    def test_empty_content_is_parse_error(self, content):
        with pytest.raises(ParseError):
            contains_term("iPhone 8")(content)

    def test_empty_term_rejected(self):
        with pytest.raises(ValueError):
            contains_term("")


class TestMatchesPattern:

    def test_regex_search(self):
        p = matches_pattern(r"iPhone\s+8\b")
        assert p(PAGE_WITH) is True
        assert p(PAGE_WITHOUT) is False

    def test_accepts_compiled_pattern(self):
        p = matches_pattern(re.compile(r"iphone 8"))
        # compiled patterns keep their own flags
        assert p(PAGE_WITH) is False

    def test_empty_content_is_parse_error(self):
        with pytest.raises(ParseError):
            matches_pattern("x")("")


class TestSelectorContains:

    def test_term_inside_selected_elements(self):
        p = selector_contains("li.product", "iPhone 8")
        assert p(PAGE_WITH) is True
        assert p(PAGE_WITHOUT) is False

    def test_term_outside_selection_is_ignored(self):
        page = "<div><h1>iPhone 8 coming soon</h1><li class='product'>iPhone 7</li></div>"
        assert selector_contains("li.product", "iPhone 8")(page) is False

    def test_missing_selection_with_term_is_parse_error(self):
        with pytest.raises(ParseError) as exc:
            selector_contains("li.product", "iPhone 8")("<html><body>maintenance</body></html>")
        assert "li.product" in str(exc.value)

    def test_presence_only(self):
        p = selector_contains("button.add-to-basket")
        assert p("<button class='add-to-basket'>Add</button>") is True
        assert p("<p>Out of stock</p>") is False


class TestBuildPredicate:

    def test_selector_takes_precedence(self):
        p = build_predicate(term="iPhone 8", pattern="nothing", selector="li.product")
        assert p(PAGE_WITH) is True

    def test_pattern_over_term(self):
        p = build_predicate(term="iPhone 7", pattern=r"iPhone 8")
        assert p(PAGE_WITHOUT) is False

    def test_term_only(self):
        assert build_predicate(term="iPhone 8")(PAGE_WITH) is True

    def test_requires_something(self):
        with pytest.raises(ValueError):
            build_predicate()
