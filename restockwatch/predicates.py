# restockwatch/predicates.py
# Pure content predicates: given fetched page text, is the thing we want there?
#
# Public API:
#   contains_term(term, case_sensitive=False, html=False)
#   matches_pattern(pattern)
#   selector_contains(selector, term=None, case_sensitive=False)
#   build_predicate(term=None, pattern=None, selector=None, case_sensitive=False, strip_html=False)
#
# Every predicate raises ParseError on content it can't make sense of
# (empty body, selector matching nothing). None of them touch the network.

from __future__ import annotations
import re
from typing import Optional, Pattern, Union

from bs4 import BeautifulSoup

from .errors import ParseError
from .watchers.base import Predicate


def _require_text(content: str) -> str:
    if content is None or not str(content).strip():
        raise ParseError("empty content")
    return content


def _fold(text: str, case_sensitive: bool) -> str:
    return text if case_sensitive else text.casefold()


def _html_text(content: str) -> str:
    soup = BeautifulSoup(content, "lxml")
    for el in soup(["script", "style", "noscript"]):
        el.decompose()
    return soup.get_text(" ", strip=True)


def contains_term(term: str, case_sensitive: bool = False, html: bool = False) -> Predicate:
    """Substring match. With ``html=True`` markup is stripped first so a term
    split across tags (``iPhone <b>8</b>``) still matches."""
    if not term:
        raise ValueError("term must be non-empty")
    needle = _fold(term, case_sensitive)

    def predicate(content: str) -> bool:
        text = _require_text(content)
        if html:
            text = _html_text(text)
            # collapse whitespace introduced by get_text
            text = re.sub(r"\s+", " ", text)
        return needle in _fold(text, case_sensitive)

    predicate.__name__ = f"contains_term({term!r})"
    return predicate


def matches_pattern(pattern: Union[str, Pattern[str]], case_sensitive: bool = False) -> Predicate:
    flags = 0 if case_sensitive else re.I
    rx = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern, flags)

    def predicate(content: str) -> bool:
        return rx.search(_require_text(content)) is not None

    predicate.__name__ = f"matches_pattern({rx.pattern!r})"
    return predicate


def selector_contains(selector: str, term: Optional[str] = None, case_sensitive: bool = False) -> Predicate:
    """Scope the match to elements found by a CSS selector.

    Without ``term`` the predicate is true as soon as the selector matches
    anything (e.g. an "Add to basket" button). With ``term`` the selector is
    expected to match: if it finds nothing the page layout has changed and
    ParseError is raised rather than reporting "not present".
    """
    if not selector:
        raise ValueError("selector must be non-empty")
    needle = _fold(term, case_sensitive) if term else None

    def predicate(content: str) -> bool:
        soup = BeautifulSoup(_require_text(content), "lxml")
        nodes = soup.select(selector)
        if needle is None:
            return bool(nodes)
        if not nodes:
            raise ParseError(f"selector {selector!r} matched no elements")
        return any(needle in _fold(n.get_text(" ", strip=True), case_sensitive) for n in nodes)

    predicate.__name__ = f"selector_contains({selector!r}, {term!r})"
    return predicate


def build_predicate(
    term: Optional[str] = None,
    pattern: Optional[str] = None,
    selector: Optional[str] = None,
    case_sensitive: bool = False,
    strip_html: bool = False,
) -> Predicate:
    """Pick a predicate from configuration values.

    selector (+ optional term) wins over pattern, pattern over a bare term.
    """
    if selector:
        return selector_contains(selector, term=term, case_sensitive=case_sensitive)
    if pattern:
        return matches_pattern(pattern, case_sensitive=case_sensitive)
    if term:
        return contains_term(term, case_sensitive=case_sensitive, html=strip_html)
    raise ValueError("one of term, pattern or selector is required")
