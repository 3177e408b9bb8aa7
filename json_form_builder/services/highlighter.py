"""Lexical JSON highlighter producing tagged spans."""

import re
from typing import List, NamedTuple, Optional, Pattern, Tuple

from ..models.core import HighlightToken, TokenCategory

_STRING = r'"(?:\\.|[^"\\\n])*"'


class Matcher(NamedTuple):
    """A category, its pattern, and the group whose span gets tagged."""

    category: TokenCategory
    pattern: Pattern[str]
    group: int = 0


# Priority order: a character claimed by an earlier matcher is never re-tagged.
DEFAULT_MATCHERS: Tuple[Matcher, ...] = (
    Matcher(TokenCategory.KEY, re.compile(_STRING + r'\s*:')),
    Matcher(TokenCategory.STRING_VALUE, re.compile(r':\s*(' + _STRING + r')'), 1),
    Matcher(TokenCategory.NUMBER, re.compile(r':\s*(-?\d+(?:\.\d*)?(?:[eE][+-]?\d+)?)'), 1),
    Matcher(TokenCategory.BOOLEAN, re.compile(r':\s*(true|false)\b'), 1),
    Matcher(TokenCategory.NULL, re.compile(r':\s*(null)\b'), 1),
    Matcher(TokenCategory.STRUCTURAL, re.compile(r'[\[\]{}]')),
    Matcher(TokenCategory.SEPARATOR, re.compile(r',')),
)


class Highlighter:
    """Tags JSON text with display categories without parsing it.

    Works on any text, valid JSON or not; malformed input is tagged on a
    best-effort basis.
    """

    def __init__(self, matchers: Tuple[Matcher, ...] = DEFAULT_MATCHERS):
        self.matchers = matchers

    def highlight(self, text: str) -> List[HighlightToken]:
        """
        Tag the text with display categories.

        Args:
            text: JSON text, valid or not

        Returns:
            Disjoint tokens ordered by start offset
        """
        if not text:
            return []

        claimed = bytearray(len(text))
        spans: List[Tuple[int, int, TokenCategory]] = []

        for matcher in self.matchers:
            for match in matcher.pattern.finditer(text):
                start, end = match.span(matcher.group)
                if start == end or any(claimed[start:end]):
                    continue
                claimed[start:end] = b'\x01' * (end - start)
                spans.append((start, end, matcher.category))

        spans.sort(key=lambda span: span[0])
        return [
            HighlightToken(start=start, end=end, category=category, text=text[start:end])
            for start, end, category in spans
        ]

    def segments(self, text: str) -> List[Tuple[str, Optional[TokenCategory]]]:
        """Split the whole text into runs, untagged runs carrying ``None``."""
        runs: List[Tuple[str, Optional[TokenCategory]]] = []
        position = 0
        for token in self.highlight(text):
            if token.start > position:
                runs.append((text[position:token.start], None))
            runs.append((token.text, token.category))
            position = token.end
        if position < len(text):
            runs.append((text[position:], None))
        return runs


_default_highlighter = Highlighter()


def highlight(text: str) -> List[HighlightToken]:
    """Tag text using the default matchers."""
    return _default_highlighter.highlight(text)
