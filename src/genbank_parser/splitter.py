"""Lookahead splitting of section bodies.

A section body runs until the start of whatever comes next (the next keyword
line, the record delimiter, ...). The splitter finds that boundary without
consuming it, so the text handed back as ``rest`` still starts with the
terminator and the next section parser sees its own keyword.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Split:
    """Result of splitting text at a terminator."""

    body: str
    rest: str
    terminated: bool


class LookaheadSplitter:
    """Splits text before the first match of a terminating pattern."""

    def __init__(self, terminator: str, flags: int = re.DOTALL):
        self.pattern = re.compile(terminator, flags)

    def split(self, text: str) -> Split:
        """
        Split ``text`` at the first terminator match.

        Args:
            text: Remaining record text

        Returns:
            Split whose body is everything before the terminator. When the
            terminator never matches, the whole text is the body and
            ``terminated`` is False.
        """
        match = self.pattern.search(text)
        if match is None:
            return Split(body=text, rest="", terminated=False)
        return Split(body=text[:match.start()], rest=text[match.start():], terminated=True)

    def __repr__(self) -> str:
        return f"LookaheadSplitter({self.pattern.pattern!r})"


# Next line starting with an ALL-CAPS keyword, or the record delimiter
KEYWORD_LINE = LookaheadSplitter(r"\n(?:[A-Z]+(?:\s|$)|//)")

# Next line starting with a keyword indented by at most two spaces
SUBKEYWORD_LINE = LookaheadSplitter(r"\n {0,2}[A-Z]+")

# Indented PUBMED line, or the next (sub)keyword line, whichever is first
JOURNAL_END = LookaheadSplitter(r"\n(?: +PUBMED\b| {0,2}[A-Z]+)")

RECORD_DELIMITER = LookaheadSplitter(r"\n//")

LOCUS_LINE = LookaheadSplitter(r"\nLOCUS\b")
