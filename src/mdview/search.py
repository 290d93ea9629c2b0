"""In-document text search."""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class SearchMatch:
    """A match of the search query in a document's source."""

    line: int  # 0-based line index
    start: int  # column offsets within the line
    end: int


def find_matches(text: str, query: str) -> list[SearchMatch]:
    """Find every case-insensitive, non-overlapping occurrence of query.

    The query is matched literally. Matches never span lines.

    Args:
        text: Document text to search
        query: Text to look for (surrounding whitespace is ignored)

    Returns:
        Matches in document order, or an empty list for an empty query
    """
    query = query.strip()
    if not query:
        return []

    pattern = re.compile(re.escape(query), re.IGNORECASE)
    matches = []
    for line_index, line in enumerate(text.splitlines()):
        for match in pattern.finditer(line):
            matches.append(SearchMatch(line_index, match.start(), match.end()))
    return matches


class SearchResults:
    """Matches for one query with a wrap-around current position."""

    def __init__(self, query: str = "", matches: list[SearchMatch] | None = None) -> None:
        self.query = query
        self.matches = matches or []
        self.index = 0 if self.matches else -1

    @classmethod
    def search(cls, text: str, query: str) -> "SearchResults":
        return cls(query, find_matches(text, query))

    def __len__(self) -> int:
        return len(self.matches)

    @property
    def current(self) -> SearchMatch | None:
        if self.index < 0:
            return None
        return self.matches[self.index]

    def next(self) -> SearchMatch | None:
        """Advance to the next match, wrapping to the first."""
        if not self.matches:
            return None
        self.index = (self.index + 1) % len(self.matches)
        return self.current

    def previous(self) -> SearchMatch | None:
        """Step back to the previous match, wrapping to the last."""
        if not self.matches:
            return None
        self.index = (self.index - 1) % len(self.matches)
        return self.current

    def summary(self) -> str:
        if not self.query.strip():
            return ""
        if not self.matches:
            return "No matches"
        return f"{self.index + 1} of {len(self.matches)}"
