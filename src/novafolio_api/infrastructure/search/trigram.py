"""Trigram similarity and lexeme matching for SQLite.

PostgreSQL provides ``similarity()`` (pg_trgm) and ``tsvector`` matching
natively. These functions reproduce the same semantics in Python so they can
be registered on SQLite connections and the search query stays identical
across backends.
"""

import re
from typing import FrozenSet, List, Optional, Set

_WORD_RE = re.compile(r"[^\W_]+", re.UNICODE)
_QUERY_TOKEN_RE = re.compile(r'-?"[^"]*"|\S+')

# Subset of PostgreSQL's english stop word list
STOP_WORDS: FrozenSet[str] = frozenset(
    """
    a about above after again against all am an and any are as at be because
    been before being below between both but by can did do does doing down
    during each few for from further had has have having he her here hers
    herself him himself his how i if in into is it its itself just me more
    most my myself no nor not now of off on once only or other our ours
    ourselves out over own same she should so some such than that the their
    theirs them themselves then there these they this those through to too
    under until up very was we were what when where which while who whom why
    will with you your yours yourself yourselves
    """.split()
)


def trigrams(text: str) -> Set[str]:
    """Return the pg_trgm trigram set of ``text``.

    Each alphanumeric word is lower-cased and padded with two leading blanks
    and one trailing blank before being cut into three-character windows.
    """
    grams: Set[str] = set()
    for word in _WORD_RE.findall(text.lower()):
        padded = f"  {word} "
        for i in range(len(padded) - 2):
            grams.add(padded[i:i + 3])
    return grams


def similarity(left: Optional[str], right: Optional[str]) -> Optional[float]:
    """Jaccard similarity of the trigram sets, as pg_trgm's ``similarity``."""
    if left is None or right is None:
        return None
    a = trigrams(left)
    b = trigrams(right)
    union = len(a | b)
    if union == 0:
        return 0.0
    return len(a & b) / union


def lexemes(text: Optional[str]) -> List[str]:
    """Sorted unique lower-cased words of ``text`` without stop words."""
    if not text:
        return []
    words = {w for w in _WORD_RE.findall(text.lower()) if w not in STOP_WORDS}
    return sorted(words)


def to_search_vector(text: Optional[str]) -> str:
    return " ".join(lexemes(text))


def _parse_websearch(query: str) -> List[List[tuple]]:
    """Split a web-search style query into OR-groups of (negated, words)."""
    groups: List[List[tuple]] = [[]]
    for token in _QUERY_TOKEN_RE.findall(query):
        if token.lower() == "or":
            groups.append([])
            continue
        negated = token.startswith("-") and len(token) > 1
        if negated:
            token = token[1:]
        words = lexemes(token.strip('"'))
        if words:
            groups[-1].append((negated, words))
    return [g for g in groups if g]


def websearch_match(vector: Optional[str], query: Optional[str]) -> int:
    """Return 1 when ``vector`` satisfies the web-search style ``query``.

    Terms are AND-ed, ``or`` separates alternatives and a leading ``-``
    excludes a term. A query made only of stop words matches nothing.
    """
    if not vector or not query:
        return 0
    present = set(vector.split())
    for group in _parse_websearch(query):
        positives = [words for negated, words in group if not negated]
        if not positives:
            continue
        if not all(all(w in present for w in words) for words in positives):
            continue
        if any(all(w in present for w in words) for negated, words in group if negated):
            continue
        return 1
    return 0
