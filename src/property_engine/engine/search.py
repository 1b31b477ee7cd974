"""Free-text property search with explainable relevance scoring.

Scoring per query term found anywhere in a record's corpus:

- +1 base score
- +10 when the term also appears in the title
- +5 when the term also appears in the address
- +0.5 per fuzzy word match (see ``property_engine.engine.fuzzy``)

Records matching fewer than half of the query terms score 0 and are
dropped. Survivors are returned as scored copies, best first, with ties
kept in input order.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging

from property_engine.domain.model import PropertyRecord, SearchResult
from property_engine.engine.fuzzy import count_fuzzy_matches, split_words


logger = logging.getLogger(__name__)

BASE_SCORE = 1.0
TITLE_BONUS = 10.0
ADDRESS_BONUS = 5.0
FUZZY_BONUS = 0.5
MIN_MATCH_RATIO = 0.5


@dataclass(frozen=True)
class TermScore:
    """Contribution of a single query term to a record's score."""

    term: str
    matched: bool
    score: float = 0.0


def tokenize_query(query: str) -> list[str]:
    """Lowercase whitespace-delimited terms; empty tokens are dropped."""
    return query.lower().split()


def build_corpus(record: PropertyRecord) -> str:
    """Lowercased searchable text for a record."""
    parts = [
        record.title or "",
        record.description or "",
        record.address or "",
        record.city or "",
        record.neighborhood or "",
        record.property_type or "",
        record.sale_type or "",
        *record.features,
    ]
    return " ".join(parts).lower()


def score_term(term: str, record: PropertyRecord, corpus: str, words: Sequence[str], fuzzy: bool) -> TermScore:
    if term not in corpus:
        return TermScore(term=term, matched=False)

    score = BASE_SCORE
    if term in record.title_text.lower():
        score += TITLE_BONUS
    if term in record.address_text.lower():
        score += ADDRESS_BONUS
    if fuzzy:
        score += FUZZY_BONUS * count_fuzzy_matches(term, words)
    return TermScore(term=term, matched=True, score=score)


def score_record(record: PropertyRecord, terms: Sequence[str], fuzzy: bool = True) -> float:
    """Relevance score of ``record`` for ``terms``; 0 means "not a match"."""
    if not terms:
        return 0.0

    corpus = build_corpus(record)
    words = split_words(corpus)
    term_scores = [score_term(term, record, corpus, words, fuzzy) for term in terms]

    matched = sum(1 for item in term_scores if item.matched)
    if matched / len(terms) < MIN_MATCH_RATIO:
        return 0.0
    return sum(item.score for item in term_scores)


def search_properties(records: Sequence[PropertyRecord], query: str | None, fuzzy: bool = True) -> SearchResult:
    """Rank ``records`` against ``query``.

    A blank query is a pass-through: every record comes back unscored in its
    original order.
    """
    if not query or not query.strip():
        return SearchResult(search_results=list(records), query=query, result_count=len(records))

    terms = tokenize_query(query)
    scored = []
    for record in records:
        score = score_record(record, terms, fuzzy)
        if score > 0:
            scored.append(record.with_score(score))

    # list.sort is stable, so equal scores keep input order
    scored.sort(key=lambda record: record.search_score or 0.0, reverse=True)

    logger.debug(f"Search '{query}': {len(terms)} terms, {len(scored)}/{len(records)} records matched")
    return SearchResult(search_results=scored, query=query, result_count=len(scored))
