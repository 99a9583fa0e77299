# src/similarity/corpus_matcher.py — v1
"""Score a candidate against the caller-supplied own corpus.

Pure functions over the scorer: no I/O, no retained state. The corpus is
held in memory only for the duration of the call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from originality.core.models import CorpusMatch, Document
from originality.similarity.scorer import classify, fused_score

if TYPE_CHECKING:
    from originality.similarity.scorer import SimilarityScorer

DEFAULT_TOP_N = 5


def check_similarity_batch(
    candidate: str,
    corpus: list[Document],
    scorer: SimilarityScorer | None = None,
) -> list[CorpusMatch]:
    """Score `candidate` against every corpus document, best first.

    Documents with no text are skipped.
    """
    score_fn = scorer.fused_score if scorer is not None else fused_score
    matches = [
        _to_match(doc, score_fn(candidate, doc.raw_text))
        for doc in corpus
        if doc.raw_text and doc.raw_text.strip()
    ]
    # sort() is stable: equal scores keep corpus order
    matches.sort(key=lambda m: m.score, reverse=True)
    return matches


def check_against_corpus(
    candidate: str,
    corpus: list[Document],
    top_n: int = DEFAULT_TOP_N,
    scorer: SimilarityScorer | None = None,
) -> list[CorpusMatch]:
    """Top-N own-corpus matches for `candidate`, sorted descending."""
    if not candidate or not candidate.strip() or not corpus:
        return []
    return check_similarity_batch(candidate, corpus, scorer=scorer)[:top_n]


def _to_match(doc: Document, similarity: float) -> CorpusMatch:
    return CorpusMatch(
        document_id=doc.id,
        title=doc.title,
        url=doc.url,
        score=similarity,
        level=classify(similarity),
    )
