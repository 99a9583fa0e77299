# src/api/aggregator.py — v1
"""Merge own-corpus and web matches into one risk verdict.

overall_score is the best single match across both sources, not an
average: one near-duplicate is enough to flag risk.

Risk scale (independent from the similarity-level scale in
similarity/scorer.py):
  >= 80                      HIGH_RISK
  >= 60                      MEDIUM_RISK
  <  30 with no match        ORIGINAL
  otherwise                  LOW_RISK
A "match" is any corpus or web result scoring at least MATCH_FLOOR.
"""

from __future__ import annotations

import logging

from originality.core.models import (
    AggregateResult,
    CorpusMatch,
    Document,
    RiskStatus,
    WebMatch,
)

logger = logging.getLogger(__name__)

HIGH_RISK_THRESHOLD = 80.0
MEDIUM_RISK_THRESHOLD = 60.0
ORIGINAL_THRESHOLD = 30.0
MATCH_FLOOR = 30.0

_RISK_MESSAGES: dict[RiskStatus, str] = {
    "HIGH_RISK": "Very similar content was found. Rewrite the text before publishing.",
    "MEDIUM_RISK": "Partially similar content was found. Revise the overlapping passages.",
    "LOW_RISK": "Some similar content was found, but the text is mostly original.",
    "ORIGINAL": "No similar content was found. The text appears original.",
}


def classify_risk(overall_score: float, has_match: bool) -> RiskStatus:
    """Map an aggregate score onto the risk scale."""
    if overall_score >= HIGH_RISK_THRESHOLD:
        return "HIGH_RISK"
    if overall_score >= MEDIUM_RISK_THRESHOLD:
        return "MEDIUM_RISK"
    if overall_score < ORIGINAL_THRESHOLD and not has_match:
        return "ORIGINAL"
    return "LOW_RISK"


def build_message(
    risk_status: RiskStatus,
    overall_score: float,
    corpus_count: int,
    web_count: int,
    web_search_failed: bool = False,
    cancelled: bool = False,
) -> str:
    """Human-readable summary of the verdict."""
    parts = [
        f"{_RISK_MESSAGES[risk_status]} (highest similarity {overall_score:.1f}%, "
        f"own corpus matches: {corpus_count}, web matches: {web_count})"
    ]
    if web_search_failed:
        parts.append("Web search was unavailable; only partial results were compared.")
    if cancelled:
        parts.append("The check was cancelled before all pages were fetched.")
    return " ".join(parts)


def aggregate(
    candidate: Document,
    corpus_matches: list[CorpusMatch],
    web_matches: list[WebMatch],
    duration_ms: int = 0,
    web_search_failed: bool = False,
    cancelled: bool = False,
) -> AggregateResult:
    """Build the AggregateResult. Never raises for empty match lists."""
    corpus_sorted = sorted(corpus_matches, key=lambda m: m.score, reverse=True)
    web_sorted = sorted(web_matches, key=lambda m: m.score, reverse=True)

    best_corpus = corpus_sorted[0].score if corpus_sorted else 0.0
    best_web = web_sorted[0].score if web_sorted else 0.0
    overall = round(min(100.0, max(0.0, best_corpus, best_web)), 2)

    has_match = any(m.score >= MATCH_FLOOR for m in corpus_sorted) or any(
        m.score >= MATCH_FLOOR for m in web_sorted
    )
    risk_status = classify_risk(overall, has_match)

    logger.info(
        "Aggregated check: score=%.2f status=%s corpus=%d web=%d",
        overall, risk_status, len(corpus_sorted), len(web_sorted),
        extra={
            "data": {
                "overall_score": overall,
                "risk_status": risk_status,
                "best_corpus_score": best_corpus,
                "best_web_score": best_web,
                "web_search_failed": web_search_failed,
                "cancelled": cancelled,
                "duration_ms": duration_ms,
            }
        },
    )

    return AggregateResult(
        candidate_document=candidate,
        own_corpus_matches=corpus_sorted,
        web_matches=web_sorted,
        overall_score=overall,
        risk_status=risk_status,
        message=build_message(
            risk_status,
            overall,
            len(corpus_sorted),
            len(web_sorted),
            web_search_failed=web_search_failed,
            cancelled=cancelled,
        ),
        duration_ms=duration_ms,
        web_search_failed=web_search_failed,
        cancelled=cancelled,
    )
