# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

All value objects are created per originality check and owned by the call
that created them. No module redefines these types.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

SimilarityLevel = Literal["very-high", "high", "medium", "low", "very-low"]
RiskStatus = Literal["HIGH_RISK", "MEDIUM_RISK", "LOW_RISK", "ORIGINAL"]
FetchStatus = Literal["PENDING", "FETCHING", "SUCCESS", "RATE_LIMITED", "FAILED"]
ProgressStage = Literal["start", "corpus", "search", "fetch", "aggregate", "done"]


# === DOCUMENTS ===


class Document(BaseModel):
    """A text participating in a check: the candidate or a corpus entry."""

    id: str
    title: str = ""
    url: str | None = None
    source: str = "candidate"
    raw_text: str


# === SCORING ===


class LevelInfo(BaseModel):
    """Similarity bucket with human-readable label and guidance."""

    level: SimilarityLevel
    label: str
    description: str


class SimilarityScore(BaseModel):
    """Three lexical metrics and their fused 0-100 score."""

    cosine: float = Field(ge=0.0, le=1.0)
    jaccard: float = Field(ge=0.0, le=1.0)
    edit_distance: float = Field(ge=0.0, le=1.0)
    overall: float = Field(ge=0.0, le=100.0)
    level: SimilarityLevel


class SentencePair(BaseModel):
    """Two sentences whose fused similarity passed the threshold."""

    sentence_a: str
    sentence_b: str
    similarity: float


class CorpusMatch(BaseModel):
    """Candidate scored against one own-corpus document."""

    document_id: str
    title: str = ""
    url: str | None = None
    score: float
    level: SimilarityLevel


# === SEARCH & FETCH ===


class SearchItem(BaseModel):
    """Raw item returned by a search provider."""

    title: str = ""
    link: str
    snippet: str = ""


class SearchPage(BaseModel):
    """One page of search provider results."""

    items: list[SearchItem] = Field(default_factory=list)
    total_results: int = 0


class SearchMatch(BaseModel):
    """Search hit stub; `score` is filled once the page text is compared."""

    title: str = ""
    url: str
    snippet: str = ""
    source: str = "web"
    score: float = 0.0


class WebMatch(SearchMatch):
    """Search hit whose full page text was fetched and scored."""

    level: SimilarityLevel = "very-low"
    content_chars: int = 0
    similar_sentences: list[SentencePair] = Field(default_factory=list)


class FetchOutcome(BaseModel):
    """Final state of one URL in the fetch pipeline."""

    url: str
    status: FetchStatus = "PENDING"
    content: str | None = None
    attempts: int = 0
    error: str | None = None
    history: list[FetchStatus] = Field(default_factory=lambda: ["PENDING"])

    @property
    def usable(self) -> bool:
        return self.status == "SUCCESS" and self.content is not None


# === AGGREGATE ===


class ProgressEvent(BaseModel):
    """Structured progress notification emitted during a check."""

    stage: ProgressStage
    message: str
    current: int = 0
    total: int = 0


class AggregateResult(BaseModel):
    """Return value of check_similarity(): always fully populated."""

    candidate_document: Document
    own_corpus_matches: list[CorpusMatch] = Field(default_factory=list)
    web_matches: list[WebMatch] = Field(default_factory=list)
    overall_score: float = Field(default=0.0, ge=0.0, le=100.0)
    risk_status: RiskStatus = "ORIGINAL"
    message: str
    duration_ms: int = 0
    web_search_failed: bool = False
    cancelled: bool = False
