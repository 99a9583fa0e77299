# tests/integration/logging/test_int_logging_subsystem.py — v2
"""Integration tests for the logging subsystem.

Covers: logging/logger.py, logging/context.py, and the context the
facade attaches to records emitted during a check.
"""

from __future__ import annotations

import io
import json
import logging

import pytest

from originality.api.facade import OriginalityChecker
from originality.logging.context import clear_context
from originality.logging.logger import JsonFormatter, setup_logging


@pytest.fixture
def json_stream():
    """Route the originality logger to an in-memory JSON stream."""
    setup_logging("INFO", "json")
    root = logging.getLogger("originality")
    stream = io.StringIO()
    root.handlers[0].setStream(stream)
    yield stream
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    clear_context()


class TestCheckLogging:
    @pytest.mark.asyncio
    async def test_records_carry_check_id(self, json_stream, settings, candidate_text, sample_corpus):
        result = await OriginalityChecker(settings=settings).check_similarity(
            candidate_text, corpus=sample_corpus
        )
        lines = [json.loads(line) for line in json_stream.getvalue().splitlines() if line]
        assert lines
        check_ids = {line.get("context", {}).get("check_id") for line in lines}
        assert check_ids == {result.candidate_document.id}
        summary = next(line for line in lines if "Aggregated check" in line["message"])
        assert summary["data"]["overall_score"] == result.overall_score
        assert summary["data"]["risk_status"] == result.risk_status
        assert summary["data"]["web_search_failed"] is False

    def test_formatter_is_json(self, json_stream):
        root = logging.getLogger("originality")
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        logging.getLogger("originality.test").info("formatter check")
        assert json.loads(json_stream.getvalue().splitlines()[-1])["message"] == "formatter check"
