"""Tests for the DuckDB analysis cache and history."""

import time

import pytest

from deck_analysis_mcp.db import Database, InMemoryAnalysisCache, connect
from deck_analysis_mcp.db.database import _init_schema
from deck_analysis_mcp.engine import DeckAnalyzer
from deck_analysis_mcp.models import AnalysisReport

from factories import aggro_deck


@pytest.fixture(scope="module")
def report() -> AnalysisReport:
    return DeckAnalyzer().analyze(aggro_deck(deck_id="lightning-1"))


@pytest.fixture
def db():
    conn = connect(":memory:")
    yield Database(conn)
    conn.close()


class TestAnalysisCache:
    """Tests for Database as an AnalysisCache."""

    def test_round_trip(self, db, report):
        db.set("deck-analysis:lightning-1:standard", report, 3600)
        assert db.get("deck-analysis:lightning-1:standard") == report

    def test_missing_key(self, db):
        assert db.get("deck-analysis:unknown:standard") is None

    def test_expired_entry(self, db, report):
        db.set("deck-analysis:lightning-1:standard", report, 0)
        assert db.get("deck-analysis:lightning-1:standard") is None

    def test_overwrite(self, db, report):
        key = "deck-analysis:lightning-1:standard"
        db.set(key, report, 3600)
        newer = report.model_copy(update={"recommendations": []})
        db.set(key, newer, 3600)
        assert db.get(key).recommendations == []

    def test_purge_expired(self, db, report):
        db.set("deck-analysis:old:standard", report, -10)
        db.set("deck-analysis:fresh:standard", report, 3600)
        assert db.purge_expired() == 1
        assert db.get("deck-analysis:fresh:standard") is not None

    def test_schema_is_idempotent(self, db):
        _init_schema(db.conn)


class TestAnalysisHistory:
    """Tests for analysis history rows."""

    def test_save_and_read(self, db, report):
        d = aggro_deck(deck_id="lightning-1")
        analysis_id = db.save_deck_analysis(d, "standard", report)

        rows = db.get_analysis_history("lightning-1")
        assert len(rows) == 1
        row = rows[0]
        assert row["id"] == analysis_id
        assert row["deck_name"] == "Lightning Aggro"
        assert row["format"] == "standard"
        assert row["archetype"] == "aggro"
        assert row["overall_score"] == report.scores.overall
        assert row["total_cards"] == 60

    def test_most_recent_first(self, db, report):
        d = aggro_deck(deck_id="lightning-1")
        first = db.save_deck_analysis(d, "standard", report)
        second = db.save_deck_analysis(d, "expanded", report)
        db.save_deck_analysis(aggro_deck(deck_id="other"), "standard", report)

        rows = db.get_analysis_history("lightning-1")
        assert [r["id"] for r in rows] == [second, first]

    def test_limit(self, db, report):
        d = aggro_deck(deck_id="lightning-1")
        for _ in range(3):
            db.save_deck_analysis(d, "standard", report)
        assert len(db.get_analysis_history("lightning-1", limit=2)) == 2

    def test_unnamed_deck_uses_id(self, db, report):
        d = aggro_deck(deck_id="lightning-1").model_copy(update={"name": None})
        db.save_deck_analysis(d, "standard", report)
        assert db.get_analysis_history("lightning-1")[0]["deck_name"] == "lightning-1"


class TestInMemoryAnalysisCache:
    """Tests for the process-local cache."""

    def test_expiry(self, report, monkeypatch):
        cache = InMemoryAnalysisCache()
        cache.set("k", report, 60)
        assert cache.get("k") is report

        now = time.time()
        monkeypatch.setattr(time, "time", lambda: now + 61)
        assert cache.get("k") is None
        assert len(cache) == 0
