"""DuckDB storage for cached analyses and analysis history."""

import time
from pathlib import Path

import duckdb

from ..config import settings
from ..models import AnalysisReport, Deck
from .cache import AnalysisCache


class Database(AnalysisCache):
    """DuckDB database manager for the analysis cache and history."""

    def __init__(self, conn: duckdb.DuckDBPyConnection):
        """Initialize database manager.

        Args:
            conn: DuckDB connection with schema initialized
        """
        self.conn = conn

    def get(self, key: str) -> AnalysisReport | None:
        """Get a cached analysis report.

        Args:
            key: Cache key, e.g. 'deck-analysis:my-deck:standard'

        Returns:
            Report, or None when missing or expired
        """
        row = self.conn.execute(
            "SELECT payload FROM analysis_cache WHERE cache_key = ? AND expires_at > ?",
            [key, time.time()],
        ).fetchone()
        if row is None:
            return None
        return AnalysisReport.model_validate_json(row[0])

    def set(self, key: str, report: AnalysisReport, ttl_seconds: int) -> None:
        """Store an analysis report in the cache.

        Args:
            key: Cache key
            report: Report to store
            ttl_seconds: Time-to-live in seconds
        """
        self.conn.execute(
            """
            INSERT OR REPLACE INTO analysis_cache (cache_key, payload, expires_at)
            VALUES (?, ?, ?)
            """,
            [key, report.model_dump_json(), time.time() + ttl_seconds],
        )

    def purge_expired(self) -> int:
        """Delete expired cache rows.

        Returns:
            Number of rows deleted
        """
        result = self.conn.execute(
            "DELETE FROM analysis_cache WHERE expires_at <= ? RETURNING cache_key", [time.time()]
        ).fetchall()
        return len(result)

    def save_deck_analysis(self, deck: Deck, format: str, report: AnalysisReport) -> int:
        """Save a summary row for a finished analysis.

        Args:
            deck: Analyzed deck
            format: Format the deck was analyzed for
            report: Finished report

        Returns:
            Analysis ID
        """
        result = self.conn.execute(
            """
            INSERT INTO deck_analyses
            (deck_id, deck_name, format, archetype, overall_score, total_cards)
            VALUES (?, ?, ?, ?, ?, ?)
            RETURNING id
            """,
            [
                deck.id,
                deck.name or deck.id or "Unnamed deck",
                format,
                report.archetype.primary_archetype.value,
                report.scores.overall,
                deck.total_cards,
            ],
        ).fetchone()
        if result is None:
            raise RuntimeError("Failed to save deck analysis")
        return result[0]

    def get_analysis_history(self, deck_id: str, limit: int = 10) -> list[dict]:
        """Get historical analysis runs for a deck.

        Args:
            deck_id: Deck identifier
            limit: Maximum number of results

        Returns:
            List of analysis records ordered by date (most recent first)
        """
        query = """
            SELECT
                id,
                deck_id,
                deck_name,
                format,
                archetype,
                overall_score,
                total_cards,
                analyzed_at
            FROM deck_analyses
            WHERE deck_id = ?
            ORDER BY analyzed_at DESC, id DESC
            LIMIT ?
        """
        result = self.conn.execute(query, [deck_id, limit]).fetchall()

        columns = [
            "id",
            "deck_id",
            "deck_name",
            "format",
            "archetype",
            "overall_score",
            "total_cards",
            "analyzed_at",
        ]
        return [dict(zip(columns, row)) for row in result]


def _init_schema(conn: duckdb.DuckDBPyConnection) -> None:
    """Initialize database schema.

    Args:
        conn: DuckDB connection
    """
    conn.execute("CREATE SEQUENCE IF NOT EXISTS seq_deck_analyses_id START 1")

    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS analysis_cache (
            cache_key TEXT PRIMARY KEY,
            payload TEXT NOT NULL,
            expires_at DOUBLE NOT NULL
        )
    """
    )

    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS deck_analyses (
            id BIGINT PRIMARY KEY DEFAULT nextval('seq_deck_analyses_id'),
            deck_id TEXT,
            deck_name TEXT NOT NULL,
            format TEXT NOT NULL,
            archetype TEXT NOT NULL,
            overall_score INTEGER,
            total_cards INTEGER,
            analyzed_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """
    )

    conn.execute(
        """
        CREATE INDEX IF NOT EXISTS idx_deck_analyses_deck
        ON deck_analyses(deck_id, analyzed_at DESC)
        """
    )


def connect(path: str) -> duckdb.DuckDBPyConnection:
    """Open a DuckDB connection and make sure the schema exists.

    Args:
        path: Database file path, or ':memory:'

    Returns:
        DuckDB connection
    """
    if path != ":memory:":
        path = str(Path(path).expanduser())
    conn = duckdb.connect(path)
    _init_schema(conn)
    return conn


# Singleton connection
_conn: duckdb.DuckDBPyConnection | None = None


def get_db_connection() -> duckdb.DuckDBPyConnection:
    """Get or create the singleton DuckDB connection.

    Returns:
        Singleton DuckDB connection
    """
    global _conn
    if _conn is None:
        _conn = connect(settings.database_path)
        Database(_conn).purge_expired()
    return _conn


def get_database() -> Database:
    """Get Database instance with singleton connection.

    Returns:
        Database instance
    """
    return Database(get_db_connection())
