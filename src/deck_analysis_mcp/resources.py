"""MCP resources for read-only data access (meta catalog, analysis history)."""

from .analyzers import META_DECKS
from .db import get_database
from .formatting import format_meta_deck
from .server import app


@app.resource("meta://decks")
async def meta_decks() -> str:
    """Reference meta decks used for matchup estimates.

    Returns:
        Formatted list of meta decks ordered by popularity
    """
    output = "Meta Deck Catalog\n"
    output += "=" * 80 + "\n\n"
    for deck in sorted(META_DECKS, key=lambda d: d.popularity, reverse=True):
        output += format_meta_deck(deck) + "\n"
    return output


@app.resource("analysis-history://{deck_id}")
async def analysis_history(deck_id: str) -> str:
    """Past analyses of a deck.

    Args:
        deck_id: Deck id passed to analyze_deck

    Returns:
        Formatted analysis history (most recent first)
    """
    db = get_database()
    rows = db.get_analysis_history(deck_id, limit=20)

    if not rows:
        return (
            f"No analyses recorded for deck: {deck_id}\n\n"
            "Pass deck_id to analyze_deck to record analysis history."
        )

    output = f"Analysis History: {deck_id}\n"
    output += "=" * 80 + "\n\n"

    for row in rows:
        output += (
            f"{row['analyzed_at']} [{row['format']}] {row['deck_name'] or deck_id}: "
            f"{row['archetype']}, overall {row['overall_score']}/100, {row['total_cards']} cards\n"
        )

    return output
