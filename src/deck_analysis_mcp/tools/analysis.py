"""MCP tools for deck analysis.

Deck lists are passed as [{"card_id": ..., "quantity": ...}] lines and
resolved against the Pokemon TCG API before analysis.
"""

import logging

from mcp.types import CallToolResult, TextContent

from ..client import CardNotFoundError, CatalogAPIError, CatalogConnectionError, get_catalog_client
from ..config import settings
from ..db import Database, get_database
from ..deck_input import DeckInputError, resolve_deck
from ..engine import DeckAnalyzer
from ..formatting import format_classification, format_report, format_synergy_graph
from ..models import AnalysisConfig, GameFormat
from ..server import app

logger = logging.getLogger(__name__)


def _get_cache() -> Database | None:
    """Open the DuckDB cache, or run uncached if the database is unavailable."""
    try:
        return get_database()
    except Exception:
        logger.warning("Analysis cache unavailable, continuing without it", exc_info=True)
        return None


def _input_error(e: Exception) -> CallToolResult:
    if isinstance(e, CardNotFoundError):
        text = f"{e}\n\nUse search_cards to find valid card ids."
    elif isinstance(e, CatalogConnectionError):
        text = f"Failed to reach the Pokemon TCG API.\n\nError: {str(e)}"
    else:
        text = f"Invalid request: {str(e)}"
    return CallToolResult(isError=True, content=[TextContent(type="text", text=text)])


@app.tool()
async def analyze_deck(
    cards: list[dict],
    deck_id: str | None = None,
    deck_name: str | None = None,
    format: str | None = None,
    include_rotation: bool | None = None,
    detailed: bool = False,
) -> CallToolResult:
    """Analyze a 60-card Pokemon TCG deck.

    Classifies the deck's archetype, builds its synergy graph, evaluates it
    against the meta, scores it and returns prioritized recommendations.
    Construction problems (deck size, copy limits, illegal cards) are reported
    as warnings; the analysis still runs.

    Args:
        cards: Deck list, e.g. [{"card_id": "swsh12-139", "quantity": 4}, ...]
        deck_id: Stable deck id. When given, results are cached and kept in history.
        deck_name: Name shown in the report
        format: 'standard' or 'expanded' (default from settings)
        include_rotation: Assess rotation exposure (default from settings)
        detailed: Include synergy edges, matchups and meta weaknesses

    Returns:
        Formatted analysis report

    Examples:
        >>> analyze_deck(
        ...     cards=[{"card_id": "swsh12-139", "quantity": 3}, ...],
        ...     deck_id="lugia-v1",
        ...     format="standard",
        ... )
    """
    try:
        config = AnalysisConfig(
            format=GameFormat(format or settings.default_format),
            include_rotation=settings.include_rotation if include_rotation is None else include_rotation,
        )
        deck = await resolve_deck(get_catalog_client(), cards, deck_id=deck_id, name=deck_name)

        cache = _get_cache() if deck_id else None
        report = DeckAnalyzer(cache=cache).analyze(deck, config)

        if cache is not None:
            try:
                cache.save_deck_analysis(deck, config.format.value, report)
            except Exception:
                logger.warning("Failed to record analysis history for %s", deck_id, exc_info=True)

        return CallToolResult(
            content=[TextContent(type="text", text=format_report(report, deck_name, detailed))]
        )

    except (DeckInputError, CardNotFoundError, CatalogConnectionError, ValueError) as e:
        return _input_error(e)
    except CatalogAPIError as e:
        return CallToolResult(
            isError=True,
            content=[TextContent(type="text", text=f"Card catalog error: {str(e)}")],
        )
    except Exception as e:
        logger.exception("Deck analysis failed")
        return CallToolResult(
            isError=True,
            content=[TextContent(type="text", text=f"Unexpected error: {str(e)}")],
        )


@app.tool()
async def classify_deck(cards: list[dict]) -> CallToolResult:
    """Classify a deck's archetype.

    Scores the deck against nine archetypes (aggro, control, combo, midrange,
    mill, stall, toolbox, turbo, spread) and reports the primary and secondary
    archetype with a confidence value.

    Args:
        cards: Deck list, e.g. [{"card_id": "swsh12-139", "quantity": 4}, ...]

    Returns:
        Formatted classification
    """
    try:
        deck = await resolve_deck(get_catalog_client(), cards)
        classification = DeckAnalyzer().classify(deck)
        return CallToolResult(
            content=[TextContent(type="text", text=format_classification(classification))]
        )

    except (DeckInputError, CardNotFoundError, CatalogConnectionError) as e:
        return _input_error(e)
    except Exception as e:
        return CallToolResult(
            isError=True,
            content=[TextContent(type="text", text=f"Unexpected error: {str(e)}")],
        )


@app.tool()
async def deck_synergy_graph(cards: list[dict], max_edges: int = 25) -> CallToolResult:
    """Build the card synergy graph for a deck.

    Lists the strongest card-to-card connections (abilities, trainers,
    evolution lines, energy types, weakness coverage), detected combos and
    anti-synergies, with an overall synergy score.

    Args:
        cards: Deck list, e.g. [{"card_id": "swsh12-139", "quantity": 4}, ...]
        max_edges: Number of strongest connections to list (default: 25)

    Returns:
        Formatted synergy graph
    """
    try:
        deck = await resolve_deck(get_catalog_client(), cards)
        graph = DeckAnalyzer().build_synergy_graph(deck)
        return CallToolResult(
            content=[TextContent(type="text", text=format_synergy_graph(graph, max_edges))]
        )

    except (DeckInputError, CardNotFoundError, CatalogConnectionError) as e:
        return _input_error(e)
    except Exception as e:
        return CallToolResult(
            isError=True,
            content=[TextContent(type="text", text=f"Unexpected error: {str(e)}")],
        )
