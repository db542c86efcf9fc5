"""Tests for plain-text tool output."""

from deck_analysis_mcp.analyzers import META_DECKS
from deck_analysis_mcp.engine import DeckAnalyzer
from deck_analysis_mcp.formatting import (
    format_card,
    format_classification,
    format_meta_deck,
    format_report,
    format_synergy_graph,
)

from factories import PROFESSORS_RESEARCH, v_attacker


class TestFormatting:
    """Tests for report and card formatting."""

    def test_classification(self, lightning_aggro):
        text = format_classification(DeckAnalyzer().classify(lightning_aggro))
        assert text.startswith("Archetype: Aggro (confidence")
        assert "Scores: aggro 80" in text

    def test_synergy_graph_edge_limit(self, lightning_aggro):
        graph = DeckAnalyzer().build_synergy_graph(lightning_aggro)
        text = format_synergy_graph(graph, max_edges=3)
        assert text.startswith(f"Synergy: {graph.overall_synergy}/100 across {len(graph.nodes)} cards")
        if len(graph.edges()) > 3:
            assert f"Connections (3 of {len(graph.edges())})" in text

    def test_report(self, lightning_aggro):
        report = DeckAnalyzer().analyze(lightning_aggro)
        text = format_report(report, "Lightning Aggro")
        assert text.startswith('Deck Analysis: "Lightning Aggro"')
        assert f"Overall score: {report.scores.overall}/100" in text
        assert 'Deck Recommendations: "Lightning Aggro"' in text
        assert "Matchups:" not in text

    def test_detailed_report(self, lightning_aggro):
        report = DeckAnalyzer().analyze(lightning_aggro)
        text = format_report(report, detailed=True)
        assert text.startswith('Deck Analysis: "Unnamed deck"')
        assert "vs Lost Box:" in text

    def test_pokemon_card(self):
        text = format_card(v_attacker("Raichu V"))
        assert text.startswith("Raichu V (raichu-v) - Pokémon [Basic, V]")
        assert "HP 200 | Lightning" in text
        assert "[LLL] Thunder Strike 120" in text
        assert "Retreat: 2" in text
        assert text.endswith("Legal in: standard, expanded\n")

    def test_trainer_card(self):
        text = format_card(PROFESSORS_RESEARCH)
        assert "Discard your hand and draw 7 cards." in text
        assert "HP" not in text

    def test_meta_deck(self):
        text = format_meta_deck(META_DECKS[0])
        assert text.startswith("Lost Box (toolbox, 15% popularity)")
        assert "Key cards: Comfey, Sableye, Lost City" in text
