"""Tests for the deck analysis orchestrator."""

import pytest

from deck_analysis_mcp.analyzers import BaselineConsistencyProvider, BaselineSpeedProvider, ConsistencyProvider
from deck_analysis_mcp.analyzers.baseline import mulligan_probability
from deck_analysis_mcp.db import AnalysisCache, InMemoryAnalysisCache
from deck_analysis_mcp.engine import (
    DeckAnalyzer,
    budget_efficiency,
    cache_key,
    learning_curve,
)
from deck_analysis_mcp.models import (
    AnalysisConfig,
    AnalysisReport,
    DeckArchetype,
    DeckSpeed,
    GameFormat,
    LearningCurve,
    WarningSeverity,
)

from factories import aggro_deck, consistency_report, deck, pokemon


class RecordingCache(InMemoryAnalysisCache):
    """In-memory cache that records the keys it was asked for."""

    def __init__(self):
        super().__init__()
        self.requested: list[str] = []

    def get(self, key):
        self.requested.append(key)
        return super().get(key)


class BrokenCache(AnalysisCache):
    def get(self, key):
        raise ConnectionError("cache down")

    def set(self, key, report, ttl_seconds):
        raise ConnectionError("cache down")


class FixedConsistency(ConsistencyProvider):
    def analyze(self, deck):
        return consistency_report(overall=99, mulligan=0.01)


class TestDeckAnalyzer:
    """Tests for DeckAnalyzer.analyze."""

    def test_aggro_report(self, lightning_aggro):
        report = DeckAnalyzer().analyze(lightning_aggro)

        assert report.archetype.primary_archetype == DeckArchetype.AGGRO
        assert report.speed.overall_speed == DeckSpeed.TURBO
        assert report.warnings == []
        assert report.matchups == report.meta.popular_matchups
        assert report.deck_id is None
        assert len(report.recommendations) <= 10
        for name in ("overall", "consistency", "power", "speed", "versatility", "meta_relevance"):
            assert 0 <= getattr(report.scores, name) <= 100

    def test_report_survives_json(self, lightning_aggro):
        report = DeckAnalyzer().analyze(lightning_aggro)
        assert AnalysisReport.model_validate_json(report.model_dump_json()) == report

    def test_invalid_deck_is_still_analyzed(self):
        report = DeckAnalyzer().analyze(deck((pokemon("Pikachu"), 5)))
        errors = [w for w in report.warnings if w.severity == WarningSeverity.ERROR]
        assert {w.category for w in errors} == {"Deck Size", "Card Limit"}
        assert report.scores is not None

    def test_format_and_rotation_options(self, lightning_aggro):
        config = AnalysisConfig(format=GameFormat.EXPANDED, include_rotation=False)
        report = DeckAnalyzer().analyze(lightning_aggro, config)
        assert report.meta.format_evaluation.format == GameFormat.EXPANDED
        assert report.meta.rotation_impact.cards_rotating == []
        assert report.performance_summary.future_proofing == 100

    def test_recommendation_cap(self, lightning_aggro):
        report = DeckAnalyzer(max_recommendations=1).analyze(lightning_aggro)
        assert len(report.recommendations) == 1

    def test_custom_consistency_provider(self, lightning_aggro):
        report = DeckAnalyzer(consistency_provider=FixedConsistency()).analyze(lightning_aggro)
        assert report.consistency.overall_consistency == 99
        assert report.scores.consistency == 99


class TestCaching:
    """Tests for result caching."""

    def test_second_analysis_is_served_from_cache(self):
        cache = InMemoryAnalysisCache()
        analyzer = DeckAnalyzer(cache=cache)
        d = aggro_deck(deck_id="lightning-1")

        first = analyzer.analyze(d)
        second = analyzer.analyze(d)

        assert second is first
        assert len(cache) == 1
        assert cache.get("deck-analysis:lightning-1:standard") is first

    def test_format_is_part_of_the_key(self):
        cache = InMemoryAnalysisCache()
        analyzer = DeckAnalyzer(cache=cache)
        d = aggro_deck(deck_id="lightning-1")
        analyzer.analyze(d)
        analyzer.analyze(d, AnalysisConfig(format=GameFormat.EXPANDED))
        assert len(cache) == 2

    def test_rotation_flag_is_part_of_the_key(self):
        cache = InMemoryAnalysisCache()
        analyzer = DeckAnalyzer(cache=cache)
        d = aggro_deck(deck_id="lightning-1")

        without_rotation = analyzer.analyze(d, AnalysisConfig(include_rotation=False))
        with_rotation = analyzer.analyze(d, AnalysisConfig(include_rotation=True))

        assert with_rotation is not without_rotation
        assert len(cache) == 2
        assert cache.get("deck-analysis:lightning-1:standard:no-rotation") is without_rotation
        assert cache.get("deck-analysis:lightning-1:standard") is with_rotation

    def test_deck_without_id_skips_cache(self, lightning_aggro):
        cache = RecordingCache()
        DeckAnalyzer(cache=cache).analyze(lightning_aggro)
        assert cache.requested == []
        assert len(cache) == 0

    def test_cache_failures_do_not_fail_analysis(self):
        report = DeckAnalyzer(cache=BrokenCache()).analyze(aggro_deck(deck_id="lightning-1"))
        assert report.deck_id == "lightning-1"
        assert report.archetype.primary_archetype == DeckArchetype.AGGRO

    def test_expired_entry_is_recomputed(self):
        cache = InMemoryAnalysisCache()
        analyzer = DeckAnalyzer(cache=cache, cache_ttl_seconds=-1)
        d = aggro_deck(deck_id="lightning-1")
        assert analyzer.analyze(d) is not analyzer.analyze(d)

    def test_cache_key(self):
        assert cache_key("abc", "standard") == "deck-analysis:abc:standard"
        assert cache_key("abc", "standard", include_rotation=False) == "deck-analysis:abc:standard:no-rotation"


class TestBaselineProviders:
    """Tests for the baseline consistency and speed reports."""

    def test_mulligan_probability(self):
        assert mulligan_probability(60, 0) == 1.0
        assert mulligan_probability(60, 60) == 0.0
        assert mulligan_probability(60, 12) == pytest.approx(0.1907, abs=1e-3)

    def test_consistency(self, lightning_aggro):
        report = BaselineConsistencyProvider().analyze(lightning_aggro)
        assert report.energy_ratio.energy_percentage == 20.0
        assert report.trainer_distribution.draw_power == 4
        assert report.trainer_distribution.supporters == 4
        assert report.trainer_distribution.items == 32
        # 100 - mulligan penalty - low draw power
        assert report.overall_consistency == 47

    def test_empty_deck_consistency(self, empty_deck):
        report = BaselineConsistencyProvider().analyze(empty_deck)
        assert report.overall_consistency == 0
        assert report.mulligan_probability == 1.0

    def test_speed(self, lightning_aggro):
        report = BaselineSpeedProvider().analyze(lightning_aggro)
        assert report.average_setup_turn == 1.5
        assert report.first_turn_advantage == 80
        assert report.prize_race_speed.damage_output == 120
        assert not report.prize_race_speed.ohko_capability

    def test_stage2_deck_is_slow(self):
        stage2 = pokemon("Gardevoir ex", subtypes=["Stage 2", "ex"], evolves_from="Kirlia")
        report = BaselineSpeedProvider().analyze(deck((stage2, 8)))
        assert report.average_setup_turn == 3.5
        assert report.overall_speed == DeckSpeed.SLOW


class TestPerformanceSummary:
    """Tests for the headline performance numbers."""

    def test_budget_efficiency(self, lightning_aggro, empty_deck):
        assert budget_efficiency(lightning_aggro) == 90
        assert budget_efficiency(empty_deck) == 90
        assert budget_efficiency(deck((pokemon("Charizard", rarity="RARE_HOLO"), 4))) == 70
        assert budget_efficiency(deck((pokemon("Charizard", rarity="RARE_SECRET"), 4))) == 10

    @pytest.mark.parametrize(
        "difficulty,expected",
        [
            (30, LearningCurve.BEGINNER),
            (31, LearningCurve.INTERMEDIATE),
            (75, LearningCurve.ADVANCED),
            (76, LearningCurve.EXPERT),
        ],
    )
    def test_learning_curve(self, difficulty, expected):
        assert learning_curve(difficulty) == expected

    def test_summary_follows_scores(self, lightning_aggro):
        report = DeckAnalyzer().analyze(lightning_aggro)
        summary = report.performance_summary
        assert summary.tournament_performance == report.scores.overall
        assert summary.skill_ceiling == round(report.scores.difficulty / 10)
        assert summary.future_proofing == 100 - report.meta.rotation_impact.impact_score
        assert summary.learning_curve == learning_curve(report.scores.difficulty)
