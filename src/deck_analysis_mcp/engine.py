"""Deck analysis orchestrator.

Runs validation, the collaborator reports, archetype classification, synergy
and meta analysis, then scores the deck and generates recommendations. The
result cache is optional; cache failures never fail an analysis.
"""

import logging
from datetime import datetime, timezone

from .analyzers import (
    ArchetypeClassifier,
    BaselineConsistencyProvider,
    BaselineSpeedProvider,
    ConsistencyProvider,
    MetaEvaluator,
    RecommendationEngine,
    ScoringSystem,
    SpeedProvider,
    SynergyAnalyzer,
)
from .config import settings
from .db import AnalysisCache
from .models import (
    AnalysisConfig,
    AnalysisReport,
    ArchetypeClassification,
    Deck,
    DeckScores,
    LearningCurve,
    MetaAnalysis,
    PerformanceSummary,
    SynergyGraph,
)
from .validators import DeckValidator

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "deck-analysis"

# Approximate market value per copy, by rarity
RARITY_VALUES = {
    "COMMON": 0.25,
    "UNCOMMON": 0.5,
    "RARE": 2.0,
    "RARE_HOLO": 5.0,
    "RARE_ULTRA": 20.0,
    "RARE_SECRET": 50.0,
}
DEFAULT_RARITY_VALUE = 1.0

BUDGET_BANDS = [(2, 90), (5, 70), (10, 50), (20, 30)]
LEARNING_CURVE_BANDS = [
    (30, LearningCurve.BEGINNER),
    (50, LearningCurve.INTERMEDIATE),
    (75, LearningCurve.ADVANCED),
]


def cache_key(deck_id: str, format: str, include_rotation: bool = True) -> str:
    """Build the cache key for a deck analysis, e.g. 'deck-analysis:abc:standard'.

    Reports built without rotation data get a ':no-rotation' suffix.
    """
    key = f"{CACHE_KEY_PREFIX}:{deck_id}:{format}"
    return key if include_rotation else f"{key}:no-rotation"


def budget_efficiency(deck: Deck) -> int:
    """Score how cheap a deck is to build (0-100, higher is cheaper).

    Cards without a rarity count as commons; unknown rarities as 1.0.
    """
    total = deck.total_cards
    if total == 0:
        return BUDGET_BANDS[0][1]

    value = sum(
        RARITY_VALUES.get(e.card.rarity or "COMMON", DEFAULT_RARITY_VALUE) * e.quantity
        for e in deck.entries
    )
    average = value / total
    for limit, score in BUDGET_BANDS:
        if average <= limit:
            return score
    return 10


def learning_curve(difficulty: int) -> LearningCurve:
    for limit, curve in LEARNING_CURVE_BANDS:
        if difficulty <= limit:
            return curve
    return LearningCurve.EXPERT


def performance_summary(deck: Deck, scores: DeckScores, meta: MetaAnalysis) -> PerformanceSummary:
    """Condense scores into the headline numbers shown to players."""
    return PerformanceSummary(
        tournament_performance=scores.overall,
        consistency_rating=round(scores.consistency / 10),
        power_level=round(scores.power / 10),
        meta_viability=round(scores.meta_relevance / 10),
        skill_ceiling=round(scores.difficulty / 10),
        budget_efficiency=budget_efficiency(deck),
        future_proofing=100 - meta.rotation_impact.impact_score,
        learning_curve=learning_curve(scores.difficulty),
    )


class DeckAnalyzer:
    """Produces a complete AnalysisReport for a deck."""

    def __init__(
        self,
        cache: AnalysisCache | None = None,
        consistency_provider: ConsistencyProvider | None = None,
        speed_provider: SpeedProvider | None = None,
        cache_ttl_seconds: int | None = None,
        max_recommendations: int | None = None,
    ):
        """Initialize the analyzer.

        Args:
            cache: Optional result cache. No caching when omitted.
            consistency_provider: Source of consistency reports (baseline by default)
            speed_provider: Source of speed reports (baseline by default)
            cache_ttl_seconds: Cache TTL. Uses settings.cache_ttl_seconds if not provided.
            max_recommendations: Cap on recommendations. Uses settings if not provided.
        """
        self.cache = cache
        self.consistency_provider = consistency_provider or BaselineConsistencyProvider()
        self.speed_provider = speed_provider or BaselineSpeedProvider()
        self.cache_ttl_seconds = cache_ttl_seconds or settings.cache_ttl_seconds
        self.max_recommendations = max_recommendations or settings.max_recommendations
        self.classifier = ArchetypeClassifier()
        self.synergy_analyzer = SynergyAnalyzer()
        self.scoring = ScoringSystem()
        self.recommendation_engine = RecommendationEngine()

    def analyze(self, deck: Deck, config: AnalysisConfig | None = None) -> AnalysisReport:
        """Analyze a deck.

        Invalid decks are analyzed anyway; rule violations are returned as
        warnings on the report.

        Args:
            deck: Deck with resolved cards
            config: Format and rotation options (defaults from settings)

        Returns:
            Complete analysis report
        """
        config = config or AnalysisConfig()
        key = cache_key(deck.id, config.format.value, config.include_rotation) if deck.id else None

        if key and self.cache is not None:
            cached = self._cache_get(key)
            if cached is not None:
                logger.debug("Cache hit for %s", key)
                return cached
            logger.debug("Cache miss for %s", key)

        warnings = DeckValidator(config.format).validate(deck)
        consistency = self.consistency_provider.analyze(deck)
        speed = self.speed_provider.analyze(deck)
        archetype = self.classify(deck)
        synergy = self.build_synergy_graph(deck)
        meta = MetaEvaluator(config.format, config.include_rotation).analyze(
            deck, archetype.primary_archetype
        )

        scores = self.scoring.calculate(consistency, synergy, speed, meta, archetype)
        recommendations = self.recommendation_engine.generate(
            deck,
            consistency,
            synergy,
            speed,
            meta,
            archetype,
            scores,
            max_recommendations=self.max_recommendations,
        )

        report = AnalysisReport(
            deck_id=deck.id,
            timestamp=datetime.now(timezone.utc),
            consistency=consistency,
            synergy=synergy,
            meta=meta,
            speed=speed,
            matchups=meta.popular_matchups,
            archetype=archetype,
            scores=scores,
            recommendations=recommendations,
            warnings=warnings,
            performance_summary=performance_summary(deck, scores, meta),
        )

        logger.info(
            "Analyzed deck %r: %s, overall %d, %d warning(s)",
            deck.name,
            archetype.primary_archetype.value,
            scores.overall,
            len(warnings),
        )

        if key and self.cache is not None:
            self._cache_set(key, report)
        return report

    def classify(self, deck: Deck) -> ArchetypeClassification:
        return self.classifier.classify(deck)

    def build_synergy_graph(self, deck: Deck) -> SynergyGraph:
        return self.synergy_analyzer.analyze(deck)

    def _cache_get(self, key: str) -> AnalysisReport | None:
        try:
            return self.cache.get(key)
        except Exception:
            logger.warning("Analysis cache read failed for %s", key, exc_info=True)
            return None

    def _cache_set(self, key: str, report: AnalysisReport) -> None:
        try:
            self.cache.set(key, report, self.cache_ttl_seconds)
        except Exception:
            logger.warning("Analysis cache write failed for %s", key, exc_info=True)
