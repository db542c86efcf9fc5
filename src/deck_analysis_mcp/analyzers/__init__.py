"""Deck analysis modules: features, archetypes, synergy, meta and scoring."""

from .archetype import ArchetypeClassifier, classify_deck
from .baseline import (
    BaselineConsistencyProvider,
    BaselineSpeedProvider,
    ConsistencyProvider,
    SpeedProvider,
)
from .features import extract_features
from .meta import META_DECKS, MetaEvaluator
from .recommendations import RecommendationEngine
from .scoring import ScoringSystem
from .synergy import SynergyAnalyzer, build_synergy_graph

__all__ = [
    "ArchetypeClassifier",
    "BaselineConsistencyProvider",
    "BaselineSpeedProvider",
    "ConsistencyProvider",
    "META_DECKS",
    "MetaEvaluator",
    "RecommendationEngine",
    "ScoringSystem",
    "SpeedProvider",
    "SynergyAnalyzer",
    "build_synergy_graph",
    "classify_deck",
    "extract_features",
]
