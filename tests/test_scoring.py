"""Tests for component and overall deck scores."""

import pytest

from deck_analysis_mcp.analyzers import ScoringSystem
from deck_analysis_mcp.analyzers.scoring import (
    ARCHETYPE_WEIGHTS,
    difficulty_score,
    innovation_score,
    meta_relevance_score,
    overall_score,
    power_score,
    speed_score,
    versatility_score,
)
from deck_analysis_mcp.models import (
    AbilityCombo,
    ComboChain,
    DeckArchetype,
    DeckSpeed,
    MetaTier,
    SynergyGraph,
)

from factories import (
    classification,
    consistency_report,
    meta_analysis,
    speed_report,
)

COMPONENTS = ("consistency", "power", "speed", "versatility", "meta_relevance", "innovation", "difficulty")


def _ability_combo(description: str, score: int = 85) -> AbilityCombo:
    return AbilityCombo(
        pokemon=["Charger", "Hitter"],
        abilities=["Charge Up", "Power Up"],
        synergy_score=score,
        description=description,
    )


class TestOverallScore:
    """Tests for the archetype-weighted overall score."""

    @pytest.mark.parametrize("archetype", list(DeckArchetype))
    def test_weights_sum_to_one(self, archetype):
        assert sum(ARCHETYPE_WEIGHTS[archetype].values()) == pytest.approx(1.0)

    @pytest.mark.parametrize("archetype", list(DeckArchetype))
    def test_extremes_are_clamped(self, archetype):
        assert overall_score(dict.fromkeys(COMPONENTS, 100), archetype) == 100
        assert overall_score(dict.fromkeys(COMPONENTS, 0), archetype) == 0

    def test_neutral_innovation_adds_nothing(self):
        assert overall_score(dict.fromkeys(COMPONENTS, 50), DeckArchetype.AGGRO) == 50

    def test_innovation_bonus(self):
        scores = dict.fromkeys(COMPONENTS, 50)
        scores["innovation"] = 100
        assert overall_score(scores, DeckArchetype.MIDRANGE) == 55

    def test_difficulty_is_not_weighted(self):
        easy = dict.fromkeys(COMPONENTS, 60)
        hard = dict(easy, difficulty=100)
        assert overall_score(easy, DeckArchetype.CONTROL) == overall_score(hard, DeckArchetype.CONTROL)


class TestComponentScores:
    """Tests for the individual component scores."""

    def test_power_from_damage_bands(self):
        aggro = classification(DeckArchetype.AGGRO)
        assert power_score(speed_report(damage=0), aggro) == 50
        assert power_score(speed_report(damage=120), aggro) == 70
        assert power_score(speed_report(damage=250, ohko=True), aggro) == 95

    def test_disruption_archetypes_get_power_floor(self):
        control = classification(DeckArchetype.CONTROL)
        assert power_score(speed_report(damage=0), control) == 80

    def test_speed_is_clamped(self):
        fast = speed_report(DeckSpeed.TURBO, setup_turn=1.5, first_turn=80)
        slow = speed_report(DeckSpeed.SLOW, setup_turn=3.5, first_turn=10)
        assert speed_score(fast) == 100
        assert speed_score(slow) == 11

    def test_versatility(self):
        meta = meta_analysis(win_rates=(60, 40))
        assert versatility_score(meta, classification(DeckArchetype.MIDRANGE)) == 75
        assert versatility_score(meta, classification(DeckArchetype.AGGRO, DeckArchetype.TURBO)) == 80

    def test_meta_relevance(self):
        assert meta_relevance_score(meta_analysis(MetaTier.TIER1, win_rates=(60,))) == 100
        assert meta_relevance_score(meta_analysis(MetaTier.TIER3, rotation=60)) == 45

    def test_illegal_deck_loses_meta_relevance(self):
        assert meta_relevance_score(meta_analysis(MetaTier.TIER1, viability=0)) == 5

    def test_innovation(self):
        assert innovation_score(meta_analysis(MetaTier.ROGUE), classification()) == 100
        assert innovation_score(meta_analysis(MetaTier.TIER3), classification()) == 70

    def test_difficulty(self):
        graph = SynergyGraph()
        assert difficulty_score(classification(DeckArchetype.AGGRO), graph) == 30
        assert difficulty_score(classification(DeckArchetype.CONTROL, DeckArchetype.STALL), graph) == 95

    def test_difficulty_counts_ability_combos(self):
        combos = [_ability_combo(f"Combo {i}") for i in range(3)]
        chain = ComboChain(
            name="Draw Engine",
            cards=["a", "b"],
            combo_type="setup",
            reliability=0.8,
            impact=7,
            description="Consistent card draw engine",
        )
        chains = [chain] * 3
        # Pattern chains alone do not add difficulty
        assert difficulty_score(classification(DeckArchetype.AGGRO), SynergyGraph(combos=chains)) == 30
        # 30 + 10 for three ability combos + 5 for synergy >= 80
        graph = SynergyGraph(ability_combos=combos, overall_synergy=80)
        assert difficulty_score(classification(DeckArchetype.AGGRO), graph) == 45


class TestScoringSystem:
    """Tests for ScoringSystem.calculate."""

    def test_scores_are_bounded(self):
        scores = ScoringSystem().calculate(
            consistency_report(overall=90),
            SynergyGraph(),
            speed_report(DeckSpeed.TURBO, setup_turn=1.5, damage=200, ohko=True),
            meta_analysis(MetaTier.TIER1, win_rates=(70, 60)),
            classification(DeckArchetype.AGGRO),
        )
        for name in COMPONENTS + ("overall",):
            assert 0 <= getattr(scores, name) <= 100
        assert scores.consistency == 90

    def test_breakdown(self):
        scores = ScoringSystem().calculate(
            consistency_report(overall=90),
            SynergyGraph(),
            speed_report(DeckSpeed.TURBO, setup_turn=1.5, damage=200, ohko=True),
            meta_analysis(MetaTier.TIER1, win_rates=(70, 60)),
            classification(DeckArchetype.AGGRO),
        )
        breakdown = scores.breakdown
        assert "Highly consistent setup" in breakdown.strengths
        assert "Can OHKO VMAXes" in breakdown.strengths
        assert breakdown.core_strategy.endswith("Aims to set up and attack quickly.")
        assert breakdown.win_conditions == [
            "Take 6 prizes quickly through aggressive attacks",
            "One-shot key threats for tempo advantage",
        ]

    def test_core_strategy_quotes_top_ability_combo(self):
        graph = SynergyGraph(
            ability_combos=[_ability_combo("Charge Up accelerates energy for Power Up")],
            overall_synergy=80,
        )
        scores = ScoringSystem().calculate(
            consistency_report(),
            graph,
            speed_report(),
            meta_analysis(),
            classification(),
        )
        assert scores.breakdown.core_strategy == (
            "Balanced approach adapting to opponent strategy."
            " Key combo: Charge Up accelerates energy for Power Up."
        )
        assert "Excellent card synergies" in scores.breakdown.strengths

    def test_weak_deck_breakdown(self):
        scores = ScoringSystem().calculate(
            consistency_report(overall=40, mulligan=0.3),
            SynergyGraph(),
            speed_report(DeckSpeed.SLOW, setup_turn=3.5, first_turn=10, late_game=40),
            meta_analysis(MetaTier.ROGUE, win_rates=(30,)),
            classification(DeckArchetype.MIDRANGE),
        )
        assert scores.breakdown.weaknesses == [
            "Inconsistent setup",
            "Low damage output",
            "Slow deck speed",
            "High mulligan rate",
            "Poor late game",
        ]
        assert scores.breakdown.core_strategy.endswith("Takes time to set up powerful board state.")
        assert scores.breakdown.win_conditions == ["Take 6 prizes through consistent attacks"]
