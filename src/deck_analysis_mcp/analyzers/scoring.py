"""Component scores and archetype-weighted overall score."""

from ..models import (
    ArchetypeClassification,
    ConsistencyReport,
    DeckArchetype,
    DeckScores,
    DeckSpeed,
    MetaAnalysis,
    MetaTier,
    ScoreBreakdown,
    SpeedReport,
    SynergyGraph,
    WeaknessSeverity,
)

# Weights over consistency, power, speed, versatility and meta relevance
ARCHETYPE_WEIGHTS: dict[DeckArchetype, dict[str, float]] = {
    DeckArchetype.AGGRO: {
        "consistency": 0.20,
        "power": 0.30,
        "speed": 0.35,
        "versatility": 0.05,
        "meta_relevance": 0.10,
    },
    DeckArchetype.CONTROL: {
        "consistency": 0.30,
        "power": 0.15,
        "speed": 0.10,
        "versatility": 0.25,
        "meta_relevance": 0.20,
    },
    DeckArchetype.COMBO: {
        "consistency": 0.35,
        "power": 0.30,
        "speed": 0.15,
        "versatility": 0.10,
        "meta_relevance": 0.10,
    },
    DeckArchetype.MIDRANGE: {
        "consistency": 0.25,
        "power": 0.20,
        "speed": 0.20,
        "versatility": 0.20,
        "meta_relevance": 0.15,
    },
    DeckArchetype.MILL: {
        "consistency": 0.30,
        "power": 0.10,
        "speed": 0.15,
        "versatility": 0.20,
        "meta_relevance": 0.25,
    },
    DeckArchetype.STALL: {
        "consistency": 0.35,
        "power": 0.05,
        "speed": 0.10,
        "versatility": 0.25,
        "meta_relevance": 0.25,
    },
    DeckArchetype.TOOLBOX: {
        "consistency": 0.20,
        "power": 0.15,
        "speed": 0.15,
        "versatility": 0.35,
        "meta_relevance": 0.15,
    },
    DeckArchetype.TURBO: {
        "consistency": 0.25,
        "power": 0.25,
        "speed": 0.40,
        "versatility": 0.05,
        "meta_relevance": 0.05,
    },
    DeckArchetype.SPREAD: {
        "consistency": 0.25,
        "power": 0.20,
        "speed": 0.20,
        "versatility": 0.20,
        "meta_relevance": 0.15,
    },
}

ARCHETYPE_DIFFICULTY: dict[DeckArchetype, int] = {
    DeckArchetype.AGGRO: 30,
    DeckArchetype.TURBO: 40,
    DeckArchetype.MIDRANGE: 50,
    DeckArchetype.TOOLBOX: 70,
    DeckArchetype.SPREAD: 60,
    DeckArchetype.COMBO: 80,
    DeckArchetype.CONTROL: 85,
    DeckArchetype.MILL: 75,
    DeckArchetype.STALL: 65,
}

SPEED_BASE: dict[DeckSpeed, int] = {
    DeckSpeed.TURBO: 90,
    DeckSpeed.FAST: 75,
    DeckSpeed.MEDIUM: 50,
    DeckSpeed.SLOW: 25,
}

TIER_RELEVANCE: dict[MetaTier, int] = {
    MetaTier.TIER1: 90,
    MetaTier.TIER2: 70,
    MetaTier.TIER3: 50,
    MetaTier.ROGUE: 30,
}

WIN_CONDITIONS: dict[DeckArchetype, str] = {
    DeckArchetype.AGGRO: "Take 6 prizes quickly through aggressive attacks",
    DeckArchetype.TURBO: "Take 6 prizes quickly through aggressive attacks",
    DeckArchetype.CONTROL: "Control the board and win through resource advantage",
    DeckArchetype.COMBO: "Execute key combo for game-winning damage",
    DeckArchetype.MILL: "Deck out opponent by discarding their cards",
    DeckArchetype.STALL: "Win on time or deck out while preventing opponent from taking prizes",
    DeckArchetype.SPREAD: "Set up multiple knockouts with spread damage",
}
DEFAULT_WIN_CONDITION = "Take 6 prizes through consistent attacks"

DISRUPTION_ARCHETYPES = (DeckArchetype.CONTROL, DeckArchetype.STALL, DeckArchetype.MILL)


def _clamp_score(value: float) -> int:
    return min(100, max(0, round(value)))


def power_score(speed: SpeedReport, archetype: ArchetypeClassification) -> int:
    score = 50.0
    damage = speed.prize_race_speed.damage_output
    if damage >= 200:
        score += 30
    elif damage >= 150:
        score += 25
    elif damage >= 120:
        score += 20
    elif damage >= 90:
        score += 15
    elif damage >= 60:
        score += 10

    if speed.prize_race_speed.ohko_capability:
        score += 15
    score += min(20, speed.prize_race_speed.average_prizes_per_turn * 15)

    if archetype.primary_archetype in DISRUPTION_ARCHETYPES:
        # Disruption decks are measured on denial rather than raw damage
        score = max(50, score - 20) + 30

    return min(100, round(score))


def speed_score(speed: SpeedReport) -> int:
    score: float = SPEED_BASE[speed.overall_speed]
    if speed.average_setup_turn <= 1.5:
        score += 10
    elif speed.average_setup_turn <= 2:
        score += 5
    elif speed.average_setup_turn >= 3:
        score -= 10

    score += (speed.first_turn_advantage - 50) / 10
    score += (speed.energy_attachment_efficiency - 50) / 20
    return _clamp_score(score)


def versatility_score(meta: MetaAnalysis, archetype: ArchetypeClassification) -> int:
    score = 50.0
    if archetype.secondary_archetype:
        score += 15

    if meta.popular_matchups:
        favorable = sum(1 for m in meta.popular_matchups if m.win_rate >= 50)
        score += favorable / len(meta.popular_matchups) * 30

    score += min(15, len(meta.tech_recommendations) * 3)

    if archetype.primary_archetype == DeckArchetype.TOOLBOX:
        score += 20
    elif archetype.primary_archetype == DeckArchetype.MIDRANGE:
        score += 10

    if any("Comeback potential" in m.key_factors for m in meta.popular_matchups):
        score += 10

    return min(100, round(score))


def meta_relevance_score(meta: MetaAnalysis) -> int:
    score: float = TIER_RELEVANCE[meta.meta_position]

    matchups = meta.popular_matchups
    average_win_rate = sum(m.win_rate for m in matchups) / (len(matchups) or 1)
    if average_win_rate >= 55:
        score += 10
    elif average_win_rate >= 50:
        score += 5
    elif average_win_rate <= 45:
        score -= 10

    score = score * meta.format_evaluation.viability / 100

    if meta.rotation_impact.impact_score <= 20:
        score += 5
    elif meta.rotation_impact.impact_score >= 50:
        score -= 10

    return _clamp_score(score)


def innovation_score(meta: MetaAnalysis, archetype: ArchetypeClassification) -> int:
    score = 50
    if meta.meta_position == MetaTier.ROGUE:
        score += 30
    if archetype.secondary_archetype:
        score += 15
    if meta.archetype_match == "Rogue Deck":
        score += 20
    if archetype.confidence < 70:
        score += 10
    if len(meta.counter_strategies) >= 3:
        score += 15
    return min(100, score)


def difficulty_score(archetype: ArchetypeClassification, synergy: SynergyGraph) -> int:
    score = ARCHETYPE_DIFFICULTY.get(archetype.primary_archetype, 50)
    if len(synergy.ability_combos) >= 3:
        score += 10
    if len(synergy.attack_combos) >= 2:
        score += 10
    if synergy.overall_synergy >= 80:
        score += 5
    if archetype.secondary_archetype:
        score += 10
    return min(100, score)


def overall_score(scores: dict[str, int], archetype: DeckArchetype) -> int:
    """Weighted mean of the five weighted components plus an innovation bonus.

    Difficulty and innovation stay out of the weighted mean; innovation moves
    the result by at most five points either way.
    """
    weights = ARCHETYPE_WEIGHTS.get(archetype, ARCHETYPE_WEIGHTS[DeckArchetype.MIDRANGE])
    total_weight = sum(weights.values())
    weighted = sum(scores[key] * weight for key, weight in weights.items())
    base = weighted / total_weight if total_weight > 0 else 50
    innovation_bonus = (scores["innovation"] - 50) * 0.1
    return _clamp_score(base + innovation_bonus)


class ScoringSystem:
    """Aggregates the analyses into component and overall scores."""

    def calculate(
        self,
        consistency: ConsistencyReport,
        synergy: SynergyGraph,
        speed: SpeedReport,
        meta: MetaAnalysis,
        archetype: ArchetypeClassification,
    ) -> DeckScores:
        """Calculate all deck scores.

        Args:
            consistency: Consistency report (passed through as the consistency score)
            synergy: Synergy graph for the deck
            speed: Speed report
            meta: Meta evaluation
            archetype: Archetype classification

        Returns:
            DeckScores with the seven components, overall score and breakdown
        """
        scores = {
            "consistency": consistency.overall_consistency,
            "power": power_score(speed, archetype),
            "speed": speed_score(speed),
            "versatility": versatility_score(meta, archetype),
            "meta_relevance": meta_relevance_score(meta),
            "innovation": innovation_score(meta, archetype),
            "difficulty": difficulty_score(archetype, synergy),
        }

        return DeckScores(
            overall=overall_score(scores, archetype.primary_archetype),
            breakdown=self._breakdown(consistency, synergy, speed, meta, archetype, scores),
            **scores,
        )

    def _breakdown(
        self,
        consistency: ConsistencyReport,
        synergy: SynergyGraph,
        speed: SpeedReport,
        meta: MetaAnalysis,
        archetype: ArchetypeClassification,
        scores: dict[str, int],
    ) -> ScoreBreakdown:
        strengths = []
        if scores["consistency"] >= 80:
            strengths.append("Highly consistent setup")
        if scores["power"] >= 80:
            strengths.append("Powerful damage output")
        if scores["speed"] >= 80:
            strengths.append("Very fast deck")
        if scores["versatility"] >= 80:
            strengths.append("Highly versatile strategy")
        if scores["meta_relevance"] >= 80:
            strengths.append("Strong meta positioning")
        if synergy.overall_synergy >= 80:
            strengths.append("Excellent card synergies")
        if speed.prize_race_speed.ohko_capability:
            strengths.append("Can OHKO VMAXes")

        weaknesses = []
        if scores["consistency"] <= 60:
            weaknesses.append("Inconsistent setup")
        if scores["power"] <= 60 and archetype.primary_archetype != DeckArchetype.CONTROL:
            weaknesses.append("Low damage output")
        if scores["speed"] <= 40:
            weaknesses.append("Slow deck speed")
        if consistency.mulligan_probability > 0.15:
            weaknesses.append("High mulligan rate")
        if any(w.severity == WeaknessSeverity.HIGH for w in meta.weaknesses):
            weaknesses.append("Vulnerable to meta threats")
        if speed.late_game_sustainability <= 60:
            weaknesses.append("Poor late game")

        return ScoreBreakdown(
            strengths=strengths,
            weaknesses=weaknesses,
            core_strategy=self._core_strategy(archetype, synergy, speed),
            win_conditions=self._win_conditions(archetype, speed, meta),
        )

    def _core_strategy(
        self, archetype: ArchetypeClassification, synergy: SynergyGraph, speed: SpeedReport
    ) -> str:
        strategy = archetype.playstyle
        if synergy.ability_combos:
            strategy += f" Key combo: {synergy.ability_combos[0].description}."
        if speed.overall_speed in (DeckSpeed.TURBO, DeckSpeed.FAST):
            strategy += " Aims to set up and attack quickly."
        elif speed.overall_speed == DeckSpeed.SLOW:
            strategy += " Takes time to set up powerful board state."
        return strategy

    def _win_conditions(
        self, archetype: ArchetypeClassification, speed: SpeedReport, meta: MetaAnalysis
    ) -> list[str]:
        conditions = [WIN_CONDITIONS.get(archetype.primary_archetype, DEFAULT_WIN_CONDITION)]
        if speed.prize_race_speed.ohko_capability:
            conditions.append("One-shot key threats for tempo advantage")
        if speed.prize_race_speed.comeback_potential >= 70:
            conditions.append("Come back from behind with efficient trades")
        if meta.counter_strategies:
            conditions.append("Exploit opponent's weaknesses with tech cards")
        return conditions
