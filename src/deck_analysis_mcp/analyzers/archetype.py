"""Heuristic archetype classification.

Each archetype has a pure scoring function over the deck's feature vector
(toolbox and spread also look at the deck list directly). The threshold bands
are fixed product values; changing any of them changes classifications.
"""

from collections.abc import Callable

from ..models import ArchetypeClassification, Deck, DeckArchetype, FeatureVector
from .features import extract_features, is_attacker

SECONDARY_THRESHOLD = 40


def aggro_score(f: FeatureVector, deck: Deck) -> int:
    score = 0
    if f.average_damage >= 120:
        score += 30
    elif f.average_damage >= 90:
        score += 20
    elif f.average_damage >= 60:
        score += 10

    if f.setup_speed >= 80:
        score += 20
    elif f.setup_speed >= 60:
        score += 10

    if f.attacker_count >= 12:
        score += 20
    elif f.attacker_count >= 8:
        score += 10

    if f.average_retreat_cost <= 1.5:
        score += 10
    if f.energy_acceleration >= 8:
        score += 10
    if f.disruption_count <= 2:
        score += 10
    return score


def control_score(f: FeatureVector, deck: Deck) -> int:
    score = 0
    if f.disruption_count >= 10:
        score += 30
    elif f.disruption_count >= 6:
        score += 20
    elif f.disruption_count >= 3:
        score += 10

    if f.special_conditions >= 4:
        score += 20
    elif f.special_conditions >= 2:
        score += 10

    if f.healing_count >= 6:
        score += 15
    elif f.healing_count >= 3:
        score += 8

    if f.average_damage <= 80:
        score += 10
    if f.draw_power >= 12:
        score += 10
    if f.single_prize_ratio >= 0.7:
        score += 15
    return score


def combo_score(f: FeatureVector, deck: Deck) -> int:
    score = 0
    if f.combo_components >= 6:
        score += 30
    elif f.combo_components >= 3:
        score += 20

    if f.average_damage >= 150:
        score += 20
    elif f.average_damage >= 120:
        score += 10

    if f.energy_acceleration >= 10:
        score += 20
    elif f.energy_acceleration >= 6:
        score += 10

    if f.draw_power >= 15:
        score += 15
    elif f.draw_power >= 10:
        score += 8

    if f.bench_sitters >= 4:
        score += 15
    return score


def midrange_score(f: FeatureVector, deck: Deck) -> int:
    """Balanced decks start from a base of 40."""
    score = 40
    if 70 <= f.average_damage <= 110:
        score += 20
    if 50 <= f.setup_speed <= 75:
        score += 15
    if 2 <= f.disruption_count <= 6:
        score += 10
    if 6 <= f.attacker_count <= 10:
        score += 15
    if 0.3 <= f.single_prize_ratio <= 0.7:
        score += 10
    return score


def mill_score(f: FeatureVector, deck: Deck) -> int:
    score = 0
    if f.mill_cards >= 8:
        score += 40
    elif f.mill_cards >= 4:
        score += 25
    elif f.mill_cards >= 2:
        score += 10

    if f.disruption_count >= 8:
        score += 20
    elif f.disruption_count >= 4:
        score += 10

    if f.average_damage <= 50:
        score += 15
    if f.healing_count >= 4:
        score += 15
    if f.special_conditions >= 2:
        score += 10
    return score


def stall_score(f: FeatureVector, deck: Deck) -> int:
    score = 0
    if f.healing_count >= 10:
        score += 30
    elif f.healing_count >= 6:
        score += 20
    elif f.healing_count >= 3:
        score += 10

    if f.average_damage <= 30:
        score += 20
    elif f.average_damage <= 50:
        score += 10

    if f.disruption_count >= 8:
        score += 15
    if f.single_prize_ratio >= 0.9:
        score += 20
    if f.special_conditions >= 3:
        score += 15
    if f.attacker_count <= 4:
        score += 10
    return score


def toolbox_score(f: FeatureVector, deck: Deck) -> int:
    score = 0
    unique_attackers = len({e.card.name for e in deck.entries if is_attacker(e.card)})
    if unique_attackers >= 5:
        score += 30
    elif unique_attackers >= 3:
        score += 20

    if f.single_prize_ratio >= 0.6:
        score += 20
    if 60 <= f.average_damage <= 100:
        score += 15
    if 2 <= f.disruption_count <= 6:
        score += 15

    energy_types = {e.card.types[0] for e in deck.entries if e.card.is_energy and e.card.types}
    if len(energy_types) >= 3:
        score += 20
    return score


def turbo_score(f: FeatureVector, deck: Deck) -> int:
    score = 0
    if f.energy_acceleration >= 15:
        score += 35
    elif f.energy_acceleration >= 10:
        score += 25
    elif f.energy_acceleration >= 6:
        score += 15

    if f.average_damage >= 150:
        score += 25
    elif f.average_damage >= 120:
        score += 15

    if f.setup_speed >= 85:
        score += 20
    if f.draw_power >= 15:
        score += 10
    if 3 <= f.attacker_count <= 6:
        score += 10
    return score


def spread_score(f: FeatureVector, deck: Deck) -> int:
    score = 0
    if f.spread_damage >= 6:
        score += 40
    elif f.spread_damage >= 3:
        score += 25
    elif f.spread_damage >= 1:
        score += 10

    if 50 <= f.average_damage <= 90:
        score += 20

    bench_targeting = sum(
        1 for e in deck.entries if "bench" in e.card.search_text and "damage" in e.card.search_text
    )
    if bench_targeting >= 4:
        score += 20
    if f.attacker_count >= 8:
        score += 10
    return score


# Insertion order is the tie-break order
ARCHETYPE_SCORERS: dict[DeckArchetype, Callable[[FeatureVector, Deck], int]] = {
    DeckArchetype.AGGRO: aggro_score,
    DeckArchetype.CONTROL: control_score,
    DeckArchetype.COMBO: combo_score,
    DeckArchetype.MIDRANGE: midrange_score,
    DeckArchetype.MILL: mill_score,
    DeckArchetype.STALL: stall_score,
    DeckArchetype.TOOLBOX: toolbox_score,
    DeckArchetype.TURBO: turbo_score,
    DeckArchetype.SPREAD: spread_score,
}

CHARACTERISTICS: dict[DeckArchetype, list[str]] = {
    DeckArchetype.AGGRO: [
        "Fast, aggressive gameplay",
        "High damage output",
        "Minimal setup time",
        "Pressure from turn 1",
        "Weak to control strategies",
    ],
    DeckArchetype.CONTROL: [
        "Disrupts opponent's strategy",
        "Wins through resource denial",
        "Heavy use of trainer cards",
        "Longer games",
        "Weak to fast aggro",
    ],
    DeckArchetype.COMBO: [
        "Relies on specific card combinations",
        "Explosive turns",
        "Requires setup time",
        "Vulnerable to disruption",
        "High damage ceiling",
    ],
    DeckArchetype.MIDRANGE: [
        "Balanced approach",
        "Flexible game plan",
        "Good against most decks",
        "Adapts to opponent",
        "Jack of all trades",
    ],
    DeckArchetype.MILL: [
        "Wins by decking out opponent",
        "Minimal attacking",
        "Heavy disruption",
        "Unique win condition",
        "Weak to aggressive decks",
    ],
    DeckArchetype.STALL: [
        "Prevents opponent from winning",
        "Heavy healing and protection",
        "Wins in time",
        "Frustrating to play against",
        "Weak to one-shot strategies",
    ],
    DeckArchetype.TOOLBOX: [
        "Multiple attackers for different situations",
        "Flexible strategy",
        "Good matchup spread",
        "Requires game knowledge",
        "Can adapt mid-game",
    ],
    DeckArchetype.TURBO: [
        "Extremely fast energy acceleration",
        "Powers up one main attacker",
        "Aims for quick knockouts",
        "All-in strategy",
        "Weak to energy denial",
    ],
    DeckArchetype.SPREAD: [
        "Damages multiple Pokemon at once",
        "Sets up multiple knockouts",
        "Good against bench-heavy decks",
        "Slower win condition",
        "Weak to healing",
    ],
}

PLAYSTYLES: dict[DeckArchetype, str] = {
    DeckArchetype.AGGRO: (
        "Apply immediate pressure with fast attackers and overwhelm before opponent can set up."
    ),
    DeckArchetype.CONTROL: "Disrupt opponent's strategy while slowly building your win condition.",
    DeckArchetype.COMBO: "Set up specific card combinations for powerful, game-winning turns.",
    DeckArchetype.MIDRANGE: "Play flexibly, adapting strategy based on matchup and game state.",
    DeckArchetype.MILL: "Force opponent to run out of cards by discarding from their deck.",
    DeckArchetype.STALL: "Prevent opponent from taking prizes while winning on time or deck out.",
    DeckArchetype.TOOLBOX: "Use different attackers and strategies based on the matchup.",
    DeckArchetype.TURBO: "Accelerate energy as fast as possible to power up big attacks.",
    DeckArchetype.SPREAD: "Damage multiple targets to set up multi-prize turns.",
}


def score_archetypes(features: FeatureVector, deck: Deck) -> dict[DeckArchetype, int]:
    """Score every archetype, in tie-break order."""
    return {archetype: scorer(features, deck) for archetype, scorer in ARCHETYPE_SCORERS.items()}


def calculate_confidence(primary_score: float, secondary_score: float) -> int:
    """Confidence from the primary score and its lead over the runner-up."""
    confidence = min(100, primary_score)
    gap = primary_score - secondary_score
    if gap >= 30:
        confidence = min(100, confidence + 20)
    elif gap >= 20:
        confidence = min(100, confidence + 10)
    elif gap <= 10:
        confidence = max(50, confidence - 20)
    if primary_score > 0:
        # Primaries under 50 with an 11-19 point lead would otherwise land below 50
        confidence = max(50, confidence)
    return round(confidence)


def select_archetypes(
    scores: dict[DeckArchetype, int],
) -> tuple[DeckArchetype, int, DeckArchetype | None, int]:
    """Single pass tracking the best and second-best scores.

    Strict comparisons keep the earlier archetype on ties. With every score at
    zero, Midrange stays primary.
    """
    primary = DeckArchetype.MIDRANGE
    highest = 0
    second: DeckArchetype | None = None
    second_score = 0

    for archetype, score in scores.items():
        if score > highest:
            second, second_score = primary, highest
            primary, highest = archetype, score
        elif score > second_score:
            second, second_score = archetype, score

    return primary, highest, second, second_score


class ArchetypeClassifier:
    """Classifies decks into one of the nine strategic archetypes."""

    def classify(self, deck: Deck, features: FeatureVector | None = None) -> ArchetypeClassification:
        """Classify a deck.

        Args:
            deck: Deck to classify
            features: Precomputed feature vector (extracted when omitted)

        Returns:
            ArchetypeClassification with primary/secondary archetype and confidence
        """
        if features is None:
            features = extract_features(deck)

        scores = score_archetypes(features, deck)
        primary, highest, second, second_score = select_archetypes(scores)

        return ArchetypeClassification(
            primary_archetype=primary,
            secondary_archetype=second if second_score > SECONDARY_THRESHOLD else None,
            confidence=calculate_confidence(highest, second_score),
            characteristics=list(CHARACTERISTICS[primary]),
            playstyle=PLAYSTYLES[primary],
            archetype_scores=scores,
        )


def classify_deck(deck: Deck) -> ArchetypeClassification:
    """Convenience wrapper around ArchetypeClassifier."""
    return ArchetypeClassifier().classify(deck)
