"""Consistency and speed report providers.

The engine only depends on the ``ConsistencyProvider`` and ``SpeedProvider``
interfaces. The baseline implementations derive both reports from plain deck
counts so the engine can run standalone.
"""

import math
from abc import ABC, abstractmethod

from ..models import (
    ConsistencyReport,
    Deck,
    DeckSpeed,
    EnergyRange,
    EnergyRatio,
    PrizeRaceSpeed,
    SpeedReport,
    TrainerDistribution,
)
from .features import extract_features

OPENING_HAND_SIZE = 7
RECOMMENDED_ENERGY_RANGE = EnergyRange(min=15.0, max=25.0)
OHKO_DAMAGE = 280  # Enough for most VMAX and VSTAR Pokemon


class ConsistencyProvider(ABC):
    """Supplies the consistency report for a deck."""

    @abstractmethod
    def analyze(self, deck: Deck) -> ConsistencyReport:
        pass


class SpeedProvider(ABC):
    """Supplies the speed report for a deck."""

    @abstractmethod
    def analyze(self, deck: Deck) -> SpeedReport:
        pass


def mulligan_probability(deck_size: int, basic_count: int, hand_size: int = OPENING_HAND_SIZE) -> float:
    """Hypergeometric chance that an opening hand holds no Basic Pokemon."""
    if deck_size <= 0 or basic_count <= 0:
        return 1.0
    if deck_size < hand_size:
        return 0.0
    return math.comb(deck_size - basic_count, hand_size) / math.comb(deck_size, hand_size)


def _clamp(value: float) -> int:
    return min(100, max(0, round(value)))


class BaselineConsistencyProvider(ConsistencyProvider):
    """Consistency from energy share, opening-hand odds and trainer mix."""

    def analyze(self, deck: Deck) -> ConsistencyReport:
        total = deck.total_cards
        energy = deck.count(lambda c: c.is_energy)
        basics = deck.count(lambda c: c.is_pokemon and "Basic" in c.subtypes)
        energy_percentage = energy / total * 100 if total else 0.0
        mulligan = mulligan_probability(total, basics)

        trainers = TrainerDistribution(
            draw_power=deck.count(lambda c: c.is_trainer and "draw" in c.search_text),
            search=deck.count(lambda c: c.is_trainer and "search" in c.search_text),
            disruption=deck.count(
                lambda c: c.is_trainer
                and "opponent" in c.search_text
                and ("discard" in c.search_text or "shuffle" in c.search_text)
            ),
            supporters=deck.count(lambda c: c.is_trainer and "Supporter" in c.subtypes),
            items=deck.count(lambda c: c.is_trainer and "Item" in c.subtypes),
        )

        score = 100 - mulligan * 200
        if not RECOMMENDED_ENERGY_RANGE.min <= energy_percentage <= RECOMMENDED_ENERGY_RANGE.max:
            score -= 15
        if trainers.draw_power < 6:
            score -= 15
        if trainers.search < 4:
            score -= 10

        return ConsistencyReport(
            overall_consistency=_clamp(score),
            mulligan_probability=round(mulligan, 4),
            energy_ratio=EnergyRatio(
                energy_percentage=round(energy_percentage, 2),
                recommended_range=RECOMMENDED_ENERGY_RANGE,
            ),
            trainer_distribution=trainers,
        )


class BaselineSpeedProvider(SpeedProvider):
    """Speed from evolution depth, acceleration and best attack damage."""

    def analyze(self, deck: Deck) -> SpeedReport:
        features = extract_features(deck)
        stage2 = deck.count(lambda c: "Stage 2" in c.subtypes)
        best_damage = max(
            (a.damage_value for e in deck.entries if e.card.is_pokemon for a in e.card.attacks),
            default=0,
        )

        setup_turn = max(1.0, 1.5 + 0.25 * stage2 - 0.1 * features.energy_acceleration)
        if setup_turn <= 1.5:
            overall = DeckSpeed.TURBO
        elif setup_turn <= 2:
            overall = DeckSpeed.FAST
        elif setup_turn <= 3:
            overall = DeckSpeed.MEDIUM
        else:
            overall = DeckSpeed.SLOW

        return SpeedReport(
            overall_speed=overall,
            average_setup_turn=round(setup_turn, 2),
            first_turn_advantage=_clamp(features.setup_speed),
            energy_attachment_efficiency=_clamp(50 + 5 * features.energy_acceleration),
            late_game_sustainability=_clamp(
                40 + 3 * features.draw_power + 3 * features.healing_count
            ),
            prize_race_speed=PrizeRaceSpeed(
                damage_output=best_damage,
                ohko_capability=best_damage >= OHKO_DAMAGE,
                average_prizes_per_turn=round(min(2.0, best_damage / 120), 2),
                comeback_potential=_clamp(features.single_prize_ratio * 100),
            ),
        )
