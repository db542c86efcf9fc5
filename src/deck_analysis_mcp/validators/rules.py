"""Deck construction rules.

Rule violations are reported as ``AnalysisWarning`` entries; they never raise,
since half-built decks are a normal editing state.
"""

from abc import ABC, abstractmethod
from collections import Counter

from ..models import AnalysisWarning, Deck, GameFormat, WarningSeverity

DECK_SIZE = 60
MAX_COPIES = 4
MIN_ENERGY = 8
MAX_ENERGY = 20


class DeckRule(ABC):
    """Base class for deck construction rules."""

    @abstractmethod
    def check(self, deck: Deck, format: GameFormat) -> list[AnalysisWarning]:
        """Check deck against this rule.

        Args:
            deck: Deck to validate
            format: Format the deck is evaluated for

        Returns:
            List of warnings (empty when the rule passes)
        """


class DeckSizeRule(DeckRule):
    """Decks must contain exactly 60 cards."""

    def check(self, deck: Deck, format: GameFormat) -> list[AnalysisWarning]:
        total = deck.total_cards
        if total == DECK_SIZE:
            return []
        return [
            AnalysisWarning(
                severity=WarningSeverity.ERROR,
                category="Deck Size",
                message=f"Deck contains {total} cards, must be exactly {DECK_SIZE}",
            )
        ]


class BasicPokemonRule(DeckRule):
    """At least one Pokemon that does not evolve from another."""

    def check(self, deck: Deck, format: GameFormat) -> list[AnalysisWarning]:
        if any(e.card.is_pokemon and not e.card.evolves_from for e in deck.entries):
            return []
        return [
            AnalysisWarning(
                severity=WarningSeverity.ERROR,
                category="Basic Pokemon",
                message="Deck must contain at least one Basic Pokemon",
            )
        ]


class CardLimitRule(DeckRule):
    """At most four copies of any card name, basic energy excepted."""

    def check(self, deck: Deck, format: GameFormat) -> list[AnalysisWarning]:
        counts: Counter[str] = Counter()
        for entry in deck.entries:
            if not entry.card.is_basic_energy:
                counts[entry.card.name] += entry.quantity

        return [
            AnalysisWarning(
                severity=WarningSeverity.ERROR,
                category="Card Limit",
                message=f"{name} exceeds {MAX_COPIES} card limit ({count} copies)",
                affected_cards=[name],
            )
            for name, count in counts.items()
            if count > MAX_COPIES
        ]


class FormatLegalityRule(DeckRule):
    """Every card must be legal in the requested format."""

    def check(self, deck: Deck, format: GameFormat) -> list[AnalysisWarning]:
        return [
            AnalysisWarning(
                severity=WarningSeverity.ERROR,
                category="Format Legality",
                message=f"{e.card.name} is not legal in {format.value} format",
                affected_cards=[e.card.name],
            )
            for e in deck.entries
            if not e.card.is_legal_in(format)
        ]


class EnergyCountRule(DeckRule):
    """Energy count outside 8-20 tends to hurt consistency."""

    def check(self, deck: Deck, format: GameFormat) -> list[AnalysisWarning]:
        energy = deck.count(lambda c: c.is_energy)
        if energy < MIN_ENERGY:
            return [
                AnalysisWarning(
                    severity=WarningSeverity.WARNING,
                    category="Energy Count",
                    message=f"Low energy count ({energy}), may cause consistency issues",
                    suggestion="Consider adding more energy cards",
                )
            ]
        if energy > MAX_ENERGY:
            return [
                AnalysisWarning(
                    severity=WarningSeverity.WARNING,
                    category="Energy Count",
                    message=f"High energy count ({energy}), may reduce deck options",
                    suggestion="Consider reducing energy count",
                )
            ]
        return []


class DrawSupportRule(DeckRule):
    """Flag decks without any draw Supporter."""

    def check(self, deck: Deck, format: GameFormat) -> list[AnalysisWarning]:
        has_draw_supporter = any(
            e.card.is_trainer and "Supporter" in e.card.subtypes and "draw" in e.card.search_text
            for e in deck.entries
        )
        if has_draw_supporter:
            return []
        return [
            AnalysisWarning(
                severity=WarningSeverity.WARNING,
                category="Draw Support",
                message="No draw supporters detected",
                suggestion="Add Professor's Research, Marnie, or similar cards",
            )
        ]
