"""Deck validator that runs the construction rules."""

from ..config import settings
from ..models import AnalysisWarning, Deck, GameFormat, WarningSeverity
from .rules import (
    BasicPokemonRule,
    CardLimitRule,
    DeckSizeRule,
    DrawSupportRule,
    EnergyCountRule,
    FormatLegalityRule,
)


class DeckValidator:
    """Validates decks against construction rules and common-sense checks."""

    def __init__(self, format: GameFormat | None = None):
        """Initialize deck validator.

        Args:
            format: Format to validate for. Uses settings.default_format if not provided.
        """
        self.format = format or GameFormat(settings.default_format)
        self.rules = [
            DeckSizeRule(),
            BasicPokemonRule(),
            CardLimitRule(),
            FormatLegalityRule(),
            EnergyCountRule(),
            DrawSupportRule(),
        ]

    def validate(self, deck: Deck) -> list[AnalysisWarning]:
        """Run all rules on a deck, errors first in rule order."""
        warnings = []
        for rule in self.rules:
            warnings.extend(rule.check(deck, self.format))
        return warnings

    def is_valid(self, deck: Deck) -> bool:
        """True if no ERROR severity warnings."""
        return not self.get_errors(deck)

    def get_errors(self, deck: Deck) -> list[AnalysisWarning]:
        return [w for w in self.validate(deck) if w.severity == WarningSeverity.ERROR]

    def get_warnings(self, deck: Deck) -> list[AnalysisWarning]:
        return [w for w in self.validate(deck) if w.severity == WarningSeverity.WARNING]


def get_validator(format: GameFormat | None = None) -> DeckValidator:
    """Get a deck validator instance.

    Args:
        format: Format to validate for

    Returns:
        DeckValidator instance
    """
    return DeckValidator(format)
