"""Tests for deck construction rules."""

from deck_analysis_mcp.models import Deck, GameFormat, WarningSeverity
from deck_analysis_mcp.validators import DeckValidator, get_validator
from deck_analysis_mcp.validators.rules import (
    BasicPokemonRule,
    CardLimitRule,
    DeckSizeRule,
    DrawSupportRule,
    EnergyCountRule,
    FormatLegalityRule,
)

from factories import PROFESSORS_RESEARCH, deck, energy, pokemon, trainer

STANDARD = GameFormat.STANDARD


class TestDeckValidator:
    """Tests for DeckValidator."""

    def test_legal_deck_has_no_warnings(self, lightning_aggro):
        validator = DeckValidator(STANDARD)
        assert validator.validate(lightning_aggro) == []
        assert validator.is_valid(lightning_aggro)

    def test_empty_deck(self, empty_deck):
        validator = get_validator(STANDARD)
        categories = [w.category for w in validator.validate(empty_deck)]
        assert categories == ["Deck Size", "Basic Pokemon", "Energy Count", "Draw Support"]
        assert not validator.is_valid(empty_deck)

    def test_errors_and_warnings_are_split(self, empty_deck):
        validator = DeckValidator(STANDARD)
        assert all(w.severity == WarningSeverity.ERROR for w in validator.get_errors(empty_deck))
        assert [w.category for w in validator.get_warnings(empty_deck)] == ["Energy Count", "Draw Support"]


class TestRules:
    """Tests for individual rules."""

    def test_deck_size(self):
        warnings = DeckSizeRule().check(deck((pokemon("Pikachu"), 4)), STANDARD)
        assert len(warnings) == 1
        assert warnings[0].message == "Deck contains 4 cards, must be exactly 60"

    def test_evolution_only_deck_has_no_basic(self):
        stage1 = pokemon("Raichu", subtypes=["Stage 1"], evolves_from="Pikachu")
        warnings = BasicPokemonRule().check(deck((stage1, 4)), STANDARD)
        assert warnings[0].category == "Basic Pokemon"

    def test_card_limit_counts_by_name(self):
        # Two printings of the same card share the limit
        first = trainer("Quick Ball", card_id="swsh1-179")
        second = trainer("Quick Ball", card_id="swsh9-183")
        warnings = CardLimitRule().check(deck((first, 3), (second, 2)), STANDARD)
        assert len(warnings) == 1
        assert warnings[0].message == "Quick Ball exceeds 4 card limit (5 copies)"
        assert warnings[0].affected_cards == ["Quick Ball"]

    def test_basic_energy_is_exempt(self):
        warnings = CardLimitRule().check(deck((energy("Fire Energy"), 20)), STANDARD)
        assert warnings == []

    def test_special_energy_is_limited(self):
        special = energy("Double Turbo Energy", subtypes=["Special"])
        warnings = CardLimitRule().check(deck((special, 5)), STANDARD)
        assert [w.affected_cards for w in warnings] == [["Double Turbo Energy"]]

    def test_format_legality(self):
        banned = trainer("Lysandre's Trump Card", legal_standard=False)
        d = deck((banned, 1))
        warnings = FormatLegalityRule().check(d, STANDARD)
        assert warnings[0].message == "Lysandre's Trump Card is not legal in standard format"
        assert FormatLegalityRule().check(d, GameFormat.EXPANDED) == []

    def test_energy_count_bounds(self):
        rule = EnergyCountRule()
        low = rule.check(deck((energy("Water Energy"), 7)), STANDARD)
        high = rule.check(deck((energy("Water Energy"), 21)), STANDARD)
        assert low[0].message == "Low energy count (7), may cause consistency issues"
        assert high[0].message == "High energy count (21), may reduce deck options"
        assert all(w.severity == WarningSeverity.WARNING for w in low + high)
        assert rule.check(deck((energy("Water Energy"), 8)), STANDARD) == []
        assert rule.check(deck((energy("Water Energy"), 20)), STANDARD) == []

    def test_draw_support(self):
        rule = DrawSupportRule()
        boss = trainer(
            "Boss's Orders",
            "Switch in 1 of your opponent's Benched Pokémon to the Active Spot.",
            subtypes=["Supporter"],
        )
        no_draw = rule.check(deck((boss, 2)), STANDARD)
        assert no_draw[0].category == "Draw Support"
        assert no_draw[0].severity == WarningSeverity.WARNING
        assert rule.check(deck((PROFESSORS_RESEARCH, 4)), STANDARD) == []

    def test_draw_item_does_not_count(self):
        item = trainer("Trekking Shoes", "Look at the top card of your deck. You may draw that card.")
        assert len(DrawSupportRule().check(deck((item, 4)), STANDARD)) == 1

    def test_default_format_from_settings(self):
        assert DeckValidator().format == GameFormat.STANDARD
        assert DeckValidator().validate(Deck(entries=[]))
