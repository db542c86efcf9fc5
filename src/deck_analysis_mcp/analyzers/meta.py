"""Meta-game evaluation against a static catalog of reference decks."""

from datetime import date

from ..config import settings
from ..models import (
    Card,
    CounterStrategy,
    Deck,
    DeckArchetype,
    DeckEntry,
    FormatEvaluation,
    GameFormat,
    MetaAnalysis,
    MetaDeck,
    MetaTier,
    MetaWeakness,
    PopularMatchup,
    RotationImpact,
    TechCardRecommendation,
    WeaknessSeverity,
)

META_DECKS: tuple[MetaDeck, ...] = (
    MetaDeck(
        id="lost-box",
        name="Lost Box",
        archetype=DeckArchetype.TOOLBOX,
        popularity=15,
        key_cards=["Comfey", "Sableye", "Lost City"],
        strategy="Use Lost Zone engine for versatile attacks",
        weaknesses=["Path to the Peak", "Early pressure"],
    ),
    MetaDeck(
        id="mew-vmax",
        name="Mew VMAX",
        archetype=DeckArchetype.COMBO,
        popularity=12,
        key_cards=["Mew VMAX", "Genesect V", "Cross Fusion Strike"],
        strategy="Copy attacks from benched Fusion Strike Pokemon",
        weaknesses=["Dark types", "Path to the Peak"],
    ),
    MetaDeck(
        id="lugia-vstar",
        name="Lugia VSTAR",
        archetype=DeckArchetype.AGGRO,
        popularity=14,
        key_cards=["Lugia VSTAR", "Archeops", "Powerful Colorless Energy"],
        strategy="Accelerate energy with Archeops for big attacks",
        weaknesses=["Lightning types", "Lost Vacuum"],
    ),
    MetaDeck(
        id="arceus-vstar",
        name="Arceus VSTAR",
        archetype=DeckArchetype.MIDRANGE,
        popularity=10,
        key_cards=["Arceus VSTAR", "Bibarel", "Double Turbo Energy"],
        strategy="Consistent setup with Trinity Nova acceleration",
        weaknesses=["Fighting types", "Slow early game"],
    ),
    MetaDeck(
        id="gardevoir-ex",
        name="Gardevoir ex",
        archetype=DeckArchetype.CONTROL,
        popularity=11,
        key_cards=["Gardevoir ex", "Kirlia", "Reversal Energy"],
        strategy="Psychic energy scaling damage",
        weaknesses=["Metal types", "Spiritomb"],
    ),
)

META_RELEVANT_CARDS = (
    "Professor's Research",
    "Boss's Orders",
    "Quick Ball",
    "Ultra Ball",
    "Battle VIP Pass",
    "Cross Switcher",
    "Path to the Peak",
    "Lost City",
    "Training Court",
)

# Looked up by the opponent deck's archetype value
TYPE_MATCHUPS: dict[str, dict[str, int]] = {
    "Dark": {"Psychic": 20},
    "Lightning": {"Water": 20, "Flying": 20},
    "Fighting": {"Darkness": 20, "Colorless": 20},
    "Metal": {"Fairy": 20, "Water": -20},
    "Fire": {"Metal": 20, "Grass": 20},
    "Water": {"Fire": 20, "Ground": 20},
    "Grass": {"Water": 20, "Fighting": 20},
    "Psychic": {"Fighting": 20, "Dark": -20},
}

SPEED_RANKS: dict[DeckArchetype, int] = {
    DeckArchetype.TURBO: 5,
    DeckArchetype.AGGRO: 4,
    DeckArchetype.COMBO: 3,
    DeckArchetype.MIDRANGE: 3,
    DeckArchetype.TOOLBOX: 2,
    DeckArchetype.SPREAD: 2,
    DeckArchetype.CONTROL: 1,
    DeckArchetype.MILL: 1,
    DeckArchetype.STALL: 0,
}

# (player, opponent) -> (win rate shift, strategy); missing pairs are neutral
ARCHETYPE_MATCHUPS: dict[tuple[DeckArchetype, DeckArchetype], tuple[int, str]] = {
    (DeckArchetype.AGGRO, DeckArchetype.CONTROL): (15, "Apply early pressure before control setup"),
    (DeckArchetype.AGGRO, DeckArchetype.STALL): (-10, "Break through stall tactics quickly"),
    (DeckArchetype.AGGRO, DeckArchetype.COMBO): (10, "Race to knock out combo pieces"),
    (DeckArchetype.CONTROL, DeckArchetype.AGGRO): (-15, "Survive early game and stabilize"),
    (DeckArchetype.CONTROL, DeckArchetype.MIDRANGE): (10, "Disrupt their resource management"),
    (DeckArchetype.CONTROL, DeckArchetype.COMBO): (15, "Prevent combo setup with disruption"),
    (DeckArchetype.COMBO, DeckArchetype.CONTROL): (-15, "Execute combo before disruption"),
    (DeckArchetype.COMBO, DeckArchetype.AGGRO): (-10, "Setup quickly under pressure"),
    (DeckArchetype.COMBO, DeckArchetype.STALL): (5, "Combo through stall tactics"),
}
DEFAULT_MATCHUP_STRATEGY = "Play to deck strengths"

COUNTER_CARDS: tuple[tuple[str, tuple[str, ...], int], ...] = (
    ("Path to the Peak", ("Mew VMAX", "Lost Box"), 75),
    ("Spiritomb", ("Lugia VSTAR", "Item-heavy decks"), 70),
    ("Lost Vacuum", ("Stadium reliant", "Tool reliant"), 65),
    ("Collapsed Stadium", ("Bench-heavy decks",), 60),
    ("Canceling Cologne", ("Ability reliant",), 70),
)

TYPE_COUNTERS = ("Psychic", "Fighting", "Dark", "Darkness", "Dragon", "Metal")

REPLACEMENTS: dict[str, list[str]] = {
    "Professor's Research": ["Professor Turo", "Professor Sada"],
    "Quick Ball": ["Ultra Ball", "Nest Ball"],
    "Marnie": ["Judge", "Iono"],
    "Boss's Orders": ["Cross Switcher", "Prime Catcher"],
}
NO_REPLACEMENT = "No direct replacement available"

MATCHUP_TECH: dict[str, list[TechCardRecommendation]] = {
    "Lost Box": [
        TechCardRecommendation(
            card="Path to the Peak",
            reason="Shuts down Comfey draw engine",
            matchup_improvements=["Lost Box"],
            slot=1,
        ),
        TechCardRecommendation(
            card="Klefki",
            reason="Prevents Sableye damage",
            matchup_improvements=["Lost Box"],
            slot=1,
        ),
    ],
    "Mew VMAX": [
        TechCardRecommendation(
            card="Drapion V",
            reason="Dark type with no weakness",
            matchup_improvements=["Mew VMAX", "Gardevoir ex"],
            slot=1,
        ),
    ],
    "Lugia VSTAR": [
        TechCardRecommendation(
            card="Lost Vacuum",
            reason="Remove Powerful Energy",
            matchup_improvements=["Lugia VSTAR"],
            slot=2,
        ),
    ],
}

WEAKNESS_TECH: dict[str, list[TechCardRecommendation]] = {
    "Path to the Peak vulnerability": [
        TechCardRecommendation(
            card="Lost Vacuum",
            reason="Remove opponent stadiums",
            matchup_improvements=["Path decks"],
            slot=2,
        ),
        TechCardRecommendation(
            card="Stadium Nav",
            reason="Find your stadiums consistently",
            matchup_improvements=["Path decks"],
            slot=1,
        ),
    ],
    "Special Energy reliance": [
        TechCardRecommendation(
            card="Basic Energy",
            reason="Mix in basics for Enhanced Hammer protection",
            matchup_improvements=["Hammer decks"],
            slot=3,
        ),
    ],
}

MODERN_CONSISTENCY = ("Battle VIP Pass", "Irida", "Arven")
EXPANDED_POWER = ("Computer Search", "Battle Compressor", "VS Seeker")
EXPANDED_CONSISTENCY = ("Tapu Lele-GX", "Shaymin-EX", "Dedenne-GX")
MAX_TECH_RECOMMENDATIONS = 5


def _pokemon_count(deck: Deck, predicate) -> int:
    return deck.count(lambda c: c.is_pokemon and predicate(c))


def _pokemon_types(deck: Deck) -> list[str]:
    types: list[str] = []
    for entry in deck.entries:
        if entry.card.is_pokemon:
            for t in entry.card.types:
                if t not in types:
                    types.append(t)
    return types


def _has_type(deck: Deck, type_name: str) -> bool:
    # Catalog data spells the dark type "Darkness"
    aliases = {type_name, "Darkness"} if type_name == "Dark" else {type_name}
    return any(e.card.is_pokemon and aliases & set(e.card.types) for e in deck.entries)


class MetaEvaluator:
    """Evaluates a deck against the reference meta catalog."""

    def __init__(
        self,
        format: GameFormat = GameFormat.STANDARD,
        include_rotation: bool = True,
        rotation_cutoff: date | None = None,
        meta_decks: tuple[MetaDeck, ...] = META_DECKS,
    ):
        self.format = format
        self.include_rotation = include_rotation
        self.rotation_cutoff = rotation_cutoff or settings.rotation_cutoff
        self.meta_decks = meta_decks

    def analyze(self, deck: Deck, archetype: DeckArchetype) -> MetaAnalysis:
        """Run the full meta evaluation.

        Args:
            deck: Deck to evaluate
            archetype: Primary archetype from classification

        Returns:
            MetaAnalysis with tier, matchups, counters, weaknesses and tech picks
        """
        matchups = self.analyze_matchups(deck, archetype)
        weaknesses = self.identify_weaknesses(deck)

        return MetaAnalysis(
            archetype_match=self.identify_archetype_match(deck, archetype),
            meta_position=self.evaluate_meta_position(deck),
            popular_matchups=matchups,
            counter_strategies=self.identify_counter_strategies(deck),
            weaknesses=weaknesses,
            format_evaluation=self.evaluate_format(deck),
            rotation_impact=(
                self.assess_rotation_impact(deck) if self.include_rotation else RotationImpact()
            ),
            tech_recommendations=self.recommend_tech_cards(deck, matchups, weaknesses),
        )

    # Archetype and Tier

    def identify_archetype_match(self, deck: Deck, archetype: DeckArchetype) -> str:
        """Name of the closest catalog deck, or 'Rogue Deck' below 50 points."""
        best_match = "Rogue Deck"
        highest = 0
        for meta_deck in self.meta_decks:
            score = 30 if meta_deck.archetype == archetype else 0
            score += 20 * sum(1 for key in meta_deck.key_cards if deck.has_card(key))
            if score > highest:
                highest = score
                best_match = meta_deck.name
        return best_match if highest >= 50 else "Rogue Deck"

    def evaluate_meta_position(self, deck: Deck) -> MetaTier:
        matched = next(
            (
                md
                for md in self.meta_decks
                if all(deck.has_card(key) for key in md.key_cards)
            ),
            None,
        )
        if matched:
            if matched.popularity >= 15:
                return MetaTier.TIER1
            if matched.popularity >= 10:
                return MetaTier.TIER2
            return MetaTier.TIER3

        relevant = deck.count(lambda c: any(name in c.name for name in META_RELEVANT_CARDS))
        if relevant >= 10:
            return MetaTier.TIER2
        if relevant >= 5:
            return MetaTier.TIER3
        return MetaTier.ROGUE

    # Matchups

    def analyze_matchups(self, deck: Deck, archetype: DeckArchetype) -> list[PopularMatchup]:
        """Matchup estimate per catalog deck, most popular opponent first."""
        ordered = sorted(self.meta_decks, key=lambda md: md.popularity, reverse=True)
        return [self.calculate_matchup(deck, archetype, md) for md in ordered]

    def calculate_matchup(
        self, deck: Deck, archetype: DeckArchetype, opponent: MetaDeck
    ) -> PopularMatchup:
        win_rate = 50
        factors: list[str] = []

        type_advantage = self._type_advantage(deck, opponent)
        win_rate += type_advantage
        if abs(type_advantage) >= 10:
            factors.append("Type advantage" if type_advantage > 0 else "Type disadvantage")

        speed = (SPEED_RANKS[archetype] - SPEED_RANKS[opponent.archetype]) * 5
        win_rate += speed
        if abs(speed) >= 5:
            factors.append("Faster setup" if speed > 0 else "Slower setup")

        counters = [
            e.card.name
            for weakness in opponent.weaknesses
            for e in deck.entries
            if weakness in e.card.name
        ]
        win_rate += 10 * len(counters)
        if counters:
            factors.append(f"Counter cards: {', '.join(counters)}")

        shift, strategy = ARCHETYPE_MATCHUPS.get(
            (archetype, opponent.archetype), (0, DEFAULT_MATCHUP_STRATEGY)
        )
        win_rate += shift

        interaction_score, interaction_factors = self._specific_interactions(deck, opponent)
        win_rate += interaction_score
        factors.extend(interaction_factors)

        return PopularMatchup(
            opponent_archetype=opponent.name,
            win_rate=max(20, min(80, win_rate)),
            key_factors=factors,
            strategy=strategy,
        )

    def _type_advantage(self, deck: Deck, opponent: MetaDeck) -> int:
        advantage = 0
        for player_type in _pokemon_types(deck):
            table = TYPE_MATCHUPS.get(player_type)
            if table:
                advantage += table.get(opponent.archetype.value, 0)
        return advantage

    def _specific_interactions(self, deck: Deck, opponent: MetaDeck) -> tuple[int, list[str]]:
        score = 0
        factors: list[str] = []
        if opponent.name == "Lost Box" and deck.has_card("Path to the Peak"):
            factors.append("Path shuts down Comfey engine")
            score += 15
        if opponent.name == "Lugia VSTAR" and deck.has_card("Lost Vacuum"):
            factors.append("Lost Vacuum removes Powerful Energy")
            score += 10
        if opponent.name == "Mew VMAX" and _has_type(deck, "Dark"):
            factors.append("Dark type advantage vs Psychic")
            score += 20
        return score, factors

    # Counters and Weaknesses

    def identify_counter_strategies(self, deck: Deck) -> list[CounterStrategy]:
        strategies = [
            CounterStrategy(target_archetype=target, cards=[card], effectiveness=effectiveness)
            for card, targets, effectiveness in COUNTER_CARDS
            if deck.has_card(card)
            for target in targets
        ]

        types = _pokemon_types(deck)
        for type_name in types:
            if type_name in TYPE_COUNTERS:
                strategies.append(
                    CounterStrategy(
                        target_archetype=f"{type_name} weak decks",
                        cards=list(types),
                        effectiveness=80,
                    )
                )
        return strategies

    def identify_weaknesses(self, deck: Deck) -> list[MetaWeakness]:
        """Threshold checks over deck-list counts."""
        checks = (
            (
                "Path to the Peak vulnerability",
                _pokemon_count(deck, lambda c: bool(c.abilities)) >= 10,
                WeaknessSeverity.HIGH,
                ["Path to the Peak", "Canceling Cologne"],
            ),
            (
                "Special Energy reliance",
                deck.count(lambda c: c.is_energy and not c.is_basic_energy) >= 8,
                WeaknessSeverity.MEDIUM,
                ["Enhanced Hammer", "Giacomo"],
            ),
            (
                "Bench space dependency",
                _pokemon_count(deck, lambda c: bool(c.abilities) and not c.attacks) >= 6,
                WeaknessSeverity.MEDIUM,
                ["Collapsed Stadium", "Avery"],
            ),
            (
                "Slow setup",
                _pokemon_count(deck, lambda c: "Stage 2" in c.subtypes) >= 4,
                WeaknessSeverity.HIGH,
                ["Aggressive early game decks", "Marnie chains"],
            ),
            (
                "Low HP Pokemon",
                _pokemon_count(deck, lambda c: c.hp is not None and c.hp <= 90) >= 8,
                WeaknessSeverity.MEDIUM,
                ["Quick Shooting", "Damage spread"],
            ),
        )
        return [
            MetaWeakness(weakness=name, severity=severity, common_exploits=exploits)
            for name, triggered, severity, exploits in checks
            if triggered
        ]

    # Format and Rotation

    def evaluate_format(self, deck: Deck) -> FormatEvaluation:
        label = self.format.value.capitalize()
        issues = [
            f"{e.card.name} is not legal in {label}"
            for e in deck.entries
            if not e.card.is_legal_in(self.format)
        ]

        viability = 70
        strengths: list[str] = []
        if self.format == GameFormat.STANDARD:
            if any(deck.has_card(name) for name in MODERN_CONSISTENCY):
                strengths.append("Uses modern consistency engines")
                viability += 10
            if self._has_recent_cards(deck):
                strengths.append("Includes cards from recent sets")
                viability += 5
        else:
            if any(deck.has_card(name) for name in EXPANDED_POWER):
                strengths.append("Uses powerful Expanded-only cards")
                viability += 15
            if any(deck.has_card(name) for name in EXPANDED_CONSISTENCY):
                strengths.append("Enhanced consistency with Expanded cards")
                viability += 10

        return FormatEvaluation(
            format=self.format,
            viability=0 if issues else min(100, viability),
            legality_issues=issues,
            format_specific_strengths=strengths,
        )

    def _has_recent_cards(self, deck: Deck) -> bool:
        """Any card released on or after the rotation cutoff (undated cards count as recent)."""
        return any(
            e.card.set_release_date is None or e.card.set_release_date >= self.rotation_cutoff
            for e in deck.entries
        )

    def is_rotating(self, card: Card) -> bool:
        return card.set_release_date is not None and card.set_release_date < self.rotation_cutoff

    def assess_rotation_impact(self, deck: Deck) -> RotationImpact:
        rotating: list[str] = []
        suggestions: dict[str, list[str]] = {}
        impact = 0

        for entry in deck.entries:
            if not self.is_rotating(entry.card):
                continue
            rotating.append(entry.card.name)
            impact += entry.quantity * (10 if _is_key_card(entry) else 5)
            suggestions[entry.card.id] = list(REPLACEMENTS.get(entry.card.name, [NO_REPLACEMENT]))

        return RotationImpact(
            cards_rotating=rotating,
            impact_score=min(100, impact),
            replacement_suggestions=suggestions,
        )

    # Tech Cards

    def recommend_tech_cards(
        self,
        deck: Deck,
        matchups: list[PopularMatchup],
        weaknesses: list[MetaWeakness],
    ) -> list[TechCardRecommendation]:
        """Tech picks for sub-40% matchups and detected weaknesses, broadest first."""
        owned = {e.card.name for e in deck.entries}
        picks: list[TechCardRecommendation] = []

        for matchup in matchups:
            if matchup.win_rate >= 40:
                continue
            for tech in MATCHUP_TECH.get(matchup.opponent_archetype, []):
                if tech.card not in owned and all(p.card != tech.card for p in picks):
                    picks.append(tech.model_copy(deep=True))

        for weakness in weaknesses:
            for tech in WEAKNESS_TECH.get(weakness.weakness, []):
                if tech.card not in owned and all(p.card != tech.card for p in picks):
                    picks.append(tech.model_copy(deep=True))

        picks.sort(key=lambda t: len(t.matchup_improvements), reverse=True)
        return picks[:MAX_TECH_RECOMMENDATIONS]


def _is_key_card(entry: DeckEntry) -> bool:
    return entry.quantity == 1 or (entry.card.is_pokemon and entry.quantity <= 2)
