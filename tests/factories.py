"""Card and deck builders shared by the test modules."""

from datetime import date

from deck_analysis_mcp.models import (
    Ability,
    ArchetypeClassification,
    Attack,
    Card,
    ConsistencyReport,
    Deck,
    DeckArchetype,
    DeckEntry,
    DeckSpeed,
    EnergyRange,
    EnergyRatio,
    FormatEvaluation,
    GameFormat,
    MetaAnalysis,
    MetaTier,
    PopularMatchup,
    PrizeRaceSpeed,
    RotationImpact,
    SpeedReport,
    Supertype,
    TechCardRecommendation,
    TrainerDistribution,
    TypeModifier,
)


def attack(name: str, damage: str = "", text: str = "", cost: int = 1, energy: str = "Colorless") -> Attack:
    return Attack(name=name, cost=[energy] * cost, damage=damage, text=text)


def ability(name: str, text: str) -> Ability:
    return Ability(name=name, text=text)


def pokemon(
    name: str,
    *,
    card_id: str | None = None,
    subtypes: list[str] | None = None,
    types: list[str] | None = None,
    hp: int | None = 100,
    attacks: list[Attack] | None = None,
    abilities: list[Ability] | None = None,
    weaknesses: list[str] | None = None,
    resistances: list[str] | None = None,
    retreat: int = 1,
    evolves_from: str | None = None,
    rarity: str | None = None,
    released: date | None = None,
    legal_standard: bool = True,
) -> Card:
    return Card(
        id=card_id or name.lower().replace(" ", "-"),
        name=name,
        supertype=Supertype.POKEMON,
        subtypes=subtypes if subtypes is not None else ["Basic"],
        types=types if types is not None else ["Colorless"],
        hp=hp,
        attacks=attacks or [],
        abilities=abilities or [],
        weaknesses=[TypeModifier(type=t, value="×2") for t in weaknesses or []],
        resistances=[TypeModifier(type=t, value="-30") for t in resistances or []],
        retreat_cost=["Colorless"] * retreat,
        converted_retreat_cost=retreat,
        evolves_from=evolves_from,
        rarity=rarity,
        set_release_date=released,
        legal_standard=legal_standard,
    )


def trainer(
    name: str,
    text: str = "",
    *,
    card_id: str | None = None,
    subtypes: list[str] | None = None,
    released: date | None = None,
    legal_standard: bool = True,
) -> Card:
    return Card(
        id=card_id or name.lower().replace(" ", "-").replace("'", ""),
        name=name,
        supertype=Supertype.TRAINER,
        subtypes=subtypes if subtypes is not None else ["Item"],
        rules=[text] if text else [],
        set_release_date=released,
        legal_standard=legal_standard,
    )


def energy(name: str, *, subtypes: list[str] | None = None, text: str = "") -> Card:
    return Card(
        id=name.lower().replace(" ", "-"),
        name=name,
        supertype=Supertype.ENERGY,
        subtypes=subtypes if subtypes is not None else ["Basic"],
        rules=[text] if text else [],
    )


def deck(*entries: tuple[Card, int], deck_id: str | None = None, name: str | None = None) -> Deck:
    return Deck(
        id=deck_id,
        name=name,
        entries=[DeckEntry(card=card, quantity=qty) for card, qty in entries],
    )


PROFESSORS_RESEARCH = trainer(
    "Professor's Research",
    "Discard your hand and draw 7 cards.",
    subtypes=["Supporter"],
)

SEARCH_ITEM_TEXT = (
    "Search your deck for a Basic Pokémon, reveal it, and put it into your hand. "
    "Then, shuffle your deck."
)


def v_attacker(name: str) -> Card:
    """Lightning V with a single 120 damage attack and retreat cost 2."""
    return pokemon(
        name,
        subtypes=["Basic", "V"],
        types=["Lightning"],
        hp=200,
        attacks=[attack("Thunder Strike", "120", cost=3, energy="Lightning")],
        weaknesses=["Fighting"],
        retreat=2,
    )


def aggro_deck(deck_id: str | None = None) -> Deck:
    """Legal 60-card Lightning V deck: 12 attackers, 12 energy, 4 draw supporters, 32 items."""
    entries: list[tuple[Card, int]] = [
        (v_attacker("Raichu V"), 4),
        (v_attacker("Zeraora V"), 4),
        (v_attacker("Regieleki V"), 4),
        (energy("Lightning Energy"), 12),
        (PROFESSORS_RESEARCH, 4),
    ]
    entries.extend(
        (trainer(f"Search Item {i}", SEARCH_ITEM_TEXT), 4) for i in range(1, 9)
    )
    return deck(*entries, deck_id=deck_id, name="Lightning Aggro")


def classification(
    primary: DeckArchetype = DeckArchetype.MIDRANGE,
    secondary: DeckArchetype | None = None,
    confidence: int = 80,
) -> ArchetypeClassification:
    return ArchetypeClassification(
        primary_archetype=primary,
        secondary_archetype=secondary,
        confidence=confidence,
        playstyle="Balanced approach adapting to opponent strategy.",
    )


def consistency_report(
    overall: int = 80,
    mulligan: float = 0.08,
    energy_percentage: float = 18.0,
    draw_power: int = 8,
) -> ConsistencyReport:
    return ConsistencyReport(
        overall_consistency=overall,
        mulligan_probability=mulligan,
        energy_ratio=EnergyRatio(
            energy_percentage=energy_percentage,
            recommended_range=EnergyRange(min=15, max=25),
        ),
        trainer_distribution=TrainerDistribution(draw_power=draw_power),
    )


def speed_report(
    overall: DeckSpeed = DeckSpeed.MEDIUM,
    setup_turn: float = 2.5,
    first_turn: int = 50,
    efficiency: int = 50,
    late_game: int = 70,
    damage: float = 0.0,
    ohko: bool = False,
) -> SpeedReport:
    return SpeedReport(
        overall_speed=overall,
        average_setup_turn=setup_turn,
        first_turn_advantage=first_turn,
        energy_attachment_efficiency=efficiency,
        late_game_sustainability=late_game,
        prize_race_speed=PrizeRaceSpeed(damage_output=damage, ohko_capability=ohko),
    )


def meta_analysis(
    tier: MetaTier = MetaTier.TIER3,
    win_rates: tuple[int, ...] = (50,),
    viability: int = 100,
    rotation: int = 0,
    tech: list[TechCardRecommendation] | None = None,
) -> MetaAnalysis:
    return MetaAnalysis(
        archetype_match="Rogue Deck",
        meta_position=tier,
        popular_matchups=[
            PopularMatchup(opponent_archetype=f"Opponent {i}", win_rate=rate)
            for i, rate in enumerate(win_rates)
        ],
        format_evaluation=FormatEvaluation(format=GameFormat.STANDARD, viability=viability),
        rotation_impact=RotationImpact(impact_score=rotation),
        tech_recommendations=tech or [],
    )


# Pokemon TCG API v2 payloads

BASE_URL = "https://tcg.test/v2"

COMFEY = {
    "id": "swsh11-79",
    "name": "Comfey",
    "supertype": "Pokémon",
    "subtypes": ["Basic"],
    "hp": "70",
    "types": ["Psychic"],
    "abilities": [
        {
            "name": "Flower Selecting",
            "text": "Once during your turn, you may look at the top 2 cards of your deck.",
            "type": "Ability",
        }
    ],
    "attacks": [{"name": "Spinning Attack", "cost": ["Colorless"], "damage": "30", "text": ""}],
    "weaknesses": [{"type": "Metal", "value": "×2"}],
    "retreatCost": ["Colorless"],
    "convertedRetreatCost": 1,
    "set": {"id": "swsh11", "releaseDate": "2022/09/09"},
    "rarity": "Rare Holo",
    "legalities": {"unlimited": "Legal", "expanded": "Legal", "standard": "Legal"},
}

QUICK_BALL = {
    "id": "swsh1-179",
    "name": "Quick Ball",
    "supertype": "Trainer",
    "subtypes": ["Item"],
    "rules": ["You can play this card only if you discard another card from your hand."],
    "set": {"id": "swsh1", "releaseDate": "2020/02/07"},
    "rarity": "Uncommon",
    "legalities": {"unlimited": "Legal", "expanded": "Legal"},
}
