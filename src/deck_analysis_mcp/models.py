"""Pydantic models for cards, decks, analysis reports and their parts."""

import re
from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

BASIC_ENERGY_TYPES = (
    "Grass",
    "Fire",
    "Water",
    "Lightning",
    "Psychic",
    "Fighting",
    "Darkness",
    "Metal",
    "Fairy",
)

_LEADING_NUMBER = re.compile(r"^\s*(\d+)")


class Supertype(str, Enum):
    """Top-level card categories."""

    POKEMON = "Pokémon"
    TRAINER = "Trainer"
    ENERGY = "Energy"


# Card Models


class Attack(BaseModel):
    """A Pokemon attack."""

    model_config = ConfigDict(frozen=True)

    name: str
    cost: list[str] = Field(default_factory=list, description="Energy symbols required")
    damage: str = Field(default="", description="Printed damage, e.g. '120', '30+', '50×'")
    text: str = Field(default="", description="Attack effect text")

    @property
    def damage_value(self) -> int:
        """Leading integer of the printed damage (0 when absent)."""
        match = _LEADING_NUMBER.match(self.damage or "")
        return int(match.group(1)) if match else 0


class Ability(BaseModel):
    """A Pokemon ability."""

    model_config = ConfigDict(frozen=True)

    name: str
    text: str = ""
    type: str = Field(default="Ability", description="Ability kind as printed")


class TypeModifier(BaseModel):
    """Weakness or resistance entry."""

    model_config = ConfigDict(frozen=True)

    type: str = Field(description="Elemental type, e.g. 'Fire'")
    value: str = Field(default="", description="Multiplier or modifier, e.g. '×2' or '-30'")


class Card(BaseModel):
    """Immutable card record supplied by the card catalog."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Stable catalog id, e.g. 'swsh12-139'")
    name: str
    supertype: Supertype
    subtypes: list[str] = Field(default_factory=list, description="e.g. ['Basic', 'V']")
    types: list[str] = Field(default_factory=list, description="Elemental types")
    hp: int | None = None
    rules: list[str] = Field(default_factory=list, description="Card rules text lines")
    attacks: list[Attack] = Field(default_factory=list)
    abilities: list[Ability] = Field(default_factory=list)
    weaknesses: list[TypeModifier] = Field(default_factory=list)
    resistances: list[TypeModifier] = Field(default_factory=list)
    retreat_cost: list[str] = Field(default_factory=list)
    converted_retreat_cost: int | None = None
    evolves_from: str | None = None
    evolves_to: list[str] = Field(default_factory=list)
    rarity: str | None = None
    set_release_date: date | None = None
    legal_standard: bool = True
    legal_expanded: bool = True

    @property
    def is_pokemon(self) -> bool:
        return self.supertype == Supertype.POKEMON

    @property
    def is_trainer(self) -> bool:
        return self.supertype == Supertype.TRAINER

    @property
    def is_energy(self) -> bool:
        return self.supertype == Supertype.ENERGY

    @property
    def is_basic_energy(self) -> bool:
        """Basic energies are exempt from the four-copy limit."""
        if not self.is_energy:
            return False
        if "Basic" in self.subtypes:
            return True
        return any(
            self.name in (f"{t} Energy", f"Basic {t} Energy") for t in BASIC_ENERGY_TYPES
        )

    @property
    def text(self) -> str:
        """All printed effect text: rules, ability text and attack text."""
        parts = list(self.rules)
        parts.extend(a.text for a in self.abilities if a.text)
        parts.extend(a.text for a in self.attacks if a.text)
        return "\n".join(parts)

    @property
    def search_text(self) -> str:
        """Lowercased name, subtypes, attack/ability names and text for keyword matching."""
        parts = [self.name, " ".join(self.subtypes)]
        parts.extend(a.name for a in self.abilities)
        parts.extend(a.name for a in self.attacks)
        parts.append(self.text)
        return "\n".join(parts).lower()

    def is_legal_in(self, format: "GameFormat") -> bool:
        """Check legality for a format."""
        if format == GameFormat.EXPANDED:
            return self.legal_expanded
        return self.legal_standard


class DeckEntry(BaseModel):
    """A card and how many copies of it the deck runs."""

    card: Card
    quantity: int = Field(ge=1, description="Copies in the deck")


class Deck(BaseModel):
    """An ordered deck list."""

    id: str | None = Field(default=None, description="Deck id used for caching")
    name: str | None = None
    entries: list[DeckEntry] = Field(default_factory=list)

    @property
    def total_cards(self) -> int:
        return sum(entry.quantity for entry in self.entries)

    def count(self, predicate) -> int:
        """Sum quantities of entries whose card satisfies ``predicate``."""
        return sum(e.quantity for e in self.entries if predicate(e.card))

    def has_card(self, name: str) -> bool:
        """Substring match on card names."""
        return any(name in e.card.name for e in self.entries)


class GameFormat(str, Enum):
    """Play formats supported by the analysis."""

    STANDARD = "standard"
    EXPANDED = "expanded"


class AnalysisConfig(BaseModel):
    """Per-request analysis options."""

    format: GameFormat = GameFormat.STANDARD
    include_rotation: bool = True


# Archetype Models


class FeatureVector(BaseModel):
    """Numeric features extracted from a deck for archetype classification."""

    attacker_count: int = Field(default=0, description="Copies of Pokemon with a 60+ damage attack")
    average_damage: float = Field(default=0.0, description="Mean damage of damaging attacks")
    setup_speed: float = Field(
        default=0.0, description="100 - 15*stage2 copies - 10*avg retreat (not clamped)"
    )
    disruption_count: int = 0
    healing_count: int = 0
    draw_power: int = 0
    energy_acceleration: int = 0
    bench_sitters: int = Field(default=0, description="Ability Pokemon without attacks")
    average_retreat_cost: float = 0.0
    special_conditions: int = 0
    mill_cards: int = 0
    spread_damage: int = 0
    combo_components: int = 0
    single_prize_ratio: float = Field(default=0.0, description="0.0-1.0")


class DeckArchetype(str, Enum):
    """Strategic archetypes, in tie-breaking order."""

    AGGRO = "aggro"
    CONTROL = "control"
    COMBO = "combo"
    MIDRANGE = "midrange"
    MILL = "mill"
    STALL = "stall"
    TOOLBOX = "toolbox"
    TURBO = "turbo"
    SPREAD = "spread"


class ArchetypeClassification(BaseModel):
    """Result of classifying a deck into an archetype."""

    primary_archetype: DeckArchetype
    secondary_archetype: DeckArchetype | None = None
    confidence: int = Field(description="Confidence (0-100)")
    characteristics: list[str] = Field(default_factory=list)
    playstyle: str = ""
    archetype_scores: dict[DeckArchetype, int] = Field(
        default_factory=dict, description="Raw heuristic score per archetype"
    )


# Synergy Models


class SynergyPolarity(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class SynergyKind(str, Enum):
    """Detector that produced a pair score."""

    ABILITY = "ability"
    TYPE = "type"
    ENERGY = "energy"
    STRATEGY = "strategy"
    SEARCH = "search"


class SynergyEdge(BaseModel):
    """Directed edge in the synergy graph."""

    target_id: str
    strength: float = Field(ge=-100, le=100, description="Edge strength (-100 to 100)")
    polarity: SynergyPolarity
    description: str


class SynergyNode(BaseModel):
    """One node per distinct card id."""

    card_id: str
    card_name: str
    connections: list[SynergyEdge] = Field(default_factory=list)


class PairSynergy(BaseModel):
    """Aggregated score for an unordered card pair."""

    card1_id: str
    card2_id: str
    score: float = Field(description="Clamped to [-1, 1]")
    kind: SynergyKind
    description: str
    combo_rating: float = Field(default=0.0, description="Combo potential (0-10)")


class ComboChain(BaseModel):
    """Cards satisfying a named combo pattern."""

    name: str
    cards: list[str] = Field(description="Card ids in pattern slot order")
    combo_type: str
    reliability: float = Field(description="0.0-1.0, taken from the pattern")
    impact: int = Field(description="1-10, taken from the pattern")
    description: str


class AntiSynergy(BaseModel):
    """A pair of cards that work against each other."""

    card1_id: str
    card2_id: str
    severity: float = Field(description="3-10; fixed per conflict rule, else |score| * 10")
    reasoning: str
    can_coexist: bool


class AttackCombo(BaseModel):
    """A setup attack that feeds another Pokemon's payoff attack."""

    setup_pokemon: str
    attacker_pokemon: str
    combo: str
    damage: int
    setup_turns: int


class TypeSynergy(BaseModel):
    """Weakness and resistance coverage across the deck's Pokemon."""

    weakness_coverage: float = Field(default=100.0, description="0-100")
    resistance_utilization: float = Field(
        default=0.0, description="Resistant copies as a percentage of Pokemon copies"
    )
    type_balance: bool = Field(default=False, description="One to three Pokemon types")
    vulnerabilities: list[str] = Field(
        default_factory=list, description="Weakness types shared by more than 3 copies and never resisted"
    )


class AbilityCombo(BaseModel):
    """Two Pokemon whose abilities work together."""

    pokemon: list[str]
    abilities: list[str]
    synergy_score: int
    description: str


class TrainerSynergy(BaseModel):
    """Two Trainers that work together."""

    cards: list[str]
    effect: str
    synergy_score: int
    frequency: float = Field(description="Mean copies of the two cards")


class EnergySynergy(BaseModel):
    acceleration_methods: list[str] = Field(default_factory=list)
    energy_recycling: list[str] = Field(default_factory=list)
    efficiency: int = 70
    consistency: int = 50


class EvolutionSynergy(BaseModel):
    support_cards: list[str] = Field(default_factory=list)
    evolution_speed: int = 50
    reliability: int = 50


class SynergyGraph(BaseModel):
    """Synergy analysis for one deck: graph, sub-analyses, combos and scores."""

    nodes: dict[str, SynergyNode] = Field(default_factory=dict, description="Keyed by card id")
    pair_scores: list[PairSynergy] = Field(default_factory=list)
    combos: list[ComboChain] = Field(default_factory=list)
    type_synergy: TypeSynergy = Field(default_factory=TypeSynergy)
    ability_combos: list[AbilityCombo] = Field(
        default_factory=list, description="Strongest first"
    )
    trainer_synergy: list[TrainerSynergy] = Field(default_factory=list, description="Strongest first")
    energy_synergy: EnergySynergy = Field(default_factory=EnergySynergy)
    evolution_synergy: EvolutionSynergy = Field(default_factory=EvolutionSynergy)
    attack_combos: list[AttackCombo] = Field(default_factory=list)
    anti_synergies: list[AntiSynergy] = Field(default_factory=list)
    overall_coherence: float = Field(default=0.5, description="0.0-1.0")
    overall_synergy: int = Field(default=50, description="Weighted sub-analysis score (0-100)")

    def edges(self) -> list[tuple[str, SynergyEdge]]:
        """Flatten adjacency lists into (source_id, edge) pairs."""
        return [(source, edge) for source, node in self.nodes.items() for edge in node.connections]


# Meta Models


class MetaDeck(BaseModel):
    """Reference deck from the meta catalog."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    archetype: DeckArchetype
    popularity: int = Field(description="Share of the field in percent")
    key_cards: list[str]
    strategy: str
    weaknesses: list[str]


class MetaTier(str, Enum):
    TIER1 = "tier1"
    TIER2 = "tier2"
    TIER3 = "tier3"
    ROGUE = "rogue"


class PopularMatchup(BaseModel):
    """Estimated matchup against a catalog deck."""

    opponent_archetype: str = Field(description="Name of the opposing meta deck")
    win_rate: int = Field(description="Estimated win rate (20-80)")
    key_factors: list[str] = Field(default_factory=list)
    strategy: str = ""


class CounterStrategy(BaseModel):
    target_archetype: str
    cards: list[str]
    effectiveness: int


class WeaknessSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class MetaWeakness(BaseModel):
    weakness: str
    severity: WeaknessSeverity
    common_exploits: list[str] = Field(default_factory=list)


class FormatEvaluation(BaseModel):
    format: GameFormat
    viability: int = Field(description="0-100; 0 when any card is illegal")
    legality_issues: list[str] = Field(default_factory=list)
    format_specific_strengths: list[str] = Field(default_factory=list)


class RotationImpact(BaseModel):
    cards_rotating: list[str] = Field(default_factory=list)
    impact_score: int = Field(default=0, description="0-100")
    replacement_suggestions: dict[str, list[str]] = Field(
        default_factory=dict, description="Keyed by card id"
    )


class TechCardRecommendation(BaseModel):
    card: str
    reason: str
    matchup_improvements: list[str] = Field(default_factory=list)
    slot: int = Field(description="Copies to include")


class MetaAnalysis(BaseModel):
    """Meta-game evaluation of a deck."""

    archetype_match: str
    meta_position: MetaTier
    popular_matchups: list[PopularMatchup] = Field(default_factory=list)
    counter_strategies: list[CounterStrategy] = Field(default_factory=list)
    weaknesses: list[MetaWeakness] = Field(default_factory=list)
    format_evaluation: FormatEvaluation
    rotation_impact: RotationImpact = Field(default_factory=RotationImpact)
    tech_recommendations: list[TechCardRecommendation] = Field(default_factory=list)


# Collaborator Reports


class EnergyRange(BaseModel):
    min: float
    max: float


class EnergyRatio(BaseModel):
    energy_percentage: float = Field(description="Energy share of the deck in percent")
    recommended_range: EnergyRange


class TrainerDistribution(BaseModel):
    draw_power: int = 0
    search: int = 0
    disruption: int = 0
    supporters: int = 0
    items: int = 0


class ConsistencyReport(BaseModel):
    """Consistency analysis supplied by a consistency provider."""

    overall_consistency: int = Field(description="0-100")
    mulligan_probability: float = Field(description="0.0-1.0")
    energy_ratio: EnergyRatio
    trainer_distribution: TrainerDistribution = Field(default_factory=TrainerDistribution)


class DeckSpeed(str, Enum):
    TURBO = "turbo"
    FAST = "fast"
    MEDIUM = "medium"
    SLOW = "slow"


class PrizeRaceSpeed(BaseModel):
    damage_output: float = 0.0
    ohko_capability: bool = False
    average_prizes_per_turn: float = 0.0
    comeback_potential: int = Field(default=0, description="0-100")


class SpeedReport(BaseModel):
    """Speed analysis supplied by a speed provider."""

    overall_speed: DeckSpeed
    average_setup_turn: float
    first_turn_advantage: int = Field(description="0-100")
    energy_attachment_efficiency: int = Field(description="0-100")
    late_game_sustainability: int = Field(description="0-100")
    prize_race_speed: PrizeRaceSpeed = Field(default_factory=PrizeRaceSpeed)


# Scoring Models


class ScoreBreakdown(BaseModel):
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    core_strategy: str = ""
    win_conditions: list[str] = Field(default_factory=list)


class DeckScores(BaseModel):
    """Component scores and archetype-weighted overall score (all 0-100)."""

    overall: int
    consistency: int
    power: int
    speed: int
    versatility: int
    meta_relevance: int
    innovation: int
    difficulty: int
    breakdown: ScoreBreakdown


class RecommendationType(str, Enum):
    ADD = "add"
    REMOVE = "remove"
    ADJUST = "adjust"


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Recommendation(BaseModel):
    """Actionable suggestion for improving the deck."""

    type: RecommendationType
    priority: Priority
    card: str | None = Field(default=None, description="Target card or card group")
    quantity: int | None = None
    reason: str
    impact: str
    suggestion: str | None = None
    alternatives: list[str] = Field(default_factory=list)


class WarningSeverity(str, Enum):
    """Warning severity levels."""

    ERROR = "error"  # Deck breaks a construction rule
    WARNING = "warning"  # Legal but likely to play badly


class AnalysisWarning(BaseModel):
    """Structured deck-rule violation; never raised."""

    severity: WarningSeverity
    category: str = Field(description="Rule category, e.g. 'Deck Size'")
    message: str
    affected_cards: list[str] = Field(default_factory=list)
    suggestion: str | None = None


class LearningCurve(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class PerformanceSummary(BaseModel):
    tournament_performance: int = Field(description="0-100")
    consistency_rating: int = Field(description="1-10")
    power_level: int = Field(description="1-10")
    meta_viability: int = Field(description="1-10")
    skill_ceiling: int = Field(description="1-10")
    budget_efficiency: int = Field(description="0-100, higher is cheaper")
    future_proofing: int = Field(description="0-100")
    learning_curve: LearningCurve


class AnalysisReport(BaseModel):
    """Complete analysis of one deck."""

    deck_id: str | None = None
    timestamp: datetime
    consistency: ConsistencyReport
    synergy: SynergyGraph
    meta: MetaAnalysis
    speed: SpeedReport
    matchups: list[PopularMatchup] = Field(default_factory=list)
    archetype: ArchetypeClassification
    scores: DeckScores
    recommendations: list[Recommendation] = Field(default_factory=list)
    warnings: list[AnalysisWarning] = Field(default_factory=list)
    performance_summary: PerformanceSummary
