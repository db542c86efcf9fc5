"""Card synergy analysis: pairwise scores, synergy graph, combo chains and the
weighted overall synergy score."""

import math
from collections import Counter
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from ..models import (
    Ability,
    AbilityCombo,
    AntiSynergy,
    Attack,
    AttackCombo,
    Card,
    ComboChain,
    Deck,
    EnergySynergy,
    EvolutionSynergy,
    PairSynergy,
    SynergyEdge,
    SynergyGraph,
    SynergyKind,
    SynergyNode,
    SynergyPolarity,
    TrainerSynergy,
    TypeSynergy,
)

ANTI_SYNERGY_THRESHOLD = -0.3
COEXIST_THRESHOLD = -0.7
COMBO_WEIGHT = 0.2
STATUS_CONDITIONS = ("Asleep", "Burned", "Confused", "Paralyzed", "Poisoned")

SYNERGY_WEIGHTS = {
    "type": 0.15,
    "abilities": 0.25,
    "trainers": 0.20,
    "energy": 0.15,
    "evolution": 0.10,
    "attacks": 0.15,
}


@dataclass
class DetectorResult:
    """Score and explanation from one pair detector."""

    kind: SynergyKind
    score: float
    descriptions: list[str]

    @property
    def description(self) -> str:
        return ", ".join(self.descriptions) or f"No {self.kind.value} synergy"


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# Pair Detectors


def check_ability_synergy(card1: Card, card2: Card) -> DetectorResult:
    score = 0.0
    found: list[str] = []

    for ability1 in card1.abilities:
        for ability2 in card2.abilities:
            t1, t2 = ability1.text, ability2.text
            if "draw" in t1 and "draw" in t2:
                score += 0.3
                found.append("Both provide card draw")
            if "Energy" in t1 and "Energy" in t2:
                score += 0.4
                found.append("Energy acceleration combo")
            if ("damage" in t1 and "more damage" in t2) or ("damage" in t2 and "more damage" in t1):
                score += 0.5
                found.append("Damage amplification synergy")
            if ("prevent" in t1 or "reduce" in t1) and ("prevent" in t2 or "reduce" in t2):
                score += 0.3
                found.append("Defensive synergy")

    if card1.abilities and card2.is_trainer:
        if "Ability" in card2.text or "abilities" in card2.text:
            score += 0.4
            found.append("Trainer enhances abilities")

    return DetectorResult(SynergyKind.ABILITY, min(1.0, score), found)


def check_type_synergy(card1: Card, card2: Card) -> DetectorResult:
    score = 0.0
    found: list[str] = []

    shared = [t for t in card1.types if t in card2.types]
    if shared:
        score += 0.3 * len(shared)
        found.append(f"Share {', '.join(shared)} type(s)")

    if card1.is_pokemon and card2.is_energy:
        if any(t.lower() in card2.name.lower() for t in card1.types):
            score += 0.5
            found.append("Energy matches Pokemon type")

    if card1.is_pokemon and card2.is_trainer and card2.text:
        if any(t.lower() in card2.text.lower() for t in card1.types):
            score += 0.4
            found.append("Trainer supports Pokemon type")

    if card1.is_pokemon and card2.is_pokemon:
        resisted = {r.type for r in card2.resistances}
        if any(w.type in resisted for w in card1.weaknesses):
            score += 0.3
            found.append("Covers weakness")

    return DetectorResult(SynergyKind.TYPE, min(1.0, score), found)


def check_energy_synergy(card1: Card, card2: Card) -> DetectorResult:
    score = 0.0
    found: list[str] = []
    text1 = card1.text

    if "attach" in text1 and "Energy" in text1 and card2.is_pokemon and card2.attacks:
        score += 0.4
        found.append("Accelerates energy for attacks")

    if card1.is_energy and "Special" in card1.subtypes and "Special Energy" in card2.text:
        score += 0.5
        found.append("Special energy synergy")

    if "Energy" in text1 and "discard pile" in text1:
        if card2.is_pokemon and any(len(a.cost) > 2 for a in card2.attacks):
            score += 0.3
            found.append("Energy recovery for heavy attackers")

    if any("less Energy" in a.text for a in card1.abilities) and card2.is_pokemon:
        score += 0.4
        found.append("Reduces energy requirements")

    return DetectorResult(SynergyKind.ENERGY, min(1.0, score), found)


def _is_mill(card: Card) -> bool:
    return "discard" in card.text and "opponent's deck" in card.text


def check_strategy_synergy(card1: Card, card2: Card) -> DetectorResult:
    score = 0.0
    found: list[str] = []
    text1, text2 = card1.text, card2.text

    if _is_mill(card1) and _is_mill(card2):
        score += 0.6
        found.append("Mill strategy synergy")

    hits_all = any("all" in a.text for a in card1.attacks) or any(
        "all" in a.text for a in card2.attacks
    )
    if hits_all and ("damage counter" in text1 or "damage counter" in text2):
        score += 0.5
        found.append("Spread damage synergy")

    if ("switch" in text1 or "retreat" in text1) and ("switch" in text2 or "retreat" in text2):
        score += 0.4
        found.append("Control synergy")

    status1 = next((s for s in STATUS_CONDITIONS if s in text1), None)
    status2 = next((s for s in STATUS_CONDITIONS if s in text2), None)
    if status1 and status2:
        if status1 == status2:
            score += 0.4
            found.append(f"{status1} condition synergy")
        else:
            score += 0.2
            found.append("Multiple status conditions")

    return DetectorResult(SynergyKind.STRATEGY, min(1.0, score), found)


def check_search_synergy(card1: Card, card2: Card) -> DetectorResult:
    score = 0.0
    found: list[str] = []
    text1, text2 = card1.text, card2.text

    if card1.is_trainer and "search" in text1 and card2.is_pokemon:
        if "Pokémon" in text1 and "Item" not in text1:
            score += 0.5
            found.append("Searches for this Pokemon")

    if "Ball" in card1.name and "Ball" in card2.name:
        score += 0.3
        found.append("Search consistency")

    if "Evolution" in text1 and card2.evolves_from:
        score += 0.4
        found.append("Evolution search synergy")

    # Both thin the same deck
    if "from your deck" in text1 and "from your deck" in text2:
        score -= 0.2
        found.append("Compete for deck thinning")

    return DetectorResult(SynergyKind.SEARCH, _clamp(score, -1.0, 1.0), found)


def check_combo_potential(card1: Card, card2: Card) -> float:
    """Combo rating for a pair (0-10)."""
    rating = 0

    if card1.abilities and card2.abilities:
        if any("use this Ability again" in a.text for a in card1.abilities + card2.abilities):
            rating += 8
        if any("once during your turn" in a.text for a in card1.abilities) and any(
            "once during your turn" in a.text for a in card2.abilities
        ):
            rating += 5

    if card1.abilities and card2.attacks:
        if "damage" in card1.abilities[0].text and card2.attacks[0].damage:
            rating += 6

    if card1.is_trainer and card2.is_pokemon and card2.name in card1.text:
        rating += 9

    return min(10, rating)


PAIR_DETECTORS: tuple[Callable[[Card, Card], DetectorResult], ...] = (
    check_ability_synergy,
    check_type_synergy,
    check_energy_synergy,
    check_strategy_synergy,
    check_search_synergy,
)


def calculate_pair_synergy(card1: Card, card2: Card) -> PairSynergy:
    """Sum every non-zero detector score plus weighted combo potential."""
    results = [r for r in (detect(card1, card2) for detect in PAIR_DETECTORS) if r.score != 0]
    total = sum(r.score for r in results)

    combo_rating = check_combo_potential(card1, card2)
    if combo_rating > 0:
        total += combo_rating * COMBO_WEIGHT

    primary = max(results, key=lambda r: abs(r.score)) if results else None
    if results:
        description = "; ".join(r.description for r in results)
    else:
        description = f"{card1.name} and {card2.name} have neutral interaction"

    return PairSynergy(
        card1_id=card1.id,
        card2_id=card2.id,
        score=_clamp(total, -1.0, 1.0),
        kind=primary.kind if primary else SynergyKind.STRATEGY,
        description=description,
        combo_rating=combo_rating,
    )


# Anti-Synergy Rules


def _blocks_abilities(card: Card) -> bool:
    return any("can't use" in a.text for a in card.abilities)


def _needs_typed_energy(card: Card) -> bool:
    return any(symbol != "Colorless" for a in card.attacks for symbol in a.cost)


def _needs_different_energy(card1: Card, card2: Card) -> bool:
    """Two Pokemon with disjoint, non-Colorless types whose attacks both need typed Energy."""
    if not (card1.is_pokemon and card2.is_pokemon):
        return False
    if not card1.types or not card2.types:
        return False
    if set(card1.types) & set(card2.types):
        return False
    if "Colorless" in card1.types or "Colorless" in card2.types:
        return False
    return _needs_typed_energy(card1) and _needs_typed_energy(card2)


def check_anti_synergy(card1: Card, card2: Card) -> AntiSynergy | None:
    """Known conflicts between two cards, first matching rule wins."""
    if "Stadium" in card1.subtypes and "Stadium" in card2.subtypes:
        # Both fit in the deck; only one can be in play
        return AntiSynergy(
            card1_id=card1.id,
            card2_id=card2.id,
            severity=5,
            reasoning="Stadium cards replace each other",
            can_coexist=True,
        )

    if (_blocks_abilities(card1) and card2.abilities) or (_blocks_abilities(card2) and card1.abilities):
        return AntiSynergy(
            card1_id=card1.id,
            card2_id=card2.id,
            severity=8,
            reasoning="Ability prevention conflict",
            can_coexist=False,
        )

    if _needs_different_energy(card1, card2):
        return AntiSynergy(
            card1_id=card1.id,
            card2_id=card2.id,
            severity=6,
            reasoning="Incompatible energy requirements",
            can_coexist=True,
        )

    return None


def anti_synergy_from_pair(pair: PairSynergy) -> AntiSynergy | None:
    """Anti-synergy for a pair whose combined score is at or below the threshold."""
    if pair.score > ANTI_SYNERGY_THRESHOLD:
        return None
    return AntiSynergy(
        card1_id=pair.card1_id,
        card2_id=pair.card2_id,
        severity=abs(pair.score) * 10,
        reasoning=pair.description,
        can_coexist=pair.score > COEXIST_THRESHOLD,
    )


def calculate_coherence(pairs: list[PairSynergy]) -> float:
    """Mean pair score rescaled from [-1, 1] to [0, 1]; 0.5 with no pairs."""
    mean = sum(p.score for p in pairs) / len(pairs) if pairs else 0.0
    return _clamp((mean + 1) / 2, 0.0, 1.0)


# Combo Patterns


@dataclass(frozen=True)
class ComboPattern:
    """Named pattern with one card predicate per slot."""

    name: str
    slots: tuple[Callable[[Card], bool], ...]
    combo_type: str
    impact: int
    reliability: float
    description: str


def _draws(card: Card) -> bool:
    return "draw" in card.text or any("draw" in a.text for a in card.abilities)


def _attaches_energy(card: Card) -> bool:
    return "attach" in card.text and "Energy" in card.text


def _amplifies_damage(card: Card) -> bool:
    return "more damage" in card.text or any("more damage" in a.text for a in card.abilities)


COMBO_PATTERNS: tuple[ComboPattern, ...] = (
    ComboPattern(
        name="Draw Engine",
        slots=(_draws, lambda c: "draw" in c.text or "Research" in c.name),
        combo_type="setup",
        impact=7,
        reliability=0.8,
        description="Consistent card draw engine",
    ),
    ComboPattern(
        name="Energy Acceleration",
        slots=(
            _attaches_energy,
            lambda c: c.is_pokemon and any(len(a.cost) >= 3 for a in c.attacks),
        ),
        combo_type="setup",
        impact=8,
        reliability=0.7,
        description="Fast energy setup for powerful attacks",
    ),
    ComboPattern(
        name="Lock Combo",
        slots=(
            lambda c: "can't retreat" in c.text,
            lambda c: "can't attack" in c.text or "can't use" in c.text,
        ),
        combo_type="lock",
        impact=9,
        reliability=0.5,
        description="Prevents opponent from playing",
    ),
    ComboPattern(
        name="Damage Amplification",
        slots=(_amplifies_damage, lambda c: c.is_pokemon and bool(c.attacks)),
        combo_type="damage",
        impact=8,
        reliability=0.8,
        description="Increases damage output significantly",
    ),
)


def _slot_assignments(candidates: list[list[Card]]) -> Iterator[list[Card]]:
    if not candidates:
        return
    first, rest = candidates[0], candidates[1:]
    if not rest:
        for card in first:
            yield [card]
        return
    tails = list(_slot_assignments(rest))
    for card in first:
        for tail in tails:
            if all(card.id != other.id for other in tail):
                yield [card, *tail]


def generate_combinations(candidates: list[list[Card]]) -> Iterator[list[Card]]:
    """Yield one card per slot, never using the same card twice in a combination.

    Each set of cards is yielded once, in the first slot order found.
    """
    seen: set[frozenset[str]] = set()
    for combo in _slot_assignments(candidates):
        key = frozenset(card.id for card in combo)
        if key not in seen:
            seen.add(key)
            yield combo


def find_combo_chains(cards: list[Card]) -> list[ComboChain]:
    """Match every combo pattern against the deck, best impact x reliability first."""
    chains: list[ComboChain] = []
    for pattern in COMBO_PATTERNS:
        candidates = [[c for c in cards if slot(c)] for slot in pattern.slots]
        if not all(candidates):
            continue
        for combo in generate_combinations(candidates):
            chains.append(
                ComboChain(
                    name=pattern.name,
                    cards=[c.id for c in combo],
                    combo_type=pattern.combo_type,
                    reliability=pattern.reliability,
                    impact=pattern.impact,
                    description=pattern.description,
                )
            )
    chains.sort(key=lambda c: c.impact * c.reliability, reverse=True)
    return chains


# Graph Edge Rules


def ability_pair_edge(ability1: Ability, ability2: Ability, pokemon2: Card) -> tuple[int, str] | None:
    """Edge strength and description for two Pokemon abilities that work together."""
    text1 = ability1.text.lower()
    text2 = ability2.text.lower()

    if "attach" in text1 and "energy" in text1 and "damage" in text2 and "less damage" not in text2:
        return 85, f"{ability1.name} accelerates energy for {ability2.name}"
    if ("draw" in text1 or "look at" in text1) and "hand" in text2:
        return 75, f"{ability1.name} synergizes with {ability2.name} for card advantage"
    if "less damage" in text1 and pokemon2.hp and pokemon2.hp > 150:
        return 70, f"{ability1.name} helps {pokemon2.name} tank hits"
    if "bench" in text1 and "damage" in text1 and not pokemon2.retreat_cost:
        return 65, f"{ability1.name} protects {pokemon2.name} on bench"
    return None


def trainer_pair_edge(trainer1: Card, trainer2: Card) -> tuple[int, str] | None:
    text1 = trainer1.search_text
    text2 = trainer2.search_text

    if "search" in text1 and "shuffle" in text2 and "draw" in text2:
        return 80, "Search for key cards then shuffle draw"
    if "energy" in text1 and "attach" in text1 and "energy" in text2 and "move" in text2:
        return 75, "Accelerate energy then redistribute"
    if (
        "discard" in text1
        and "opponent" not in text1
        and "discard pile" in text2
        and "shuffle" in text2
    ):
        return 70, "Discard for effect then recover resources"
    if "Stadium" in trainer1.subtypes and "stadium" in text2 and "discard" in text2:
        return 60, "Stadium with protection from opponent stadiums"
    return None


def check_attack_combo(
    setup: Card, setup_attack: Attack, attacker: Card, payoff: Attack
) -> AttackCombo | None:
    """Setup attack on one Pokemon that enables another Pokemon's payoff attack."""
    setup_text = setup_attack.text.lower()
    payoff_text = payoff.text.lower()
    damage = payoff.damage_value

    if "attach" in setup_text and "energy" in setup_text and damage >= 120:
        return AttackCombo(
            setup_pokemon=setup.name,
            attacker_pokemon=attacker.name,
            combo=f"{setup_attack.name} → {payoff.name}",
            damage=damage,
            setup_turns=1,
        )

    if "damage counter" in setup_text or "place" in setup_text:
        bonus = 50 if "damage counter" in payoff_text else 0
        if damage + bonus >= 100:
            return AttackCombo(
                setup_pokemon=setup.name,
                attacker_pokemon=attacker.name,
                combo=f"Place damage counters → {payoff.name}",
                damage=damage + bonus,
                setup_turns=2,
            )

    if "asleep" in setup_text or "paralyzed" in setup_text:
        bonus = 60 if "asleep" in payoff_text or "status" in payoff_text else 0
        if damage + bonus >= 90:
            return AttackCombo(
                setup_pokemon=setup.name,
                attacker_pokemon=attacker.name,
                combo=f"Status condition → {payoff.name}",
                damage=damage + bonus,
                setup_turns=1,
            )

    return None


# Deck Sub-Analyses


def analyze_type_synergy(deck: Deck) -> TypeSynergy:
    """Weakness coverage, resistance use and type spread of the deck's Pokemon."""
    types: dict[str, None] = {}
    weaknesses: Counter[str] = Counter()
    resistances: Counter[str] = Counter()
    for entry in deck.entries:
        card = entry.card
        if not card.is_pokemon:
            continue
        types.update(dict.fromkeys(card.types))
        for weakness in card.weaknesses:
            weaknesses[weakness.type] += entry.quantity
        for resistance in card.resistances:
            resistances[resistance.type] += entry.quantity

    vulnerabilities = [t for t, count in weaknesses.items() if t not in resistances and count > 3]
    total_pokemon = deck.count(lambda c: c.is_pokemon)

    if vulnerabilities:
        coverage = (1 - len(vulnerabilities) / len(weaknesses)) * 100
    else:
        coverage = 100.0
    utilization = sum(resistances.values()) / total_pokemon * 100 if resistances else 0.0

    return TypeSynergy(
        weakness_coverage=coverage,
        resistance_utilization=utilization,
        type_balance=1 <= len(types) <= 3,
        vulnerabilities=vulnerabilities,
    )


def energy_consistency(energy_count: int, acceleration: int, recycling: int) -> int:
    consistency = 50
    if 10 <= energy_count <= 15:
        consistency += 20
    elif 8 <= energy_count <= 18:
        consistency += 10
    consistency += min(20, acceleration * 10)
    consistency += min(10, recycling * 5)
    return min(100, consistency)


def analyze_energy_synergy(deck: Deck, cards: list[Card]) -> EnergySynergy:
    """Energy acceleration and recycling cards, with efficiency and consistency ratings."""
    acceleration: list[str] = []
    recycling: list[str] = []
    efficiency = 70

    for card in cards:
        text = card.search_text
        if "attach" in text and "energy" in text and ("bench" in text or "additional" in text):
            acceleration.append(card.name)
            efficiency += 5
        if "energy" in text and ("discard pile" in text or "shuffle" in text):
            recycling.append(card.name)
            efficiency += 3

    energy_count = deck.count(lambda c: c.is_energy)
    return EnergySynergy(
        acceleration_methods=acceleration,
        energy_recycling=recycling,
        efficiency=min(100, efficiency),
        consistency=energy_consistency(energy_count, len(acceleration), len(recycling)),
    )


def _supports_evolution(trainer: Card) -> bool:
    text = trainer.search_text
    if "evolution" in text or "evolve" in text:
        return True
    return ("pokémon" in text or "pokemon" in text) and "deck" in text


def analyze_evolution_synergy(cards: list[Card]) -> EvolutionSynergy:
    """Trainers and abilities that fetch or speed up evolutions."""
    support: list[str] = []
    speed = 50
    reliability = 50

    for card in cards:
        if card.is_trainer and _supports_evolution(card):
            support.append(card.name)
            speed += 10
            reliability += 8

    for card in cards:
        if not card.is_pokemon:
            continue
        for ability in card.abilities:
            if "evolve" in ability.text.lower():
                support.append(f"{card.name} ({ability.name})")
                speed += 15
                reliability += 10

    return EvolutionSynergy(
        support_cards=support,
        evolution_speed=min(100, speed),
        reliability=min(100, reliability),
    )


def _combo_score(scores: list[int]) -> float:
    """Mean combo score x 20, capped at 100; 50 with no combos."""
    if not scores:
        return 50
    return min(100, sum(scores) / len(scores) * 20)


def calculate_overall_synergy(
    type_synergy: TypeSynergy,
    ability_combos: list[AbilityCombo],
    trainer_synergy: list[TrainerSynergy],
    energy: EnergySynergy,
    evolution: EvolutionSynergy,
    attack_combos: list[AttackCombo],
) -> int:
    """Weighted 0-100 score over the six synergy sub-analyses."""
    score = SYNERGY_WEIGHTS["type"] * (
        type_synergy.weakness_coverage * 0.5
        + type_synergy.resistance_utilization * 0.3
        + (20 if type_synergy.type_balance else 0)
    )
    score += SYNERGY_WEIGHTS["abilities"] * _combo_score([c.synergy_score for c in ability_combos])
    score += SYNERGY_WEIGHTS["trainers"] * _combo_score([t.synergy_score for t in trainer_synergy])
    score += SYNERGY_WEIGHTS["energy"] * ((energy.efficiency + energy.consistency) / 2)
    score += SYNERGY_WEIGHTS["evolution"] * ((evolution.evolution_speed + evolution.reliability) / 2)
    attack_score = min(100, len(attack_combos) * 20) if attack_combos else 50
    score += SYNERGY_WEIGHTS["attacks"] * attack_score
    # Half-up rounding
    return int(_clamp(math.floor(score + 0.5), 0, 100))


class _GraphBuilder:
    """Adjacency lists for a single analysis; one edge per (source, target)."""

    def __init__(self, cards: list[Card]):
        self.nodes: dict[str, SynergyNode] = {
            card.id: SynergyNode(card_id=card.id, card_name=card.name) for card in cards
        }

    def connect(
        self, source_id: str, target_id: str, strength: float, polarity: SynergyPolarity, description: str
    ) -> None:
        node = self.nodes.get(source_id)
        if node is None:
            return
        if any(edge.target_id == target_id for edge in node.connections):
            return
        node.connections.append(
            SynergyEdge(
                target_id=target_id,
                strength=_clamp(strength, -100, 100),
                polarity=polarity,
                description=description,
            )
        )


class SynergyAnalyzer:
    """Builds the synergy graph for a deck."""

    def analyze(self, deck: Deck) -> SynergyGraph:
        """Analyze card interactions.

        Args:
            deck: Deck to analyze

        Returns:
            SynergyGraph with nodes, pair scores, sub-analyses, combos,
            anti-synergies, coherence and the weighted overall synergy
        """
        cards = _unique_cards(deck)
        quantities = _quantities(deck)
        graph = _GraphBuilder(cards)

        pair_scores: list[PairSynergy] = []
        anti_synergies: list[AntiSynergy] = []
        for i, card1 in enumerate(cards):
            for card2 in cards[i + 1 :]:
                pair = calculate_pair_synergy(card1, card2)
                pair_scores.append(pair)
                anti = check_anti_synergy(card1, card2) or anti_synergy_from_pair(pair)
                if anti:
                    anti_synergies.append(anti)

        type_synergy = analyze_type_synergy(deck)
        ability_combos = self._find_ability_combos(graph, cards)
        trainer_synergy = self._find_trainer_synergy(graph, cards, quantities)
        energy_synergy = analyze_energy_synergy(deck, cards)
        evolution_synergy = analyze_evolution_synergy(cards)
        attack_combos = self._add_attack_combo_edges(graph, cards)
        self._add_energy_type_edges(graph, cards)
        self._add_evolution_edges(graph, cards)
        self._add_weakness_coverage_edges(graph, cards)
        self._add_anti_synergy_edges(graph, anti_synergies)

        return SynergyGraph(
            nodes=graph.nodes,
            pair_scores=pair_scores,
            combos=find_combo_chains(cards),
            type_synergy=type_synergy,
            ability_combos=ability_combos,
            trainer_synergy=trainer_synergy,
            energy_synergy=energy_synergy,
            evolution_synergy=evolution_synergy,
            attack_combos=attack_combos,
            anti_synergies=anti_synergies,
            overall_coherence=calculate_coherence(pair_scores),
            overall_synergy=calculate_overall_synergy(
                type_synergy,
                ability_combos,
                trainer_synergy,
                energy_synergy,
                evolution_synergy,
                attack_combos,
            ),
        )

    def _find_ability_combos(self, graph: _GraphBuilder, cards: list[Card]) -> list[AbilityCombo]:
        combos: list[AbilityCombo] = []
        pokemon = [c for c in cards if c.is_pokemon and c.abilities]
        for i, card1 in enumerate(pokemon):
            for card2 in pokemon[i + 1 :]:
                for ability1 in card1.abilities:
                    for ability2 in card2.abilities:
                        edge = ability_pair_edge(ability1, ability2, card2)
                        if edge:
                            combos.append(
                                AbilityCombo(
                                    pokemon=[card1.name, card2.name],
                                    abilities=[ability1.name, ability2.name],
                                    synergy_score=edge[0],
                                    description=edge[1],
                                )
                            )
                            graph.connect(card1.id, card2.id, edge[0], SynergyPolarity.POSITIVE, edge[1])
        combos.sort(key=lambda c: c.synergy_score, reverse=True)
        return combos

    def _find_trainer_synergy(
        self, graph: _GraphBuilder, cards: list[Card], quantities: dict[str, int]
    ) -> list[TrainerSynergy]:
        synergies: list[TrainerSynergy] = []
        trainers = [c for c in cards if c.is_trainer]
        for i, trainer1 in enumerate(trainers):
            for trainer2 in trainers[i + 1 :]:
                edge = trainer_pair_edge(trainer1, trainer2)
                if edge:
                    synergies.append(
                        TrainerSynergy(
                            cards=[trainer1.name, trainer2.name],
                            effect=edge[1],
                            synergy_score=edge[0],
                            frequency=(quantities[trainer1.id] + quantities[trainer2.id]) / 2,
                        )
                    )
                    graph.connect(trainer1.id, trainer2.id, edge[0], SynergyPolarity.POSITIVE, edge[1])

        stadiums = [t for t in trainers if "Stadium" in t.subtypes]
        for i, stadium1 in enumerate(stadiums):
            for stadium2 in stadiums[i + 1 :]:
                graph.connect(
                    stadium1.id, stadium2.id, -50, SynergyPolarity.NEGATIVE, "Conflicting stadiums"
                )

        for trainer1 in trainers:
            text1 = trainer1.search_text
            for trainer2 in trainers:
                if trainer1.id == trainer2.id:
                    continue
                text2 = trainer2.search_text
                if "discard" in text1 and "hand" in text1 and "hand" in text2 and "more" in text2:
                    graph.connect(
                        trainer1.id,
                        trainer2.id,
                        -60,
                        SynergyPolarity.NEGATIVE,
                        "Conflicting hand size strategies",
                    )

        synergies.sort(key=lambda s: s.synergy_score, reverse=True)
        return synergies

    def _add_attack_combo_edges(self, graph: _GraphBuilder, cards: list[Card]) -> list[AttackCombo]:
        combos: list[AttackCombo] = []
        attackers = [c for c in cards if c.is_pokemon and c.attacks]
        for setup in attackers:
            for attacker in attackers:
                if setup.id == attacker.id:
                    continue
                for setup_attack in setup.attacks:
                    for payoff in attacker.attacks:
                        combo = check_attack_combo(setup, setup_attack, attacker, payoff)
                        if combo:
                            combos.append(combo)
                            graph.connect(
                                setup.id,
                                attacker.id,
                                combo.damage / 50,
                                SynergyPolarity.POSITIVE,
                                combo.combo,
                            )
        combos.sort(key=lambda c: c.damage, reverse=True)
        return combos

    def _add_energy_type_edges(self, graph: _GraphBuilder, cards: list[Card]) -> None:
        pokemon = [c for c in cards if c.is_pokemon]
        for energy in (c for c in cards if c.is_energy):
            for mon in pokemon:
                if any(t.lower() in energy.name.lower() for t in mon.types):
                    graph.connect(energy.id, mon.id, 50, SynergyPolarity.POSITIVE, "Type matching")

    def _add_evolution_edges(self, graph: _GraphBuilder, cards: list[Card]) -> None:
        for card in cards:
            if not card.evolves_from:
                continue
            prevo = next((c for c in cards if c.name == card.evolves_from), None)
            if prevo:
                graph.connect(prevo.id, card.id, 90, SynergyPolarity.POSITIVE, "Evolution line")

    def _add_weakness_coverage_edges(self, graph: _GraphBuilder, cards: list[Card]) -> None:
        pokemon = [c for c in cards if c.is_pokemon]
        for mon1 in pokemon:
            for mon2 in pokemon:
                if mon1.id == mon2.id:
                    continue
                resisted = {r.type for r in mon2.resistances}
                for weakness in mon1.weaknesses:
                    if weakness.type in resisted:
                        graph.connect(
                            mon1.id,
                            mon2.id,
                            60,
                            SynergyPolarity.POSITIVE,
                            f"{mon2.name} covers {mon1.name}'s {weakness.type} weakness",
                        )

    def _add_anti_synergy_edges(self, graph: _GraphBuilder, anti_synergies: list[AntiSynergy]) -> None:
        for anti in anti_synergies:
            graph.connect(
                anti.card1_id,
                anti.card2_id,
                -anti.severity * 10,
                SynergyPolarity.NEGATIVE,
                anti.reasoning,
            )


def _unique_cards(deck: Deck) -> list[Card]:
    """Distinct cards in deck order, first entry wins."""
    seen: dict[str, Card] = {}
    for entry in deck.entries:
        seen.setdefault(entry.card.id, entry.card)
    return list(seen.values())


def _quantities(deck: Deck) -> dict[str, int]:
    counts: Counter[str] = Counter()
    for entry in deck.entries:
        counts[entry.card.id] += entry.quantity
    return dict(counts)


def build_synergy_graph(deck: Deck) -> SynergyGraph:
    """Convenience wrapper around SynergyAnalyzer."""
    return SynergyAnalyzer().analyze(deck)
