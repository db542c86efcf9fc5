"""Feature extraction over a deck's card multiset."""

from ..models import Card, Deck, FeatureVector

MULTI_PRIZE_SUBTYPES = frozenset({"V", "VMAX", "VSTAR", "ex", "GX", "EX"})
COMBO_PIECE_NAMES = ("Magnezone", "Electrode", "Coalossal", "Archeops")
SPECIAL_CONDITION_WORDS = ("asleep", "paralyzed", "confused", "burned")
ATTACKER_DAMAGE_THRESHOLD = 60


def is_single_prize(card: Card) -> bool:
    """Whether knocking out this Pokemon yields a single prize."""
    return not any(st in MULTI_PRIZE_SUBTYPES for st in card.subtypes)


def is_attacker(card: Card) -> bool:
    """Pokemon with at least one attack dealing 60 or more damage."""
    return card.is_pokemon and any(
        a.damage_value >= ATTACKER_DAMAGE_THRESHOLD for a in card.attacks
    )


def extract_features(deck: Deck) -> FeatureVector:
    """Reduce a deck to its archetype feature vector.

    Single pass over the entries. Empty decks and zero-count categories give
    zeros rather than raising. ``setup_speed`` is left unclamped and may fall
    below 0 for decks heavy on Stage 2 Pokemon.
    """
    attacker_count = 0
    total_damage = 0
    damage_count = 0
    disruption = 0
    healing = 0
    draw_power = 0
    energy_accel = 0
    bench_sitters = 0
    total_retreat = 0
    retreat_count = 0
    special_conditions = 0
    mill = 0
    spread = 0
    combo = 0
    single_prize = 0
    total_pokemon = 0
    stage2_count = 0

    for entry in deck.entries:
        card, qty = entry.card, entry.quantity
        if "Stage 2" in card.subtypes:
            stage2_count += qty

        if card.is_pokemon:
            total_pokemon += qty
            if is_single_prize(card):
                single_prize += qty

            has_good_attack = False
            for attack in card.attacks:
                damage = attack.damage_value
                text = attack.text.lower()
                if damage > 0:
                    total_damage += damage
                    damage_count += 1
                    if damage >= ATTACKER_DAMAGE_THRESHOLD:
                        has_good_attack = True

                # Attack-text signals count once per printing, not per copy
                if any(word in text for word in SPECIAL_CONDITION_WORDS):
                    special_conditions += 1
                if "bench" in text and ("damage" in text or damage > 0):
                    spread += 1
                if "discard" in text and "opponent" in text and "deck" in text:
                    mill += 1

            if has_good_attack:
                attacker_count += qty

            for ability in card.abilities:
                text = ability.text.lower()
                if "heal" in text:
                    healing += 1
                if "prevent" in text and "damage" in text:
                    healing += 1
                if not card.attacks:
                    bench_sitters += 1

            if card.converted_retreat_cost is not None:
                total_retreat += card.converted_retreat_cost * qty
                retreat_count += qty

        elif card.is_trainer:
            text = card.search_text
            if "discard" in text and "opponent" in text:
                disruption += qty
            if "shuffle" in text and "opponent" in text:
                disruption += qty
            if "draw" in text:
                draw_power += qty
            if "heal" in text:
                healing += qty
            if "discard" in text and "opponent" in text and "deck" in text:
                mill += qty
            if "attach" in text and "energy" in text:
                energy_accel += qty
            if any(name in card.name for name in COMBO_PIECE_NAMES):
                combo += qty

        elif card.is_energy:
            if "provides 2" in card.search_text or "Double" in card.name or "Twin" in card.name:
                energy_accel += qty

    average_damage = total_damage / damage_count if damage_count else 0.0
    average_retreat = total_retreat / retreat_count if retreat_count else 0.0
    single_prize_ratio = single_prize / total_pokemon if total_pokemon else 0.0

    return FeatureVector(
        attacker_count=attacker_count,
        average_damage=average_damage,
        setup_speed=100 - stage2_count * 15 - average_retreat * 10,
        disruption_count=disruption,
        healing_count=healing,
        draw_power=draw_power,
        energy_acceleration=energy_accel,
        bench_sitters=bench_sitters,
        average_retreat_cost=average_retreat,
        special_conditions=special_conditions,
        mill_cards=mill,
        spread_damage=spread,
        combo_components=combo,
        single_prize_ratio=single_prize_ratio,
    )
