"""Plain-text formatting of analysis results for MCP tool output."""

from .analyzers import RecommendationEngine
from .models import (
    AnalysisReport,
    ArchetypeClassification,
    Card,
    MetaDeck,
    SynergyGraph,
    WarningSeverity,
)

RULE = "=" * 60


def format_classification(archetype: ArchetypeClassification) -> str:
    """Format an archetype classification.

    Args:
        archetype: Classification result

    Returns:
        Formatted classification text
    """
    msg = f"Archetype: {archetype.primary_archetype.value.title()}"
    if archetype.secondary_archetype:
        msg += f" / {archetype.secondary_archetype.value.title()}"
    msg += f" (confidence {archetype.confidence}%)\n"
    msg += f"Playstyle: {archetype.playstyle}\n"

    if archetype.characteristics:
        msg += "Characteristics:\n"
        msg += "\n".join(f"  - {c}" for c in archetype.characteristics) + "\n"

    ranked = sorted(archetype.archetype_scores.items(), key=lambda kv: kv[1], reverse=True)
    msg += "Scores: " + ", ".join(f"{a.value} {s}" for a, s in ranked) + "\n"
    return msg


def format_synergy_graph(graph: SynergyGraph, max_edges: int = 25) -> str:
    """Format a synergy graph.

    Args:
        graph: Synergy graph
        max_edges: Strongest edges to list

    Returns:
        Formatted synergy text
    """
    names = {card_id: node.card_name for card_id, node in graph.nodes.items()}
    edges = sorted(graph.edges(), key=lambda pair: abs(pair[1].strength), reverse=True)

    msg = f"Synergy: {graph.overall_synergy}/100 across {len(graph.nodes)} cards\n"

    types = graph.type_synergy
    msg += (
        f"Type: {types.weakness_coverage:.0f}% weakness coverage, "
        f"{types.resistance_utilization:.0f}% resistance use"
    )
    if types.vulnerabilities:
        msg += f", exposed to {', '.join(types.vulnerabilities)}"
    msg += "\n"
    energy = graph.energy_synergy
    msg += f"Energy: efficiency {energy.efficiency}, consistency {energy.consistency}\n"
    evolution = graph.evolution_synergy
    msg += f"Evolution: speed {evolution.evolution_speed}, reliability {evolution.reliability}\n"

    if edges:
        msg += f"\nConnections ({min(len(edges), max_edges)} of {len(edges)}):\n"
        for source, edge in edges[:max_edges]:
            target = names.get(edge.target_id, edge.target_id)
            sign = "+" if edge.strength >= 0 else ""
            msg += f"  {names.get(source, source)} -> {target} [{sign}{edge.strength}] {edge.description}\n"

    if graph.ability_combos:
        msg += "\nAbility combos:\n"
        for ac in graph.ability_combos:
            msg += f"  {' + '.join(ac.pokemon)} [{ac.synergy_score}] {ac.description}\n"

    if graph.trainer_synergy:
        msg += "\nTrainer synergy:\n"
        for ts in graph.trainer_synergy:
            msg += f"  {' + '.join(ts.cards)} [{ts.synergy_score}] {ts.effect}\n"

    if graph.combos:
        msg += "\nCombos:\n"
        for combo in graph.combos:
            msg += (
                f"  {combo.name}: {' + '.join(names.get(c, c) for c in combo.cards)} "
                f"(impact {combo.impact}, reliability {combo.reliability:.0%})\n"
            )

    if graph.attack_combos:
        msg += "\nAttack combos:\n"
        for ac in graph.attack_combos:
            msg += f"  {ac.combo} ({ac.damage} damage, {ac.setup_turns} setup turn(s))\n"

    if graph.anti_synergies:
        msg += "\nAnti-synergies:\n"
        for anti in graph.anti_synergies:
            coexist = "can coexist" if anti.can_coexist else "avoid together"
            msg += (
                f"  {names.get(anti.card1_id, anti.card1_id)} x "
                f"{names.get(anti.card2_id, anti.card2_id)}: severity {anti.severity:.1f}, {coexist}\n"
            )

    return msg


def format_report(report: AnalysisReport, deck_name: str | None = None, detailed: bool = False) -> str:
    """Format a full analysis report.

    Args:
        report: Analysis report
        deck_name: Name shown in the header
        detailed: Include synergy graph, matchups and meta details

    Returns:
        Formatted report text
    """
    scores = report.scores
    summary = report.performance_summary
    title = deck_name or report.deck_id or "Unnamed deck"

    msg = f'Deck Analysis: "{title}"\n{RULE}\n\n'
    msg += format_classification(report.archetype) + "\n"

    msg += f"Overall score: {scores.overall}/100\n"
    msg += (
        f"  Consistency {scores.consistency} | Power {scores.power} | Speed {scores.speed} | "
        f"Versatility {scores.versatility}\n"
        f"  Meta relevance {scores.meta_relevance} | Innovation {scores.innovation} | "
        f"Difficulty {scores.difficulty}\n\n"
    )

    msg += f"Speed: {report.speed.overall_speed.value} (setup turn {report.speed.average_setup_turn:.1f})\n"
    msg += f"Meta: {report.meta.meta_position.value}, closest to {report.meta.archetype_match}\n"
    msg += (
        f"Budget efficiency {summary.budget_efficiency} | Future proofing {summary.future_proofing} | "
        f"Learning curve: {summary.learning_curve.value}\n"
    )

    errors = [w for w in report.warnings if w.severity == WarningSeverity.ERROR]
    others = [w for w in report.warnings if w.severity != WarningSeverity.ERROR]
    if report.warnings:
        msg += f"\nWarnings ({len(errors)} error(s), {len(others)} warning(s)):\n"
        for w in errors + others:
            msg += f"  [{w.severity.value.upper()}] {w.category}: {w.message}\n"
            if w.suggestion:
                msg += f"    {w.suggestion}\n"

    breakdown = scores.breakdown
    if breakdown.strengths:
        msg += "\nStrengths:\n" + "\n".join(f"  + {s}" for s in breakdown.strengths) + "\n"
    if breakdown.weaknesses:
        msg += "\nWeaknesses:\n" + "\n".join(f"  - {w}" for w in breakdown.weaknesses) + "\n"
    msg += f"\nStrategy: {breakdown.core_strategy}\n"
    if breakdown.win_conditions:
        msg += "Win conditions:\n" + "\n".join(f"  * {w}" for w in breakdown.win_conditions) + "\n"

    if detailed:
        msg += f"\n{RULE}\n" + format_synergy_graph(report.synergy)
        if report.matchups:
            msg += "\nMatchups:\n"
            for m in report.matchups:
                msg += f"  vs {m.opponent_archetype}: {m.win_rate}% ({m.strategy})\n"
        if report.meta.weaknesses:
            msg += "\nMeta weaknesses:\n"
            for weakness in report.meta.weaknesses:
                msg += f"  [{weakness.severity.value}] {weakness.weakness}\n"
        if report.meta.rotation_impact.cards_rotating:
            rotation = report.meta.rotation_impact
            msg += f"\nRotation impact {rotation.impact_score}/100: {', '.join(rotation.cards_rotating)}\n"

    msg += f"\n{RULE}\n"
    msg += RecommendationEngine().format_recommendations(report.recommendations, title)
    return msg.strip()


def format_card(card: Card) -> str:
    """Format a catalog card.

    Args:
        card: Card to format

    Returns:
        Formatted card text
    """
    header = f"{card.name} ({card.id}) - {card.supertype.value}"
    if card.subtypes:
        header += f" [{', '.join(card.subtypes)}]"
    msg = header + "\n"

    if card.hp is not None:
        msg += f"HP {card.hp}"
        if card.types:
            msg += f" | {'/'.join(card.types)}"
        msg += "\n"
    if card.evolves_from:
        msg += f"Evolves from {card.evolves_from}\n"
    for ability in card.abilities:
        msg += f"{ability.type}: {ability.name} - {ability.text}\n"
    for attack in card.attacks:
        cost = "".join(c[0] for c in attack.cost) or "-"
        msg += f"[{cost}] {attack.name} {attack.damage}".rstrip() + "\n"
        if attack.text:
            msg += f"    {attack.text}\n"
    for rule in card.rules:
        msg += f"{rule}\n"
    if card.weaknesses:
        msg += "Weakness: " + ", ".join(f"{w.type} {w.value}" for w in card.weaknesses) + "\n"
    if card.retreat_cost:
        msg += f"Retreat: {len(card.retreat_cost)}\n"

    legal = [f for f, ok in (("standard", card.legal_standard), ("expanded", card.legal_expanded)) if ok]
    msg += f"Legal in: {', '.join(legal) if legal else 'none'}\n"
    return msg


def format_meta_deck(deck: MetaDeck) -> str:
    msg = f"{deck.name} ({deck.archetype.value}, {deck.popularity}% popularity)\n"
    msg += f"  Key cards: {', '.join(deck.key_cards)}\n"
    msg += f"  Strategy: {deck.strategy}\n"
    msg += f"  Weaknesses: {', '.join(deck.weaknesses)}\n"
    return msg
