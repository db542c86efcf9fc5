"""Recommendation engine for deck improvements."""

import math

from ..models import (
    ArchetypeClassification,
    ConsistencyReport,
    Deck,
    DeckArchetype,
    DeckScores,
    DeckSpeed,
    MetaAnalysis,
    Priority,
    Recommendation,
    RecommendationType,
    SpeedReport,
    SynergyGraph,
)

PRIORITY_ORDER = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}

ENERGY_ACCELERATION_OPTIONS = [
    "Melony",
    "Welder",
    "Bede",
    "Raihan",
    "Metal Saucer",
    "Dark Patch",
    "Twin Energy",
    "Double Turbo Energy",
]


class RecommendationEngine:
    """Generates prioritized recommendations for deck improvement."""

    DECK_SIZE = 60

    def generate(
        self,
        deck: Deck,
        consistency: ConsistencyReport,
        synergy: SynergyGraph,
        speed: SpeedReport,
        meta: MetaAnalysis,
        archetype: ArchetypeClassification,
        scores: DeckScores,
        max_recommendations: int = 10,
    ) -> list[Recommendation]:
        """Generate prioritized recommendations.

        Args:
            deck: Analyzed deck
            consistency: Consistency report
            synergy: Synergy graph
            speed: Speed report
            meta: Meta evaluation
            archetype: Archetype classification
            scores: Deck scores
            max_recommendations: Maximum recommendations to return (default: 10)

        Returns:
            Recommendations ordered high, medium, low; insertion order kept within a tier
        """
        recommendations: list[Recommendation] = []

        if consistency.overall_consistency < 70:
            recommendations.extend(self._consistency_recommendations(deck, consistency))

        if speed.overall_speed == DeckSpeed.SLOW and archetype.primary_archetype != DeckArchetype.CONTROL:
            recommendations.extend(self._speed_recommendations(speed))

        for tech in meta.tech_recommendations:
            if len(recommendations) >= max_recommendations:
                break
            recommendations.append(
                Recommendation(
                    type=RecommendationType.ADD,
                    priority=Priority.MEDIUM,
                    card=tech.card,
                    quantity=tech.slot,
                    reason=tech.reason,
                    impact=f"Improves matchups vs {', '.join(tech.matchup_improvements)}",
                )
            )

        if synergy.overall_synergy < 60:
            recommendations.append(
                Recommendation(
                    type=RecommendationType.ADJUST,
                    priority=Priority.LOW,
                    reason="Low card synergy",
                    impact="Better card interactions and combo potential",
                    suggestion="Consider focusing on cards that work well together",
                )
            )

        recommendations.extend(self._archetype_recommendations(archetype, scores))

        # sort() is stable, so ties keep their generation order
        recommendations.sort(key=lambda r: PRIORITY_ORDER[r.priority])
        return recommendations[:max_recommendations]

    def _consistency_recommendations(
        self, deck: Deck, consistency: ConsistencyReport
    ) -> list[Recommendation]:
        recs = []
        ratio = consistency.energy_ratio

        if ratio.energy_percentage < ratio.recommended_range.min:
            missing = (ratio.recommended_range.min - ratio.energy_percentage) / 100 * self.DECK_SIZE
            recs.append(
                Recommendation(
                    type=RecommendationType.ADD,
                    priority=Priority.HIGH,
                    card="Basic Energy",
                    quantity=math.ceil(missing),
                    reason="Energy count below recommended range",
                    impact="Improved energy consistency and reduced dead hands",
                )
            )

        if consistency.trainer_distribution.draw_power < 6:
            owned = deck.count(lambda c: "Professor's Research" in c.name)
            recs.append(
                Recommendation(
                    type=RecommendationType.ADD,
                    priority=Priority.HIGH,
                    card="Professor's Research",
                    quantity=max(1, 4 - owned),
                    reason="Insufficient draw power",
                    impact="Better hand refresh and consistency",
                    alternatives=["Colress's Experiment", "Marnie"],
                )
            )

        if consistency.mulligan_probability > 0.10:
            recs.append(
                Recommendation(
                    type=RecommendationType.ADD,
                    priority=Priority.HIGH,
                    card="Basic Pokemon",
                    quantity=2,
                    reason="High mulligan probability",
                    impact="Reduced mulligan rate and better starts",
                )
            )

        return recs

    def _speed_recommendations(self, speed: SpeedReport) -> list[Recommendation]:
        recs = []
        if speed.energy_attachment_efficiency < 60:
            recs.append(
                Recommendation(
                    type=RecommendationType.ADD,
                    priority=Priority.MEDIUM,
                    card="Energy acceleration",
                    reason="Slow energy attachment",
                    impact="Faster setup and earlier attacks",
                    alternatives=list(ENERGY_ACCELERATION_OPTIONS),
                )
            )
        if speed.first_turn_advantage < 40:
            recs.append(
                Recommendation(
                    type=RecommendationType.ADD,
                    priority=Priority.MEDIUM,
                    card="Battle VIP Pass",
                    quantity=4,
                    reason="Poor first turn setup",
                    impact="Much better turn 1 plays",
                )
            )
        return recs

    def _archetype_recommendations(
        self, archetype: ArchetypeClassification, scores: DeckScores
    ) -> list[Recommendation]:
        primary = archetype.primary_archetype

        if primary == DeckArchetype.AGGRO and scores.speed < 70:
            return [
                Recommendation(
                    type=RecommendationType.ADJUST,
                    priority=Priority.HIGH,
                    reason="Aggro deck is too slow",
                    impact="Match archetype speed requirements",
                    suggestion="Remove high-cost attackers for faster options",
                )
            ]
        if primary == DeckArchetype.CONTROL and scores.versatility < 60:
            return [
                Recommendation(
                    type=RecommendationType.ADD,
                    priority=Priority.MEDIUM,
                    card="Disruption cards",
                    reason="Control deck lacks disruption",
                    impact="Better opponent disruption",
                    alternatives=["Marnie", "Judge", "Crushing Hammer"],
                )
            ]
        if primary == DeckArchetype.COMBO and scores.consistency < 70:
            return [
                Recommendation(
                    type=RecommendationType.ADD,
                    priority=Priority.HIGH,
                    card="Search cards",
                    reason="Combo deck needs to find pieces",
                    impact="More reliable combo execution",
                    alternatives=["Quick Ball", "Ultra Ball", "Trainers' Mail"],
                )
            ]
        return []

    def format_recommendations(self, recommendations: list[Recommendation], deck_name: str) -> str:
        """Format recommendations as human-readable text.

        Args:
            recommendations: List of recommendations to format
            deck_name: Name of the analyzed deck

        Returns:
            Formatted recommendations text
        """
        if not recommendations:
            msg = f'Deck Recommendations: "{deck_name}"\n\n'
            msg += "No recommendations - deck is in good shape!"
            return msg

        msg = f'Deck Recommendations: "{deck_name}"\n'
        msg += f"Generated {len(recommendations)} prioritized recommendations\n\n"

        idx = 1
        for priority in (Priority.HIGH, Priority.MEDIUM, Priority.LOW):
            tier = [r for r in recommendations if r.priority == priority]
            if not tier:
                continue
            msg += f"=== {priority.value.upper()} PRIORITY ===\n\n"
            for rec in tier:
                msg += self._format_recommendation(idx, rec)
                idx += 1

        return msg.strip()

    def _format_recommendation(self, idx: int, rec: Recommendation) -> str:
        """Format a single recommendation."""
        action = rec.type.value.title()
        if rec.card:
            target = f"{rec.quantity}x {rec.card}" if rec.quantity else rec.card
            msg = f"{idx}. {action}: {target}\n"
        else:
            msg = f"{idx}. {action}: {rec.reason}\n"
        msg += f"   Reason: {rec.reason}\n"
        msg += f"   Impact: {rec.impact}\n"

        if rec.suggestion:
            msg += f"   {rec.suggestion}\n"
        if rec.alternatives:
            msg += f"   Alternatives: {', '.join(rec.alternatives)}\n"

        msg += "\n"
        return msg
