"""Shared pytest fixtures."""

import pytest

from deck_analysis_mcp.models import Deck

from factories import aggro_deck


@pytest.fixture
def lightning_aggro() -> Deck:
    """Legal 60-card aggro deck without a deck id."""
    return aggro_deck()


@pytest.fixture
def empty_deck() -> Deck:
    return Deck(id="empty", name="Empty", entries=[])
