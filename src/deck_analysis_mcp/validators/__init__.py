"""Validation module for deck construction rules."""

from .deck_validator import DeckValidator, get_validator

__all__ = ["DeckValidator", "get_validator"]
