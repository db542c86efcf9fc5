"""Deck list payloads accepted by the MCP tools and their resolution to Decks."""

from pydantic import BaseModel, Field, ValidationError

from .client import CatalogClient
from .models import Deck, DeckEntry


class DeckInputError(Exception):
    """Raised when a deck list payload is malformed."""


class DeckCardInput(BaseModel):
    """One line of a deck list as sent by a caller."""

    card_id: str = Field(min_length=1, description="Pokemon TCG API card id, e.g. 'swsh12-139'")
    quantity: int = Field(ge=1, description="Number of copies")


def parse_deck_list(cards: list[dict]) -> list[DeckCardInput]:
    """Validate raw deck list lines.

    Args:
        cards: List of {"card_id": str, "quantity": int} mappings

    Returns:
        Parsed deck list lines

    Raises:
        DeckInputError: Payload is empty or a line is malformed
    """
    if not cards:
        raise DeckInputError("Deck list is empty")

    parsed = []
    for idx, line in enumerate(cards, 1):
        try:
            parsed.append(DeckCardInput.model_validate(line))
        except ValidationError as e:
            raise DeckInputError(f"Invalid deck list line {idx}: {e.errors()[0]['msg']}") from e
    return parsed


async def resolve_deck(
    client: CatalogClient,
    cards: list[dict],
    deck_id: str | None = None,
    name: str | None = None,
) -> Deck:
    """Resolve a deck list against the card catalog.

    Lines naming the same card id are merged.

    Args:
        client: Catalog client
        cards: Raw deck list lines
        deck_id: Optional deck id (enables result caching)
        name: Optional deck name

    Returns:
        Deck with resolved cards, in first-seen order

    Raises:
        DeckInputError: Malformed payload
        CardNotFoundError: A card id could not be resolved
    """
    lines = parse_deck_list(cards)

    quantities: dict[str, int] = {}
    for line in lines:
        quantities[line.card_id] = quantities.get(line.card_id, 0) + line.quantity

    resolved = await client.get_cards(list(quantities))
    return Deck(
        id=deck_id,
        name=name,
        entries=[DeckEntry(card=resolved[card_id], quantity=qty) for card_id, qty in quantities.items()],
    )
