"""Pokemon TCG API client with singleton pattern."""

import logging
from datetime import date, datetime
from typing import Any

import httpx

from ..config import settings
from ..models import Ability, Attack, Card, Supertype, TypeModifier

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 250


class CatalogConnectionError(Exception):
    """Raised when unable to reach the card catalog."""


class CatalogAPIError(Exception):
    """Raised when the card catalog returns an error response."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class CardNotFoundError(Exception):
    """Raised when one or more card ids cannot be resolved."""

    def __init__(self, card_ids: list[str]):
        super().__init__(f"Card(s) not found in catalog: {', '.join(card_ids)}")
        self.card_ids = card_ids


def _parse_release_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return datetime.strptime(value.replace("-", "/"), "%Y/%m/%d").date()
    except ValueError:
        logger.warning("Unparseable set release date %r", value)
        return None


def _parse_hp(value: Any) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def card_from_api(data: dict[str, Any]) -> Card:
    """Map a Pokemon TCG API v2 card object to a Card.

    Args:
        data: Card object as returned under ``data`` by the API

    Returns:
        Card model
    """
    legalities = data.get("legalities") or {}
    card_set = data.get("set") or {}
    rarity = data.get("rarity")

    return Card(
        id=data["id"],
        name=data["name"],
        supertype=Supertype(data["supertype"]),
        subtypes=data.get("subtypes") or [],
        types=data.get("types") or [],
        hp=_parse_hp(data.get("hp")),
        rules=data.get("rules") or [],
        attacks=[
            Attack(
                name=a.get("name", ""),
                cost=a.get("cost") or [],
                damage=a.get("damage") or "",
                text=a.get("text") or "",
            )
            for a in data.get("attacks") or []
        ],
        abilities=[
            Ability(name=a.get("name", ""), text=a.get("text") or "", type=a.get("type") or "Ability")
            for a in data.get("abilities") or []
        ],
        weaknesses=[TypeModifier(**w) for w in data.get("weaknesses") or []],
        resistances=[TypeModifier(**r) for r in data.get("resistances") or []],
        retreat_cost=data.get("retreatCost") or [],
        converted_retreat_cost=data.get("convertedRetreatCost"),
        evolves_from=data.get("evolvesFrom"),
        evolves_to=data.get("evolvesTo") or [],
        # "Rare Holo" -> "RARE_HOLO"
        rarity=rarity.upper().replace(" ", "_") if rarity else None,
        set_release_date=_parse_release_date(card_set.get("releaseDate")),
        legal_standard=legalities.get("standard") == "Legal",
        legal_expanded=legalities.get("expanded") == "Legal",
    )


class CatalogClient:
    """Async HTTP client for the Pokemon TCG API."""

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize catalog client.

        Args:
            url: API base URL
            api_key: Optional API key for higher rate limits
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used to stub the API in tests)
        """
        self.url = (url or settings.pokemon_tcg_api_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.pokemon_tcg_api_key
        self.timeout = timeout or settings.request_timeout
        self.transport = transport

    async def request(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Issue a GET request against the API.

        Args:
            path: Path below the base URL, e.g. '/cards/swsh1-1'
            params: Query parameters

        Returns:
            Decoded JSON body

        Raises:
            CatalogConnectionError: Failed to reach the API
            CatalogAPIError: API returned a non-success status
        """
        headers = {"X-Api-Key": self.api_key} if self.api_key else {}

        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            try:
                response = await client.get(f"{self.url}{path}", params=params, headers=headers)
            except httpx.HTTPError as e:
                raise CatalogConnectionError(
                    f"Failed to connect to the card catalog at {self.url}. Error: {e}"
                ) from e

        if response.status_code >= 400:
            raise CatalogAPIError(
                f"Card catalog returned HTTP {response.status_code} for {path}",
                status_code=response.status_code,
            )
        return response.json()

    async def get_card(self, card_id: str) -> Card:
        """Fetch a single card.

        Args:
            card_id: Catalog card id

        Returns:
            Card model

        Raises:
            CardNotFoundError: No card with this id
            CatalogConnectionError: Connection failed
        """
        try:
            body = await self.request(f"/cards/{card_id}")
        except CatalogAPIError as e:
            if e.status_code == 404:
                raise CardNotFoundError([card_id]) from e
            raise
        return card_from_api(body["data"])

    async def get_cards(self, card_ids: list[str]) -> dict[str, Card]:
        """Resolve many card ids in one query.

        Args:
            card_ids: Catalog card ids (duplicates allowed)

        Returns:
            Cards keyed by id

        Raises:
            CardNotFoundError: Any id could not be resolved
            CatalogConnectionError: Connection failed
        """
        unique_ids = list(dict.fromkeys(card_ids))
        if not unique_ids:
            return {}

        query = " OR ".join(f"id:{card_id}" for card_id in unique_ids)
        body = await self.request("/cards", {"q": query, "pageSize": MAX_PAGE_SIZE})
        cards = {c.id: c for c in (card_from_api(item) for item in body.get("data", []))}

        missing = [card_id for card_id in unique_ids if card_id not in cards]
        if missing:
            raise CardNotFoundError(missing)

        logger.debug("Resolved %d cards from catalog", len(cards))
        return cards

    async def search_cards(self, query: str, page_size: int = 20) -> list[Card]:
        """Search cards with Pokemon TCG API query syntax.

        Args:
            query: Search query, e.g. 'name:"Comfey"' or 'types:Psychic subtypes:V'
            page_size: Maximum number of cards to return

        Returns:
            Matching cards

        Raises:
            CatalogConnectionError: Connection failed
            CatalogAPIError: Invalid query
        """
        body = await self.request(
            "/cards", {"q": query, "pageSize": max(1, min(page_size, MAX_PAGE_SIZE))}
        )
        return [card_from_api(item) for item in body.get("data", [])]


# Singleton instance
_client: CatalogClient | None = None


def get_catalog_client() -> CatalogClient:
    """Get or create the singleton catalog client.

    Returns:
        Singleton CatalogClient instance
    """
    global _client
    if _client is None:
        _client = CatalogClient(
            settings.pokemon_tcg_api_url, settings.pokemon_tcg_api_key, settings.request_timeout
        )
    return _client
