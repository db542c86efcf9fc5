"""Tests for the Pokemon TCG API client."""

from datetime import date

import httpx
import pytest

from deck_analysis_mcp.client import (
    CardNotFoundError,
    CatalogAPIError,
    CatalogClient,
    CatalogConnectionError,
    card_from_api,
)
from deck_analysis_mcp.models import GameFormat, Supertype

from factories import BASE_URL, COMFEY, QUICK_BALL


def _client(handler, api_key=None) -> CatalogClient:
    return CatalogClient(BASE_URL, api_key=api_key, timeout=5, transport=httpx.MockTransport(handler))


class TestCardMapping:
    """Tests for card_from_api."""

    def test_pokemon(self):
        card = card_from_api(COMFEY)
        assert card.supertype == Supertype.POKEMON
        assert card.hp == 70
        assert card.abilities[0].name == "Flower Selecting"
        assert card.attacks[0].damage_value == 30
        assert card.weaknesses[0].type == "Metal"
        assert card.converted_retreat_cost == 1
        assert card.rarity == "RARE_HOLO"
        assert card.set_release_date == date(2022, 9, 9)

    def test_legalities(self):
        card = card_from_api(QUICK_BALL)
        assert card.is_legal_in(GameFormat.EXPANDED)
        assert not card.is_legal_in(GameFormat.STANDARD)
        assert card.rarity == "UNCOMMON"

    def test_missing_optional_fields(self):
        card = card_from_api(
            {
                "id": "sve-1",
                "name": "Basic Grass Energy",
                "supertype": "Energy",
                "hp": "",
                "set": {"releaseDate": "bad"},
            }
        )
        assert card.hp is None
        assert card.set_release_date is None
        assert card.is_basic_energy


class TestCatalogClient:
    """Tests for CatalogClient requests."""

    @pytest.mark.asyncio
    async def test_get_card(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": COMFEY})

        card = await _client(handler, api_key="secret").get_card("swsh11-79")

        assert card.name == "Comfey"
        assert seen[0].url.path == "/v2/cards/swsh11-79"
        assert seen[0].headers["X-Api-Key"] == "secret"

    @pytest.mark.asyncio
    async def test_no_api_key_header_without_key(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": COMFEY})

        await CatalogClient(BASE_URL, api_key="", transport=httpx.MockTransport(handler)).get_card("swsh11-79")
        assert "X-Api-Key" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_get_card_not_found(self):
        client = _client(lambda request: httpx.Response(404, json={"error": {"message": "Not found"}}))

        with pytest.raises(CardNotFoundError) as exc_info:
            await client.get_card("nope-1")
        assert exc_info.value.card_ids == ["nope-1"]

    @pytest.mark.asyncio
    async def test_server_error(self):
        client = _client(lambda request: httpx.Response(500))

        with pytest.raises(CatalogAPIError) as exc_info:
            await client.get_card("swsh11-79")
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(CatalogConnectionError):
            await _client(handler).get_card("swsh11-79")

    @pytest.mark.asyncio
    async def test_get_cards_single_query(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": [COMFEY, QUICK_BALL]})

        cards = await _client(handler).get_cards(["swsh11-79", "swsh1-179", "swsh11-79"])

        assert set(cards) == {"swsh11-79", "swsh1-179"}
        assert len(seen) == 1
        assert seen[0].url.params["q"] == "id:swsh11-79 OR id:swsh1-179"
        assert seen[0].url.params["pageSize"] == "250"

    @pytest.mark.asyncio
    async def test_get_cards_reports_missing(self):
        client = _client(lambda request: httpx.Response(200, json={"data": [COMFEY]}))

        with pytest.raises(CardNotFoundError) as exc_info:
            await client.get_cards(["swsh11-79", "fake-1", "fake-2"])
        assert exc_info.value.card_ids == ["fake-1", "fake-2"]
        assert str(exc_info.value) == "Card(s) not found in catalog: fake-1, fake-2"

    @pytest.mark.asyncio
    async def test_get_cards_empty(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        assert await _client(handler).get_cards([]) == {}

    @pytest.mark.asyncio
    async def test_search_cards_clamps_page_size(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": [QUICK_BALL]})

        found = await _client(handler).search_cards('name:"Quick Ball"', page_size=1000)

        assert [c.id for c in found] == ["swsh1-179"]
        assert seen[0].url.params["q"] == 'name:"Quick Ball"'
        assert seen[0].url.params["pageSize"] == "250"
