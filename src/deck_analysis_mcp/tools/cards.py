"""MCP tools for looking up cards in the Pokemon TCG API."""

from mcp.types import CallToolResult, TextContent

from ..client import CardNotFoundError, CatalogAPIError, CatalogConnectionError, get_catalog_client
from ..formatting import format_card
from ..server import app


@app.tool()
async def lookup_card(card_id: str) -> CallToolResult:
    """Look up a single card by id.

    Args:
        card_id: Pokemon TCG API card id, e.g. 'swsh12-139'

    Returns:
        Card details (type, HP, abilities, attacks, legality)
    """
    try:
        card = await get_catalog_client().get_card(card_id)
        return CallToolResult(content=[TextContent(type="text", text=format_card(card))])

    except CardNotFoundError as e:
        return CallToolResult(
            isError=True,
            content=[
                TextContent(type="text", text=f"{e}\n\nUse search_cards to find valid card ids.")
            ],
        )
    except CatalogConnectionError as e:
        return CallToolResult(
            isError=True,
            content=[
                TextContent(type="text", text=f"Failed to reach the Pokemon TCG API.\n\nError: {str(e)}")
            ],
        )
    except Exception as e:
        return CallToolResult(
            isError=True,
            content=[TextContent(type="text", text=f"Unexpected error: {str(e)}")],
        )


@app.tool()
async def search_cards(query: str, limit: int = 20) -> CallToolResult:
    """Search cards using Pokemon TCG API query syntax.

    Args:
        query: Search query (e.g., 'name:"Lugia VSTAR"', 'types:Lightning subtypes:V',
               'supertype:Trainer name:Iono')
        limit: Maximum results to return (default: 20, max: 250)

    Returns:
        Matching cards with their ids

    Examples:
        >>> search_cards('name:"Comfey"')
        >>> search_cards("subtypes:Supporter legalities.standard:Legal", limit=50)
    """
    try:
        found = await get_catalog_client().search_cards(query, page_size=limit)

        if not found:
            return CallToolResult(
                content=[TextContent(type="text", text=f"No cards found matching: {query}")]
            )

        msg = f"Found {len(found)} card(s) matching: {query}\n\n"
        for card in found:
            subtypes = f" [{', '.join(card.subtypes)}]" if card.subtypes else ""
            msg += f"- {card.id}: {card.name} ({card.supertype.value}{subtypes})\n"

        return CallToolResult(content=[TextContent(type="text", text=msg)])

    except CatalogConnectionError as e:
        return CallToolResult(
            isError=True,
            content=[
                TextContent(type="text", text=f"Failed to reach the Pokemon TCG API.\n\nError: {str(e)}")
            ],
        )
    except CatalogAPIError as e:
        return CallToolResult(
            isError=True,
            content=[TextContent(type="text", text=f"Invalid search query: {str(e)}")],
        )
    except Exception as e:
        return CallToolResult(
            isError=True,
            content=[TextContent(type="text", text=f"Unexpected error: {str(e)}")],
        )
