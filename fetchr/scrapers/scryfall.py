"""
Scryfall commander scraper.

Pages through Scryfall's card search for every paper card that is legal as
a commander and converts each card into a Commander record.

Search API: https://scryfall.com/docs/api/cards/search
"""

import logging
import re
from typing import Any

import httpx

from fetchr.config import settings
from fetchr.models.commander import Commander, FixedPartner, NoPartner, OpenPartner, PartnerKind

logger = logging.getLogger(__name__)

USER_AGENT = "Fetchr/1.0"

# "Partner with Pir, Imaginative Rascal (When this creature enters, ...)"
# The name runs until the reminder text, the end of the line, or a period.
_PARTNER_WITH_PATTERN = re.compile(r"Partner with ([^\n(.;]+)")


def parse_partner(oracle_text: str) -> PartnerKind:
    """
    Read the partner ability from oracle text.

    "Partner with X" gives FixedPartner(X); any other mention of partner
    gives OpenPartner.
    """
    if "partner" not in oracle_text.lower():
        return NoPartner()

    match = _PARTNER_WITH_PATTERN.search(oracle_text)
    if match:
        name = match.group(1).strip()
        if name:
            return FixedPartner(name)
    return OpenPartner()


def parse_commander_card(card: dict[str, Any]) -> Commander | None:
    """
    Convert one Scryfall card object to a Commander.

    Double-faced cards use the front face for name and oracle text; color
    identity and mana value always come from the card itself.

    Returns:
        Commander, or None if the card has no usable name
    """
    faces = card.get("card_faces")
    face: dict[str, Any] = faces[0] if isinstance(faces, list) and faces else card

    name = face.get("name") or card.get("name")
    if not isinstance(name, str) or not name.strip():
        logger.warning("Card name not found in Scryfall card %s", card.get("id"))
        return None

    oracle_text = face.get("oracle_text") or ""

    try:
        mana_value = int(card.get("cmc") or 0)
    except (TypeError, ValueError):
        mana_value = 0

    try:
        return Commander(
            name=name,
            color_identity=tuple(card.get("color_identity") or ()),
            mana_value=mana_value,
            partner=parse_partner(oracle_text),
        )
    except ValueError as e:
        logger.warning("Skipping card %r: %s", name, e)
        return None


def parse_search_page(payload: dict[str, Any]) -> tuple[list[Commander], str | None]:
    """
    Parse one page of search results.

    Returns:
        Tuple of (commanders, next page URL or None)
    """
    commanders: list[Commander] = []
    for card in payload.get("data") or []:
        commander = parse_commander_card(card)
        if commander is not None:
            commanders.append(commander)

    next_page = payload.get("next_page") if payload.get("has_more") else None
    return commanders, next_page


async def fetch_all_commanders(
    client: httpx.AsyncClient | None = None,
    url: str | None = None,
) -> list[Commander]:
    """
    Fetch every commander from Scryfall, following pagination.

    Args:
        client: Optional httpx client for connection reuse
        url: First search page. Defaults to the configured commander search

    Raises:
        httpx.HTTPError: If any page request fails
    """
    if client is None:
        async with httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            follow_redirects=True,
            timeout=30.0,
        ) as own_client:
            return await fetch_all_commanders(own_client, url)

    next_url: str | None = url or settings.scryfall_search_url
    commanders: list[Commander] = []
    page = 0

    while next_url:
        page += 1
        response = await client.get(next_url)
        response.raise_for_status()

        page_commanders, next_url = parse_search_page(response.json())
        commanders.extend(page_commanders)
        logger.info("Fetched page %d: %d commanders", page, len(page_commanders))

    return commanders
