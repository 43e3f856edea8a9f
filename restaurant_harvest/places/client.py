from __future__ import annotations

import logging
from typing import Sequence

from google.maps import places_v1

from .config import DETAIL_FIELDS, SEARCH_FIELDS
from .models import PlaceDetail, PlaceSummary

logger = logging.getLogger(__name__)


class PlacesDirectory:
    """Thin async wrapper over the Places (New) API."""

    def __init__(self, api_key: str, client: places_v1.PlacesAsyncClient | None = None) -> None:
        self.client = client or places_v1.PlacesAsyncClient(client_options={"api_key": api_key})

    async def search(self, query: str, location_bias: dict | None = None) -> list[PlaceSummary]:
        request = {"text_query": query}
        if location_bias:
            request["location_bias"] = location_bias

        response = await self.client.search_text(
            request=request,
            metadata=[("x-goog-fieldmask", SEARCH_FIELDS)],
        )
        places = [PlaceSummary.from_place(place) for place in response.places]
        logger.debug("Search %r returned %d places", query, len(places))
        return places

    async def get_detail(self, place_id: str, fields: Sequence[str] = DETAIL_FIELDS) -> PlaceDetail:
        response = await self.client.get_place(
            request={"name": f"places/{place_id}"},
            metadata=[("x-goog-fieldmask", ",".join(fields))],
        )
        return PlaceDetail.from_place(response)
