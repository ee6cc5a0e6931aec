import logging
from typing import AbstractSet, Dict, Optional

import httpx

from citywalk.config import settings
from citywalk.config.place_types import is_valid_provider_type
from citywalk.models.place import Coordinate
from citywalk.services.errors import ProviderQueryFailed, ProviderUnavailable
from citywalk.services.map.api_counter import APICounter
from citywalk.services.map.map_service import (
    NearbySearchResponse,
    PlacesProvider,
    SearchStatus,
)

logger = logging.getLogger(__name__)

SEARCH_FIELD_MASK = (
    "places.id,places.displayName,places.location,places.rating,places.types,"
    "places.priceLevel,places.shortFormattedAddress,places.photos"
)
DETAILS_FIELD_MASK = (
    "id,displayName,formattedAddress,rating,types,photos,priceLevel,regularOpeningHours"
)

HTTP_STATUS_TO_SEARCH_STATUS = {
    429: SearchStatus.OVER_QUERY_LIMIT,
    403: SearchStatus.REQUEST_DENIED,
    400: SearchStatus.INVALID_REQUEST,
}


class GoogleMapService(PlacesProvider):
    """Google Places API (New) v1 implementation"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        api_counter: Optional[APICounter] = None,
        max_result_count: int = 20,
    ):
        self.api_key = settings.google_maps_api_key if api_key is None else api_key
        self.nearby_search_url = settings.places_search_url
        self.place_details_url = settings.place_details_url
        self.timeout = settings.provider_timeout_s
        self.max_result_count = max_result_count
        self.api_counter = api_counter or APICounter(settings.max_api_calls_per_day)
        self._client = client
        self._owns_client = client is None
        self._ready = False

    async def initialize(self) -> None:
        if not self.api_key:
            raise ProviderUnavailable("Google Maps API Key is required")

        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        self._ready = True

    def _headers(self, field_mask: str) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.api_key,
            "X-Goog-FieldMask": field_mask,
        }

    def _require_client(self) -> httpx.AsyncClient:
        if not self._ready or self._client is None:
            raise ProviderUnavailable("Places service is not initialized")
        return self._client

    async def search_nearby(
        self,
        center: Coordinate,
        radius_m: float,
        included_types: Optional[AbstractSet[str]] = None,
    ) -> NearbySearchResponse:
        """Search nearby places using Google Places API (New) v1"""
        client = self._require_client()

        # Check API call limit
        if not self.api_counter.can_make_call():
            logger.warning(
                "API call limit exceeded. Max calls per day: %s",
                self.api_counter.max_calls_per_day,
            )
            return NearbySearchResponse(status=SearchStatus.OVER_QUERY_LIMIT)

        body = {
            "maxResultCount": self.max_result_count,
            "locationRestriction": {
                "circle": {
                    "center": {
                        "latitude": center.latitude,
                        "longitude": center.longitude,
                    },
                    "radius": radius_m,
                }
            },
        }

        # Add type filtering if types are specified
        types = sorted(t for t in (included_types or ()) if is_valid_provider_type(t))
        if types:
            body["includedTypes"] = types

        try:
            response = await client.post(
                self.nearby_search_url,
                headers=self._headers(SEARCH_FIELD_MASK),
                json=body,
                timeout=self.timeout,
            )
            self.api_counter.record_call()
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = HTTP_STATUS_TO_SEARCH_STATUS.get(
                e.response.status_code, SearchStatus.UNKNOWN_ERROR
            )
            logger.warning(
                "Places API error: %s%s", e.response.status_code, _error_detail(e.response)
            )
            return NearbySearchResponse(status=status)
        except httpx.HTTPError as e:
            logger.warning("Failed to fetch places: %s", e)
            return NearbySearchResponse(status=SearchStatus.UNKNOWN_ERROR)

        places = response.json().get("places", [])
        if not places:
            return NearbySearchResponse(status=SearchStatus.ZERO_RESULTS)
        return NearbySearchResponse(status=SearchStatus.OK, places=places)

    async def get_place_details(self, place_id: str) -> Dict:
        client = self._require_client()

        if not self.api_counter.can_make_call():
            raise ProviderQueryFailed(SearchStatus.OVER_QUERY_LIMIT.value)

        try:
            response = await client.get(
                f"{self.place_details_url}/{place_id}",
                headers=self._headers(DETAILS_FIELD_MASK),
                timeout=self.timeout,
            )
            self.api_counter.record_call()
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = HTTP_STATUS_TO_SEARCH_STATUS.get(
                e.response.status_code, SearchStatus.UNKNOWN_ERROR
            )
            raise ProviderQueryFailed(status.value, _error_detail(e.response).lstrip(" -")) from e
        except httpx.HTTPError as e:
            raise ProviderQueryFailed(SearchStatus.UNKNOWN_ERROR.value, str(e)) from e

        return response.json()

    async def close(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
        self._ready = False


def _error_detail(response: httpx.Response) -> str:
    try:
        message = response.json().get("error", {}).get("message", "")
    except ValueError:
        return ""
    return f" - {message}" if message else ""
