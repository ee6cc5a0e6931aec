from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import AbstractSet, Dict, List, Optional

from citywalk.models.place import Coordinate


class SearchStatus(str, Enum):
    """Status of a nearby search, mirroring the Places service statuses"""

    OK = "OK"
    ZERO_RESULTS = "ZERO_RESULTS"
    OVER_QUERY_LIMIT = "OVER_QUERY_LIMIT"
    REQUEST_DENIED = "REQUEST_DENIED"
    INVALID_REQUEST = "INVALID_REQUEST"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


@dataclass
class NearbySearchResponse:
    status: SearchStatus
    places: List[Dict] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == SearchStatus.OK


class PlacesProvider(ABC):
    """Places search service abstract interface"""

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the service; raises ProviderUnavailable if it cannot be used"""
        pass

    @abstractmethod
    async def search_nearby(
        self,
        center: Coordinate,
        radius_m: float,
        included_types: Optional[AbstractSet[str]] = None,
    ) -> NearbySearchResponse:
        """Search for nearby places, optionally restricted to the given types

        Raw places are returned in the provider's own format:
        {"id", "displayName": {"text"}, "location": {"latitude", "longitude"},
         "types", "rating", "priceLevel", "shortFormattedAddress", "photos"}
        """
        pass

    @abstractmethod
    async def get_place_details(self, place_id: str) -> Dict:
        """Get details for a single place; raises ProviderQueryFailed on error"""
        pass

    async def close(self) -> None:
        pass
