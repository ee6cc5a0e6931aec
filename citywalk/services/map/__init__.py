# Map service package
from .geolocation import (
    DEFAULT_POSITION_OPTIONS,
    GeolocationProvider,
    PositionOptions,
    get_current_position,
    is_geolocation_supported,
    watch_position,
)
from .google_map_service import GoogleMapService
from .map_service import NearbySearchResponse, PlacesProvider, SearchStatus

__all__ = [
    "DEFAULT_POSITION_OPTIONS",
    "GeolocationProvider",
    "GoogleMapService",
    "NearbySearchResponse",
    "PlacesProvider",
    "PositionOptions",
    "SearchStatus",
    "get_current_position",
    "is_geolocation_supported",
    "watch_position",
]
