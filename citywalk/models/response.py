"""
Response models for the places API
"""
from typing import List, Optional
from pydantic import BaseModel

from citywalk.models.place import CacheState, Coordinate


class PlaceItem(BaseModel):
    """Place as shown in the discovery list"""
    id: str
    name: str
    label: str
    categories: List[str]
    rating: float
    location: Coordinate
    distance_m: float
    distance_text: str
    price_level: Optional[int] = None
    vicinity: str = ""


class NearbyPlacesResponse(BaseModel):
    success: bool = True
    places: List[PlaceItem] = []
    total_count: int = 0
    cache_state: CacheState = CacheState.COLD


class PlaceTypeOption(BaseModel):
    value: str
    label: str
    icon: str


class RouteSummaryResponse(BaseModel):
    distance_m: float
    distance_text: str
    duration_text: Optional[str] = None
