from typing import List, Optional
from pydantic import BaseModel, Field

from citywalk.models.place import Coordinate


class NearbyPlacesRequest(BaseModel):
    position: Coordinate
    view_radius_m: float = Field(default=150, gt=0)
    interests: List[str] = []


class RouteSummaryRequest(BaseModel):
    points: List[Coordinate] = []
    duration_ms: Optional[int] = Field(default=None, ge=0)
