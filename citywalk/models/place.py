"""
Place and cache models used by the geo query cache
"""
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Coordinate(BaseModel):
    """Immutable latitude/longitude pair"""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class PlaceRecord(BaseModel):
    """Normalized nearby search result"""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    categories: FrozenSet[str] = frozenset()
    rating: float = 0.0
    location: Coordinate
    distance_from_query_origin: float = 0.0  # meters
    price_level: Optional[int] = None
    vicinity: str = ""
    photo_references: List[str] = []


@dataclass
class CacheEntry:
    """One provider response, keyed by rounded center, radius and types"""

    key: str
    records: List[PlaceRecord]
    fetched_at: float


@dataclass
class QueryState:
    last_query_time: Optional[float] = None
    last_query_location: Optional[Coordinate] = None


class CacheState(str, Enum):
    COLD = "cold"
    WARM = "warm"
    STALE = "stale"
