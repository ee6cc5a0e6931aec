from .place import CacheEntry, CacheState, Coordinate, PlaceRecord, QueryState

__all__ = ["CacheEntry", "CacheState", "Coordinate", "PlaceRecord", "QueryState"]
