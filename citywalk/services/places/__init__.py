# Places service package
from .geo_query_cache import GeoQueryCache, normalize_place

__all__ = ["GeoQueryCache", "normalize_place"]
