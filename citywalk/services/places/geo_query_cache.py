"""
Geo query cache for nearby places

Every provider search is made at a fixed wide radius around the caller's
position; narrower views are then served from the cached results by distance
and type filtering. A new search is only issued on the first call, after the
caller moved far enough, or once the minimum query interval has elapsed.
"""
import asyncio
import logging
import time
from typing import (
    AbstractSet,
    Callable,
    Dict,
    FrozenSet,
    Iterable,
    List,
    Optional,
    Tuple,
)

from citywalk.config import settings
from citywalk.config.place_types import price_levels_for_interests, to_provider_types
from citywalk.models.place import (
    CacheEntry,
    CacheState,
    Coordinate,
    PlaceRecord,
    QueryState,
)
from citywalk.services.errors import ProviderUnavailable
from citywalk.services.map.distance import distance
from citywalk.services.map.map_service import (
    NearbySearchResponse,
    PlacesProvider,
    SearchStatus,
)

logger = logging.getLogger(__name__)

PRICE_LEVELS = {
    "PRICE_LEVEL_FREE": 0,
    "PRICE_LEVEL_INEXPENSIVE": 1,
    "PRICE_LEVEL_MODERATE": 2,
    "PRICE_LEVEL_EXPENSIVE": 3,
    "PRICE_LEVEL_VERY_EXPENSIVE": 4,
}


def _normalize_price_level(value) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, int):
        return value
    return PRICE_LEVELS.get(value)


def normalize_place(raw: Dict, origin: Coordinate) -> PlaceRecord:
    """Convert a raw Places API (New) v1 place into a PlaceRecord"""
    name = raw.get("displayName", {}).get("text", "Unknown Place")

    location = raw.get("location", {})
    coordinate = Coordinate(
        latitude=location.get("latitude", 0.0),
        longitude=location.get("longitude", 0.0),
    )

    photo_references = [
        photo.get("name", "").split("/")[-1]  # Extract photo ID from name
        for photo in raw.get("photos", [])
        if photo.get("name")
    ]

    return PlaceRecord(
        id=raw.get("id") or f"google_{hash(name)}",
        name=name,
        categories=frozenset(raw.get("types", [])),
        rating=raw.get("rating") or 0.0,
        location=coordinate,
        distance_from_query_origin=distance(origin, coordinate),
        price_level=_normalize_price_level(raw.get("priceLevel")),
        vicinity=raw.get("shortFormattedAddress", ""),
        photo_references=photo_references,
    )


class GeoQueryCache:
    """Caching and throttling layer in front of a places provider.

    One instance per application session. Calls to get_places are
    serialized, so at most one provider search is in flight.

    Example:
        ```python
        cache = GeoQueryCache.create()
        places = await cache.get_places(position, 300, {"park", "cafe"})
        ```
    """

    def __init__(
        self,
        provider: PlacesProvider,
        cache_ttl_s: Optional[float] = None,
        min_query_interval_s: Optional[float] = None,
        min_movement_threshold_m: Optional[float] = None,
        wide_search_radius_m: Optional[float] = None,
        cache_max_entries: Optional[int] = None,
        cache_key_precision: Optional[int] = None,
        provider_init_timeout_s: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            provider: Places search backend.
            cache_ttl_s: How long a cached search stays usable. Defaults to settings.
            min_query_interval_s: Minimum time between searches without movement.
            min_movement_threshold_m: Displacement that forces a new search.
            wide_search_radius_m: Radius used for every provider search.
            cache_max_entries: Upper bound on cached searches.
            cache_key_precision: Decimal places kept from coordinates in cache keys.
            provider_init_timeout_s: How long to wait for the provider to initialize.
            clock: Monotonic time source in seconds.
        """
        self.provider = provider
        self.cache_ttl_s = _or_default(cache_ttl_s, settings.cache_ttl_s)
        self.min_query_interval_s = _or_default(
            min_query_interval_s, settings.min_query_interval_s
        )
        self.min_movement_threshold_m = _or_default(
            min_movement_threshold_m, settings.min_movement_threshold_m
        )
        self.wide_search_radius_m = _or_default(
            wide_search_radius_m, settings.wide_search_radius_m
        )
        self.cache_max_entries = _or_default(cache_max_entries, settings.cache_max_entries)
        self.cache_key_precision = _or_default(
            cache_key_precision, settings.cache_key_precision
        )
        self.provider_init_timeout_s = _or_default(
            provider_init_timeout_s, settings.provider_init_timeout_s
        )
        self._clock = clock
        self._validate()

        self._cache: Dict[str, CacheEntry] = {}
        self._query_state = QueryState()
        self._provider_ready = False
        self._provider_calls = 0
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    def _validate(self) -> None:
        """Reject settings that would make the cache unusable."""
        if self.cache_max_entries < 1:
            raise ValueError("cache_max_entries must be at least 1")
        if self.cache_key_precision < 0:
            raise ValueError("cache_key_precision must not be negative")
        for name in (
            "cache_ttl_s",
            "wide_search_radius_m",
            "provider_init_timeout_s",
        ):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ("min_query_interval_s", "min_movement_threshold_m"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative, got {getattr(self, name)}")

    @classmethod
    def create(cls, provider: Optional[PlacesProvider] = None, **overrides) -> "GeoQueryCache":
        """Build an engine backed by Google Places unless another provider is given"""
        if provider is None:
            from citywalk.services.map.google_map_service import GoogleMapService

            provider = GoogleMapService()
        return cls(provider=provider, **overrides)

    @property
    def query_state(self) -> QueryState:
        return QueryState(
            last_query_time=self._query_state.last_query_time,
            last_query_location=self._query_state.last_query_location,
        )

    @staticmethod
    def cache_key(
        center: Coordinate,
        radius_m: float,
        provider_types: Iterable[str],
        precision: int = 3,
    ) -> str:
        return (
            f"{center.latitude:.{precision}f},{center.longitude:.{precision}f},"
            f"{radius_m:g},{','.join(sorted(provider_types))}"
        )

    def is_entry_valid(self, entry: CacheEntry, now: Optional[float] = None) -> bool:
        now = self._clock() if now is None else now
        return now - entry.fetched_at < self.cache_ttl_s

    def should_query(self, position: Coordinate) -> Tuple[bool, str]:
        """Decide whether a new provider search is warranted, and why"""
        last_location = self._query_state.last_query_location
        if last_location is None:
            return True, "first_search"

        moved = distance(position, last_location)
        if moved >= self.min_movement_threshold_m:
            return True, "moved"

        elapsed = self._clock() - self._query_state.last_query_time
        if elapsed > self.min_query_interval_s:
            return True, "interval_elapsed"

        return False, "throttled"

    def state(self, position: Optional[Coordinate] = None) -> CacheState:
        last_location = self._query_state.last_query_location
        if last_location is None:
            return CacheState.COLD

        now = self._clock()
        if not any(self.is_entry_valid(entry, now) for entry in self._cache.values()):
            return CacheState.STALE
        if self.should_query(position or last_location)[0]:
            return CacheState.STALE
        return CacheState.WARM

    async def get_places(
        self,
        position: Coordinate,
        view_radius: float,
        interests: Optional[Iterable[str]] = None,
    ) -> List[PlaceRecord]:
        """Places within view_radius of position matching the interests, nearest first.

        Raises:
            ProviderUnavailable: the places provider could not be initialized.
        """
        interests = frozenset(interests or ())

        async with self._get_lock():
            await self._ensure_provider()

            provider_types = to_provider_types(interests)
            refresh, reason = self.should_query(position)
            if refresh:
                logger.debug("Querying places provider (%s)", reason)
                await self._refresh(position, provider_types)
            else:
                logger.debug("Query throttled - serving from cache")

            return self._filter_cached(
                position,
                view_radius,
                provider_types,
                price_levels_for_interests(interests),
            )

    async def get_place_details(self, place_id: str) -> Dict:
        """Details for one place, straight from the provider.

        Raises:
            ProviderUnavailable: the places provider could not be initialized.
            ProviderQueryFailed: the provider returned a non-success status.
        """
        async with self._get_lock():
            await self._ensure_provider()
        return await self.provider.get_place_details(place_id)

    def clear(self) -> None:
        """Drop all cached searches and forget the last query"""
        self._cache.clear()
        self._query_state = QueryState()

    def stats(self) -> Dict:
        last_location = self._query_state.last_query_location
        return {
            "entries": len(self._cache),
            "records": sum(len(entry.records) for entry in self._cache.values()),
            "provider_calls": self._provider_calls,
            "last_query_time": self._query_state.last_query_time,
            "last_query_location": last_location.model_dump() if last_location else None,
            "state": self.state().value,
        }

    def _get_lock(self) -> asyncio.Lock:
        # Bound to the running loop; a new loop gets a fresh lock
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def _ensure_provider(self) -> None:
        if self._provider_ready:
            return

        try:
            await asyncio.wait_for(
                self.provider.initialize(), timeout=self.provider_init_timeout_s
            )
        except asyncio.TimeoutError as e:
            raise ProviderUnavailable(
                f"Places service failed to load within {self.provider_init_timeout_s}s"
            ) from e
        except ProviderUnavailable:
            raise
        except Exception as e:
            raise ProviderUnavailable(f"Places service failed to load: {e}") from e

        self._provider_ready = True

    async def _refresh(self, position: Coordinate, provider_types: FrozenSet[str]) -> None:
        key = self.cache_key(
            position, self.wide_search_radius_m, provider_types, self.cache_key_precision
        )

        # Recorded before the search so a failing provider is throttled too
        self._query_state.last_query_time = self._clock()
        self._query_state.last_query_location = position
        self._provider_calls += 1

        try:
            response = await self.provider.search_nearby(
                position, self.wide_search_radius_m, provider_types or None
            )
        except Exception as e:
            logger.warning("Error searching nearby places: %s", e)
            response = NearbySearchResponse(status=SearchStatus.UNKNOWN_ERROR)

        records: List[PlaceRecord] = []
        if response.ok:
            records = [normalize_place(raw, position) for raw in response.places]
        elif response.status != SearchStatus.ZERO_RESULTS:
            logger.warning("Places API error: %s", response.status.value)

        fetched_at = self._clock()
        self._cache[key] = CacheEntry(key=key, records=records, fetched_at=fetched_at)
        self._evict(fetched_at)
        logger.info("Found %d places", len(records))

    def _evict(self, now: float) -> None:
        for key in [k for k, entry in self._cache.items() if not self.is_entry_valid(entry, now)]:
            del self._cache[key]

        while len(self._cache) > self.cache_max_entries:
            oldest = min(self._cache.values(), key=lambda entry: entry.fetched_at)
            del self._cache[oldest.key]

    def _filter_cached(
        self,
        position: Coordinate,
        view_radius: float,
        provider_types: AbstractSet[str],
        price_levels: Optional[AbstractSet[int]],
    ) -> List[PlaceRecord]:
        now = self._clock()
        entries = sorted(
            (entry for entry in self._cache.values() if self.is_entry_valid(entry, now)),
            key=lambda entry: entry.fetched_at,
            reverse=True,
        )

        # Newest entry wins for places present in several searches
        seen = set()
        results: List[PlaceRecord] = []
        for entry in entries:
            for record in entry.records:
                if record.id in seen:
                    continue
                seen.add(record.id)

                if provider_types and not (record.categories & provider_types):
                    continue
                if price_levels is not None and record.price_level not in price_levels:
                    continue

                meters = distance(position, record.location)
                if meters > view_radius:
                    continue
                results.append(
                    record.model_copy(update={"distance_from_query_origin": meters})
                )

        results.sort(key=lambda record: record.distance_from_query_origin)
        return results


def _or_default(value, default):
    return default if value is None else value
