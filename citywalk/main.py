import logging
from contextlib import asynccontextmanager
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from citywalk.config import settings
from citywalk.config.place_types import AVAILABLE_PLACE_TYPES, display_label
from citywalk.core.logger import setup_logging
from citywalk.models.place import PlaceRecord
from citywalk.models.request import NearbyPlacesRequest, RouteSummaryRequest
from citywalk.models.response import (
    NearbyPlacesResponse,
    PlaceItem,
    PlaceTypeOption,
    RouteSummaryResponse,
)
from citywalk.services.errors import ProviderUnavailable
from citywalk.services.map.distance import format_distance, format_duration, route_length
from citywalk.services.places import GeoQueryCache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """One geo query cache per running app, closed on shutdown"""
    setup_logging()
    geo_query_cache = GeoQueryCache.create()
    app.state.geo_query_cache = geo_query_cache
    logger.info("Geo query cache initialized")

    yield

    await geo_query_cache.provider.close()
    del app.state.geo_query_cache
    logger.info("Geo query cache shut down")


def get_geo_query_cache(request: Request) -> GeoQueryCache:
    cache = getattr(request.app.state, "geo_query_cache", None)
    if cache is None:
        raise RuntimeError("GeoQueryCache not initialized. Check lifespan setup.")
    return cache


app = FastAPI(
    title="CityWalk API",
    description="Nearby places discovery for walks",
    version=settings.api_version,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _to_place_item(record: PlaceRecord) -> PlaceItem:
    categories = sorted(record.categories)
    return PlaceItem(
        id=record.id,
        name=record.name,
        label=display_label(categories),
        categories=categories,
        rating=record.rating,
        location=record.location,
        distance_m=round(record.distance_from_query_origin, 1),
        distance_text=format_distance(record.distance_from_query_origin),
        price_level=record.price_level,
        vicinity=record.vicinity,
    )


@app.post("/api/v1/places/nearby", response_model=NearbyPlacesResponse)
async def nearby_places(
    request: NearbyPlacesRequest,
    cache: GeoQueryCache = Depends(get_geo_query_cache),
):
    """Places around the user's position, nearest first"""
    try:
        places = await cache.get_places(
            request.position, request.view_radius_m, request.interests
        )
    except ProviderUnavailable as e:
        raise HTTPException(status_code=503, detail=f"Places service unavailable: {e}")

    return NearbyPlacesResponse(
        places=[_to_place_item(place) for place in places],
        total_count=len(places),
        cache_state=cache.state(request.position),
    )


@app.get("/api/v1/places/types", response_model=List[PlaceTypeOption])
async def place_types():
    """Place types offered for selection"""
    return AVAILABLE_PLACE_TYPES


@app.post("/api/v1/routes/summary", response_model=RouteSummaryResponse)
async def route_summary(request: RouteSummaryRequest):
    """Length of a walked route, with readable distance and duration"""
    meters = route_length(request.points)
    return RouteSummaryResponse(
        distance_m=round(meters, 1),
        distance_text=format_distance(meters),
        duration_text=(
            format_duration(request.duration_ms)
            if request.duration_ms is not None
            else None
        ),
    )


@app.get("/health")
async def health_check():
    """Health check"""
    return {"status": "healthy", "version": settings.api_version}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
