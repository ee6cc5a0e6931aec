"""
Place Types Configuration for walk discovery
Maps the interest tags offered in the app to Google Places types,
and Google Places types back to readable labels.
"""

from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence


# Google Places API (Table A) types the app can search for
COMMON_GOOGLE_TYPES = {
    # Nature & Recreation
    "park",
    "national_park",
    "tourist_attraction",
    "hiking_area",
    "zoo",
    "aquarium",
    "marina",
    # Food & Dining
    "restaurant",
    "cafe",
    "coffee_shop",
    "bakery",
    "fast_food_restaurant",
    "bar",
    # Shopping
    "shopping_mall",
    "store",
    "market",
    "convenience_store",
    "supermarket",
    "clothing_store",
    "electronics_store",
    "book_store",
    # Culture & Entertainment
    "museum",
    "art_gallery",
    "library",
    "movie_theater",
    "night_club",
    "church",
    # Sports & Fitness
    "gym",
    "fitness_center",
    "sports_complex",
    "swimming_pool",
    "spa",
    # Services
    "hospital",
    "pharmacy",
    "bank",
    "atm",
    "post_office",
    "gas_station",
    "beauty_salon",
    "hair_care",
    "school",
    # Accommodation
    "hotel",
    "lodging",
}

# Table B types: returned in responses but rejected as a search filter
RESPONSE_ONLY_GOOGLE_TYPES = {
    "establishment",
    "food",
    "geocode",
    "natural_feature",
    "point_of_interest",
    "political",
    "locality",
    "route",
    "street_address",
}

# Interest mapping: interest tags selected in the UI -> Google types
INTEREST_TYPE_MAPPING: Dict[str, List[str]] = {
    # Walk categories
    "park": ["park", "national_park"],
    "nature": ["hiking_area", "park"],
    "waterfront": ["marina", "tourist_attraction"],
    "food": ["restaurant", "cafe", "bakery", "fast_food_restaurant", "bar"],
    "shopping": ["shopping_mall", "store", "market", "supermarket"],
    "culture": ["museum", "art_gallery", "library"],
    "attraction": ["tourist_attraction", "zoo", "aquarium"],
    "nightlife": ["bar", "night_club"],
    "sports": ["gym", "fitness_center", "sports_complex"],
    "health": ["hospital", "pharmacy"],
    "accommodation": ["hotel", "lodging"],
    # Directly selectable place types
    "restaurant": ["restaurant"],
    "cafe": ["cafe", "coffee_shop"],
    "shopping_mall": ["shopping_mall"],
    "supermarket": ["supermarket"],
    "convenience_store": ["convenience_store"],
    "bakery": ["bakery"],
}

# Tags that narrow results after the search instead of being sent to the provider
PRICE_TIER_LEVELS: Dict[str, FrozenSet[int]] = {
    "budget": frozenset({0, 1}),
    "moderate": frozenset({2}),
    "upscale": frozenset({3, 4}),
}

FILTER_ONLY_TAGS = frozenset(
    {"wheelchair_accessible", "family_friendly", *PRICE_TIER_LEVELS}
)

# Readable labels for Google types
TYPE_LABELS: Dict[str, str] = {
    "restaurant": "Restaurant",
    "food": "Food",
    "store": "Store",
    "shopping_mall": "Shopping Mall",
    "supermarket": "Supermarket",
    "gas_station": "Gas Station",
    "bank": "Bank",
    "hospital": "Hospital",
    "pharmacy": "Pharmacy",
    "school": "School",
    "park": "Park",
    "tourist_attraction": "Tourist Attraction",
    "museum": "Museum",
    "church": "Church",
    "gym": "Gym",
    "cafe": "Cafe",
    "bar": "Bar",
    "lodging": "Hotel",
    "atm": "ATM",
    "post_office": "Post Office",
    "beauty_salon": "Beauty Salon",
    "hair_care": "Hair Care",
    "clothing_store": "Clothing Store",
    "electronics_store": "Electronics Store",
    "book_store": "Book Store",
    "library": "Library",
    "movie_theater": "Movie Theater",
    "night_club": "Night Club",
    "spa": "Spa",
    "zoo": "Zoo",
    "aquarium": "Aquarium",
}

UNKNOWN_LABEL = "Unknown"

# Place types offered for selection in the app
AVAILABLE_PLACE_TYPES = [
    {"value": "restaurant", "label": "Restaurant", "icon": "🍽️"},
    {"value": "cafe", "label": "Cafe", "icon": "☕"},
    {"value": "shopping_mall", "label": "Shopping Mall", "icon": "🛍️"},
    {"value": "supermarket", "label": "Supermarket", "icon": "🏪"},
    {"value": "convenience_store", "label": "Convenience Store", "icon": "🏬"},
    {"value": "bakery", "label": "Bakery", "icon": "🥖"},
]


def get_google_types_for_interest(interest: str) -> List[str]:
    """Get Google Places API types for a given interest tag."""
    return INTEREST_TYPE_MAPPING.get(interest, [])


def is_valid_provider_type(place_type: str) -> bool:
    """Check if a place type can be sent as a nearby search filter."""
    return place_type in COMMON_GOOGLE_TYPES and place_type not in RESPONSE_ONLY_GOOGLE_TYPES


def is_filter_only_tag(interest: str) -> bool:
    return interest in FILTER_ONLY_TAGS


def to_provider_types(interests: Iterable[str]) -> FrozenSet[str]:
    """
    Translate interest tags to the set of Google types to search for.

    Unknown and filter-only tags contribute nothing; the caller applies
    filter-only tags to the fetched records.
    """
    provider_types = set()
    for interest in interests:
        if is_filter_only_tag(interest):
            continue
        provider_types.update(
            t for t in get_google_types_for_interest(interest) if is_valid_provider_type(t)
        )
    return frozenset(provider_types)


def price_levels_for_interests(interests: Iterable[str]) -> Optional[FrozenSet[int]]:
    """Allowed price levels implied by price-tier tags, or None if no tier was picked."""
    allowed = set()
    tier_selected = False
    for interest in interests:
        levels = PRICE_TIER_LEVELS.get(interest)
        if levels is not None:
            tier_selected = True
            allowed.update(levels)
    return frozenset(allowed) if tier_selected else None


def display_label(provider_types: Sequence[str]) -> str:
    """Readable label for a place based on its first Google type."""
    if not provider_types:
        return UNKNOWN_LABEL

    first_type = provider_types[0]
    label = TYPE_LABELS.get(first_type)
    if label:
        return label
    words = first_type.replace("_", " ").split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)
