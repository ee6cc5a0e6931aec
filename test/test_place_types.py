"""Unit tests for interest tag and place type mapping."""

from pathlib import Path
import sys

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from citywalk.config.place_types import (
    AVAILABLE_PLACE_TYPES,
    COMMON_GOOGLE_TYPES,
    FILTER_ONLY_TAGS,
    INTEREST_TYPE_MAPPING,
    RESPONSE_ONLY_GOOGLE_TYPES,
    display_label,
    is_filter_only_tag,
    is_valid_provider_type,
    price_levels_for_interests,
    to_provider_types,
)


def test_to_provider_types_unions_and_dedupes():
    assert to_provider_types({"park", "nature"}) == frozenset(
        {"park", "national_park", "hiking_area"}
    )
    assert to_provider_types(["cafe", "cafe"]) == frozenset({"cafe", "coffee_shop"})


def test_unknown_and_filter_only_tags_map_to_nothing():
    assert to_provider_types(set()) == frozenset()
    assert to_provider_types({"not_a_tag"}) == frozenset()
    assert to_provider_types(FILTER_ONLY_TAGS) == frozenset()
    assert is_filter_only_tag("family_friendly")
    assert not is_filter_only_tag("park")


def test_filter_only_tags_are_skipped_alongside_search_tags():
    assert to_provider_types({"budget", "cafe", "family_friendly"}) == frozenset(
        {"cafe", "coffee_shop"}
    )


def test_all_mapped_types_are_known_google_types():
    mapped = {t for types in INTEREST_TYPE_MAPPING.values() for t in types}
    assert mapped <= COMMON_GOOGLE_TYPES


@pytest.mark.parametrize("interest", sorted(INTEREST_TYPE_MAPPING))
def test_mapped_types_are_accepted_as_search_filters(interest):
    for place_type in INTEREST_TYPE_MAPPING[interest]:
        assert is_valid_provider_type(place_type)
        assert place_type not in RESPONSE_ONLY_GOOGLE_TYPES
    assert to_provider_types({interest}).isdisjoint(RESPONSE_ONLY_GOOGLE_TYPES)


@pytest.mark.parametrize("place_type", ["natural_feature", "food", "point_of_interest"])
def test_response_only_types_are_not_searchable(place_type):
    assert not is_valid_provider_type(place_type)


def test_display_labels_still_cover_response_only_types():
    assert display_label(["food", "restaurant"]) == "Food"
    assert display_label(["natural_feature"]) == "Natural Feature"


def test_available_place_types_are_searchable():
    for option in AVAILABLE_PLACE_TYPES:
        assert to_provider_types({option["value"]})
        assert display_label([option["value"]]) == option["label"]


@pytest.mark.parametrize(
    "types, expected",
    [
        (["lodging", "point_of_interest"], "Hotel"),
        (["atm"], "ATM"),
        (["tourist_attraction", "park"], "Tourist Attraction"),
        (["night_market"], "Night Market"),
        (["point_of_interest"], "Point Of Interest"),
        (["bubbleTea_shop"], "BubbleTea Shop"),
        ([], "Unknown"),
    ],
)
def test_display_label(types, expected):
    assert display_label(types) == expected


def test_price_levels_for_interests():
    assert price_levels_for_interests({"park"}) is None
    assert price_levels_for_interests({"budget"}) == frozenset({0, 1})
    assert price_levels_for_interests({"moderate", "upscale", "park"}) == frozenset({2, 3, 4})


if __name__ == "__main__":
    pytest.main([__file__])
