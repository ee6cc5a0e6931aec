"""CityWalk - walk discovery backend around a cached nearby-places search."""

__version__ = "1.0.0"
