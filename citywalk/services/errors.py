"""
Error types raised by the places and geolocation services
"""


class CityWalkError(Exception):
    """Base error for the walk discovery services"""


class ProviderUnavailable(CityWalkError):
    """Places search service could not be initialized"""


class ProviderQueryFailed(CityWalkError):
    """A places request came back with a non-success status"""

    def __init__(self, status: str, message: str = ""):
        self.status = status
        super().__init__(f"Places API error: {status}{f' - {message}' if message else ''}")


class GeolocationError(CityWalkError):
    """Base error for position lookups"""


class GeolocationDenied(GeolocationError):
    pass


class GeolocationUnsupported(GeolocationError):
    pass


class GeolocationTimeout(GeolocationError):
    pass
