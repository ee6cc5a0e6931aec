"""Unit tests for geolocation helpers."""

import asyncio
from pathlib import Path
import sys

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from citywalk.models.place import Coordinate
from citywalk.services.errors import (
    GeolocationDenied,
    GeolocationTimeout,
    GeolocationUnsupported,
)
from citywalk.services.map.geolocation import (
    GeolocationProvider,
    PositionOptions,
    get_current_position,
    is_geolocation_supported,
    watch_position,
)

HERE = Coordinate(latitude=1.2966, longitude=103.7764)


class _Provider(GeolocationProvider):
    def __init__(self, delay=0.0, error=None):
        self.delay = delay
        self.error = error
        self.options = []
        self.watchers = {}

    async def current_position(self, options):
        self.options.append(options)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return HERE

    def watch_position(self, on_update, on_error, options):
        handle = len(self.watchers) + 1
        self.watchers[handle] = (on_update, on_error, options)
        return handle

    def clear_watch(self, handle):
        self.watchers.pop(handle, None)


def test_current_position_uses_default_options():
    provider = _Provider()

    assert asyncio.run(get_current_position(provider)) == HERE
    assert provider.options == [
        PositionOptions(enable_high_accuracy=True, timeout_ms=10000, maximum_age_ms=1000)
    ]


def test_current_position_overrides_options():
    provider = _Provider()

    asyncio.run(get_current_position(provider, maximum_age_ms=0))

    assert provider.options[0].maximum_age_ms == 0
    assert provider.options[0].timeout_ms == 10000


def test_current_position_times_out():
    provider = _Provider(delay=1.0)

    with pytest.raises(GeolocationTimeout):
        asyncio.run(get_current_position(provider, timeout_ms=10))


def test_denied_is_surfaced():
    provider = _Provider(error=GeolocationDenied("User denied Geolocation"))

    with pytest.raises(GeolocationDenied):
        asyncio.run(get_current_position(provider))


def test_unsupported_without_provider():
    assert not is_geolocation_supported(None)
    with pytest.raises(GeolocationUnsupported):
        asyncio.run(get_current_position(None))


def test_watch_position_subscribes():
    provider = _Provider()
    updates = []

    handle = watch_position(provider, updates.append, pytest.fail, PositionOptions(timeout_ms=5000))

    assert handle == 1
    on_update, _, options = provider.watchers[handle]
    on_update(HERE)
    assert updates == [HERE]
    assert options.timeout_ms == 5000
    provider.clear_watch(handle)
    assert provider.watchers == {}


def test_watch_position_without_provider_reports_error():
    errors = []

    assert watch_position(None, pytest.fail, errors.append) is None
    assert len(errors) == 1
    assert isinstance(errors[0], GeolocationUnsupported)


def test_helpers_are_exported_from_map_package():
    import citywalk.services.map as map_package

    assert map_package.get_current_position is get_current_position
    assert map_package.watch_position is watch_position
    assert map_package.is_geolocation_supported is is_geolocation_supported
    assert map_package.GeolocationProvider is GeolocationProvider
    assert map_package.DEFAULT_POSITION_OPTIONS == PositionOptions()
    assert "get_current_position" in map_package.__all__


if __name__ == "__main__":
    pytest.main([__file__])
