"""
Geolocation provider contract and helpers

The device position comes from an external provider (browser, GPS daemon,
replayed track). These helpers apply the default options and map missing
support and timeouts onto the geolocation error types.
"""
import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

from citywalk.models.place import Coordinate
from citywalk.services.errors import (
    GeolocationError,
    GeolocationTimeout,
    GeolocationUnsupported,
)


@dataclass(frozen=True)
class PositionOptions:
    enable_high_accuracy: bool = True
    timeout_ms: int = 10000
    maximum_age_ms: int = 1000


DEFAULT_POSITION_OPTIONS = PositionOptions()


class GeolocationProvider(ABC):
    @abstractmethod
    async def current_position(self, options: PositionOptions) -> Coordinate:
        """Raises GeolocationDenied when the user refused access"""
        pass

    @abstractmethod
    def watch_position(
        self,
        on_update: Callable[[Coordinate], None],
        on_error: Callable[[GeolocationError], None],
        options: PositionOptions,
    ) -> Any:
        """Subscribe to position updates; returns a subscription handle"""
        pass

    @abstractmethod
    def clear_watch(self, handle: Any) -> None:
        pass


def is_geolocation_supported(provider: Optional[GeolocationProvider]) -> bool:
    return provider is not None


def _merge_options(options: Optional[PositionOptions], **overrides) -> PositionOptions:
    return replace(options or DEFAULT_POSITION_OPTIONS, **overrides)


async def get_current_position(
    provider: Optional[GeolocationProvider],
    options: Optional[PositionOptions] = None,
    **overrides,
) -> Coordinate:
    """Get the current position, failing after the configured timeout"""
    if not is_geolocation_supported(provider):
        raise GeolocationUnsupported("Geolocation is not supported")

    merged = _merge_options(options, **overrides)
    try:
        return await asyncio.wait_for(
            provider.current_position(merged), timeout=merged.timeout_ms / 1000
        )
    except asyncio.TimeoutError as e:
        raise GeolocationTimeout(
            f"Position not available within {merged.timeout_ms}ms"
        ) from e


def watch_position(
    provider: Optional[GeolocationProvider],
    on_update: Callable[[Coordinate], None],
    on_error: Callable[[GeolocationError], None],
    options: Optional[PositionOptions] = None,
    **overrides,
) -> Any:
    """Subscribe to position updates; returns None when geolocation is unsupported"""
    if not is_geolocation_supported(provider):
        on_error(GeolocationUnsupported("Geolocation is not supported"))
        return None

    return provider.watch_position(on_update, on_error, _merge_options(options, **overrides))
