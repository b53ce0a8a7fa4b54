"""Device location capture for the coordinates field."""
import asyncio
import logging

from shared.utils import format_coordinates


class LocationUnavailableError(Exception):
    """Raised when the device cannot or will not report a position.

    Not fatal: the user may retry or type the coordinates by hand.
    """
    pass


def _extract_lat_lon(position):
    """Read a latitude/longitude pair from the shapes providers return."""
    if isinstance(position, (tuple, list)) and len(position) == 2:
        return position[0], position[1]
    for lat_attr, lon_attr in (('lat', 'lng'), ('latitude', 'longitude')):
        if hasattr(position, lat_attr) and hasattr(position, lon_attr):
            return getattr(position, lat_attr), getattr(position, lon_attr)
    raise LocationUnavailableError("Location provider returned no coordinates")


class LocationService:
    """Formats the device position as a "<lat>,<lon>" coordinates value.

    Args:
        provider: async callable returning a (lat, lon) tuple or an object
            with lat/lng or latitude/longitude attributes
        timeout: seconds to wait for a fix
    """

    def __init__(self, provider, timeout=10.0):
        self.provider = provider
        self.timeout = timeout
        self.logger = logging.getLogger(self.__class__.__name__)

    async def capture_coordinates(self):
        try:
            position = await asyncio.wait_for(self.provider(), self.timeout)
        except LocationUnavailableError:
            raise
        except asyncio.TimeoutError as e:
            self.logger.warning("Timed out waiting for a location fix")
            raise LocationUnavailableError("Timed out waiting for your location") from e
        except Exception as e:
            self.logger.error(f"Error getting location: {e}")
            raise LocationUnavailableError("Unable to retrieve your location") from e

        if position is None:
            raise LocationUnavailableError("Unable to retrieve your location")

        lat, lon = _extract_lat_lon(position)
        try:
            return format_coordinates(lat, lon)
        except (TypeError, ValueError) as e:
            raise LocationUnavailableError("Location provider returned invalid coordinates") from e


def toga_location_provider(app):
    """Build a provider backed by the Toga app's location service."""

    async def provider():
        try:
            location = app.location
        except (AttributeError, NotImplementedError) as e:
            raise LocationUnavailableError("Geolocation is not supported on this device") from e

        if not location.has_permission:
            granted = await location.request_permission()
            if not granted:
                raise LocationUnavailableError("Location permission denied")
        return await location.current_location()

    return provider
