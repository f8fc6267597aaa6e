"""Error hierarchy shared by the aggregator, the HTTP route and the viewer."""


class SkyviewError(Exception):
    """Base class for every error surfaced to a caller as a single message."""


class ConfigError(SkyviewError):
    """Provider credential or configuration is missing."""


class UpstreamError(SkyviewError):
    """Geocoding, weather or forecast call failed or returned an unexpected shape."""


class ClientFetchError(SkyviewError):
    """The viewer's call to /api/weather failed or returned a non-success status."""
