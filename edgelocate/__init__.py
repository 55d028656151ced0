"""Edge location API: geolocation from edge request headers."""

__version__ = "1.0.0"
