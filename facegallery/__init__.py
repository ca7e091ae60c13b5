"""Face gallery: person/face store, reassignment service and operator console."""

__version__ = "0.1.0"
