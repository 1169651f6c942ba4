"""Short links service: short codes that redirect to long URLs and count visits."""

__version__ = "1.0.0"
