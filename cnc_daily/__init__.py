"""CNC Daily: feed-to-post pipeline for a static news digest."""

__version__ = "1.0.0"
