"""Article catalog service: listings, overviews and engagement counters."""

__version__ = "1.0.0"
