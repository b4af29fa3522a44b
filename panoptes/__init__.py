"""Change detection, tiling, vectorisation and satellite image tools for geospatial imagery."""

__version__ = "0.1.0"