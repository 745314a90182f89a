"""cartokernel: geometric kernel for mapping (points, rectangles, coordinate views, rasters, geo)."""

__version__ = '0.1.0'
