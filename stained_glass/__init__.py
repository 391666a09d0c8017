"""Deterministic Voronoi tessellations for stained-glass image overlays."""

from .core import Point, VoronoiCell, find_cell_at, generate_voronoi_cells, layout_seed

__version__ = "0.1.0"

__all__ = ['Point', 'VoronoiCell', 'find_cell_at', 'generate_voronoi_cells', 'layout_seed']
