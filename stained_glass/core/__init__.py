"""
Core tessellation functionality.
"""

from .mulberry_prng import Mulberry32PRNG, create_prng, hash_string, layout_seed
from .polygon import Point, clip_polygon_to_rect, point_in_polygon, polygon_area, polygon_centroid
from .triangulation import NO_NEIGHBOR, DelaunayTriangulator, Triangulation, Triangulator
from .voronoi_cells import CellConfig, VoronoiCell, find_cell_at, generate_voronoi_cells

__all__ = ['Mulberry32PRNG', 'create_prng', 'hash_string', 'layout_seed',
           'Point', 'clip_polygon_to_rect', 'point_in_polygon', 'polygon_area', 'polygon_centroid',
           'NO_NEIGHBOR', 'DelaunayTriangulator', 'Triangulation', 'Triangulator',
           'CellConfig', 'VoronoiCell', 'find_cell_at', 'generate_voronoi_cells']
