"""
Pixel Forge
A layered pixel-art editing engine: grids, flood fill, shape tools and export
"""

__version__ = "1.0.0"
