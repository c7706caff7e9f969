"""
Tilemap optimizer: deduplicates the tiles used by a map and repacks them
into size-bounded chunk atlases.
"""

from .config import OptimizeOptions
from .models import Frame, Layer, OptimizedMap, TileData, TileMap, Tileset
from .optimizer import Optimizer, optimize_map
from .utils.validation import (
    OptimizerError,
    ConfigurationError,
    IntegrityError,
    ExtractionError,
    PackerStateError,
    MapFormatError,
)

__all__ = [
    'OptimizeOptions',
    'Frame',
    'Layer',
    'OptimizedMap',
    'TileData',
    'TileMap',
    'Tileset',
    'Optimizer',
    'optimize_map',
    'OptimizerError',
    'ConfigurationError',
    'IntegrityError',
    'ExtractionError',
    'PackerStateError',
    'MapFormatError',
]
