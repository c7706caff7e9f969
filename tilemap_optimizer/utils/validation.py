"""
Data validation utilities for tilemap optimization.

This module provides the optimizer's exception types and the validation
functions run on maps, tilesets and options to catch errors early, before
any layer is rewritten.
"""

import logging
from typing import Dict, List, Any

# Configure logging
logger = logging.getLogger(__name__)


class OptimizerError(Exception):
    """Base class for every error raised by the optimizer"""

    pass


class ConfigurationError(OptimizerError):
    """Options and source tilesets are not compatible"""

    pass


class IntegrityError(OptimizerError):
    """Layer data references a tile no known tileset owns"""

    pass


class ExtractionError(OptimizerError):
    """A tile could not be cut out of its source image"""

    pass


class PackerStateError(OptimizerError):
    """A chunk packer was used in a state that does not allow it"""

    pass


class MapFormatError(OptimizerError):
    """A map file does not have the structure the optimizer reads"""

    pass


def validate_options(options) -> List[str]:
    """
    Validate optimizer options.

    Args:
        options: OptimizeOptions instance

    Returns:
        List of error messages (empty if validation passes)
    """
    errors = []

    if not isinstance(options.tile_size, int) or options.tile_size <= 0:
        errors.append(f"Invalid tile size: {options.tile_size}")
        return errors

    if options.chunk_width < options.tile_size or options.chunk_height < options.tile_size:
        errors.append(
            f"Chunk size {options.chunk_width}x{options.chunk_height} "
            f"cannot hold a single {options.tile_size} tile"
        )

    if options.workers is not None and options.workers < 1:
        errors.append(f"Invalid worker count: {options.workers}")

    return errors


def validate_tile_size(tileset, tile_size: int) -> List[str]:
    """
    Validate a source tileset uses the configured tile size.

    Args:
        tileset: Source Tileset
        tile_size: Configured tile size in pixels

    Returns:
        List of error messages (empty if validation passes)
    """
    errors = []

    if tileset.tilewidth != tile_size or tileset.tileheight != tile_size:
        errors.append(
            f"Tileset {tileset.name} not compatible! Accept only {tile_size} tile size "
            f"(got {tileset.tilewidth}x{tileset.tileheight})"
        )

    return errors


def validate_map_data(map_data: Dict[str, Any]) -> List[str]:
    """
    Validate raw map data has the structure the optimizer reads.

    Args:
        map_data: Dictionary loaded from a map file with keys:
            - layers: List of layers (required)
            - tilesets: List of embedded tilesets (required)
            - width, height: Map size in tiles (optional, > 0 if present)

    Returns:
        List of error messages (empty if validation passes)
    """
    errors = []

    if not isinstance(map_data.get("layers"), list):
        errors.append("Map has no layers list")
    else:
        for index, layer in enumerate(map_data["layers"]):
            data = layer.get("data") if isinstance(layer, dict) else None
            if not isinstance(layer, dict):
                errors.append(f"Layer {index} is not an object")
            elif data is not None and not isinstance(data, list):
                errors.append(
                    f"Layer {layer.get('name', index)} has encoded data, only arrays are supported"
                )

    if not isinstance(map_data.get("tilesets"), list):
        errors.append("Map has no tilesets list")

    for dimension in ["width", "height"]:
        value = map_data.get(dimension)
        if value is not None and (not isinstance(value, int) or value <= 0):
            errors.append(f"Map has invalid {dimension}: {value}")

    return errors


def validate_tileset_data(tileset_data: Dict[str, Any]) -> List[str]:
    """
    Validate raw tileset data is complete and embedded in the map.

    Args:
        tileset_data: Dictionary containing tileset information with keys:
            - firstgid: First global tile id (required, >= 1)
            - tilecount: Number of tiles (required, >= 0)
            - tilewidth, tileheight: Tile size (required)
            - imagewidth: Atlas width in pixels (required)
            - image: Atlas image path (required)

    Returns:
        List of error messages (empty if validation passes)
    """
    errors = []
    name = tileset_data.get("name", "UNKNOWN")

    if "source" in tileset_data:
        errors.append(
            f"Tileset {tileset_data['source']} is external, only embedded tilesets are supported"
        )
        return errors

    firstgid = tileset_data.get("firstgid")
    if not isinstance(firstgid, int) or firstgid < 1:
        errors.append(f"Tileset {name} has invalid firstgid: {firstgid}")

    tilecount = tileset_data.get("tilecount")
    if not isinstance(tilecount, int) or tilecount < 0:
        errors.append(f"Tileset {name} has invalid tilecount: {tilecount}")

    for field in ["tilewidth", "tileheight", "imagewidth"]:
        value = tileset_data.get(field)
        if not isinstance(value, int) or value <= 0:
            errors.append(f"Tileset {name} has invalid {field}: {value}")

    if not tileset_data.get("image"):
        errors.append(f"Tileset {name} has no image")

    return errors


def log_validation_errors(errors: List[str], data_type: str) -> None:
    """
    Log validation errors with appropriate severity.

    Args:
        errors: List of error messages
        data_type: Type of data being validated (for logging context)
    """
    if errors:
        logger.warning(f"Validation errors for {data_type}:")
        for error in errors:
            logger.warning(f"  - {error}")


def validate_and_log(data, validator_func, data_type: str) -> List[str]:
    """
    Validate data using provided validator and log any errors.

    Args:
        data: Data to validate
        validator_func: Validation function to use
        data_type: Type of data (for logging)

    Returns:
        List of validation errors
    """
    errors = validator_func(data)
    if errors:
        log_validation_errors(errors, data_type)
    return errors
