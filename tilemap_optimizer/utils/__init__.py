"""
Utilities package for tilemap optimization: logging setup and validation.
"""

from .logger import setup_logger, log_script_start, log_script_end
from .validation import (
    OptimizerError,
    ConfigurationError,
    IntegrityError,
    ExtractionError,
    PackerStateError,
    MapFormatError,
)

__all__ = [
    'setup_logger',
    'log_script_start',
    'log_script_end',
    'OptimizerError',
    'ConfigurationError',
    'IntegrityError',
    'ExtractionError',
    'PackerStateError',
    'MapFormatError',
]
