"""Width Carve: content-aware image width reduction by seam carving."""

from width_carve.energy import EnergyFunction, WrappedGradientEnergyFunction
from width_carve.errors import (
    CarvingError,
    ContractViolation,
    DecodeError,
    EncodeError,
    ErrorKind,
    InvalidTargetError,
    MalformedEnergyError,
    MalformedRasterError,
    MalformedSeamError,
)
from width_carve.raster import Raster
from width_carve.resizer import (
    ResizeResult,
    WidthResizer,
    load_raster,
    parse_target_width,
    save_raster,
)
from width_carve.seam_carving import SeamCarver, find_vertical_seam, remove_vertical_seam

__version__ = "0.1.0"
__all__ = [
    "CarvingError",
    "ContractViolation",
    "DecodeError",
    "EncodeError",
    "EnergyFunction",
    "ErrorKind",
    "InvalidTargetError",
    "MalformedEnergyError",
    "MalformedRasterError",
    "MalformedSeamError",
    "Raster",
    "ResizeResult",
    "SeamCarver",
    "WidthResizer",
    "WrappedGradientEnergyFunction",
    "find_vertical_seam",
    "load_raster",
    "parse_target_width",
    "remove_vertical_seam",
    "save_raster",
]
