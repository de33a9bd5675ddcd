"""Error types raised by the carving pipeline and its I/O collaborators."""

from enum import Enum


class ErrorKind(Enum):
    """Category of a carving failure, used by callers to pick a response."""

    DECODE = "decode"
    INVALID_TARGET = "invalid_target"
    CONTRACT = "contract"
    ENCODE = "encode"


class CarvingError(RuntimeError):
    """Base class for all errors raised by width_carve."""

    kind: ErrorKind


class DecodeError(CarvingError):
    """Raised when the source image cannot be read or parsed."""

    kind = ErrorKind.DECODE


class InvalidTargetError(CarvingError):
    """Raised when a requested width is not in ``(0, current_width)``."""

    kind = ErrorKind.INVALID_TARGET


class EncodeError(CarvingError):
    """Raised when the carved image cannot be written."""

    kind = ErrorKind.ENCODE


class ContractViolation(CarvingError):
    """Raised when rasters, energy maps and seams disagree on shape.

    These indicate a bug in the caller, not bad input, and are never
    recovered from.
    """

    kind = ErrorKind.CONTRACT


class MalformedRasterError(ContractViolation):
    """Raster buffer has the wrong dtype, rank, channel count or is empty."""


class MalformedEnergyError(ContractViolation):
    """Energy map is empty, not 2D, or holds negative/non-finite values."""


class MalformedSeamError(ContractViolation):
    """Seam length or values do not fit the raster it is applied to."""
