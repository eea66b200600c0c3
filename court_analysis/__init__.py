"""Court calibration and spatial analytics for match video review."""

__version__ = "0.1.0"
