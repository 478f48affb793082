from pathlib import Path

PROJECT_DIR = Path(__file__).parent
"""The project directory.
"""
DEFAULT_ANGLE: float = 42.0
"""The rotation angle, in radians, used when none is given on the command line.
"""
BACKGROUND_VALUE: int = 0
"""The intensity of output pixels that do not map back into the source image.
"""
SNAP_TOLERANCE: float = 1e-9
"""Trigonometric values and offsets closer than this to an integer are snapped to it. This removes
the floating point residue left at exact multiples of pi/2, e.g. cos(pi/2) ~ 6e-17.
"""
